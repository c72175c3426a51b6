"""Lay out music-box programming tape from MIDI notes."""

from .errors import (  # noqa: F401
    EmptyTrack,
    InvalidNote,
    LayoutError,
    TrackNotFound,
    UnsupportedDivision,
)
from .geometry import JoinStyle, Point  # noqa: F401
from .layout import Page, Strip, Text, build_strip, layout, layout_notes  # noqa: F401
from .midi_source import load_midi, sequence_from_midi, track_pitches  # noqa: F401
from .notes import (  # noqa: F401
    Meta,
    Note,
    NoteOff,
    NoteOn,
    NoteSequence,
    TrackEvent,
    normalize_notes,
    note_row,
    rebase_notes,
)
from .options import (  # noqa: F401
    DEFAULT_PITCHES,
    LayoutOptions,
    load_layout_options,
    parse_layout_options,
)
from .packer import StripPlan, plan_strips  # noqa: F401
