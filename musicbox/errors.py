from __future__ import annotations


class LayoutError(ValueError):
    """Base class for failures that prevent a tape layout from being built."""


class UnsupportedDivision(LayoutError):
    """Time-code based MIDI files are not supported."""

    def __init__(self, division: int) -> None:
        self.division = division
        super().__init__(
            f"unsupported division {division}; only ticks-per-beat timing is supported"
        )


class TrackNotFound(LayoutError):
    """The requested track does not exist in the file."""

    def __init__(self, track_num: int, track_count: int) -> None:
        self.track_num = track_num
        self.track_count = track_count
        super().__init__(
            f"track {track_num} not found; the file has {track_count} track(s)"
        )


class EmptyTrack(LayoutError):
    """The requested track has zero notes in it."""

    def __init__(self, track_num: int) -> None:
        self.track_num = track_num
        super().__init__(f"track {track_num} contains no notes")


class InvalidNote(LayoutError):
    """A note was present in the track that does not appear in the pitch list."""

    def __init__(self, pitch: int) -> None:
        self.pitch = pitch
        super().__init__(f"note {pitch} is not in the configured pitch list")
