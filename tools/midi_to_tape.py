#!/usr/bin/env python3
"""Convert one MIDI track into a music-box tape cutting layout.

All measurements are in mm.

Examples
--------
SVG, one file per page (``%`` becomes the page number):
    python tools/midi_to_tape.py song.mid out/song-%.svg --title "Song"

PDF or JSON (format follows the extension, or use --output-format):
    python tools/midi_to_tape.py song.mid song.pdf
    python tools/midi_to_tape.py song.mid > layout.json

Find which pitches a track uses before choosing --notes:
    python tools/midi_to_tape.py song.mid --list-pitches
"""

from __future__ import annotations

import argparse
import dataclasses
import logging
from pathlib import Path
import sys
from typing import List, Optional, Tuple

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from musicbox.errors import EmptyTrack, LayoutError, TrackNotFound
from musicbox.geometry import JoinStyle
from musicbox.json_writer import write_json
from musicbox.layout import Page, layout
from musicbox.midi_source import load_midi, track_pitches
from musicbox.options import LayoutOptions, load_layout_options, validate_layout_options
from musicbox.pdf_writer import write_pdf
from musicbox.svg_writer import write_svg

OUTPUT_FORMATS = ("svg", "pdf", "json")

# (flag, LayoutOptions field, help)
MEASUREMENT_FLAGS = [
    ("--tape-height", "tape_height", "Height of programming tape. [default: 68.6]"),
    ("--space-above-top-row", "interior_margin_top", "Space between edge of tape and first row. [default: 6]"),
    ("--space-below-bottom-row", "interior_margin_bottom", "Space between last row and edge of tape. [default: 5]"),
    ("--space-before-first-note", "interior_margin_left", "Space between end of lead-in and first note. [default: 20]"),
    ("--space-after-last-note", "interior_margin_right", "Space between last note and end of tape. [default: 20]"),
    ("--space-between-strips", "gap", "Vertical space between two strips cut from the same page. [default: 10]"),
    ("--hole-diameter", "hole_diameter", "Diameter of each hole. [default: 2.4]"),
    ("--page-width", "page_width", "Width of the page. [default: 297]"),
    ("--page-height", "page_height", "Height of the page. [default: 210]"),
    ("--margin-left", "margin_left", "Left margin. [default: 10]"),
    ("--margin-right", "margin_right", "Right margin. [default: 10]"),
    ("--margin-top", "margin_top", "Top margin. [default: 10]"),
    ("--margin-bottom", "margin_bottom", "Bottom margin. [default: 10]"),
    ("--cut-stroke-width", "cut_stroke_width", "Width of lines to be cut. Should equal the kerf. [default: 0.08]"),
    ("--stretch", "stretch", "Horizontal stretch factor (mm / beat). [default: 16]"),
    ("--lead-in-width", "lead_in_width", "Width of diagonal edge at beginning of first strip. [default: 15]"),
    ("--lead-in-height", "lead_in_height", "Height of diagonal edge at beginning of first strip. [default: 35]"),
    ("--join-width", "join_width", "Width of connecting edge join. [default: 5]"),
]


def _measurement(text: str) -> float:
    value = float(text)
    if value < 0:
        raise argparse.ArgumentTypeError(f"{text} must not be negative")
    return value


def _pitch_list(text: str) -> Tuple[int, ...]:
    try:
        pitches = tuple(int(part) for part in text.split(",") if part.strip())
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid note list {text!r}") from None
    if any(not 0 <= pitch <= 127 for pitch in pitches):
        raise argparse.ArgumentTypeError("note numbers must be in [0, 127]")
    return pitches


def _join_style(text: str) -> JoinStyle:
    try:
        return JoinStyle.parse(text)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(str(exc)) from None


def _build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Lay out a MIDI track as cuttable music-box tape strips (all sizes in mm)",
    )
    parser.add_argument("input", type=Path, help="MIDI file to read")
    parser.add_argument(
        "output",
        nargs="?",
        default=None,
        help="Output path; for SVG, %% is replaced by the page number (default: stdout)",
    )
    parser.add_argument("--config", type=Path, default=None, help="JSON file of layout options")
    parser.add_argument("-t", "--track-num", dest="track_num", type=int, default=None,
                        help="Track number to process. [default: 1]")
    parser.add_argument("-n", "--notes", dest="pitches", type=_pitch_list, default=None,
                        help="Comma-separated list of MIDI note numbers supported by your music box")
    for flag, dest, help_text in MEASUREMENT_FLAGS:
        parser.add_argument(flag, dest=dest, type=_measurement, default=None, help=help_text)
    parser.add_argument("--cut-color", dest="cut_color", default=None,
                        help="Color of lines to be cut. [default: red]")
    parser.add_argument("--engrave-color", dest="engrave_color", default=None,
                        help="Color for engraving. [default: black]")
    parser.add_argument("--num-zig-zags", dest="num_zig_zags", type=int, default=None,
                        help="Number of zig-zags in connecting edges. [default: 5]")
    parser.add_argument("--join-style", dest="join_style", type=_join_style, default=None,
                        help="straight, zigzag, or diagonal. [default: zigzag]")
    parser.add_argument("--title", default=None, help="Name of song")
    parser.add_argument("--font-file", dest="font_file", default=None,
                        help="TrueType font to use for PDF labels")
    parser.add_argument("--output-format", choices=OUTPUT_FORMATS, default=None,
                        help="Output format (default: from output extension, else json)")
    parser.add_argument("--list-pitches", action="store_true",
                        help="Print the pitches used by the track and exit")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log layout details")
    return parser


def resolve_options(args: argparse.Namespace) -> LayoutOptions:
    base = load_layout_options(args.config) if args.config is not None else LayoutOptions()
    names = {f.name for f in dataclasses.fields(LayoutOptions)}
    overrides = {
        name: value
        for name, value in vars(args).items()
        if name in names and value is not None
    }
    return validate_layout_options(dataclasses.replace(base, **overrides))


def infer_format(output: Optional[str]) -> str:
    if output is not None:
        suffix = Path(output).suffix.lower().lstrip(".")
        if suffix in OUTPUT_FORMATS:
            return suffix
    return "json"


def _emit(pages: List[Page], options: LayoutOptions, output: Optional[str], fmt: str) -> None:
    if fmt == "svg":
        if output is None:
            write_svg(pages, options, lambda page_num: sys.stdout, close_streams=False)
            return

        def open_page(page_num: int):
            path = Path(output.replace("%", str(page_num + 1)))
            path.parent.mkdir(parents=True, exist_ok=True)
            logging.info(f"Writing page {page_num + 1} -> {path}")
            return path.open("w", encoding="utf-8")

        write_svg(pages, options, open_page)
    elif fmt == "pdf":
        if output is None:
            write_pdf(pages, options, sys.stdout.buffer)
            return
        path = Path(output)
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("wb") as handle:
            write_pdf(pages, options, handle)
        logging.info(f"Wrote {len(pages)} page(s) -> {path}")
    else:
        if output is None:
            write_json(pages, sys.stdout)
            return
        path = Path(output)
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("w", encoding="utf-8") as handle:
            write_json(pages, handle)
        logging.info(f"Wrote {len(pages)} page(s) -> {path}")


def main(argv: Optional[List[str]] = None) -> int:
    parser = _build_arg_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s - %(levelname)s - %(message)s",
    )

    try:
        options = resolve_options(args)
    except OSError as exc:
        logging.error(f"failed to read config {args.config}: {exc}")
        return 1
    except ValueError as exc:
        parser.error(str(exc))

    try:
        sequence = load_midi(args.input)
        if args.list_pitches:
            print(",".join(str(p) for p in track_pitches(sequence, options.track_num)))
            return 0
        pages = layout(sequence, options)
    except (TrackNotFound, EmptyTrack) as exc:
        logging.error(f"{exc}; try a different --track-num")
        return 1
    except LayoutError as exc:
        logging.error(str(exc))
        return 1
    except (OSError, EOFError) as exc:
        logging.error(f"failed to read {args.input}: {exc}")
        return 1

    fmt = args.output_format or infer_format(args.output)
    if fmt == "svg" and len(pages) > 1 and (args.output is None or "%" not in args.output):
        parser.error(
            f"layout has {len(pages)} pages; SVG output needs an OUTPUT path containing %"
        )

    strip_count = sum(len(page.strips) for page in pages)
    logging.info(f"Laid out {strip_count} strip(s) on {len(pages)} page(s) as {fmt}")
    _emit(pages, options, args.output, fmt)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
