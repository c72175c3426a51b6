from __future__ import annotations

import json
from dataclasses import asdict
from typing import List, TextIO

from .layout import Page


def pages_to_json(pages: List[Page]) -> list:
    """Return the layout as plain lists and dicts; points become ``[x, y]``."""

    return [asdict(page) for page in pages]


def write_json(pages: List[Page], output: TextIO) -> None:
    json.dump(pages_to_json(pages), output, indent=2)
    output.write("\n")
