"""Core data structures for the keysmith localizer."""

from __future__ import annotations

import pathlib
from dataclasses import dataclass, field
from typing import List


@dataclass(frozen=True)
class Span:
    """A located piece of literal text inside a template region."""

    file_path: pathlib.Path
    line: int
    text: str
    start_offset: int
    end_offset: int
    key: str = ""


@dataclass
class ScannedFile:
    """The raw content of a source file and the spans located in it."""

    path: pathlib.Path
    content: bytes
    spans: List[Span] = field(default_factory=list)
