"""Span filtering: drop text that is not real translatable content."""

from __future__ import annotations

import unicodedata
from typing import Iterable, List

from .structures import Span


def is_whitespace_only(text: str) -> bool:
    return all(char.isspace() for char in text)


def is_symbol_only(text: str) -> bool:
    """True when every non-whitespace character is a symbol or punctuation mark."""

    visible = [char for char in text if not char.isspace()]
    if not visible:
        return False
    return all(unicodedata.category(char)[0] in {"S", "P"} for char in visible)


def filter_spans(spans: Iterable[Span], *, skip_symbols: bool = False) -> List[Span]:
    kept: List[Span] = []
    for span in spans:
        if is_whitespace_only(span.text):
            continue
        if skip_symbols and is_symbol_only(span.text):
            continue
        kept.append(span)
    return kept
