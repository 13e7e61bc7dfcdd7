"""Translation key generation."""

from __future__ import annotations

import dataclasses
import os
import pathlib
import re
from typing import Dict, Iterable, List

from .structures import Span

NON_SLUG_PATTERN = re.compile(r"[^a-z0-9]+")
EMPTY_SLUG_PATTERN = re.compile(r"\.(-\d+)?$")


def slugify(text: str, max_len: int) -> str:
    """Convert text to a lower-case, hyphen-delimited slug of at most ``max_len`` chars.

    Over-long slugs are cut back to the last hyphen inside the truncated
    string so that words are not split, unless the only hyphen (or none)
    sits at position 0.
    """

    slug = NON_SLUG_PATTERN.sub("-", text.lower()).strip("-")
    if len(slug) > max_len:
        slug = slug[:max_len]
        last_hyphen = slug.rfind("-")
        if last_hyphen > 0:
            slug = slug[:last_hyphen]
    return slug


def path_stem(file_path: os.PathLike | str, base_path: os.PathLike | str | None = None) -> str:
    """Build the dotted key prefix for a source file.

    The path is made relative to ``base_path`` when possible; any failure
    to do so falls back to the path as given.
    """

    raw = os.fspath(file_path)
    relative = raw
    if base_path is not None:
        try:
            relative = os.path.relpath(raw, os.fspath(base_path))
        except ValueError:
            relative = raw

    stem, _ = os.path.splitext(relative)
    stem = stem.lower()
    stem = stem.replace(os.sep, ".")
    if os.altsep:
        stem = stem.replace(os.altsep, ".")
    return stem


class KeyCounter:
    """Run-wide occurrence counts for candidate keys.

    One counter lives for a whole run and is shared across files, so the
    same candidate key seen twice (in one file or in two) is told apart by
    a numeric suffix instead of colliding.
    """

    def __init__(self) -> None:
        self._counts: Dict[str, int] = {}

    def increment(self, candidate: str) -> int:
        count = self._counts.get(candidate, 0) + 1
        self._counts[candidate] = count
        return count

    def __getitem__(self, candidate: str) -> int:
        return self._counts.get(candidate, 0)

def generate_key(
    file_path: os.PathLike | str,
    base_path: os.PathLike | str | None,
    text: str,
    max_slug: int,
    counter: KeyCounter,
) -> str:
    """Return a readable, run-unique key of the form ``path.stem.text-slug``."""

    candidate = f"{path_stem(file_path, base_path)}.{slugify(text, max_slug)}"
    count = counter.increment(candidate)
    if count > 1:
        return f"{candidate}-{count}"
    return candidate


def has_empty_slug(key: str) -> bool:
    """Detect keys whose text produced no slug characters.

    Matches both the bare form (``"page.section."``) and its collision
    suffixes (``"page.section.-2"``); a real slug never starts with ``-``.
    """

    return EMPTY_SLUG_PATTERN.search(key) is not None


def assign_keys(
    spans: Iterable[Span],
    base_path: pathlib.Path | None,
    max_slug: int,
    counter: KeyCounter,
) -> List[Span]:
    """Attach keys to already collected spans, in the order given.

    Keys depend on the order spans are seen, so this must run as a single
    sequential pass over the full list.
    """

    return [
        dataclasses.replace(
            span,
            key=generate_key(span.file_path, base_path, span.text, max_slug, counter),
        )
        for span in spans
    ]
