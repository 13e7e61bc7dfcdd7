"""Byte-level rewriting of located spans into translation calls."""

from __future__ import annotations

import os
import pathlib
import tempfile
from typing import Iterable, List, Sequence

from .structures import Span

REPLACEMENT_TEMPLATE = "{{{{ $t('{key}') }}}}"


def format_replacement(key: str) -> bytes:
    """Render the template expression that replaces a span."""

    return REPLACEMENT_TEMPLATE.format(key=key).encode("utf-8")


def order_for_rewrite(spans: Iterable[Span]) -> List[Span]:
    """Sort spans by start offset, highest first, as ``rewrite`` requires."""

    return sorted(spans, key=lambda span: span.start_offset, reverse=True)


def rewrite(content: bytes, spans: Sequence[Span]) -> bytes:
    """Replace every span's byte range with its translation call.

    ``spans`` must be sorted by ``start_offset`` in descending order and
    must not overlap; neither condition is checked. Working from the end
    of the buffer backwards keeps the offsets of the spans still to be
    replaced valid. Offsets are byte positions, so the buffer is never
    decoded.
    """

    for span in spans:
        content = (
            content[: span.start_offset]
            + format_replacement(span.key)
            + content[span.end_offset :]
        )
    return content


def atomic_write(path: pathlib.Path, data: bytes) -> None:
    """Write ``data`` to a temporary sibling file, then move it over ``path``.

    Permission bits of an existing target are carried over. Raises
    ``OSError`` on failure, leaving the original file in place.
    """

    directory = path.parent
    original_mode = None
    try:
        original_mode = path.stat().st_mode & 0o7777
    except FileNotFoundError:
        pass

    fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=directory)
    try:
        with os.fdopen(fd, "wb") as handle:
            handle.write(data)
            handle.flush()
            os.fsync(handle.fileno())
        if original_mode is not None:
            os.chmod(tmp_name, original_mode)
        else:
            os.chmod(tmp_name, 0o644)
        os.replace(tmp_name, path)
    except BaseException:
        if os.path.exists(tmp_name):
            os.unlink(tmp_name)
        raise
