"""Reading, merging and writing the JSON translation catalog."""

from __future__ import annotations

import json
import pathlib
from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Optional, Tuple

from .errors import CatalogParseError, CatalogReadError, CatalogWriteError
from .rewriter import atomic_write

Catalog = Dict[str, str]


@dataclass
class CatalogMergeResult:
    """Outcome of a successful merge-and-write."""

    path: pathlib.Path
    added_keys: List[str] = field(default_factory=list)
    kept_keys: List[str] = field(default_factory=list)
    total_keys: int = 0
    created: bool = False


def load_catalog(path: pathlib.Path) -> Optional[Catalog]:
    """Read an existing catalog.

    Returns ``None`` when the file does not exist. A file that exists but is
    not a JSON object mapping strings to strings raises ``CatalogParseError``.
    """

    try:
        raw = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return None
    except (OSError, UnicodeDecodeError) as exc:
        raise CatalogReadError(f"Unable to read locale file {path}: {exc}") from exc

    try:
        data = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise CatalogParseError(
            f"Failed to parse existing locale file {path}: {exc}"
        ) from exc

    if not isinstance(data, dict):
        raise CatalogParseError(
            f"Failed to parse existing locale file {path}: expected a JSON object at the root."
        )
    invalid = [key for key, value in data.items() if not isinstance(value, str)]
    if invalid:
        raise CatalogParseError(
            f"Failed to parse existing locale file {path}: non-string values for "
            + ", ".join(sorted(invalid))
        )
    return data


def merge_entries(
    existing: Mapping[str, str],
    new_entries: Mapping[str, str],
) -> Tuple[Catalog, List[str], List[str]]:
    """Add keys missing from ``existing``; existing values always win.

    Returns the merged catalog plus the sorted added and kept key lists.
    """

    merged: Catalog = dict(existing)
    added: List[str] = []
    kept: List[str] = []
    for key, text in new_entries.items():
        if key in merged:
            kept.append(key)
            continue
        merged[key] = text
        added.append(key)
    return merged, sorted(added), sorted(kept)


def serialize_catalog(catalog: Mapping[str, str]) -> str:
    return json.dumps(dict(catalog), indent=2, sort_keys=True, ensure_ascii=False) + "\n"


def merge_and_write(path: pathlib.Path, new_entries: Mapping[str, str]) -> CatalogMergeResult:
    """Merge ``new_entries`` into the catalog at ``path`` and write it back whole.

    Values are stored exactly as given. The runner passes each span's text
    with its surrounding template whitespace stripped, not the raw node text.
    """

    existing = load_catalog(path)
    merged, added, kept = merge_entries(existing or {}, new_entries)

    try:
        atomic_write(path, serialize_catalog(merged).encode("utf-8"))
    except OSError as exc:
        raise CatalogWriteError(f"Failed to write locale file {path}: {exc}") from exc

    return CatalogMergeResult(
        path=path,
        added_keys=added,
        kept_keys=kept,
        total_keys=len(merged),
        created=existing is None,
    )
