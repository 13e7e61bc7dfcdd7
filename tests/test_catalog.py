from __future__ import annotations

import json
import pathlib

import pytest

from keysmith.catalog import (
    load_catalog,
    merge_and_write,
    merge_entries,
    serialize_catalog,
)
from keysmith.errors import CatalogParseError, CatalogWriteError


def test_load_catalog_absent_returns_none(tmp_path: pathlib.Path) -> None:
    assert load_catalog(tmp_path / "en.json") is None


def test_load_catalog_empty_object_is_not_absent(tmp_path: pathlib.Path) -> None:
    path = tmp_path / "en.json"
    path.write_text("{}", encoding="utf-8")
    assert load_catalog(path) == {}


@pytest.mark.parametrize("payload", ["{not json", "[1, 2]", '{"a": 1}'])
def test_load_catalog_rejects_malformed_content(tmp_path: pathlib.Path, payload: str) -> None:
    path = tmp_path / "en.json"
    path.write_text(payload, encoding="utf-8")
    with pytest.raises(CatalogParseError):
        load_catalog(path)


def test_merge_entries_never_overwrites_existing_values() -> None:
    merged, added, kept = merge_entries(
        {"a.b": "Old"},
        {"a.b": "New", "c.d": "Added"},
    )
    assert merged == {"a.b": "Old", "c.d": "Added"}
    assert added == ["c.d"]
    assert kept == ["a.b"]


def test_serialize_catalog_sorts_keys_with_two_space_indent() -> None:
    text = serialize_catalog({"z.last": "Z", "a.first": "Ä"})
    assert text == '{\n  "a.first": "Ä",\n  "z.last": "Z"\n}\n'


def test_merge_and_write_creates_catalog(tmp_path: pathlib.Path) -> None:
    path = tmp_path / "en.json"
    result = merge_and_write(path, {"b.two": "Two", "a.one": "One"})

    assert result.created
    assert result.added_keys == ["a.one", "b.two"]
    assert result.total_keys == 2
    assert list(json.loads(path.read_text(encoding="utf-8"))) == ["a.one", "b.two"]


def test_merge_and_write_preserves_translator_edits(tmp_path: pathlib.Path) -> None:
    path = tmp_path / "en.json"
    path.write_text(json.dumps({"a.b": "Old"}), encoding="utf-8")

    result = merge_and_write(path, {"a.b": "New", "c.d": "Added"})

    assert not result.created
    assert result.kept_keys == ["a.b"]
    assert json.loads(path.read_text(encoding="utf-8")) == {"a.b": "Old", "c.d": "Added"}


def test_merge_and_write_is_idempotent(tmp_path: pathlib.Path) -> None:
    path = tmp_path / "en.json"
    merge_and_write(path, {"a": "A"})
    first = path.read_bytes()
    result = merge_and_write(path, {"a": "A"})
    assert path.read_bytes() == first
    assert result.added_keys == []


def test_merge_and_write_leaves_malformed_catalog_untouched(tmp_path: pathlib.Path) -> None:
    path = tmp_path / "en.json"
    path.write_text("{broken", encoding="utf-8")
    with pytest.raises(CatalogParseError):
        merge_and_write(path, {"a": "A"})
    assert path.read_text(encoding="utf-8") == "{broken"


def test_merge_and_write_reports_write_failure(tmp_path: pathlib.Path) -> None:
    path = tmp_path / "missing-dir" / "en.json"
    with pytest.raises(CatalogWriteError):
        merge_and_write(path, {"a": "A"})
