from __future__ import annotations

import os
import pathlib

from keysmith.keys import (
    KeyCounter,
    assign_keys,
    generate_key,
    has_empty_slug,
    path_stem,
    slugify,
)
from keysmith.structures import Span


def test_slugify_lowercases_and_collapses_symbols() -> None:
    assert slugify("Hello, World!", 30) == "hello-world"
    assert slugify("  --Save   changes--  ", 30) == "save-changes"


def test_slugify_truncates_on_word_boundary() -> None:
    assert slugify("hello world wonderful", 8) == "hello"


def test_slugify_hard_truncates_without_hyphen() -> None:
    assert slugify("abcdefgh", 5) == "abcde"


def test_slugify_symbol_only_text_is_empty() -> None:
    assert slugify("→ © ✓", 30) == ""


def test_path_stem_is_relative_dotted_and_lowercase(tmp_path: pathlib.Path) -> None:
    file_path = tmp_path / "Pages" / "Account" / "Settings.vue"
    assert path_stem(file_path, tmp_path) == "pages.account.settings"


def test_path_stem_without_base_uses_raw_path() -> None:
    raw = os.path.join("components", "NavBar.vue")
    assert path_stem(raw) == "components.navbar"


def test_generate_key_combines_stem_and_slug(tmp_path: pathlib.Path) -> None:
    counter = KeyCounter()
    key = generate_key(tmp_path / "pages" / "Home.vue", tmp_path, "Welcome back!", 30, counter)
    assert key == "pages.home.welcome-back"


def test_generate_key_suffixes_collisions_in_first_seen_order(tmp_path: pathlib.Path) -> None:
    counter = KeyCounter()
    path = tmp_path / "home.vue"
    keys = [generate_key(path, tmp_path, "Save", 30, counter) for _ in range(3)]
    assert keys == ["home.save", "home.save-2", "home.save-3"]
    assert counter["home.save"] == 3


def test_generate_key_collisions_span_files(tmp_path: pathlib.Path) -> None:
    counter = KeyCounter()
    first = generate_key(tmp_path / "a.vue", tmp_path, "OK", 30, counter)
    other = generate_key(tmp_path / "b.vue", tmp_path, "OK", 30, counter)
    again = generate_key(tmp_path / "a.vue", tmp_path, "ok!", 30, counter)
    assert (first, other, again) == ("a.ok", "b.ok", "a.ok-2")


def test_empty_slug_key_is_kept_and_detectable(tmp_path: pathlib.Path) -> None:
    key = generate_key(tmp_path / "page.vue", tmp_path, "!!!", 30, KeyCounter())
    assert key == "page."
    assert has_empty_slug(key)
    assert not has_empty_slug("page.title")


def _spans(base: pathlib.Path) -> list[Span]:
    texts = ["Title", "Body text", "Title", "Footer"]
    return [
        Span(
            file_path=base / "view.vue",
            line=index + 1,
            text=text,
            start_offset=index * 10,
            end_offset=index * 10 + 5,
        )
        for index, text in enumerate(texts)
    ]


def test_assign_keys_is_deterministic_with_fresh_counters(tmp_path: pathlib.Path) -> None:
    spans = _spans(tmp_path)
    first = [span.key for span in assign_keys(spans, tmp_path, 30, KeyCounter())]
    second = [span.key for span in assign_keys(spans, tmp_path, 30, KeyCounter())]
    assert first == second == ["view.title", "view.body-text", "view.title-2", "view.footer"]


def test_assign_keys_leaves_input_spans_untouched(tmp_path: pathlib.Path) -> None:
    spans = _spans(tmp_path)
    keyed = assign_keys(spans, tmp_path, 30, KeyCounter())
    assert all(span.key == "" for span in spans)
    assert keyed[1].text == spans[1].text
    assert keyed[1].start_offset == spans[1].start_offset


def test_has_empty_slug_matches_suffixed_keys() -> None:
    assert has_empty_slug("page.-2")
    assert has_empty_slug("page.-13")
    assert not has_empty_slug("page.save-2")


def test_path_stem_keeps_surrounding_spaces() -> None:
    assert path_stem(" Odd Name .vue") == " odd name "
