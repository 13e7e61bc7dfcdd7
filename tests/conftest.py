from __future__ import annotations

import pathlib
import re
from typing import List

import pytest

from keysmith import configuration
from keysmith.locator import TemplateSpanLocator
from keysmith.structures import Span

TEXT_BETWEEN_TAGS = re.compile(rb">([^<>{}]+)<")


class RegexLocator(TemplateSpanLocator):
    """Locator that treats any text between two tags as a span."""

    def locate_in(self, path: pathlib.Path, content: bytes) -> List[Span]:
        spans: List[Span] = []
        for match in TEXT_BETWEEN_TAGS.finditer(content):
            start, end = match.span(1)
            spans.append(
                Span(
                    file_path=path,
                    line=content.count(b"\n", 0, start) + 1,
                    text=match.group(1).decode("utf-8"),
                    start_offset=start,
                    end_offset=end,
                )
            )
        return spans


@pytest.fixture
def regex_locator() -> RegexLocator:
    return RegexLocator(parser=object())


@pytest.fixture
def write_source(tmp_path: pathlib.Path):
    def _write(relative: str, content: str) -> pathlib.Path:
        path = tmp_path / "src" / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
        return path

    return _write


@pytest.fixture
def isolated_config(tmp_path: pathlib.Path, monkeypatch: pytest.MonkeyPatch):
    home = tmp_path / "home"
    home.mkdir()
    workdir = tmp_path / "work"
    workdir.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.setenv("XDG_CONFIG_HOME", str(home / ".config"))
    for name in (
        "KEYSMITH_OUTPUT",
        "KEYSMITH_MAX_SLUG",
        "KEYSMITH_SKIP_SYMBOLS",
        "KEYSMITH_VERBOSE",
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(workdir)
    configuration._load_config_instance.cache_clear()
    yield workdir
    configuration._load_config_instance.cache_clear()
