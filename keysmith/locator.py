"""Locating literal text in Vue single-file component templates."""

from __future__ import annotations

import os
import pathlib
import sys
from typing import Any, Iterator, List, Optional

from .errors import FileReadError, KeysmithError, TemplateParseError
from .structures import ScannedFile, Span

SOURCE_SUFFIX = ".vue"
TEMPLATE_NODE = "template_element"
TEXT_NODE = "text"


def _import_vue_parser():
    try:
        from tree_sitter_language_pack import get_parser  # type: ignore
    except ImportError as exc:  # pragma: no cover - import guard
        raise KeysmithError(
            "tree-sitter-language-pack is required to parse .vue files. "
            "Install it with `pip install tree-sitter-language-pack`."
        ) from exc
    return get_parser("vue")


def find_template(node: Any) -> Optional[Any]:
    """Return the first template element in a pre-order walk, if any."""

    if node.type == TEMPLATE_NODE:
        return node
    for child in node.children:
        found = find_template(child)
        if found is not None:
            return found
    return None


def _collect_text_nodes(node: Any, found: List[Any]) -> List[Any]:
    if node.type == TEXT_NODE:
        found.append(node)
        return found
    for child in node.children:
        _collect_text_nodes(child, found)
    return found


class TemplateSpanLocator:
    """Finds text nodes inside the ``<template>`` region of a component."""

    def __init__(self, parser: Any = None) -> None:
        self._parser = parser

    @property
    def parser(self) -> Any:
        if self._parser is None:
            self._parser = _import_vue_parser()
        return self._parser

    def locate(self, path: pathlib.Path) -> ScannedFile:
        try:
            content = path.read_bytes()
        except OSError as exc:
            raise FileReadError(f"Unable to read {path}: {exc}") from exc
        return ScannedFile(path=path, content=content, spans=self.locate_in(path, content))

    def locate_in(self, path: pathlib.Path, content: bytes) -> List[Span]:
        """Return the template text spans of ``content`` in document order."""

        try:
            tree = self.parser.parse(content)
        except (TypeError, ValueError, RuntimeError) as exc:
            raise TemplateParseError(f"Unable to parse {path}: {exc}") from exc
        if tree is None or tree.root_node is None:
            raise TemplateParseError(f"Unable to parse {path}.")

        template = find_template(tree.root_node)
        if template is None:
            return []

        spans: List[Span] = []
        for node in _collect_text_nodes(template, []):
            spans.append(
                Span(
                    file_path=path,
                    line=node.start_point[0] + 1,
                    text=content[node.start_byte : node.end_byte].decode(
                        "utf-8", errors="replace"
                    ),
                    start_offset=node.start_byte,
                    end_offset=node.end_byte,
                )
            )
        return spans


def iter_source_files(root: pathlib.Path) -> Iterator[pathlib.Path]:
    """Yield ``.vue`` files below ``root`` depth-first, entries in name order.

    Directories that cannot be listed are reported and skipped.
    """

    try:
        with os.scandir(root) as iterator:
            entries = sorted(iterator, key=lambda entry: entry.name)
    except OSError as exc:
        print(f"Unable to access {root} directory: {exc}", file=sys.stderr)
        return

    for entry in entries:
        full_path = root / entry.name
        if entry.is_dir(follow_symlinks=False):
            yield from iter_source_files(full_path)
        elif entry.name.endswith(SOURCE_SUFFIX):
            yield full_path
