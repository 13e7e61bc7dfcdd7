"""High-level orchestration for a localization run."""

from __future__ import annotations

import pathlib
import time
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence

from .catalog import CatalogMergeResult, load_catalog, merge_and_write
from .errors import (
    CatalogWriteError,
    ErrorCategory,
    FileReadError,
    FileWriteError,
    InvalidTargetError,
    TemplateParseError,
)
from .filters import filter_spans
from .keys import KeyCounter, assign_keys, has_empty_slug
from .locator import TemplateSpanLocator, iter_source_files
from .policy import ErrorPolicy
from .rewriter import atomic_write, order_for_rewrite, rewrite
from .structures import ScannedFile, Span


@dataclass
class FileUpdate:
    """A source file that was rewritten."""

    path: pathlib.Path
    replacements: int


@dataclass
class LocalizationSummary:
    """Report returned after a scan, preview, or write run."""

    target: pathlib.Path
    catalog_path: pathlib.Path
    files_scanned: int
    spans: List[Span]
    new_keys: int = 0
    updated_files: List[FileUpdate] = field(default_factory=list)
    catalog_result: Optional[CatalogMergeResult] = None
    total_errors: int = 0
    elapsed_seconds: float = 0.0
    error_messages: List[str] = field(default_factory=list)

    @property
    def files_with_findings(self) -> int:
        return len({span.file_path for span in self.spans})


class LocalizationRunner:
    """Coordinates traversal, span location, key assignment and rewriting."""

    def __init__(
        self,
        *,
        target: pathlib.Path,
        catalog_path: pathlib.Path,
        max_slug: int,
        skip_symbols: bool = False,
        verbose: bool = False,
        locator: Optional[TemplateSpanLocator] = None,
        error_policy: Optional[ErrorPolicy] = None,
    ) -> None:
        self.target = target
        self.catalog_path = catalog_path
        self.max_slug = max_slug
        self.skip_symbols = skip_symbols
        self.verbose = verbose
        self.locator = locator or TemplateSpanLocator()
        self.error_policy = error_policy or ErrorPolicy()
        self.counter = KeyCounter()

    def scan(self) -> List[ScannedFile]:
        """Locate and filter spans in every source file below the target."""

        scanned: List[ScannedFile] = []
        for path in iter_source_files(self.target):
            try:
                source = self.locator.locate(path)
            except FileReadError as exc:
                self.error_policy.handle_error(ErrorCategory.FILE_READ, str(exc))
                continue
            except TemplateParseError as exc:
                self.error_policy.handle_error(ErrorCategory.PARSE, str(exc))
                continue
            source.spans = filter_spans(source.spans, skip_symbols=self.skip_symbols)
            if self.verbose:
                print(f"Scanned {path} ({len(source.spans)} text spans).")
            scanned.append(source)
        return scanned

    def assign(self, scanned: Sequence[ScannedFile]) -> List[Span]:
        """Give every span its key in one sequential pass, in traversal order."""

        spans: List[Span] = []
        for source in scanned:
            source.spans = assign_keys(source.spans, self.target, self.max_slug, self.counter)
            spans.extend(source.spans)
        for span in spans:
            if has_empty_slug(span.key):
                self.error_policy.warn(
                    f"{span.file_path}:{span.line} text {span.text.strip()!r} "
                    f"produced an empty slug (key {span.key!r})."
                )
        return spans

    def discover(self) -> LocalizationSummary:
        start_time = time.time()
        scanned = self.scan()
        spans = [span for source in scanned for span in source.spans]
        return self._summary(scanned, spans, start_time)

    def preview(self) -> LocalizationSummary:
        """Assign keys and report what a write run would do, touching nothing."""

        start_time = time.time()
        scanned = self.scan()
        spans = self.assign(scanned)
        existing = load_catalog(self.catalog_path) or {}
        summary = self._summary(scanned, spans, start_time)
        summary.new_keys = sum(1 for span in spans if span.key not in existing)
        return summary

    def apply(self) -> LocalizationSummary:
        """Rewrite every source file with findings, then merge the catalog.

        The catalog is read before any file is touched, so a malformed
        catalog aborts the run with nothing modified. A failure to write the
        catalog afterwards is recorded rather than raised, so the summary
        still lists the files that were rewritten. Catalog values are the
        span text with its surrounding template whitespace stripped.
        """

        start_time = time.time()
        scanned = self.scan()
        spans = self.assign(scanned)
        if not spans:
            return self._summary(scanned, spans, start_time)

        existing = load_catalog(self.catalog_path) or {}

        translations: Dict[str, str] = {}
        updated: List[FileUpdate] = []
        for source in scanned:
            if not source.spans:
                continue
            try:
                self._rewrite_file(source)
            except FileReadError as exc:
                self.error_policy.handle_error(ErrorCategory.FILE_READ, str(exc))
                continue
            except FileWriteError as exc:
                self.error_policy.handle_error(ErrorCategory.FILE_WRITE, str(exc))
                continue
            updated.append(FileUpdate(path=source.path, replacements=len(source.spans)))
            for span in source.spans:
                translations[span.key] = span.text.strip()

        catalog_result = None
        if translations:
            try:
                self.catalog_path.parent.mkdir(parents=True, exist_ok=True)
                catalog_result = merge_and_write(self.catalog_path, translations)
            except OSError as exc:
                self.error_policy.handle_error(
                    ErrorCategory.CATALOG,
                    f"Failed to create locale directory {self.catalog_path.parent}: {exc}",
                )
            except CatalogWriteError as exc:
                self.error_policy.handle_error(ErrorCategory.CATALOG, str(exc))

        summary = self._summary(scanned, spans, start_time)
        summary.updated_files = updated
        summary.new_keys = sum(1 for key in translations if key not in existing)
        summary.catalog_result = catalog_result
        return summary

    def _rewrite_file(self, source: ScannedFile) -> None:
        try:
            current = source.path.read_bytes()
        except OSError as exc:
            raise FileReadError(f"error reading {source.path}: {exc}") from exc
        if current != source.content:
            raise FileReadError(
                f"{source.path} changed since it was scanned; skipping rewrite."
            )

        new_content = rewrite(source.content, order_for_rewrite(source.spans))
        try:
            atomic_write(source.path, new_content)
        except OSError as exc:
            raise FileWriteError(f"error writing {source.path}: {exc}") from exc

    def _summary(
        self,
        scanned: Sequence[ScannedFile],
        spans: List[Span],
        start_time: float,
    ) -> LocalizationSummary:
        return LocalizationSummary(
            target=self.target,
            catalog_path=self.catalog_path,
            files_scanned=len(scanned),
            spans=spans,
            total_errors=len(self.error_policy.records),
            elapsed_seconds=time.time() - start_time,
            error_messages=[record.message for record in self.error_policy.records],
        )


def validate_target(target: pathlib.Path) -> None:
    """Ensure the scan target exists and is a directory."""

    if not target.exists():
        raise InvalidTargetError(f"{target} does not exist.")
    if not target.is_dir():
        raise InvalidTargetError("path must be a directory")
