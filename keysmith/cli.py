"""Command line interface for keysmith."""

from __future__ import annotations

import argparse
import pathlib
import sys
from typing import Iterable, Optional

from .configuration import get_settings
from .errors import (
    InvalidTargetError,
    KeysmithConfigurationError,
    KeysmithError,
)
from .rewriter import format_replacement
from .runner import LocalizationRunner, LocalizationSummary, validate_target
from .structures import Span

EXAMPLES = """\
Examples:
  keysmith ./src                     # Find un-localized text
  keysmith ./src --replace           # Dry-run replacement preview
  keysmith ./src --replace --write   # Apply replacements
"""


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="keysmith",
        description=(
            "Find literal text in Vue templates and replace it with $t() lookups "
            "backed by a generated locale file."
        ),
        epilog=EXAMPLES,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "path",
        help="Directory to scan for .vue files.",
    )
    parser.add_argument(
        "-r",
        "--replace",
        action="store_true",
        help="Enable replacement mode (dry-run by default).",
    )
    parser.add_argument(
        "-w",
        "--write",
        action="store_true",
        help="Apply changes to files (use with --replace).",
    )
    parser.add_argument(
        "-o",
        "--output",
        help="Path for the generated locale JSON file (default: en.json).",
    )
    parser.add_argument(
        "--max-slug",
        type=int,
        help="Maximum slug length in characters (default: 30).",
    )
    parser.add_argument(
        "--skip-symbols",
        action="store_true",
        default=None,
        help="Ignore text made only of symbols and punctuation.",
    )
    parser.add_argument(
        "-c",
        "--config",
        help="Path to a YAML configuration file.",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        default=None,
        help="Show detailed progress information.",
    )
    return parser


def print_findings(spans: Iterable[Span]) -> None:
    print("Encountered un-localized text!")
    for span in spans:
        print(f"{span.file_path}:{span.line}  {span.text!r}")


def print_diff(span: Span) -> None:
    print(f"{span.file_path}:{span.line}")
    print(f"  - {span.text.strip()}")
    print(f"  + {format_replacement(span.key).decode('utf-8')}\n")


def print_preview(summary: LocalizationSummary) -> None:
    print("=== DRY RUN ===\n")
    for span in summary.spans:
        print_diff(span)
    print("---")
    print("Summary:")
    print(
        f"  {len(summary.spans)} replacements across "
        f"{summary.files_with_findings} files"
    )
    print(f"  {summary.new_keys} new keys for {summary.catalog_path}")
    print("\nRun with --write to apply changes.")


def print_write_report(summary: LocalizationSummary) -> None:
    for update in summary.updated_files:
        print(f"Updated: {update.path} ({update.replacements} replacements)")
    result = summary.catalog_result
    if result is not None:
        print(
            f"\nLocale file written: {result.path} "
            f"({len(result.added_keys)} new, {result.total_keys} keys total)"
        )
    if summary.total_errors:
        print("  Notes:")
        for message in summary.error_messages:
            print(f"    - {message}")
    print("Done!")


def execute(
    *,
    path: str,
    output: str,
    max_slug: int,
    replace: bool,
    write: bool,
    skip_symbols: bool,
    verbose: bool,
) -> tuple[int, LocalizationSummary | None, str | None]:
    """Execute a run and return the exit code, summary, and message."""

    target = pathlib.Path(path).expanduser()
    try:
        validate_target(target)
    except InvalidTargetError as exc:
        return 1, None, f"error: {exc}"
    target = target.resolve()
    catalog_path = pathlib.Path(output).expanduser()

    runner = LocalizationRunner(
        target=target,
        catalog_path=catalog_path,
        max_slug=max_slug,
        skip_symbols=skip_symbols,
        verbose=verbose,
    )

    try:
        if not replace:
            summary = runner.discover()
        elif not write:
            summary = runner.preview()
        else:
            summary = runner.apply()
    except KeysmithError as exc:
        return 1, None, f"error: {exc}"
    except KeyboardInterrupt:
        return 2, None, "Run interrupted by user."

    if not summary.spans:
        code = 1 if summary.total_errors else 0
        return code, summary, "No un-localized text found."
    if not replace:
        return 1, summary, None
    if write and summary.total_errors:
        return 1, summary, None
    return 0, summary, None


def main(argv: Optional[Iterable[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(list(argv) if argv is not None else None)

    config_path = pathlib.Path(args.config).expanduser().resolve() if args.config else None
    try:
        settings = get_settings(config_path=config_path)
    except KeysmithConfigurationError as exc:
        print(exc, file=sys.stderr)
        return 1

    max_slug = args.max_slug if args.max_slug is not None else settings.KEYSMITH_MAX_SLUG
    if max_slug < 1:
        parser.error("--max-slug must be at least 1")

    exit_code, summary, message = execute(
        path=args.path,
        output=args.output or settings.KEYSMITH_OUTPUT,
        max_slug=max_slug,
        replace=args.replace,
        write=args.write,
        skip_symbols=bool(
            args.skip_symbols if args.skip_symbols is not None else settings.KEYSMITH_SKIP_SYMBOLS
        ),
        verbose=bool(args.verbose if args.verbose is not None else settings.KEYSMITH_VERBOSE),
    )

    if message:
        print(message, file=sys.stderr if exit_code and summary is None else sys.stdout)
    if summary and summary.spans:
        if not args.replace:
            print_findings(summary.spans)
        elif not args.write:
            print_preview(summary)
        else:
            print_write_report(summary)
    return exit_code


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
