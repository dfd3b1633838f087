"""Command-line parsing helpers."""

from __future__ import annotations

import argparse
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, NoReturn


USAGE_EXAMPLES = """\
examples:
  # export API key and run (process dirs aged between 1 and 5 days, dry run)
  export TMDB_API_KEY="your_tmdb_api_key_here"
  tmdb-dir-renamer --DIR ./test_movies --MIN_AGE_DAYS 1 --MAX_AGE_DAYS 5 --DRY_RUN true

  # use .env file (create .env with TMDB_API_KEY=your_key) and generate preview
  tmdb-dir-renamer --DIR ./test_movies --PREVIEW true

environment:
  TMDB_API_KEY   TMDb API key (required; may be placed in .env)
  TMDB_LANG      default language when --LANG is not given
"""

_TRUE = {"true", "yes", "1", "on"}
_FALSE = {"false", "no", "0", "off"}


class _ArgumentParser(argparse.ArgumentParser):
    """Argument parser that exits with status 1 on bad input."""

    def error(self, message: str) -> NoReturn:
        self.print_usage(sys.stderr)
        self.exit(1, f"{self.prog}: error: {message}\n")


def parse_bool(value: str) -> bool:
    """Parse a ``true``/``false`` style flag value."""
    lowered = str(value).strip().lower()
    if lowered in _TRUE:
        return True
    if lowered in _FALSE:
        return False
    raise argparse.ArgumentTypeError(f"expected true or false, got {value!r}")


def non_negative_int(value: str) -> int:
    """Parse a non-negative integer flag value."""
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected a non-negative integer, got {value!r}") from None
    if number < 0:
        raise argparse.ArgumentTypeError(f"expected a non-negative integer, got {value!r}")
    return number


@dataclass
class RunOptions:
    """Parsed CLI options used by the run pipeline.

    ``None`` means the flag was not given, so config file values apply.
    """

    root: Path | None
    config_path: Path | None
    min_age_days: int | None
    max_age_days: int | None
    dry_run: bool | None
    preview: bool | None
    preview_file: Path | None
    report_file: Path | None
    language: str | None
    limit_search: int | None
    force: bool | None

    def to_overrides(self) -> Dict[str, Dict[str, Any]]:
        """Express the given flags as config section overrides."""
        return {
            "tmdb": {"language": self.language},
            "scan": {
                "min_age_days": self.min_age_days,
                "max_age_days": self.max_age_days,
                "limit_search": self.limit_search,
            },
            "rename": {"dry_run": self.dry_run, "force": self.force},
            "report": {
                "report_file": str(self.report_file) if self.report_file else None,
                "preview": self.preview,
                "preview_file": str(self.preview_file) if self.preview_file else None,
            },
        }


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = _ArgumentParser(
        prog="tmdb-dir-renamer",
        description=(
            "Search each subdirectory name on TMDb, let the user pick the right movie, "
            "and rename the directory (and its video file) to 'Title (Year)'."
        ),
        epilog=USAGE_EXAMPLES,
        formatter_class=argparse.RawDescriptionHelpFormatter,
        allow_abbrev=False,
    )
    parser.add_argument("--DIR", dest="dir", metavar="DIR", help="Directory with subdirectories to rename (required)")
    parser.add_argument("--MIN_AGE_DAYS", dest="min_age_days", type=non_negative_int, metavar="N",
                        help="Minimum age (days) of directories to process")
    parser.add_argument("--MAX_AGE_DAYS", dest="max_age_days", type=non_negative_int, metavar="N",
                        help="Maximum age (days) of directories to process")
    parser.add_argument("--DRY_RUN", dest="dry_run", type=parse_bool, nargs="?", const=True, metavar="true|false",
                        help="Do not perform changes (bare flag means true)")
    parser.add_argument("--PREVIEW", dest="preview", type=parse_bool, nargs="?", const=True, metavar="true|false",
                        help="Write an HTML preview with TMDb info (bare flag means true)")
    parser.add_argument("--PREVIEW_FILE", dest="preview_file", metavar="FILE",
                        help="Preview output file (default: preview.html)")
    parser.add_argument("--REPORT_FILE", dest="report_file", metavar="FILE",
                        help="File to log not found directories (default: not_found.log)")
    parser.add_argument("--LANG", dest="lang", metavar="LANG", help="TMDb language (default: $TMDB_LANG or en-US)")
    parser.add_argument("--LIMIT_SEARCH", dest="limit_search", type=non_negative_int, metavar="N",
                        help="Stop after N directories have been searched")
    parser.add_argument("--FORCE", dest="force", type=parse_bool, nargs="?", const=True, metavar="true|false",
                        help="Pick the best matching result without prompting")
    parser.add_argument("--CONFIG", dest="config", metavar="FILE", help="Path to a JSON config file")
    return parser


def _as_path(value: str | None) -> Path | None:
    return Path(value).expanduser() if value else None


def get_run_options(argv: list[str] | None = None) -> RunOptions:
    """Build a RunOptions instance from CLI arguments.

    Args:
        argv: Optional argument list.

    Returns:
        RunOptions with normalized paths and flags.
    """
    args = build_parser().parse_args(argv)
    root = _as_path(args.dir)
    config_path = _as_path(args.config)
    return RunOptions(
        root=root.resolve() if root else None,
        config_path=config_path.resolve() if config_path else None,
        min_age_days=args.min_age_days,
        max_age_days=args.max_age_days,
        dry_run=args.dry_run,
        preview=args.preview,
        preview_file=_as_path(args.preview_file),
        report_file=_as_path(args.report_file),
        language=args.lang,
        limit_search=args.limit_search,
        force=args.force,
    )
