"""Main execution pipeline for renaming movie directories."""

from __future__ import annotations

import time
from dataclasses import dataclass
from pathlib import Path

import requests

from cli import RunOptions
from config import Config
from core.filters import has_year_tag, passes_age_filter
from core.matching import rank_candidates
from core.models import DirectoryEntry
from core.rename import DestinationExistsError, apply_plan, build_plan
from core.report import RunReport
from core.selection import AutoChooser, Chooser, PromptChooser
from logger import get_logger
from tmdb.client import NetworkError, parse_candidates, search_movies
from tmdb.images import poster_url
from tmdb.service import TmdbContext, init_tmdb

log = get_logger()


@dataclass
class RunContext:
    """Resolved configuration and helpers for a run."""

    cfg: Config
    root: Path
    tmdb_ctx: TmdbContext
    chooser: Chooser
    report: RunReport
    dry_run: bool
    min_age_days: int | None
    max_age_days: int | None
    limit_search: int | None
    extensions: list[str]


@dataclass
class ProcessResult:
    """Per-directory processing result."""

    status: str


@dataclass
class RunSummary:
    """Aggregate results for a run."""

    renamed: int = 0
    skipped: int = 0
    not_found: int = 0
    filtered: int = 0
    failed_lookup: int = 0

    def add(self, result: ProcessResult) -> None:
        if result.status == "renamed":
            self.renamed += 1
        elif result.status == "skipped":
            self.skipped += 1
        elif result.status == "not_found":
            self.not_found += 1
        elif result.status == "failed_lookup":
            self.failed_lookup += 1
        else:
            self.filtered += 1


def default_chooser(cfg: Config) -> Chooser:
    """Prompt the user unless force mode asks for automatic selection."""
    if cfg.rename.force:
        return AutoChooser(cfg.tmdb.auto_min_score)
    return PromptChooser()


def prepare_run_context(
    options: RunOptions,
    cfg: Config,
    chooser: Chooser | None = None,
    session: requests.Session | None = None,
) -> tuple[RunContext | None, str | None]:
    """Resolve configuration and helpers for a run."""
    if options.root is None:
        return None, "Missing required argument: --DIR"

    tmdb_ctx, tmdb_error = init_tmdb(cfg, session)
    if tmdb_error:
        return None, tmdb_error

    preview_file = Path(cfg.report.preview_file).expanduser() if cfg.report.preview else None
    report = RunReport(
        report_file=Path(cfg.report.report_file).expanduser(),
        preview_file=preview_file,
        preview_enabled=cfg.report.preview,
    )
    ctx = RunContext(
        cfg=cfg,
        root=options.root,
        tmdb_ctx=tmdb_ctx,
        chooser=chooser or default_chooser(cfg),
        report=report,
        dry_run=bool(cfg.rename.dry_run),
        min_age_days=cfg.scan.min_age_days,
        max_age_days=cfg.scan.max_age_days,
        limit_search=cfg.scan.limit_search,
        extensions=list(cfg.rename.video_extensions),
    )
    return ctx, None


def list_subdirectories(root: Path) -> list[Path]:
    """Return the visible subdirectories of ``root`` in name order."""
    return sorted(p for p in root.iterdir() if p.is_dir() and not p.name.startswith("."))


def filter_directory(entry: DirectoryEntry, ctx: RunContext, now: float) -> ProcessResult | None:
    """Apply the age and name filters; None means the entry should be searched."""
    if not passes_age_filter(entry, now, ctx.min_age_days, ctx.max_age_days):
        return ProcessResult(status="age_filtered")
    if has_year_tag(entry.name):
        log.info(f"Skipping '{entry.name}': already contains year (YYYY).")
        return ProcessResult(status="name_filtered")
    return None


def process_directory(entry: DirectoryEntry, ctx: RunContext) -> ProcessResult:
    """Search, select and rename a single directory.

    Raises:
        NetworkError: The search failed and the run is configured to fail fast.
        DestinationExistsError: The renamed directory would replace an existing one.
    """
    log.info(f"Searching for '{entry.name}' on TMDb...")
    try:
        payload = search_movies(
            ctx.tmdb_ctx.session,
            ctx.tmdb_ctx.api_key,
            entry.name,
            ctx.tmdb_ctx.language,
            timeout=ctx.tmdb_ctx.timeout,
        )
    except NetworkError as exc:
        if ctx.tmdb_ctx.fail_fast:
            raise
        log.warn(f"{exc}. Skipping '{entry.name}' and logging to {ctx.report.report_file}.")
        ctx.report.record_not_found(entry.name)
        return ProcessResult(status="failed_lookup")

    shortlist = rank_candidates(parse_candidates(payload))
    if not shortlist:
        log.warn(f"No results found for '{entry.name}'. Logging to {ctx.report.report_file}.")
        ctx.report.record_not_found(entry.name)
        return ProcessResult(status="not_found")

    index = ctx.chooser.choose(entry.name, shortlist)
    if index is None:
        log.info(f"Skipping '{entry.name}'.")
        return ProcessResult(status="skipped")

    candidate = shortlist[index]
    if not candidate.title.strip():
        log.warn(f"Selected result for '{entry.name}' has no title. Skipping.")
        return ProcessResult(status="skipped")
    plan = build_plan(entry.path, candidate, ctx.extensions)
    apply_plan(plan, ctx.dry_run)
    ctx.report.record_preview(entry.name, plan.target_name, candidate.overview, poster_url(candidate.poster_path))
    return ProcessResult(status="renamed")


def run_directories(ctx: RunContext, summary: RunSummary) -> None:
    """Walk the root's subdirectories, honoring the search limit."""
    searched = 0
    for path in list_subdirectories(ctx.root):
        entry = DirectoryEntry.from_path(path)
        filtered = filter_directory(entry, ctx, time.time())
        if filtered is not None:
            summary.add(filtered)
            continue
        if ctx.limit_search is not None and searched >= ctx.limit_search:
            log.info(f"Search limit of {ctx.limit_search} reached; stopping.")
            break
        searched += 1
        summary.add(process_directory(entry, ctx))


def flush_report(report: RunReport) -> bool:
    """Write the report files; False when they cannot be written."""
    try:
        report.flush()
    except OSError as exc:
        log.error(f"Cannot write report: {exc}")
        return False
    return True


def finalize_run(summary: RunSummary, ctx: RunContext) -> int:
    """Log final summary and return exit code."""
    log.info(f"Renamed: {summary.renamed}")
    log.info(f"Skipped: {summary.skipped}")
    log.info(f"Not found: {summary.not_found + summary.failed_lookup}")
    log.info(f"Filtered: {summary.filtered}")
    if ctx.dry_run:
        log.info("(dry run: no files or directories were modified)")
    log.ok("Renaming process completed.")
    return 0


def run(
    options: RunOptions,
    cfg: Config,
    chooser: Chooser | None = None,
    session: requests.Session | None = None,
) -> int:
    """Execute the rename run based on options and config.

    Args:
        options: Parsed run options.
        cfg: Loaded configuration.
        chooser: Selection strategy; defaults to prompting (or auto in force mode).
        session: Optional requests session to reuse.

    Returns:
        Process exit code.
    """
    ctx, error = prepare_run_context(options, cfg, chooser, session)
    if ctx is None:
        log.error(error or "Cannot start run.")
        return 1

    if ctx.min_age_days is not None or ctx.max_age_days is not None:
        low = "*" if ctx.min_age_days is None else ctx.min_age_days
        high = "*" if ctx.max_age_days is None else ctx.max_age_days
        log.info(f"Applying age filter: {low} .. {high} days")
    log.info(f"Starting renaming process in directory: {ctx.root}")

    summary = RunSummary()
    exit_code = 0
    try:
        run_directories(ctx, summary)
    except (NetworkError, DestinationExistsError) as exc:
        log.error(str(exc))
        exit_code = 1
    except OSError as exc:
        log.error(f"Filesystem error: {exc}")
        exit_code = 1

    if not flush_report(ctx.report):
        return 1
    if exit_code:
        return exit_code
    return finalize_run(summary, ctx)
