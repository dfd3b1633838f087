"""Renaming a directory and its matching video file."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Iterable, List, Sequence

from core.models import FileRename, RenameOutcome, RenamePlan, SearchCandidate
from logger import get_logger

log = get_logger()

VIDEO_EXTENSIONS = ("mp4", "mkv", "avi", "mov", "m4v", "wmv", "flv", "webm")


class DestinationExistsError(FileExistsError):
    """Raised when a directory rename target is already taken."""


def target_name(candidate: SearchCandidate) -> str:
    """Build the canonical ``Title (Year)`` name for a candidate."""
    title = candidate.title.strip().replace("/", "-").replace("\\", "-")
    return f"{title} ({candidate.release_year})"


def find_video_files(
    directory: Path,
    name: str,
    new_name: str,
    extensions: Sequence[str] = VIDEO_EXTENSIONS,
) -> List[FileRename]:
    """Find ``{name}.{ext}`` files directly inside ``directory``.

    Names are compared case-insensitively; every match is returned. The
    target keeps the extension as spelled in ``extensions``.
    """
    try:
        children = sorted(p for p in directory.iterdir() if p.is_file())
    except OSError as exc:
        log.warn(f"Cannot list '{directory}': {exc}")
        return []

    matches: List[FileRename] = []
    for ext in extensions:
        wanted = f"{name}.{ext}".casefold()
        for child in children:
            if child.name.casefold() == wanted:
                matches.append(FileRename(source=child, target=directory / f"{new_name}.{ext}"))
    return matches


def build_plan(source_dir: Path, candidate: SearchCandidate, extensions: Iterable[str] = VIDEO_EXTENSIONS) -> RenamePlan:
    """Plan the rename of ``source_dir`` after the chosen candidate."""
    new_name = target_name(candidate)
    return RenamePlan(
        source_dir=source_dir,
        source_name=source_dir.name,
        target_name=new_name,
        files=find_video_files(source_dir, source_dir.name, new_name, tuple(extensions)),
    )


def _rename_files(files: Iterable[FileRename], dry_run: bool, outcome: RenameOutcome) -> None:
    for item in files:
        if item.target.exists():
            log.warn(f"Target file '{item.target}' already exists. Skipping rename of '{item.source.name}'.")
            outcome.skipped_files.append(item)
            continue
        if not item.source.exists():
            log.warn(f"File '{item.source}' is gone. Skipping.")
            outcome.skipped_files.append(item)
            continue
        if dry_run:
            log.dry(f"Would rename file '{item.source}' -> '{item.target}'")
        else:
            os.rename(item.source, item.target)
            log.ok(f"Renamed file '{item.source.name}' -> '{item.target.name}'")
        outcome.renamed_files.append(item)


def apply_plan(plan: RenamePlan, dry_run: bool) -> RenameOutcome:
    """Rename the matched video files, then the directory itself.

    Files whose destination already exists are skipped with a warning.
    The directory step always runs after the file step. A taken target
    directory is detected before any file is touched.

    Raises:
        DestinationExistsError: The target directory already exists.
    """
    outcome = RenameOutcome(final_dir=plan.source_dir)
    if not plan.source_dir.is_dir():
        log.warn(f"Directory '{plan.source_dir}' no longer exists. Nothing to rename.")
        return outcome

    target_dir = plan.target_dir
    if target_dir.exists():
        if not dry_run:
            raise DestinationExistsError(f"Cannot rename '{plan.source_name}': '{target_dir}' already exists.")
        log.warn(f"Target directory '{target_dir}' already exists; the rename would fail.")

    _rename_files(plan.files, dry_run, outcome)

    if dry_run:
        log.dry(f"Would rename directory '{plan.source_name}' -> '{plan.target_name}'")
        return outcome

    os.rename(plan.source_dir, target_dir)
    log.ok(f"Renamed directory '{plan.source_name}' -> '{plan.target_name}'")
    outcome.directory_renamed = True
    outcome.final_dir = target_dir
    return outcome
