"""Data models shared by the rename pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List


@dataclass(frozen=True)
class DirectoryEntry:
    """A candidate directory as seen at the start of one loop iteration."""

    path: Path
    name: str
    mtime: float | None

    @classmethod
    def from_path(cls, path: Path) -> "DirectoryEntry":
        """Build an entry, leaving ``mtime`` unset when it cannot be read."""
        try:
            mtime: float | None = path.stat().st_mtime
        except OSError:
            mtime = None
        return cls(path=path, name=path.name, mtime=mtime)


@dataclass(frozen=True)
class SearchCandidate:
    """One TMDb movie search result."""

    title: str
    release_date: str
    popularity: float
    overview: str
    poster_path: str

    @property
    def release_year(self) -> str:
        # Not validated; malformed dates pass through as-is.
        return self.release_date[:4]

    @classmethod
    def from_tmdb(cls, result: Dict[str, Any]) -> "SearchCandidate":
        """Create a candidate from a raw ``results[]`` object."""
        try:
            popularity = float(result.get("popularity") or 0.0)
        except (TypeError, ValueError):
            popularity = 0.0
        return cls(
            title=str(result.get("title") or ""),
            release_date=str(result.get("release_date") or ""),
            popularity=popularity,
            overview=str(result.get("overview") or ""),
            poster_path=str(result.get("poster_path") or ""),
        )


@dataclass(frozen=True)
class FileRename:
    """A video file inside the source directory and its new path."""

    source: Path
    target: Path


@dataclass(frozen=True)
class RenamePlan:
    """Everything needed to rename one directory and its video files."""

    source_dir: Path
    source_name: str
    target_name: str
    files: List[FileRename] = field(default_factory=list)

    @property
    def target_dir(self) -> Path:
        return self.source_dir.parent / self.target_name


@dataclass
class RenameOutcome:
    """What ``apply_plan`` did (or would have done, in dry run)."""

    renamed_files: List[FileRename] = field(default_factory=list)
    skipped_files: List[FileRename] = field(default_factory=list)
    directory_renamed: bool = False
    final_dir: Path | None = None
