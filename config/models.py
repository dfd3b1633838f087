"""Configuration dataclasses."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List


DEFAULT_VIDEO_EXTENSIONS = ["mp4", "mkv", "avi", "mov", "m4v", "wmv", "flv", "webm"]


@dataclass
class TmdbConfig:
    """TMDb configuration settings."""

    api_key_env: str = "TMDB_API_KEY"
    api_key: str = ""
    language: str = ""
    request_timeout_seconds: float = 20.0
    fail_fast: bool = True
    auto_min_score: float = 8.0


@dataclass
class ScanConfig:
    """Directory filtering configuration settings."""

    min_age_days: int | None = None
    max_age_days: int | None = None
    limit_search: int | None = None


@dataclass
class RenameConfig:
    """Rename behavior configuration settings."""

    dry_run: bool = False
    force: bool = False
    video_extensions: List[str] = field(default_factory=lambda: list(DEFAULT_VIDEO_EXTENSIONS))


@dataclass
class ReportConfig:
    """End-of-run report configuration settings."""

    report_file: str = "not_found.log"
    preview: bool = False
    preview_file: str = "preview.html"


@dataclass
class LogConfig:
    """Console logging configuration settings."""

    level: str = "INFO"


@dataclass
class Config:
    """Top-level configuration container."""

    tmdb: TmdbConfig
    scan: ScanConfig
    rename: RenameConfig
    report: ReportConfig
    log: LogConfig
