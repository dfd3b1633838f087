"""Configuration loading and normalization."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, List

from config.merge import merge_sections
from config.models import (
    DEFAULT_VIDEO_EXTENSIONS,
    Config,
    LogConfig,
    RenameConfig,
    ReportConfig,
    ScanConfig,
    TmdbConfig,
)


class ConfigError(ValueError):
    """Raised when configuration input is missing or invalid."""


def _as_list(value: Any, default: List[str]) -> List[str]:
    if not value:
        return list(default)
    if isinstance(value, list):
        return [str(v) for v in value]
    return [str(v).strip() for v in str(value).split(",") if str(v).strip()]


def _as_bool(value: Any, default: bool) -> bool:
    if isinstance(value, bool):
        return value
    return default


def _as_float(value: Any, default: float) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        return default


def _as_positive_float(value: Any, default: float, name: str) -> float:
    number = _as_float(value, default)
    if number <= 0:
        raise ConfigError(f"{name} must be positive, got {number}")
    return number


def _as_optional_int(value: Any, name: str) -> int | None:
    if value is None or value == "":
        return None
    if isinstance(value, bool):
        raise ConfigError(f"{name} must be an integer, got {value!r}")
    try:
        number = int(value)
    except (TypeError, ValueError):
        raise ConfigError(f"{name} must be an integer, got {value!r}") from None
    if number < 0:
        raise ConfigError(f"{name} must not be negative, got {number}")
    return number


def _normalize_extensions(exts: List[str]) -> List[str]:
    out: List[str] = []
    for ext in exts:
        value = ext.strip().lower().lstrip(".")
        if value and value not in out:
            out.append(value)
    return out


def _load_json(path: Path) -> Dict[str, Any]:
    try:
        with path.open("r", encoding="utf-8") as f:
            data = json.load(f)
    except OSError as exc:
        raise ConfigError(f"Cannot read config file {path}: {exc}") from exc
    except json.JSONDecodeError as exc:
        raise ConfigError(f"Invalid JSON in config file {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"Config file {path} must contain a JSON object")
    return data


def config_from_dict(raw: Dict[str, Any]) -> Config:
    """Build a Config instance from a raw dictionary."""
    tmdb_raw = raw.get("tmdb", {}) or {}
    scan_raw = raw.get("scan", {}) or {}
    rename_raw = raw.get("rename", {}) or {}
    report_raw = raw.get("report", {}) or {}
    log_raw = raw.get("log", {}) or {}

    tmdb = TmdbConfig(
        api_key_env=str(tmdb_raw.get("api_key_env", "TMDB_API_KEY")),
        api_key=str(tmdb_raw.get("api_key", "")),
        language=str(tmdb_raw.get("language", "")),
        request_timeout_seconds=_as_positive_float(
            tmdb_raw.get("request_timeout_seconds", 20.0), 20.0, "request_timeout_seconds"
        ),
        fail_fast=_as_bool(tmdb_raw.get("fail_fast"), True),
        auto_min_score=_as_float(tmdb_raw.get("auto_min_score", 8.0), 8.0),
    )
    scan = ScanConfig(
        min_age_days=_as_optional_int(scan_raw.get("min_age_days"), "min_age_days"),
        max_age_days=_as_optional_int(scan_raw.get("max_age_days"), "max_age_days"),
        limit_search=_as_optional_int(scan_raw.get("limit_search"), "limit_search"),
    )
    rename = RenameConfig(
        dry_run=_as_bool(rename_raw.get("dry_run"), False),
        force=_as_bool(rename_raw.get("force"), False),
        video_extensions=_normalize_extensions(
            _as_list(rename_raw.get("video_extensions"), DEFAULT_VIDEO_EXTENSIONS)
        ),
    )
    report = ReportConfig(
        report_file=str(report_raw.get("report_file") or "not_found.log"),
        preview=_as_bool(report_raw.get("preview"), False),
        preview_file=str(report_raw.get("preview_file") or "preview.html"),
    )
    log_cfg = LogConfig(level=str(log_raw.get("level") or "INFO").upper())
    return Config(tmdb=tmdb, scan=scan, rename=rename, report=report, log=log_cfg)


def load_config(path: Path | None, overrides: Dict[str, Any] | None = None) -> Config:
    """Load config data into a Config instance.

    Args:
        path: Optional JSON config file.
        overrides: Per-section values (usually from CLI flags) that win over
            the file. ``None`` values mean "not given" and are skipped.

    Returns:
        Parsed Config instance.
    """
    raw: Dict[str, Any] = {}
    if path is not None:
        raw = _load_json(path)
    if overrides:
        raw = merge_sections(raw, overrides)
    return config_from_dict(raw)
