"""TMDb session initialization."""

from __future__ import annotations

import os
from dataclasses import dataclass

import requests

from config import Config


DEFAULT_LANGUAGE = "en-US"
LANGUAGE_ENV = "TMDB_LANG"


@dataclass
class TmdbContext:
    """TMDb session and request settings for one run."""

    session: requests.Session | None
    api_key: str
    language: str
    timeout: float
    fail_fast: bool


def resolve_language(cfg: Config) -> str:
    """Pick the request language: config/CLI, then TMDB_LANG, then en-US."""
    return cfg.tmdb.language or os.environ.get(LANGUAGE_ENV, "") or DEFAULT_LANGUAGE


def init_tmdb(cfg: Config, session: requests.Session | None = None) -> tuple[TmdbContext, str | None]:
    """Initialize the TMDb session.

    Returns:
        The context and an error message (None on success).
    """
    api_key_env = cfg.tmdb.api_key_env
    api_key = cfg.tmdb.api_key or os.environ.get(api_key_env, "")
    ctx = TmdbContext(
        session=None,
        api_key=api_key,
        language=resolve_language(cfg),
        timeout=float(cfg.tmdb.request_timeout_seconds),
        fail_fast=bool(cfg.tmdb.fail_fast),
    )
    if not api_key:
        return ctx, f"TMDb API key not set. Export {api_key_env} (or put it in .env) or add tmdb.api_key to config."
    ctx.session = session or requests.Session()
    return ctx, None
