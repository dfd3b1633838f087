"""TMDb API client for movie searches."""

from __future__ import annotations

from typing import Any, Dict, List

import requests

from core.models import SearchCandidate


TMDB_BASE = "https://api.themoviedb.org/3"
DEFAULT_TIMEOUT = 20.0


class NetworkError(RuntimeError):
    """Raised when a TMDb request fails or returns an unusable response."""


def tmdb_request(
    session: requests.Session,
    api_key: str,
    endpoint: str,
    params: Dict[str, Any],
    timeout: float = DEFAULT_TIMEOUT,
) -> Dict[str, Any]:
    """Make a TMDb API request.

    Args:
        session: Requests session.
        api_key: TMDb API key.
        endpoint: API endpoint path.
        params: Query parameters (percent-encoded by requests).
        timeout: Request timeout in seconds.

    Returns:
        Parsed JSON response.

    Raises:
        NetworkError: On transport failure, non-success status or invalid JSON.
    """
    url = f"{TMDB_BASE}{endpoint}"
    params = dict(params)
    params["api_key"] = api_key
    try:
        resp = session.get(url, params=params, timeout=timeout)
        resp.raise_for_status()
        data = resp.json()
    except requests.RequestException as exc:
        raise NetworkError(f"TMDb request to {endpoint} failed: {exc}") from exc
    except ValueError as exc:
        raise NetworkError(f"TMDb returned invalid JSON for {endpoint}: {exc}") from exc
    if not isinstance(data, dict):
        raise NetworkError(f"TMDb returned an unexpected payload for {endpoint}")
    return data


def search_movies(
    session: requests.Session,
    api_key: str,
    query: str,
    language: str,
    timeout: float = DEFAULT_TIMEOUT,
) -> Dict[str, Any]:
    """Run one ``/search/movie`` query and return the raw payload."""
    return tmdb_request(
        session,
        api_key,
        "/search/movie",
        {"language": language, "query": query},
        timeout=timeout,
    )


def parse_candidates(payload: Dict[str, Any]) -> List[SearchCandidate]:
    """Convert a search payload into candidates, in API order."""
    results = payload.get("results") or []
    return [SearchCandidate.from_tmdb(r) for r in results if isinstance(r, dict)]
