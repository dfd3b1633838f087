"""Ranking and title matching helpers for TMDb search results."""

from __future__ import annotations

import re
import unicodedata
from typing import Iterable, List

from rapidfuzz import fuzz

from core.models import SearchCandidate


SHORTLIST_SIZE = 5


def rank_candidates(candidates: Iterable[SearchCandidate], limit: int = SHORTLIST_SIZE) -> List[SearchCandidate]:
    """Order candidates by popularity (descending) and keep the top ``limit``.

    The sort is stable, so equally popular results keep their API order.
    """
    ranked = sorted(candidates, key=lambda c: -c.popularity)
    return ranked[:limit]


def normalize_title(title: str) -> str:
    """Normalize a title for fuzzy matching.

    Args:
        title: Title to normalize.

    Returns:
        Normalized title string.
    """
    lowered = title.lower()
    lowered = unicodedata.normalize("NFKD", lowered)
    lowered = "".join(ch for ch in lowered if not unicodedata.combining(ch))
    lowered = lowered.replace("&", "and")
    lowered = re.sub(r"[^a-z0-9]+", " ", lowered)
    return re.sub(r"\s+", " ", lowered).strip()


def title_similarity(left: str, right: str) -> float:
    """Compute a fuzzy similarity score between two titles.

    Args:
        left: First title.
        right: Second title.

    Returns:
        Similarity score in [0, 1].
    """
    if not left or not right:
        return 0.0
    return fuzz.QRatio(normalize_title(left), normalize_title(right)) / 100.0


def match_score(query: str, candidate: SearchCandidate) -> float:
    """Score a candidate title against a directory name on a 0-10 scale."""
    return title_similarity(query, candidate.title) * 10.0
