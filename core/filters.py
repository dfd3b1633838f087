"""Directory filters applied before any TMDb lookup."""

from __future__ import annotations

import math
import re

from core.models import DirectoryEntry
from logger import get_logger

log = get_logger()

SECONDS_PER_DAY = 86400
YEAR_TAG_RE = re.compile(r"\([0-9]{4}\)")


def age_in_days(mtime: float, now: float) -> int:
    """Return the whole number of days between ``mtime`` and ``now``."""
    return math.floor((now - mtime) / SECONDS_PER_DAY)


def passes_age_filter(
    entry: DirectoryEntry,
    now: float,
    min_days: int | None,
    max_days: int | None,
) -> bool:
    """Decide whether a directory's age falls inside the configured range.

    Args:
        entry: Directory to check.
        now: Current time as a Unix timestamp.
        min_days: Minimum age in days (inclusive), or None.
        max_days: Maximum age in days (inclusive), or None.

    Returns:
        True to keep the directory, False to skip it.
    """
    if min_days is None and max_days is None:
        return True
    if entry.mtime is None:
        log.warn(f"Cannot stat '{entry.path}'. Skipping.")
        return False

    age_days = age_in_days(entry.mtime, now)
    if min_days is not None and age_days < min_days:
        log.info(f"Skipping '{entry.name}': age {age_days}d is less than minimum {min_days}d.")
        return False
    if max_days is not None and age_days > max_days:
        log.info(f"Skipping '{entry.name}': age {age_days}d is greater than maximum {max_days}d.")
        return False
    return True


def has_year_tag(name: str) -> bool:
    """Return True when a name already carries a ``(YYYY)`` year."""
    return YEAR_TAG_RE.search(name) is not None
