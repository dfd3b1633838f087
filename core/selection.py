"""Choosing one shortlist entry, interactively or by policy."""

from __future__ import annotations

import re
from typing import Callable, Protocol, Sequence

from core.matching import match_score
from core.models import SearchCandidate
from logger import get_logger

log = get_logger()

_SELECTION_RE = re.compile(r"[1-9]")


class Chooser(Protocol):
    """Picks one shortlist entry for a directory."""

    def choose(self, name: str, shortlist: Sequence[SearchCandidate]) -> int | None:
        """Return the 0-based index of the chosen candidate, or None to skip."""


def format_candidate(position: int, candidate: SearchCandidate) -> str:
    """Render one shortlist line, e.g. ``1. Terminator (1984)``."""
    return f"{position}. {candidate.title} ({candidate.release_year})"


def parse_selection(raw: str, count: int) -> int | None:
    """Turn a typed selection into a 0-based index.

    ``0`` skips. Only a single digit 1-9 within the shortlist is accepted;
    anything else skips with a warning.
    """
    value = raw.strip()
    if value == "0":
        return None
    if not _SELECTION_RE.fullmatch(value) or int(value) > count:
        log.warn(f"Invalid selection '{value}'.")
        return None
    return int(value) - 1


class PromptChooser(Chooser):
    """Asks the user on the terminal."""

    def __init__(
        self,
        input_func: Callable[[str], str] | None = None,
        output: Callable[[str], None] | None = None,
    ) -> None:
        self._input = input_func or input
        self._output = output or print

    def choose(self, name: str, shortlist: Sequence[SearchCandidate]) -> int | None:
        log.info(f"Top {len(shortlist)} results for '{name}':")
        for position, candidate in enumerate(shortlist, 1):
            self._output(format_candidate(position, candidate))
        try:
            raw = self._input(f"Select the correct movie (1-{len(shortlist)}) or 0 to skip: ")
        except EOFError:
            log.warn("No input available.")
            return None
        return parse_selection(raw, len(shortlist))


class AutoChooser(Chooser):
    """Picks the best-ranked candidate whose title is close enough to the name."""

    def __init__(self, min_score: float) -> None:
        self.min_score = min_score

    def choose(self, name: str, shortlist: Sequence[SearchCandidate]) -> int | None:
        for index, candidate in enumerate(shortlist):
            score = match_score(name, candidate)
            if score >= self.min_score:
                log.info(f"Auto-selected {format_candidate(index + 1, candidate)} (score {score:.1f})")
                return index
        log.warn(f"No result for '{name}' scored at least {self.min_score:.1f}.")
        return None
