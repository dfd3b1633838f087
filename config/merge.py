"""Config merging helpers."""

from __future__ import annotations

from typing import Any, Dict


def merge_dicts(base: Dict[str, Any], overrides: Dict[str, Any]) -> Dict[str, Any]:
    """Recursively merge overrides into base, ignoring unset (None) values."""
    merged = dict(base)
    for key, value in overrides.items():
        if value is None:
            continue
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = merge_dicts(merged[key], value)
        else:
            merged[key] = value
    return merged


def merge_sections(base: Dict[str, Any], overrides: Dict[str, Any]) -> Dict[str, Any]:
    """Merge per-section overrides (e.g. CLI flags) into file-based config.

    Sections missing from ``base`` are created. A section override that is
    not a dict replaces the section wholesale.
    """
    merged = dict(base)
    for section, values in overrides.items():
        if values is None:
            continue
        if isinstance(values, dict):
            current = merged.get(section)
            merged[section] = merge_dicts(current if isinstance(current, dict) else {}, values)
        else:
            merged[section] = values
    return merged
