"""TMDb image URL helpers."""

from __future__ import annotations


IMAGE_BASE_URL = "https://image.tmdb.org/t/p/"
POSTER_SIZE = "w500"


def build_image_url(base_url: str, size: str, path: str) -> str:
    """Build a full image URL.

    Args:
        base_url: Image base URL (e.g. https://image.tmdb.org/t/p/).
        size: Image size.
        path: Image path (e.g. /poster.jpg).

    Returns:
        Full URL string, or "" when any part is missing.
    """
    if not base_url or not size or not path:
        return ""
    base = base_url if base_url.endswith("/") else (base_url + "/")
    size_part = size[1:] if size.startswith("/") else size
    return f"{base}{size_part}{path}"


def poster_url(poster_path: str, size: str = POSTER_SIZE) -> str:
    """Return the public poster URL for a TMDb ``poster_path``."""
    return build_image_url(IMAGE_BASE_URL, size, poster_path)
