"""End-of-run report: not-found list and optional HTML preview."""

from __future__ import annotations

from dataclasses import dataclass
from html import escape as html_escape
from pathlib import Path
from typing import List

from logger import get_logger

log = get_logger()


@dataclass(frozen=True)
class PreviewRow:
    """One rename shown in the HTML preview."""

    old_name: str
    new_name: str
    overview: str
    poster_url: str


def render_preview_html(rows: List[PreviewRow]) -> str:
    """Render preview rows as a standalone HTML document."""
    parts = [
        "<html><head><meta charset='utf-8'><title>Renaming Preview</title></head><body>",
        "<h1>Renaming Preview</h1>",
        "<table border='1'><tr><th>Original Name</th><th>New Name</th><th>Details</th></tr>",
    ]
    for row in rows:
        image = ""
        if row.poster_url:
            image = f"<img src='{html_escape(row.poster_url, quote=True)}' alt='Poster' style='width:100px;'><br>"
        parts.append(
            f"<tr><td>{html_escape(row.old_name)}</td><td>{html_escape(row.new_name)}</td>"
            f"<td>{image}{html_escape(row.overview)}</td></tr>"
        )
    parts.append("</table></body></html>")
    return "\n".join(parts) + "\n"


class RunReport:
    """Collects not-found names and preview rows until ``flush``."""

    def __init__(self, report_file: Path, preview_file: Path | None = None, preview_enabled: bool = False) -> None:
        self.report_file = report_file
        self.preview_file = preview_file
        self.preview_enabled = preview_enabled and preview_file is not None
        self.not_found: List[str] = []
        self.previews: List[PreviewRow] = []

    def record_not_found(self, name: str) -> None:
        self.not_found.append(name)

    def record_preview(self, old_name: str, new_name: str, overview: str, poster_url: str) -> None:
        if not self.preview_enabled:
            return
        self.previews.append(PreviewRow(old_name, new_name, overview, poster_url))

    def flush(self) -> None:
        """Append not-found names to the report file and write the preview."""
        if self.not_found:
            log.info(f"Logging not found directories to {self.report_file}")
            self.report_file.parent.mkdir(parents=True, exist_ok=True)
            with self.report_file.open("a", encoding="utf-8") as f:
                for name in self.not_found:
                    f.write(name + "\n")
        if self.preview_enabled and self.preview_file is not None:
            self.preview_file.parent.mkdir(parents=True, exist_ok=True)
            self.preview_file.write_text(render_preview_html(self.previews), encoding="utf-8")
            log.ok(f"Preview saved to {self.preview_file}")
