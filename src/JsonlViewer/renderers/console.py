"""Console text output renderers.

Renders record views into human-friendly text and writes it via logging.
"""

from __future__ import annotations

from typing import Any, Iterable, Mapping, Sequence

from JsonlViewer.renderers.base import OutputWriter
from JsonlViewer.renderers.view_models import PageView, RecordView
from JsonlViewer.utils.log import log


def render_text(records: Iterable[RecordView]) -> str:
    """Render record views as `<line>: <json>` rows.

    Highlight spans, when present, are listed under their record.

    Args:
        records: Iterable of record views.

    Returns:
        A formatted string ready to be printed.
    """
    lines: list[str] = []
    for view in records:
        lines.append(f"{view.line_number:>6}: {view.display_json}")
        for match in view.highlights:
            lines.append(f"        ^ {match.field_name} [{match.start}:{match.end}] {match.text}")
    return "\n".join(lines) + ("\n" if lines else "")


def render_page_header(page: PageView) -> str:
    """One-line summary of a page's window and totals."""
    end = page.offset + len(page.records)
    if page.query is not None:
        return (
            f"Matches {page.offset + 1 if page.records else page.offset}-{end} of {page.total_matches} "
            f"(records: {page.total_available}, query: {page.query!r}, more: {page.has_more})"
        )
    return f"Records {page.offset + 1 if page.records else page.offset}-{end} of {page.total_available} (more: {page.has_more})"


def _fmt_value(value: Any) -> str:
    if isinstance(value, (list, tuple)):
        return ", ".join(str(item) for item in value) if value else "-"
    if value is None:
        return "-"
    return str(value)


class ConsoleOutputWriter(OutputWriter):
    """Write results to console via logging."""

    def write_page(self, page: PageView) -> None:
        log.info(render_page_header(page))
        for line in render_text(page.records).splitlines():
            log.info(line)

    def write_records(self, records: Sequence[RecordView], title: str) -> None:
        log.info("%s (%d)", title, len(records))
        for line in render_text(records).splitlines():
            log.info(line)

    def write_info(self, title: str, payload: Mapping[str, Any]) -> None:
        log.info("=== %s ===", title)
        for key, value in payload.items():
            log.info("%s: %s", key, _fmt_value(value))

    def finalize(self, action: str) -> None:
        """No-op for console output."""
