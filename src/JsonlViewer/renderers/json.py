"""JSON output renderers.

Renders record and page views into JSON-serializable objects, accumulates
them per command, and writes a single document on finalize.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Iterable, Mapping, Sequence

import click

from JsonlViewer.renderers.base import OutputWriter
from JsonlViewer.renderers.view_models import PageView, RecordView
from JsonlViewer.utils.log import log


def render_json(records: Iterable[RecordView]) -> list[dict]:
    """Render record views into JSON-serializable Python objects.

    The projected JSON text is decoded back so the output nests real objects
    rather than escaped strings.

    Args:
        records: Iterable of record views.

    Returns:
        A list of dicts with `lineNumber`, `content` and optional `highlights`.
    """
    out: list[dict] = []
    for view in records:
        d: dict[str, Any] = {
            "lineNumber": view.line_number,
            "content": json.loads(view.display_json),
        }
        if view.highlights:
            d["highlights"] = [
                {
                    "text": match.text,
                    "startPos": match.start,
                    "endPos": match.end,
                    "fieldName": match.field_name,
                }
                for match in view.highlights
            ]
        out.append(d)
    return out


def render_page_json(page: PageView) -> dict:
    """Render a page view with its totals."""
    return {
        "records": render_json(page.records),
        "offset": page.offset,
        "limit": page.limit,
        "total": page.total_available,
        "totalMatches": page.total_matches,
        "hasMore": page.has_more,
        "query": page.query,
    }


class JsonOutputWriter(OutputWriter):
    """Accumulate results and emit one JSON document on finalize."""

    def __init__(self, output_path: Path | None = None) -> None:
        """Initialize JSON writer.

        Args:
            output_path: File to write; None prints to stdout.
        """
        self.output_path = output_path
        self.results: list[dict] = []

    def write_page(self, page: PageView) -> None:
        self.results.append({"type": "page", **render_page_json(page)})

    def write_records(self, records: Sequence[RecordView], title: str) -> None:
        self.results.append({"type": "records", "title": title, "records": render_json(records)})

    def write_info(self, title: str, payload: Mapping[str, Any]) -> None:
        self.results.append({"type": "info", "title": title, **payload})

    def finalize(self, action: str) -> None:
        """Write accumulated results.

        Args:
            action: The CLI command name, recorded in the document.
        """
        document = {"action": action, "results": self.results}
        payload = json.dumps(document, ensure_ascii=False, indent=2, default=str)
        if self.output_path is None:
            click.echo(payload)
            return
        self.output_path.parent.mkdir(parents=True, exist_ok=True)
        self.output_path.write_text(payload + "\n", encoding="utf-8")
        log.info("JSON saved to %s", self.output_path)
