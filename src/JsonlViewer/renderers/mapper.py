"""Mapper from domain records/pages to display view models.

Display goes through the same projection as export, so what is shown and
what is exported for a given show/hide setting are identical.
"""

from __future__ import annotations

from typing import Sequence

from JsonlViewer.core.models import FieldVisibility, HighlightMatch, Page, Record
from JsonlViewer.core.projection import display_json
from JsonlViewer.renderers.view_models import PageView, RecordView


def map_record_to_view(
    record: Record,
    visibility: FieldVisibility,
    highlights: Sequence[HighlightMatch] = (),
) -> RecordView:
    """Project one record for display."""
    return RecordView(
        line_number=record.line_number,
        display_json=display_json(record, visibility),
        highlights=tuple(highlights),
    )


def map_records_to_views(records: Sequence[Record], visibility: FieldVisibility) -> list[RecordView]:
    return [map_record_to_view(record, visibility) for record in records]


def map_page_to_view(
    page: Page,
    visibility: FieldVisibility,
    highlights: Sequence[Sequence[HighlightMatch]] | None = None,
) -> PageView:
    """Project every record of a page, attaching highlights when given.

    Args:
        page: Page from the store or the search gateway.
        visibility: Show/hide configuration.
        highlights: One highlight list per record, aligned with `page.records`.

    Returns:
        PageView carrying the page totals.
    """
    if highlights is None:
        views = map_records_to_views(page.records, visibility)
    else:
        views = [
            map_record_to_view(record, visibility, spans)
            for record, spans in zip(page.records, highlights)
        ]
    return PageView(
        records=views,
        offset=page.offset,
        limit=page.limit,
        total_available=page.total_available,
        total_matches=page.total_matches,
        has_more=page.has_more,
        query=page.query,
    )
