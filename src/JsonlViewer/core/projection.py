"""Field projection shared by on-screen display and export."""

from __future__ import annotations

import json
from typing import Any

from JsonlViewer.core.models import FieldVisibility, Record
from JsonlViewer.utils.log import log


def project(record: Record, visibility: FieldVisibility) -> dict[str, Any]:
    """Restrict a record's fields to what `visibility` allows.

    Args:
        record: Source record.
        visibility: Show/hide configuration. A non-empty show set wins.

    Returns:
        New mapping in the record's original key order.
    """
    if visibility.show:
        return {key: value for key, value in record.content.items() if key in visibility.show}
    if visibility.hide:
        return {key: value for key, value in record.content.items() if key not in visibility.hide}
    return dict(record.content)


def display_json(record: Record, visibility: FieldVisibility) -> str:
    """Single-line JSON for a record after projection.

    With no filtering the source line is returned verbatim, so unfiltered
    output is byte-for-byte identical to the source.
    """
    if visibility.is_empty:
        return record.raw_text

    try:
        return json.dumps(project(record, visibility), ensure_ascii=False, separators=(",", ":"))
    except (TypeError, ValueError) as error:
        log.warning("Projection serialization failed at line %d: %s", record.line_number, error)
        return record.raw_text
