"""Locate plain-text query matches inside a record's raw line."""

from __future__ import annotations

import json
import re

from JsonlViewer.core.evaluate import value_text
from JsonlViewer.core.models import HighlightMatch, Record

RAW_FIELD = "raw"


def find_highlights(record: Record, query: str, case_sensitive: bool = False) -> list[HighlightMatch]:
    """Find spans to highlight for `query` in `record`.

    Every non-overlapping occurrence in the raw line is reported with field
    name "raw". Then each field whose value contains the query contributes
    the span of its value in the raw line, when that span can be located
    after the field's key.

    Args:
        record: Record being displayed.
        query: Text to look for; the query language is not interpreted here.
        case_sensitive: Compare with exact case.

    Returns:
        Matches in discovery order; empty for a blank query.
    """
    if not query.strip():
        return []

    raw = record.raw_text
    needle = query if case_sensitive else query.lower()

    # Matched on the original text: lower() can change string length.
    pattern = re.compile(re.escape(query), 0 if case_sensitive else re.IGNORECASE)
    matches: list[HighlightMatch] = [
        HighlightMatch(text=found.group(), start=found.start(), end=found.end(), field_name=RAW_FIELD)
        for found in pattern.finditer(raw)
    ]

    for name, value in record.content.items():
        text = value_text(value)
        folded = text if case_sensitive else text.lower()
        if needle not in folded:
            continue
        key = json.dumps(name, ensure_ascii=False)
        key_pos = raw.find(key)
        if key_pos == -1:
            continue
        span = _raw_spelling(text, value)
        value_pos = raw.find(span, key_pos + len(key))
        if value_pos == -1:
            continue
        matches.append(
            HighlightMatch(text=text, start=value_pos, end=value_pos + len(span), field_name=name)
        )
    return matches


def _raw_spelling(text: str, value: object) -> str:
    """How a value most likely appears in the raw line (strings keep their quotes)."""
    if isinstance(value, str):
        return json.dumps(value, ensure_ascii=False)
    return text
