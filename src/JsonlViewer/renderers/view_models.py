"""View models for output rendering.

Keeps display concerns (projected JSON text, highlight spans) apart from the
`Record` domain model. Used by OutputWriter implementations.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from JsonlViewer.core.models import HighlightMatch


@dataclass(frozen=True, slots=True)
class RecordView:
    """Record as it is shown to the user.

    Attributes:
        line_number: Source line of the record.
        display_json: Projected single-line JSON (raw line when unfiltered).
        highlights: Highlight spans in the raw line, when requested.
    """

    line_number: int
    display_json: str
    highlights: Sequence[HighlightMatch] = ()


@dataclass(frozen=True, slots=True)
class PageView:
    """Page metadata plus its record views."""

    records: Sequence[RecordView]
    offset: int
    limit: int
    total_available: int
    total_matches: int
    has_more: bool
    query: str | None = None
