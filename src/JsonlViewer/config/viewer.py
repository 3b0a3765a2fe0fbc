"""Viewer domain configuration: paging and search defaults."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

from JsonlViewer.config.common import expect_bool, expect_int, get_section, get_value
from JsonlViewer.core.models import DEFAULT_PAGE_SIZE, MAX_PAGE


@dataclass(frozen=True, slots=True)
class ViewerConfig:
    """Validated viewer defaults.

    Attributes:
        page_size: Default page width when a command gives no limit.
        case_sensitive: Default value matching mode for search.
        query_language: False makes search a plain substring match.
    """

    page_size: int
    case_sensitive: bool
    query_language: bool


def load_viewer(raw: Mapping[str, Any]) -> ViewerConfig:
    """Load the optional `viewer` section."""
    section = get_section(raw, "viewer", required=False)
    return ViewerConfig(
        page_size=expect_int(
            get_value(section, "page_size", "viewer.page_size", default=DEFAULT_PAGE_SIZE),
            "viewer.page_size",
        ),
        case_sensitive=expect_bool(
            get_value(section, "case_sensitive", "viewer.case_sensitive", default=False),
            "viewer.case_sensitive",
        ),
        query_language=expect_bool(
            get_value(section, "query_language", "viewer.query_language", default=True),
            "viewer.query_language",
        ),
    )


def check_viewer(config: ViewerConfig) -> None:
    """Validate viewer constraints.

    Raises:
        ValueError: If page_size is outside 1..MAX_PAGE.
    """
    if not 1 <= config.page_size <= MAX_PAGE:
        raise ValueError(f"viewer.page_size must be between 1 and {MAX_PAGE}")
