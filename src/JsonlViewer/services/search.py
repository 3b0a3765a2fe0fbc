"""Pagination gateway: search pages and full exports over a record store."""

from __future__ import annotations

from typing import Iterator, Sequence

from JsonlViewer.core.evaluate import evaluate, match_term, value_text
from JsonlViewer.core.highlight import find_highlights
from JsonlViewer.core.models import FieldVisibility, HighlightMatch, Page, Record, SearchRequest
from JsonlViewer.core.projection import display_json
from JsonlViewer.core.query import QueryCompiler, QueryNode, compile_query
from JsonlViewer.storage.record_store import RecordStore, clamp_window
from JsonlViewer.utils.log import log

ALL_FIELDS = "all"


def search(store: RecordStore, request: SearchRequest, compiler: QueryCompiler | None = None) -> Page:
    """Answer "page N of the matches" for one request.

    A blank query returns an empty page straight away, without compiling.
    Otherwise the whole store is scanned once in store order and the window
    is cut from the match list.

    Args:
        store: Snapshot to search.
        request: Query, flags and window.
        compiler: Query compiler override.

    Returns:
        Page of matches; `total_available` is the store size.
    """
    offset, limit = clamp_window(request.offset, request.limit)
    if not request.query.strip():
        return Page(
            records=(),
            offset=offset,
            limit=limit,
            total_available=0,
            total_matches=0,
            query=request.query,
        )

    matches = _collect_matches(store, request, compiler)
    log.debug(
        "Search query=%r case_sensitive=%s matches=%d/%d",
        request.query,
        request.case_sensitive,
        len(matches),
        store.total_count,
    )
    return Page(
        records=tuple(matches[offset:offset + limit]),
        offset=offset,
        limit=limit,
        total_available=store.total_count,
        total_matches=len(matches),
        query=request.query,
    )


def search_with_highlights(
    store: RecordStore,
    request: SearchRequest,
    compiler: QueryCompiler | None = None,
) -> tuple[Page, list[list[HighlightMatch]]]:
    """Search, then attach plain-text highlight spans to each returned record."""
    page = search(store, request, compiler)
    highlights = [find_highlights(record, request.query, request.case_sensitive) for record in page.records]
    return page, highlights


def export_all(
    store: RecordStore,
    query: str,
    visibility: FieldVisibility,
    *,
    case_sensitive: bool = False,
    compiler: QueryCompiler | None = None,
) -> Iterator[str]:
    """Lazily yield one projected JSON line per matching record.

    Unlike `search`, a blank query exports every record, and no window is
    applied. The store always holds the complete source, so the export is
    complete.

    Args:
        store: Snapshot to export from.
        query: Query text; blank means everything.
        visibility: Field projection applied to every line.
        case_sensitive: Compare values with exact case.
        compiler: Query compiler override.

    Yields:
        Single-line JSON strings without trailing newline.
    """
    if not query.strip():
        for record in store:
            yield display_json(record, visibility)
        return

    node = compile_query(query, compiler)
    for record in store:
        if evaluate(node, record, case_sensitive):
            yield display_json(record, visibility)


def plain_match(record: Record, query: str, case_sensitive: bool, selected_field: str | None = None) -> bool:
    """Substring search without the query language.

    With a selected field only that field's value is tested; otherwise the
    raw line and then every field value.
    """
    if selected_field and selected_field != ALL_FIELDS:
        value = record.content.get(selected_field)
        return value is not None and match_term(value_text(value), query, case_sensitive, allow_empty=True)

    if match_term(record.raw_text, query, case_sensitive):
        return True
    return any(match_term(value_text(value), query, case_sensitive) for value in record.content.values())


def _collect_matches(
    store: RecordStore,
    request: SearchRequest,
    compiler: QueryCompiler | None,
) -> Sequence[Record]:
    if not request.use_query_language:
        return [
            record
            for record in store
            if plain_match(record, request.query, request.case_sensitive, request.selected_field)
        ]

    node: QueryNode | None = compile_query(request.query, compiler)
    if node is None:
        return []
    return [record for record in store if evaluate(node, record, request.case_sensitive)]
