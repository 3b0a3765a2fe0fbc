"""Viewer session: the one place that holds the currently loaded source.

Every operation the presentation layer needs goes through `ViewerSession`.
A load builds the new store and statistics completely, then publishes them
with a single assignment, so readers only ever see a whole snapshot.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterable, Iterator

from JsonlViewer.core.errors import NoSourceLoaded, ParseSourceError, ReloadNotSupported
from JsonlViewer.core.models import (
    DEFAULT_PAGE_SIZE,
    PASTED_SOURCE_PATH,
    FieldVisibility,
    FileDescriptor,
    HighlightMatch,
    LoadStats,
    ModificationInfo,
    Page,
    Record,
    SearchRequest,
)
from JsonlViewer.core.query import QueryCompiler
from JsonlViewer.services.export import ExportResult, write_export
from JsonlViewer.services.search import export_all, search as search_store, search_with_highlights
from JsonlViewer.sources.loader import IngestResult, ingest_bytes, ingest_file, ingest_text
from JsonlViewer.storage.record_store import RecordStore
from JsonlViewer.utils.log import log


@dataclass(frozen=True, slots=True)
class _Snapshot:
    store: RecordStore
    stats: LoadStats
    descriptor: FileDescriptor


class ViewerSession:
    """Holds the current snapshot and exposes the viewer operations."""

    def __init__(self, *, page_size: int = DEFAULT_PAGE_SIZE, compiler: QueryCompiler | None = None) -> None:
        """Initialize an empty session.

        Args:
            page_size: Default page width applied to every loaded store.
            compiler: Query compiler override used by search and export.
        """
        self._page_size = page_size
        self._compiler = compiler
        self._snapshot: _Snapshot | None = None

    # -- loading ---------------------------------------------------------

    def load_file(self, path: Path | str) -> FileDescriptor:
        """Load a JSONL file, replacing the current source.

        Raises:
            ParseSourceError: If the file cannot be read. The previous source stays loaded.
        """
        file_path = Path(path)
        try:
            # Taken before reading so a write during ingestion shows up as a modification.
            modified_at = _mtime(file_path)
        except OSError as error:
            raise ParseSourceError(f"File not found or cannot be accessed: {file_path}") from error
        result = ingest_file(file_path, page_size=self._page_size)

        descriptor = FileDescriptor(
            name=file_path.name,
            path=str(file_path),
            size=result.stats.source_byte_size,
            record_count=result.stats.valid_record_count,
            loaded_at=datetime.now(timezone.utc),
            source_modified_at=modified_at,
        )
        self._publish(result, descriptor)
        return descriptor

    def load_text(self, text: str, name: str = PASTED_SOURCE_PATH) -> FileDescriptor:
        """Load pasted JSONL text, replacing the current source."""
        return self._publish_pasted(ingest_text(text, page_size=self._page_size), name)

    def load_bytes(self, data: bytes, name: str = PASTED_SOURCE_PATH) -> FileDescriptor:
        """Load pasted JSONL bytes; lines that are not valid UTF-8 count as malformed."""
        return self._publish_pasted(ingest_bytes(data, page_size=self._page_size), name)

    def _publish_pasted(self, result: IngestResult, name: str) -> FileDescriptor:
        descriptor = FileDescriptor(
            name=name,
            path=PASTED_SOURCE_PATH,
            size=result.stats.source_byte_size,
            record_count=result.stats.valid_record_count,
            loaded_at=datetime.now(timezone.utc),
            source_modified_at=None,
        )
        self._publish(result, descriptor)
        return descriptor

    def _publish(self, result: IngestResult, descriptor: FileDescriptor) -> None:
        self._snapshot = _Snapshot(store=result.store, stats=result.stats, descriptor=descriptor)
        log.info("Loaded %s: %d records", descriptor.name, descriptor.record_count)

    def _current(self) -> _Snapshot:
        snapshot = self._snapshot
        if snapshot is None:
            raise NoSourceLoaded()
        return snapshot

    @property
    def is_loaded(self) -> bool:
        return self._snapshot is not None

    @property
    def descriptor(self) -> FileDescriptor:
        return self._current().descriptor

    @property
    def stats(self) -> LoadStats:
        return self._current().stats

    @property
    def store(self) -> RecordStore:
        return self._current().store

    # -- browsing --------------------------------------------------------

    def get_page(self, offset: int, limit: int = 0) -> Page:
        """Page of records in file order (limit <= 0 uses the page size preference)."""
        return self._current().store.slice(offset, limit)

    def get_by_line(self, line_number: int) -> Record:
        return self._current().store.by_line_number(line_number)

    def get_range(self, start_line: int, end_line: int) -> list[Record]:
        return self._current().store.range(start_line, end_line)

    def total_count(self) -> int:
        return self._current().store.total_count

    def set_page_size(self, page_size: int) -> None:
        """Change the default page width for this and later loads."""
        store = self._current().store
        store.set_page_size(page_size)
        self._page_size = store.page_size

    def get_page_size(self) -> int:
        return self._current().store.page_size

    def get_all_fields(self) -> list[str]:
        return self._current().store.all_fields()

    def get_common_fields(self) -> list[str]:
        return self._current().store.common_fields()

    # -- search & export -------------------------------------------------

    def search(self, query: str, case_sensitive: bool = False, offset: int = 0, limit: int = DEFAULT_PAGE_SIZE) -> Page:
        """Search with the query language and return one page of matches."""
        return self.search_request(
            SearchRequest(query=query, case_sensitive=case_sensitive, offset=offset, limit=limit)
        )

    def search_request(self, request: SearchRequest) -> Page:
        return search_store(self._current().store, request, self._compiler)

    def search_with_highlights(self, request: SearchRequest) -> tuple[Page, list[list[HighlightMatch]]]:
        return search_with_highlights(self._current().store, request, self._compiler)

    def export(
        self,
        query: str,
        show: Iterable[str] = (),
        hide: Iterable[str] = (),
        *,
        case_sensitive: bool = False,
    ) -> Iterator[str]:
        """Lazily yield projected JSON lines for every match (blank query = all records)."""
        return export_all(
            self._current().store,
            query,
            FieldVisibility.of(show, hide),
            case_sensitive=case_sensitive,
            compiler=self._compiler,
        )

    def export_to_file(
        self,
        destination: Path,
        query: str,
        show: Iterable[str] = (),
        hide: Iterable[str] = (),
        *,
        case_sensitive: bool = False,
    ) -> ExportResult:
        """Write the export to `destination`.

        Raises:
            ExportIOError: If writing fails; already written lines remain.
        """
        lines = self.export(query, show, hide, case_sensitive=case_sensitive)
        return write_export(lines, destination)

    # -- file tracking ---------------------------------------------------

    def check_modified(self) -> bool:
        """Whether the loaded file changed on disk since it was loaded.

        Pasted sources are never modified.

        Raises:
            ParseSourceError: If the file can no longer be inspected.
        """
        descriptor = self._current().descriptor
        if descriptor.is_pasted:
            return False
        try:
            current = _mtime(Path(descriptor.path))
        except OSError as error:
            raise ParseSourceError("Failed to check file modification time") from error
        return descriptor.source_modified_at is not None and current > descriptor.source_modified_at

    def modification_info(self) -> ModificationInfo:
        """Describe the modification state without raising for a vanished file."""
        descriptor = self._current().descriptor
        if descriptor.is_pasted:
            return ModificationInfo(
                path=descriptor.path,
                loaded_at=descriptor.loaded_at,
                original_modified_at=None,
                current_modified_at=None,
                is_pasted=True,
                is_modified=False,
            )
        try:
            current = _mtime(Path(descriptor.path))
        except OSError:
            return ModificationInfo(
                path=descriptor.path,
                loaded_at=descriptor.loaded_at,
                original_modified_at=descriptor.source_modified_at,
                current_modified_at=None,
                is_pasted=False,
                is_modified=False,
                error="File no longer exists or cannot be accessed",
            )
        original = descriptor.source_modified_at
        return ModificationInfo(
            path=descriptor.path,
            loaded_at=descriptor.loaded_at,
            original_modified_at=original,
            current_modified_at=current,
            is_pasted=False,
            is_modified=original is not None and current > original,
        )

    def reload(self) -> FileDescriptor:
        """Reload the file if it changed; otherwise return the current descriptor.

        Raises:
            NoSourceLoaded: If nothing is loaded.
            ReloadNotSupported: If the source was pasted text.
        """
        descriptor = self._current().descriptor
        if descriptor.is_pasted:
            raise ReloadNotSupported("Cannot reload pasted content")
        if not self.check_modified():
            log.debug("Reload skipped, %s unchanged", descriptor.path)
            return descriptor
        log.info("Reloading modified file %s", descriptor.path)
        return self.load_file(descriptor.path)


def _mtime(path: Path) -> datetime:
    return datetime.fromtimestamp(path.stat().st_mtime, tz=timezone.utc)
