"""Command implementations for the JsonlViewer CLI.

Each command works against an already loaded `ViewerSession` and hands its
results to an OutputWriter, keeping business logic apart from click option
handling.
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from pathlib import Path
from typing import IO, Callable, Optional, Protocol

import click

from JsonlViewer.core.models import FieldVisibility, SearchRequest
from JsonlViewer.renderers import OutputWriter
from JsonlViewer.renderers.mapper import map_page_to_view, map_records_to_views
from JsonlViewer.services.export import ExportResult, write_lines
from JsonlViewer.services.session import ViewerSession
from JsonlViewer.utils.log import log


class Command(Protocol):
    """Anything the runner can execute."""

    def execute(self) -> None:
        raise NotImplementedError


@dataclass(slots=True)
class StatsCommand:
    """Show the loaded source's descriptor and load statistics."""

    session: ViewerSession
    output_writer: OutputWriter

    def execute(self) -> None:
        descriptor = self.session.descriptor
        stats = self.session.stats
        self.output_writer.write_info(
            "Source",
            {
                "name": descriptor.name,
                "path": descriptor.path,
                "size": descriptor.size,
                "records": descriptor.record_count,
                "loadedAt": descriptor.loaded_at.isoformat(),
                "modifiedAt": descriptor.source_modified_at.isoformat() if descriptor.source_modified_at else None,
            },
        )
        self.output_writer.write_info(
            "Stats",
            {
                "totalLines": stats.total_lines,
                "validRecords": stats.valid_record_count,
                "invalidLines": list(stats.invalid_line_numbers),
                "commonFields": list(stats.common_fields),
                "fileSize": stats.source_byte_size,
            },
        )


@dataclass(slots=True)
class PageCommand:
    """Show one page of records in file order."""

    session: ViewerSession
    output_writer: OutputWriter
    offset: int
    limit: int
    visibility: FieldVisibility

    def execute(self) -> None:
        page = self.session.get_page(self.offset, self.limit)
        self.output_writer.write_page(map_page_to_view(page, self.visibility))


@dataclass(slots=True)
class LineCommand:
    """Show the record parsed from one source line."""

    session: ViewerSession
    output_writer: OutputWriter
    line_number: int
    visibility: FieldVisibility

    def execute(self) -> None:
        record = self.session.get_by_line(self.line_number)
        self.output_writer.write_records(
            map_records_to_views([record], self.visibility),
            f"Line {self.line_number}",
        )


@dataclass(slots=True)
class RangeCommand:
    """Show records within an inclusive line range."""

    session: ViewerSession
    output_writer: OutputWriter
    start_line: int
    end_line: int
    visibility: FieldVisibility

    def execute(self) -> None:
        records = self.session.get_range(self.start_line, self.end_line)
        self.output_writer.write_records(
            map_records_to_views(records, self.visibility),
            f"Lines {self.start_line}-{self.end_line}",
        )


@dataclass(slots=True)
class FieldsCommand:
    """List field names (all, or only the common ones)."""

    session: ViewerSession
    output_writer: OutputWriter
    common_only: bool = False

    def execute(self) -> None:
        if self.common_only:
            self.output_writer.write_info("Common fields", {"fields": self.session.get_common_fields()})
        else:
            self.output_writer.write_info("All fields", {"fields": self.session.get_all_fields()})


@dataclass(slots=True)
class SearchCommand:
    """Run one search and show the requested page of matches."""

    session: ViewerSession
    output_writer: OutputWriter
    request: SearchRequest
    visibility: FieldVisibility
    highlight: bool = False

    def execute(self) -> None:
        log.debug("Search request: %s", self.request)
        if self.highlight:
            page, highlights = self.session.search_with_highlights(self.request)
            view = map_page_to_view(page, self.visibility, highlights)
        else:
            page = self.session.search_request(self.request)
            view = map_page_to_view(page, self.visibility)
        log.info("Found %d matches in %d records", page.total_matches, page.total_available)
        self.output_writer.write_page(view)


class _EchoStream:
    """Minimal text stream writing through `click.echo`."""

    def write(self, text: str) -> int:
        click.echo(text, nl=False)
        return len(text)

    def flush(self) -> None:
        pass


@dataclass(slots=True)
class ExportCommand:
    """Export every match as JSONL to a file, an open stream, or stdout.

    With neither `destination` nor `stream` set, lines go to stdout via click.
    """

    session: ViewerSession
    query: str
    visibility: FieldVisibility
    destination: Optional[Path] = None
    stream: Optional[IO[str]] = None
    case_sensitive: bool = False
    result: Optional[ExportResult] = None

    def execute(self) -> None:
        log.debug(
            "Export query=%r show=%s hide=%s",
            self.query,
            sorted(self.visibility.show),
            sorted(self.visibility.hide),
        )
        if self.destination is not None:
            self.result = self.session.export_to_file(
                self.destination,
                self.query,
                self.visibility.show,
                self.visibility.hide,
                case_sensitive=self.case_sensitive,
            )
            return

        lines = self.session.export(
            self.query,
            self.visibility.show,
            self.visibility.hide,
            case_sensitive=self.case_sensitive,
        )
        stream = self.stream if self.stream is not None else _EchoStream()
        count = write_lines(lines, stream)
        log.info("Exported %d records", count)
        self.result = ExportResult(path=None, count=count)


@dataclass(slots=True)
class CheckCommand:
    """Poll the loaded file for modifications, optionally reloading it.

    Each round waits `interval` seconds, then reports the modification state.
    """

    session: ViewerSession
    output_writer: OutputWriter
    reload: bool = False
    interval: float = 0.0
    rounds: int = 1
    sleep: Callable[[float], None] = time.sleep

    def execute(self) -> None:
        for _ in range(max(self.rounds, 1)):
            if self.interval > 0:
                self.sleep(self.interval)
            self._check_once()

    def _check_once(self) -> None:
        info = self.session.modification_info()
        self.output_writer.write_info(
            "Modification",
            {
                "path": info.path,
                "isPasted": info.is_pasted,
                "isModified": info.is_modified,
                "loadedAt": info.loaded_at.isoformat(),
                "originalModTime": info.original_modified_at.isoformat() if info.original_modified_at else None,
                "currentModTime": info.current_modified_at.isoformat() if info.current_modified_at else None,
                "error": info.error,
            },
        )
        if self.reload and info.is_modified:
            descriptor = self.session.reload()
            self.output_writer.write_info(
                "Reloaded",
                {"path": descriptor.path, "records": descriptor.record_count, "size": descriptor.size},
            )
