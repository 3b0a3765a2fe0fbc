"""Turn a JSONL source into a record store plus load statistics.

Line numbers are 1-based over every line of the source, blank lines
included, so a record always points at its real position. A trailing newline
does not count as an extra line. Malformed lines never abort a load; they are
listed in `LoadStats.invalid_line_numbers`.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Iterator, Optional

from JsonlViewer.core.errors import ParseSourceError
from JsonlViewer.core.models import DEFAULT_PAGE_SIZE, LoadStats, Record
from JsonlViewer.sources.parser import decode_line, parse_line
from JsonlViewer.storage.record_store import RecordStore, compute_common_fields
from JsonlViewer.utils.log import log


@dataclass(frozen=True, slots=True)
class IngestResult:
    """Fully built store and its statistics."""

    store: RecordStore
    stats: LoadStats


def ingest_text(text: str, *, page_size: int = DEFAULT_PAGE_SIZE) -> IngestResult:
    """Ingest pasted JSONL text.

    Args:
        text: Whole source as a string.
        page_size: Default page width for the resulting store.

    Returns:
        Store and statistics.
    """
    lines = text.split("\n")
    if lines and lines[-1] == "":
        lines.pop()
    return ingest_lines(lines, byte_size=len(text.encode("utf-8")), page_size=page_size)


def ingest_bytes(data: bytes, *, page_size: int = DEFAULT_PAGE_SIZE) -> IngestResult:
    """Ingest JSONL bytes; undecodable lines count as malformed."""
    return ingest_lines(_decode_lines(_split_bytes(data)), byte_size=len(data), page_size=page_size)


def ingest_file(path: Path | str, *, page_size: int = DEFAULT_PAGE_SIZE) -> IngestResult:
    """Ingest a JSONL file from disk.

    Args:
        path: File to read.
        page_size: Default page width for the resulting store.

    Returns:
        Store and statistics.

    Raises:
        ParseSourceError: If the file cannot be opened or read.
    """
    if not str(path).strip():
        raise ParseSourceError("File path cannot be empty")
    file_path = Path(path)
    try:
        size = file_path.stat().st_size
        with file_path.open("rb") as handle:
            return ingest_lines(_decode_lines(handle), byte_size=size, page_size=page_size)
    except OSError as error:
        raise ParseSourceError(f"File not found or cannot be accessed: {file_path} ({error})") from error


def ingest_lines(
    lines: Iterable[Optional[str]],
    *,
    byte_size: int = 0,
    page_size: int = DEFAULT_PAGE_SIZE,
) -> IngestResult:
    """Build a store from already split lines.

    Args:
        lines: Source lines in order. None marks a line that could not be
            decoded; it is counted as malformed.
        byte_size: Source size reported in the statistics.
        page_size: Default page width for the resulting store.

    Returns:
        Store and statistics.
    """
    records: list[Record] = []
    invalid: list[int] = []
    field_counts: Counter[str] = Counter()
    total_lines = 0

    for line_number, line in enumerate(lines, start=1):
        total_lines = line_number
        text = line.strip() if line is not None else None
        if text == "":
            continue

        content = parse_line(text) if text is not None else None
        if content is None:
            invalid.append(line_number)
            log.debug("Skipping malformed line %d", line_number)
            continue

        field_counts.update(content.keys())
        records.append(Record(line_number=line_number, content=content, raw_text=text))

    stats = LoadStats(
        total_lines=total_lines,
        valid_record_count=len(records),
        invalid_line_numbers=tuple(invalid),
        common_fields=compute_common_fields(field_counts, len(records)),
        source_byte_size=byte_size,
    )
    log.info(
        "Parsed %d records from %d lines (%d invalid, %d bytes)",
        stats.valid_record_count,
        stats.total_lines,
        len(stats.invalid_line_numbers),
        stats.source_byte_size,
    )
    return IngestResult(store=RecordStore(records, page_size=page_size), stats=stats)


def _split_bytes(data: bytes) -> list[bytes]:
    chunks = data.split(b"\n")
    if chunks and chunks[-1] == b"":
        chunks.pop()
    return chunks


def _decode_lines(raw_lines: Iterable[bytes]) -> Iterator[Optional[str]]:
    for index, raw in enumerate(raw_lines):
        yield decode_line(raw, first=index == 0)
