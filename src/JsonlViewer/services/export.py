"""Write exported JSONL lines to a file or stream."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import IO, Iterable

from JsonlViewer.core.errors import ExportIOError
from JsonlViewer.utils.log import log

DEFAULT_EXPORT_PREFIX = "jsonl-viewer-export"
DEFAULT_TIMESTAMP_FORMAT = "%Y-%m-%dT%H-%M-%S"


@dataclass(frozen=True, slots=True)
class ExportResult:
    """Where an export went and how many lines it wrote."""

    path: Path | None
    count: int


def default_export_path(
    directory: Path | str,
    prefix: str = DEFAULT_EXPORT_PREFIX,
    timestamp_format: str = DEFAULT_TIMESTAMP_FORMAT,
    now: datetime | None = None,
) -> Path:
    """Timestamped export file name inside `directory` (`~` is expanded)."""
    timestamp = (now or datetime.now()).strftime(timestamp_format)
    return Path(directory).expanduser() / f"{prefix}-{timestamp}.jsonl"


def write_lines(lines: Iterable[str], stream: IO[str]) -> int:
    """Write one line per item to an open text stream.

    Returns:
        Number of lines written.

    Raises:
        ExportIOError: If the stream fails; `written` holds the lines already out.
    """
    written = 0
    try:
        for line in lines:
            stream.write(line + "\n")
            written += 1
        stream.flush()
    except OSError as error:
        raise ExportIOError(f"Failed to write export: {error}", written=written) from error
    return written


def write_export(lines: Iterable[str], destination: Path) -> ExportResult:
    """Write lines to `destination`, creating parent directories.

    Lines written before a failure stay in the file.

    Raises:
        ExportIOError: If the file cannot be created or written.
    """
    written = 0
    try:
        destination.parent.mkdir(parents=True, exist_ok=True)
        with destination.open("w", encoding="utf-8", newline="\n") as handle:
            for line in lines:
                handle.write(line + "\n")
                written += 1
    except OSError as error:
        raise ExportIOError(
            f"Failed to write export file {destination}: {error}",
            written=written,
            destination=destination,
        ) from error

    log.info("Exported %d records to %s", written, destination)
    return ExportResult(path=destination, count=written)
