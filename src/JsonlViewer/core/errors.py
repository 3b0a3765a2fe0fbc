"""Error taxonomy for viewer operations.

Malformed JSON on an individual line is never an error: it only shows up in
``LoadStats.invalid_line_numbers``.
"""

from __future__ import annotations

from pathlib import Path


class ViewerError(RuntimeError):
    """Base class for every error raised by a viewer operation.

    Attributes:
        line_number: Source line the error refers to, when there is one.
    """

    def __init__(self, message: str, *, line_number: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.line_number = line_number

    def __str__(self) -> str:
        if self.line_number is not None and self.line_number > 0:
            return f"{self.message} at line {self.line_number}"
        return self.message


class ParseSourceError(ViewerError):
    """The source could not be opened or read. Nothing was published."""


class NoSourceLoaded(ViewerError):
    """An operation needed a loaded source but none was loaded yet."""

    def __init__(self, message: str = "No file currently loaded") -> None:
        super().__init__(message)


class InvalidLineNumber(ViewerError):
    """Line argument is non-positive or otherwise unusable."""


class RecordNotFound(InvalidLineNumber):
    """Valid line number, but no record was stored for it (blank or malformed line)."""


class InvalidRange(ViewerError):
    """Start/end line pair is malformed."""


class ReloadNotSupported(ViewerError):
    """Reload was requested for a source that has no backing file."""


class ExportIOError(ViewerError):
    """Writing exported lines failed part-way.

    Attributes:
        written: Number of lines written before the failure.
        destination: Export target path, if the export went to a file.
    """

    def __init__(self, message: str, *, written: int, destination: Path | None = None) -> None:
        super().__init__(message)
        self.written = written
        self.destination = destination

    def __str__(self) -> str:
        return f"{self.message} (after {self.written} lines)"
