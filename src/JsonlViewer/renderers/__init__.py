"""Output renderers for command results.

Exports the OutputWriter base class and a factory choosing a writer from the
requested output format.
"""

from __future__ import annotations

from pathlib import Path
from typing import Sequence

from JsonlViewer.renderers.base import MultiOutputWriter, OutputWriter
from JsonlViewer.renderers.console import ConsoleOutputWriter, render_text
from JsonlViewer.renderers.json import JsonOutputWriter, render_json

OUTPUT_FORMATS = ("console", "json")


def create_output_writer(formats: Sequence[str], output_path: Path | None = None) -> OutputWriter:
    """Create an output writer for the requested formats.

    Args:
        formats: Any of "console" and "json".
        output_path: JSON only; file to write instead of stdout.

    Returns:
        A single writer, or a MultiOutputWriter when several formats are asked for.

    Raises:
        ValueError: If no format or an unknown format is given.
    """
    requested = [fmt.lower() for fmt in formats]
    unknown = set(requested) - set(OUTPUT_FORMATS)
    if unknown:
        raise ValueError(f"Unknown output formats: {sorted(unknown)}")

    writers: list[OutputWriter] = []
    if "console" in requested:
        writers.append(ConsoleOutputWriter())
    if "json" in requested:
        writers.append(JsonOutputWriter(output_path))

    if not writers:
        raise ValueError("No output writers configured")
    if len(writers) == 1:
        return writers[0]
    return MultiOutputWriter(writers)


__all__ = [
    "OUTPUT_FORMATS",
    "OutputWriter",
    "ConsoleOutputWriter",
    "JsonOutputWriter",
    "MultiOutputWriter",
    "create_output_writer",
    "render_json",
    "render_text",
]
