"""Export domain configuration: default destination naming."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Mapping

from JsonlViewer.config.common import check_non_empty, expect_str, get_section, get_value
from JsonlViewer.services.export import DEFAULT_EXPORT_PREFIX, DEFAULT_TIMESTAMP_FORMAT


@dataclass(frozen=True, slots=True)
class ExportConfig:
    """Where exports go when no output path is given."""

    dir: str
    filename_prefix: str
    timestamp_format: str


def load_export(raw: Mapping[str, Any]) -> ExportConfig:
    """Load the optional `export` section."""
    section = get_section(raw, "export", required=False)
    return ExportConfig(
        dir=expect_str(get_value(section, "dir", "export.dir", default="~/Downloads"), "export.dir"),
        filename_prefix=expect_str(
            get_value(section, "filename_prefix", "export.filename_prefix", default=DEFAULT_EXPORT_PREFIX),
            "export.filename_prefix",
        ),
        timestamp_format=expect_str(
            get_value(section, "timestamp_format", "export.timestamp_format", default=DEFAULT_TIMESTAMP_FORMAT),
            "export.timestamp_format",
        ),
    )


def check_export(config: ExportConfig) -> None:
    """Validate export constraints.

    Raises:
        ValueError: If a value is empty or the timestamp format is unusable.
    """
    check_non_empty(config.dir, "export.dir")
    check_non_empty(config.filename_prefix, "export.filename_prefix")
    check_non_empty(config.timestamp_format, "export.timestamp_format")
    if "/" in datetime(2000, 1, 2, 3, 4, 5).strftime(config.timestamp_format):
        raise ValueError("export.timestamp_format must not produce path separators")
