"""Runtime domain configuration (logging)."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

from JsonlViewer.config.common import check_non_empty, expect_bool, expect_str, get_section, get_value

_ALLOWED_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


@dataclass(frozen=True, slots=True)
class RuntimeConfig:
    """Validated logging settings."""

    level: str
    to_file: bool
    dir: str


def load_runtime(raw: Mapping[str, Any]) -> RuntimeConfig:
    """Load the `log` section.

    Raises:
        TypeError: If config types are invalid.
        ValueError: If the section is missing.
    """
    section = get_section(raw, "log", required=True)
    return RuntimeConfig(
        level=expect_str(get_value(section, "level", "log.level", default="INFO"), "log.level").upper(),
        to_file=expect_bool(get_value(section, "to_file", "log.to_file", default=False), "log.to_file"),
        dir=expect_str(get_value(section, "dir", "log.dir", default="log"), "log.dir"),
    )


def check_runtime(config: RuntimeConfig) -> None:
    """Validate runtime constraints.

    Raises:
        ValueError: If the level is unknown or the log dir is empty.
    """
    if config.level not in _ALLOWED_LOG_LEVELS:
        raise ValueError(f"log.level must be one of {sorted(_ALLOWED_LOG_LEVELS)}")
    check_non_empty(config.dir, "log.dir")
