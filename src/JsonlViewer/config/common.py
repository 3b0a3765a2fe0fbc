from __future__ import annotations

"""Shared helpers for reading and validating config sections."""

from typing import Any, Mapping


def get_section(raw: Mapping[str, Any], key: str, *, required: bool) -> Mapping[str, Any]:
    """Return a mapping section from the root config.

    Args:
        raw: Root configuration mapping.
        key: Section name.
        required: Whether the section must exist.

    Returns:
        Section mapping, or an empty mapping for a missing optional section.

    Raises:
        ValueError: If the section is required but missing.
        TypeError: If the section is not a mapping.
    """
    section = raw.get(key)
    if section is None:
        if required:
            raise ValueError(f"Missing required config: {key}")
        return {}
    if not isinstance(section, Mapping):
        raise TypeError(f"{key} must be an object")
    return section


def get_value(section: Mapping[str, Any], field: str, config_key: str, *, default: Any = ...) -> Any:
    """Return a field value, falling back to `default` when one is given.

    Raises:
        ValueError: If the field is missing and no default was given.
    """
    if field in section:
        return section[field]
    if default is ...:
        raise ValueError(f"Missing required config: {config_key}")
    return default


def expect_str(value: Any, config_key: str) -> str:
    """Validate and return a string value."""
    if not isinstance(value, str):
        raise TypeError(f"{config_key} must be a string")
    return value


def expect_bool(value: Any, config_key: str) -> bool:
    """Validate and return a boolean value."""
    if not isinstance(value, bool):
        raise TypeError(f"{config_key} must be a boolean")
    return value


def expect_int(value: Any, config_key: str) -> int:
    """Validate and return an integer value (bool is rejected)."""
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"{config_key} must be an integer")
    return value


def check_non_empty(value: str, config_key: str) -> None:
    """Reject empty or whitespace-only strings."""
    if not value.strip():
        raise ValueError(f"{config_key} must not be empty")
