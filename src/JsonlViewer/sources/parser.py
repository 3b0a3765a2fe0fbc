"""Strict per-line JSON parsing for JSONL sources."""

from __future__ import annotations

import json
from typing import Any, Optional


def _reject_constant(name: str) -> Any:
    raise ValueError(f"Non-standard JSON constant: {name}")


def parse_line(text: str) -> Optional[dict[str, Any]]:
    """Parse one trimmed line as a JSON object.

    Only standard JSON is accepted (`NaN`, `Infinity` and `-Infinity` are
    rejected) and the top-level value must be an object.

    Args:
        text: Line content with surrounding whitespace removed.

    Returns:
        The decoded object, or None when the line is not a JSON object.
    """
    try:
        value = json.loads(text, parse_constant=_reject_constant)
    except (ValueError, RecursionError):
        return None
    if not isinstance(value, dict):
        return None
    return value


def decode_line(raw: bytes, *, first: bool = False) -> Optional[str]:
    """Decode a raw line as UTF-8 (BOM tolerated on the first line).

    Returns:
        Decoded text, or None when the bytes are not valid UTF-8.
    """
    try:
        return raw.decode("utf-8-sig" if first else "utf-8")
    except UnicodeDecodeError:
        return None
