"""Evaluate a compiled query tree against one record."""

from __future__ import annotations

import json
from typing import Any

from JsonlViewer.core.models import Record
from JsonlViewer.core.query import And, FieldTerm, Not, Or, Phrase, QueryNode, Term, Wildcard


def evaluate(node: QueryNode | None, record: Record, case_sensitive: bool = False) -> bool:
    """Return whether `record` satisfies `node`.

    Args:
        node: Compiled query; None never matches.
        record: Record to test.
        case_sensitive: Compare values with exact case.

    Returns:
        True when the record matches.

    Raises:
        TypeError: If `node` is not one of the query node types.
    """
    if node is None:
        return False

    if isinstance(node, And):
        return evaluate(node.left, record, case_sensitive) and evaluate(node.right, record, case_sensitive)
    if isinstance(node, Or):
        return evaluate(node.left, record, case_sensitive) or evaluate(node.right, record, case_sensitive)
    if isinstance(node, Not):
        return not evaluate(node.child, record, case_sensitive)

    if isinstance(node, FieldTerm):
        value = record.content.get(node.field)
        return value is not None and match_term(value_text(value), node.value, case_sensitive, allow_empty=True)
    if isinstance(node, Term):
        return match_term(record.raw_text, node.value, case_sensitive)
    if isinstance(node, Phrase):
        text = _leaf_text(record, node.field)
        return text is not None and match_term(text, node.value, case_sensitive)
    if isinstance(node, Wildcard):
        text = _leaf_text(record, node.field)
        return text is not None and match_wildcard(text, node.pattern, case_sensitive)

    raise TypeError(f"Unsupported query node: {type(node).__name__}")


def value_text(value: Any) -> str:
    """Render a JSON value as the text leaves are matched against.

    Strings are used as-is, scalars use their JSON spelling (`30`, `true`),
    arrays and objects become compact JSON.
    """
    if isinstance(value, str):
        return value
    if value is None:
        return "null"
    return json.dumps(value, ensure_ascii=False, separators=(",", ":"))


def match_term(text: str, term: str, case_sensitive: bool, *, allow_empty: bool = False) -> bool:
    """Substring containment, case folded unless `case_sensitive`.

    Phrases go through here too: a phrase is plain containment of the whole
    quoted text, no word boundaries.
    """
    if not text and not allow_empty:
        return False
    if not case_sensitive:
        text, term = text.lower(), term.lower()
    return term in text


def match_wildcard(text: str, pattern: str, case_sensitive: bool) -> bool:
    """Match `*` wildcards in four shapes: `p*`, `*p`, `*p*`, and containment.

    `?` is accepted by the grammar but compared literally.
    """
    if not text:
        return False
    if not case_sensitive:
        text, pattern = text.lower(), pattern.lower()

    if pattern == "*":
        return True
    if "*" not in pattern:
        return pattern in text
    if pattern.startswith("*") and pattern.endswith("*"):
        return pattern[1:-1] in text
    if pattern.startswith("*"):
        return text.endswith(pattern[1:])
    if pattern.endswith("*"):
        return text.startswith(pattern[:-1])
    return pattern.replace("*", "") in text


def _leaf_text(record: Record, field: str | None) -> str | None:
    """Text a phrase/wildcard leaf is tested against; None when the field is missing or null."""
    if field is None:
        return record.raw_text
    value = record.content.get(field)
    if value is None:
        return None
    return value_text(value)
