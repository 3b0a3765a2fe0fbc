"""Query expression tree and the compiler that builds it.

Grammar, lowest precedence first, no grouping::

    query    := orGroup
    orGroup  := andGroup (" OR " andGroup)*
    andGroup := unary (" AND " unary)*
    unary    := "NOT " unary | atom
    atom     := field ":" value | value
    value    := '"' text '"' | wildcardText | plainText

Operators are found by literal substring search and are case-sensitive no
matter how values are matched. Known limitation: a quoted phrase or plain
value containing " AND " / " OR " is split like any other text. Swap the
compiler (see `QueryCompiler`) to change that; the evaluator only depends on
the node types below.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Protocol, Union

OR_OPERATOR = " OR "
AND_OPERATOR = " AND "
NOT_PREFIX = "NOT "
WILDCARD_CHARS = ("*", "?")


@dataclass(frozen=True, slots=True)
class Term:
    """Unqualified value searched in the record's raw line."""

    value: str


@dataclass(frozen=True, slots=True)
class FieldTerm:
    """`field:value`, substring match on one field."""

    field: str
    value: str


@dataclass(frozen=True, slots=True)
class Phrase:
    """Quoted text. `field` None means the raw line."""

    value: str
    field: Optional[str] = None


@dataclass(frozen=True, slots=True)
class Wildcard:
    """Value containing `*` or `?`. `field` None means the raw line."""

    pattern: str
    field: Optional[str] = None


@dataclass(frozen=True, slots=True)
class And:
    left: QueryNode | None
    right: QueryNode | None


@dataclass(frozen=True, slots=True)
class Or:
    left: QueryNode | None
    right: QueryNode | None


@dataclass(frozen=True, slots=True)
class Not:
    child: QueryNode | None


QueryNode = Union[Term, FieldTerm, Phrase, Wildcard, And, Or, Not]


class QueryCompiler(Protocol):
    """Anything that turns query text into a tree (None = match nothing)."""

    def compile(self, query: str) -> QueryNode | None:
        """Compile query text."""
        raise NotImplementedError


class SubstringQueryCompiler:
    """Top-down compiler splitting on literal operator substrings."""

    def compile(self, query: str) -> QueryNode | None:
        """Compile `query` into a tree.

        Args:
            query: Raw query text.

        Returns:
            Root node, or None for an empty/whitespace-only query.
        """
        text = query.strip()
        if not text:
            return None

        if OR_OPERATOR in text:
            return self._fold(text.split(OR_OPERATOR), Or)
        if AND_OPERATOR in text:
            return self._fold(text.split(AND_OPERATOR), And)
        if text.startswith(NOT_PREFIX):
            return Not(self.compile(text[len(NOT_PREFIX):]))
        return _classify_atom(text)

    def _fold(self, parts: list[str], node_type: type[And] | type[Or]) -> QueryNode | None:
        """Build a left-associative chain over every operand."""
        left = self.compile(parts[0])
        for part in parts[1:]:
            left = node_type(left, self.compile(part))
        return left


def _classify_atom(text: str) -> QueryNode:
    """Classify a single operand (no operators left)."""
    if ":" in text:
        field, value = (part.strip() for part in text.split(":", 1))
        if _is_quoted(value):
            return Phrase(value=value[1:-1], field=field or None)
        if _has_wildcard(value):
            return Wildcard(pattern=value, field=field or None)
        return FieldTerm(field=field, value=value)

    if _is_quoted(text):
        return Phrase(value=text[1:-1])
    if _has_wildcard(text):
        return Wildcard(pattern=text)
    return Term(value=text)


def _is_quoted(value: str) -> bool:
    return len(value) > 1 and value.startswith('"') and value.endswith('"')


def _has_wildcard(value: str) -> bool:
    return any(ch in value for ch in WILDCARD_CHARS)


_DEFAULT_COMPILER = SubstringQueryCompiler()


def compile_query(query: str, compiler: QueryCompiler | None = None) -> QueryNode | None:
    """Compile query text with the default (or given) compiler."""
    return (compiler or _DEFAULT_COMPILER).compile(query)
