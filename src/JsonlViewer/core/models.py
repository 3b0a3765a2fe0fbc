from __future__ import annotations

from dataclasses import dataclass
from dataclasses import field
from datetime import datetime
from types import MappingProxyType
from typing import Any, Iterable, Mapping, Optional, Sequence

PASTED_SOURCE_PATH = "<pasted>"
DEFAULT_PAGE_SIZE = 50
MAX_PAGE = 1000


@dataclass(frozen=True, slots=True)
class Record:
    """One parsed JSON object from the source.

    Attributes:
        line_number: 1-based position of the line in the source. Unique within
            one load but not contiguous, since blank and malformed lines are
            skipped.
        content: Field name to JSON value, in the order the fields appear on
            the line.
        raw_text: The trimmed source line.
    """

    line_number: int
    content: Mapping[str, Any]
    raw_text: str

    def __post_init__(self) -> None:
        # Read-only view so a record handed to a renderer cannot be edited in place.
        object.__setattr__(self, "content", MappingProxyType(dict(self.content)))


@dataclass(frozen=True, slots=True)
class LoadStats:
    """Per-load statistics. Recomputed from scratch on every load.

    Attributes:
        total_lines: Number of lines in the source, blank ones included.
        valid_record_count: Lines that parsed to a JSON object.
        invalid_line_numbers: Non-blank lines that failed to parse, ascending.
        common_fields: Fields present in at least half of the valid records, sorted.
        source_byte_size: Size of the source in bytes.
    """

    total_lines: int
    valid_record_count: int
    invalid_line_numbers: Sequence[int] = ()
    common_fields: Sequence[str] = ()
    source_byte_size: int = 0


@dataclass(frozen=True, slots=True)
class Page:
    """Offset-addressed slice of the store or of a match set.

    For a plain store slice `total_matches` equals `total_available`.
    """

    records: Sequence[Record]
    offset: int
    limit: int
    total_available: int
    total_matches: int
    query: Optional[str] = None

    @property
    def has_more(self) -> bool:
        return self.offset + len(self.records) < self.total_matches


@dataclass(frozen=True, slots=True)
class SearchRequest:
    """Search parameters coming from the presentation layer.

    Attributes:
        query: Query text.
        case_sensitive: Governs value matching only, never operator keywords.
        offset: Index of the first match to return.
        limit: Maximum matches to return.
        use_query_language: False switches to plain substring search.
        selected_field: Plain search only; restrict matching to this field.
            None or "all" means the whole record.
    """

    query: str
    case_sensitive: bool = False
    offset: int = 0
    limit: int = DEFAULT_PAGE_SIZE
    use_query_language: bool = True
    selected_field: Optional[str] = None


@dataclass(frozen=True, slots=True)
class FieldVisibility:
    """Show/hide field configuration.

    A non-empty `show` takes precedence and `hide` is ignored. With `show`
    empty, `hide` removes fields. Both empty means no filtering.
    """

    show: frozenset[str] = field(default_factory=frozenset)
    hide: frozenset[str] = field(default_factory=frozenset)

    @classmethod
    def of(cls, show: Iterable[str] = (), hide: Iterable[str] = ()) -> FieldVisibility:
        return cls(show=frozenset(show), hide=frozenset(hide))

    @property
    def is_empty(self) -> bool:
        return not self.show and not self.hide


@dataclass(frozen=True, slots=True)
class FileDescriptor:
    """Metadata about the currently loaded source.

    Attributes:
        name: File name, or a label for pasted text.
        path: Filesystem path, or "<pasted>" when the source has no file.
        size: Source size in bytes.
        record_count: Valid records loaded.
        loaded_at: When the load finished.
        source_modified_at: File mtime at load time; None for pasted text.
    """

    name: str
    path: str
    size: int
    record_count: int
    loaded_at: datetime
    source_modified_at: Optional[datetime] = None

    @property
    def is_pasted(self) -> bool:
        return self.path == PASTED_SOURCE_PATH


@dataclass(frozen=True, slots=True)
class ModificationInfo:
    """Result of comparing the loaded file against what is on disk now."""

    path: str
    loaded_at: datetime
    original_modified_at: Optional[datetime]
    current_modified_at: Optional[datetime]
    is_pasted: bool
    is_modified: bool
    error: Optional[str] = None


@dataclass(frozen=True, slots=True)
class HighlightMatch:
    """Span of a query match inside a record's raw line.

    `field_name` is "raw" for matches found by scanning the whole line.
    """

    text: str
    start: int
    end: int
    field_name: str
