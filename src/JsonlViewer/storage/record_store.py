"""In-memory record store for the currently loaded source."""

from __future__ import annotations

from collections import Counter
from typing import Iterable, Iterator, Mapping, Sequence

from JsonlViewer.core.errors import InvalidLineNumber, InvalidRange, RecordNotFound
from JsonlViewer.core.models import DEFAULT_PAGE_SIZE, MAX_PAGE, Page, Record


def clamp_window(offset: int, limit: int, default_limit: int = DEFAULT_PAGE_SIZE) -> tuple[int, int]:
    """Normalize an offset/limit pair.

    Negative offsets become 0, a non-positive limit becomes `default_limit`,
    and limits are capped at MAX_PAGE.
    """
    offset = max(offset, 0)
    if limit <= 0:
        limit = default_limit
    return offset, min(limit, MAX_PAGE)


def compute_common_fields(field_counts: Mapping[str, int], record_count: int) -> tuple[str, ...]:
    """Fields whose count reaches `record_count // 2`, sorted by name."""
    threshold = record_count // 2
    return tuple(sorted(name for name, count in field_counts.items() if count >= threshold))


class RecordStore:
    """Ordered, read-only collection of records.

    Records are kept in ingestion order. The store is never edited after
    construction; a reload builds a new store. Only the page size preference
    can change, and it only affects the default slice width.
    """

    def __init__(self, records: Iterable[Record], page_size: int = DEFAULT_PAGE_SIZE) -> None:
        self._records: tuple[Record, ...] = tuple(records)
        self._by_line: dict[int, Record] = {record.line_number: record for record in self._records}
        self._page_size = DEFAULT_PAGE_SIZE
        self.set_page_size(page_size)

    @property
    def records(self) -> Sequence[Record]:
        return self._records

    @property
    def total_count(self) -> int:
        return len(self._records)

    @property
    def page_size(self) -> int:
        return self._page_size

    def set_page_size(self, page_size: int) -> None:
        """Set the default slice width (<=0 resets to 50, capped at 1000)."""
        if page_size <= 0:
            page_size = DEFAULT_PAGE_SIZE
        self._page_size = min(page_size, MAX_PAGE)

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[Record]:
        return iter(self._records)

    def slice(self, offset: int, limit: int = 0) -> Page:
        """Return a page of records in store order.

        Args:
            offset: Index of the first record; negatives clamp to 0.
            limit: Page width; <=0 uses the page size preference, capped at MAX_PAGE.

        Returns:
            Page whose totals both equal the store size. An offset at or past
            the end gives an empty page rather than an error.
        """
        offset, limit = clamp_window(offset, limit, self._page_size)
        total = self.total_count
        return Page(
            records=self._records[offset:offset + limit],
            offset=offset,
            limit=limit,
            total_available=total,
            total_matches=total,
        )

    def by_line_number(self, line_number: int) -> Record:
        """Look up the record parsed from a source line.

        Raises:
            InvalidLineNumber: If `line_number` is not positive.
            RecordNotFound: If no record was stored for that line.
        """
        if line_number <= 0:
            raise InvalidLineNumber("Line number must be greater than 0", line_number=line_number)
        record = self._by_line.get(line_number)
        if record is None:
            raise RecordNotFound("Record not found at specified line number", line_number=line_number)
        return record

    def range(self, start_line: int, end_line: int) -> list[Record]:
        """Records whose line number lies in `[start_line, end_line]`.

        Raises:
            InvalidRange: If either bound is not positive or start > end.
        """
        if start_line <= 0 or end_line <= 0 or start_line > end_line:
            raise InvalidRange(f"Invalid line number range: {start_line}-{end_line}")
        return [record for record in self._records if start_line <= record.line_number <= end_line]

    def all_fields(self) -> list[str]:
        """Every field name seen in any record, sorted."""
        names: set[str] = set()
        for record in self._records:
            names.update(record.content)
        return sorted(names)

    def common_fields(self) -> list[str]:
        """Fields present in at least half of the records, sorted."""
        counts: Counter[str] = Counter()
        for record in self._records:
            counts.update(record.content.keys())
        return list(compute_common_fields(counts, self.total_count))
