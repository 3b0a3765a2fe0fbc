"""Tests for record store paging and line lookups."""

from __future__ import annotations

import sys
import unittest
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(REPO_ROOT / "src"))

from JsonlViewer.core.errors import InvalidLineNumber, InvalidRange, RecordNotFound
from JsonlViewer.core.models import Record
from JsonlViewer.storage.record_store import RecordStore, clamp_window, compute_common_fields


def _record(line_number: int, **content) -> Record:
    raw = "{" + ",".join(f'"{k}":{v!r}' for k, v in content.items()).replace("'", '"') + "}"
    return Record(line_number=line_number, content=content, raw_text=raw)


def _store(count: int, page_size: int = 50) -> RecordStore:
    return RecordStore([_record(i, id=i) for i in range(1, count + 1)], page_size=page_size)


class TestClampWindow(unittest.TestCase):
    def test_negative_offset_and_zero_limit(self) -> None:
        self.assertEqual(clamp_window(-5, 0), (0, 50))

    def test_limit_capped(self) -> None:
        self.assertEqual(clamp_window(3, 5000), (3, 1000))

    def test_custom_default(self) -> None:
        self.assertEqual(clamp_window(0, -1, default_limit=20), (0, 20))


class TestRecordStoreSlice(unittest.TestCase):
    def test_slice_returns_window_in_order(self) -> None:
        page = _store(10).slice(2, 3)
        self.assertEqual([r.line_number for r in page.records], [3, 4, 5])
        self.assertEqual(page.total_available, 10)
        self.assertEqual(page.total_matches, 10)
        self.assertTrue(page.has_more)

    def test_negative_offset_equals_zero_offset(self) -> None:
        store = _store(5)
        self.assertEqual(store.slice(-5, 1), store.slice(0, 1))

    def test_offset_past_end_is_empty_not_error(self) -> None:
        store = _store(5)
        for offset in (5, 100):
            with self.subTest(offset=offset):
                page = store.slice(offset, 10)
                self.assertEqual(len(page.records), 0)
                self.assertFalse(page.has_more)
                self.assertEqual(page.total_available, 5)

    def test_limit_is_capped_at_max_page(self) -> None:
        page = _store(1500).slice(0, 5000)
        self.assertEqual(page.limit, 1000)
        self.assertEqual(len(page.records), 1000)
        self.assertTrue(page.has_more)

    def test_zero_limit_uses_page_size(self) -> None:
        store = _store(30, page_size=7)
        page = store.slice(0)
        self.assertEqual(page.limit, 7)
        self.assertEqual(len(page.records), 7)

    def test_set_page_size_bounds(self) -> None:
        store = _store(3)
        store.set_page_size(0)
        self.assertEqual(store.page_size, 50)
        store.set_page_size(20000)
        self.assertEqual(store.page_size, 1000)
        store.set_page_size(25)
        self.assertEqual(store.page_size, 25)

    def test_empty_store(self) -> None:
        store = RecordStore([])
        page = store.slice(0, 10)
        self.assertEqual(page.records, ())
        self.assertEqual(page.total_available, 0)
        self.assertFalse(page.has_more)


class TestRecordStoreLookup(unittest.TestCase):
    def setUp(self) -> None:
        # Lines 3 and 5 are missing, as if blank or malformed.
        self.store = RecordStore([_record(n, id=n) for n in (1, 2, 4, 6)])

    def test_by_line_number(self) -> None:
        self.assertEqual(self.store.by_line_number(4).content["id"], 4)

    def test_non_positive_line_is_invalid(self) -> None:
        for line_number in (0, -1):
            with self.subTest(line_number=line_number):
                with self.assertRaises(InvalidLineNumber):
                    self.store.by_line_number(line_number)

    def test_skipped_line_is_not_found(self) -> None:
        with self.assertRaises(RecordNotFound) as ctx:
            self.store.by_line_number(3)
        self.assertEqual(ctx.exception.line_number, 3)
        self.assertIn("line 3", str(ctx.exception))

    def test_range_is_inclusive_and_skips_gaps(self) -> None:
        records = self.store.range(2, 5)
        self.assertEqual([r.line_number for r in records], [2, 4])

    def test_range_past_end_is_empty(self) -> None:
        self.assertEqual(self.store.range(100, 200), [])

    def test_invalid_ranges(self) -> None:
        for start, end in ((0, 3), (3, 0), (5, 2), (-1, -1)):
            with self.subTest(start=start, end=end):
                with self.assertRaises(InvalidRange):
                    self.store.range(start, end)


class TestRecordStoreFields(unittest.TestCase):
    def test_all_fields_sorted(self) -> None:
        store = RecordStore([_record(1, zeta=1, alpha=2), _record(2, mid=3)])
        self.assertEqual(store.all_fields(), ["alpha", "mid", "zeta"])

    def test_common_fields_threshold(self) -> None:
        store = RecordStore(
            [
                _record(1, a=1, b=1),
                _record(2, a=1),
                _record(3, a=1, c=1),
                _record(4, a=1, b=1),
                _record(5, a=1),
            ]
        )
        # 5 records -> threshold 2.
        self.assertEqual(store.common_fields(), ["a", "b"])

    def test_compute_common_fields_on_empty_input(self) -> None:
        self.assertEqual(compute_common_fields({}, 0), ())


if __name__ == "__main__":
    unittest.main()
