"""Tests for the viewer session: loading, reloading and exporting."""

from __future__ import annotations

import io
import os
import sys
import tempfile
import time
import unittest
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(REPO_ROOT / "src"))

from JsonlViewer.core.errors import (
    ExportIOError,
    NoSourceLoaded,
    ParseSourceError,
    RecordNotFound,
    ReloadNotSupported,
)
from JsonlViewer.core.models import PASTED_SOURCE_PATH
from JsonlViewer.services.export import default_export_path, write_lines
from JsonlViewer.services.session import ViewerSession

_TEXT = '{"name": "John", "age": 30}\n{"name": "Jane", "age": 25}\nnot json\n{"name": "Bob", "age": 40}\n'


def _bump_mtime(path: Path, seconds: float = 10.0) -> None:
    future = time.time() + seconds
    os.utime(path, (future, future))


class _FailingStream(io.StringIO):
    def __init__(self, fail_after: int) -> None:
        super().__init__()
        self._remaining = fail_after

    def write(self, text: str) -> int:
        if self._remaining == 0:
            raise OSError("disk full")
        self._remaining -= 1
        return super().write(text)


class TestSessionWithoutSource(unittest.TestCase):
    def test_operations_require_a_loaded_source(self) -> None:
        session = ViewerSession()
        self.assertFalse(session.is_loaded)
        operations = [
            lambda: session.get_page(0, 10),
            lambda: session.get_by_line(1),
            lambda: session.get_range(1, 2),
            lambda: session.total_count(),
            lambda: session.get_all_fields(),
            lambda: session.get_common_fields(),
            lambda: session.search("John"),
            lambda: session.export(""),
            lambda: session.check_modified(),
            lambda: session.modification_info(),
            lambda: session.reload(),
            lambda: session.descriptor,
        ]
        for operation in operations:
            with self.assertRaises(NoSourceLoaded):
                operation()


class TestSessionPasted(unittest.TestCase):
    def setUp(self) -> None:
        self.session = ViewerSession()
        self.descriptor = self.session.load_text(_TEXT)

    def test_pasted_descriptor(self) -> None:
        self.assertTrue(self.descriptor.is_pasted)
        self.assertEqual(self.descriptor.path, PASTED_SOURCE_PATH)
        self.assertIsNone(self.descriptor.source_modified_at)
        self.assertEqual(self.descriptor.record_count, 3)
        self.assertEqual(self.descriptor.size, len(_TEXT.encode("utf-8")))
        self.assertEqual(tuple(self.session.stats.invalid_line_numbers), (3,))

    def test_pasted_bytes_with_undecodable_line(self) -> None:
        data = b'{"a": 1}\n\xff\xfe bad\n{"a": 2}\n'
        descriptor = self.session.load_bytes(data)

        self.assertTrue(descriptor.is_pasted)
        self.assertEqual(descriptor.record_count, 2)
        self.assertEqual(descriptor.size, len(data))
        self.assertEqual(tuple(self.session.stats.invalid_line_numbers), (2,))
        self.assertEqual(self.session.get_by_line(3).content["a"], 2)

    def test_pasted_is_never_modified(self) -> None:
        self.assertFalse(self.session.check_modified())
        info = self.session.modification_info()
        self.assertTrue(info.is_pasted)
        self.assertFalse(info.is_modified)

    def test_pasted_cannot_be_reloaded(self) -> None:
        with self.assertRaises(ReloadNotSupported):
            self.session.reload()

    def test_browse_and_search(self) -> None:
        self.assertEqual(self.session.total_count(), 3)
        self.assertEqual(self.session.get_by_line(4).content["name"], "Bob")
        with self.assertRaises(RecordNotFound):
            self.session.get_by_line(3)
        self.assertEqual([r.line_number for r in self.session.get_range(2, 4)], [2, 4])
        self.assertEqual(self.session.get_all_fields(), ["age", "name"])

        page = self.session.search("name:j*", limit=10)
        self.assertEqual([r.line_number for r in page.records], [1, 2])

    def test_page_size_preference(self) -> None:
        self.session.set_page_size(2)
        self.assertEqual(self.session.get_page_size(), 2)
        self.assertEqual(len(self.session.get_page(0).records), 2)

        self.session.load_text(_TEXT)
        self.assertEqual(self.session.get_page_size(), 2)

        self.session.set_page_size(-1)
        self.assertEqual(self.session.get_page_size(), 50)

    def test_load_replaces_previous_source(self) -> None:
        self.session.load_text('{"only": 1}')
        self.assertEqual(self.session.total_count(), 1)
        self.assertEqual(self.session.get_all_fields(), ["only"])

    def test_export_generator(self) -> None:
        lines = list(self.session.export("age:2 OR age:4", hide=["age"]))
        self.assertEqual(lines, ['{"name":"Jane"}', '{"name":"Bob"}'])


class TestSessionFile(unittest.TestCase):
    def setUp(self) -> None:
        self.tmp_dir = Path(tempfile.mkdtemp())
        self.path = self.tmp_dir / "people.jsonl"
        self.path.write_text(_TEXT, encoding="utf-8")
        self.session = ViewerSession(page_size=10)
        self.descriptor = self.session.load_file(self.path)

    def test_file_descriptor(self) -> None:
        self.assertFalse(self.descriptor.is_pasted)
        self.assertEqual(self.descriptor.name, "people.jsonl")
        self.assertEqual(self.descriptor.path, str(self.path))
        self.assertEqual(self.descriptor.size, self.path.stat().st_size)
        self.assertIsNotNone(self.descriptor.source_modified_at)
        self.assertEqual(self.session.get_page_size(), 10)

    def test_unchanged_file_is_not_reloaded(self) -> None:
        self.assertFalse(self.session.check_modified())
        self.assertIs(self.session.reload(), self.descriptor)

    def test_modified_file_is_reloaded(self) -> None:
        self.path.write_text(_TEXT + '{"name": "Eve", "age": 22}\n', encoding="utf-8")
        _bump_mtime(self.path)

        self.assertTrue(self.session.check_modified())
        self.assertTrue(self.session.modification_info().is_modified)

        descriptor = self.session.reload()
        self.assertEqual(descriptor.record_count, 4)
        self.assertEqual(self.session.get_by_line(5).content["name"], "Eve")
        self.assertFalse(self.session.check_modified())

    def test_vanished_file(self) -> None:
        self.path.unlink()

        info = self.session.modification_info()
        self.assertFalse(info.is_modified)
        self.assertEqual(info.error, "File no longer exists or cannot be accessed")

        with self.assertRaises(ParseSourceError):
            self.session.check_modified()

        # The last good snapshot stays readable.
        self.assertEqual(self.session.total_count(), 3)

    def test_failed_load_keeps_previous_snapshot(self) -> None:
        with self.assertRaises(ParseSourceError):
            self.session.load_file(self.tmp_dir / "missing.jsonl")
        self.assertIs(self.session.descriptor, self.descriptor)
        self.assertEqual(self.session.total_count(), 3)

    def test_export_to_file(self) -> None:
        destination = self.tmp_dir / "out" / "export.jsonl"
        result = self.session.export_to_file(destination, "", show=["name"])

        self.assertEqual(result.count, 3)
        self.assertEqual(result.path, destination)
        self.assertEqual(
            destination.read_text(encoding="utf-8").splitlines(),
            ['{"name":"John"}', '{"name":"Jane"}', '{"name":"Bob"}'],
        )

    def test_export_to_directory_fails(self) -> None:
        with self.assertRaises(ExportIOError) as ctx:
            self.session.export_to_file(self.tmp_dir, "")
        self.assertEqual(ctx.exception.written, 0)
        self.assertEqual(ctx.exception.destination, self.tmp_dir)


class TestExportHelpers(unittest.TestCase):
    def test_partial_stream_write_reports_count(self) -> None:
        stream = _FailingStream(fail_after=2)
        with self.assertRaises(ExportIOError) as ctx:
            write_lines(["a", "b", "c"], stream)
        self.assertEqual(ctx.exception.written, 2)
        self.assertEqual(stream.getvalue(), "a\nb\n")
        self.assertIn("after 2 lines", str(ctx.exception))

    def test_write_lines_counts(self) -> None:
        stream = io.StringIO()
        self.assertEqual(write_lines(iter(["x", "y"]), stream), 2)
        self.assertEqual(stream.getvalue(), "x\ny\n")

    def test_default_export_path(self) -> None:
        from datetime import datetime

        path = default_export_path("/tmp/exports", "dump", now=datetime(2024, 5, 6, 7, 8, 9))
        self.assertEqual(path, Path("/tmp/exports/dump-2024-05-06T07-08-09.jsonl"))


if __name__ == "__main__":
    unittest.main()
