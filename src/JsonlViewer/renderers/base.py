"""Base classes for output writers.

Separates command control flow from how results are shown.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Mapping, Sequence

from JsonlViewer.renderers.view_models import PageView, RecordView


class OutputWriter(ABC):
    """Abstract base class for command output writers."""

    @abstractmethod
    def write_page(self, page: PageView) -> None:
        """Write one page of records with its totals."""

    @abstractmethod
    def write_records(self, records: Sequence[RecordView], title: str) -> None:
        """Write a list of records without paging metadata (line/range lookups)."""

    @abstractmethod
    def write_info(self, title: str, payload: Mapping[str, Any]) -> None:
        """Write a small key/value block (stats, descriptors, field lists)."""

    @abstractmethod
    def finalize(self, action: str) -> None:
        """Flush anything accumulated.

        Args:
            action: The CLI command name (e.g., 'search').
        """


@dataclass(slots=True)
class MultiOutputWriter(OutputWriter):
    """Delegate output to multiple writers."""

    writers: Sequence[OutputWriter]

    def write_page(self, page: PageView) -> None:
        for writer in self.writers:
            writer.write_page(page)

    def write_records(self, records: Sequence[RecordView], title: str) -> None:
        for writer in self.writers:
            writer.write_records(records, title)

    def write_info(self, title: str, payload: Mapping[str, Any]) -> None:
        for writer in self.writers:
            writer.write_info(title, payload)

    def finalize(self, action: str) -> None:
        for writer in self.writers:
            writer.finalize(action)
