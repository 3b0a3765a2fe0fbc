"""Service layer for JsonlViewer.

Provides the viewer session, export helpers and the factory that builds a
session from configuration. The search/export gateway lives in
`JsonlViewer.services.search`.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from JsonlViewer.services.export import ExportResult, default_export_path
from JsonlViewer.services.session import ViewerSession

if TYPE_CHECKING:
    from JsonlViewer.config import AppConfig


def create_session(config: AppConfig) -> ViewerSession:
    """Create an empty viewer session from configuration.

    Args:
        config: Application configuration containing viewer settings.

    Returns:
        Session with the configured page size.
    """
    return ViewerSession(page_size=config.viewer.page_size)


__all__ = [
    "ExportResult",
    "ViewerSession",
    "create_session",
    "default_export_path",
]
