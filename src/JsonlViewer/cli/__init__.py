"""CLI package for JsonlViewer command orchestration.

Click definitions live in `ui`, command logic in `commands`, and the
logging/session/error plumbing in `runner`.
"""

from __future__ import annotations

__all__ = ["CommandRunner", "main"]

from dotenv import load_dotenv

from JsonlViewer.cli.runner import CommandRunner
from JsonlViewer.cli.ui import cli


def main() -> None:
    """Run JsonlViewer CLI.

    Entry point referenced by console script in pyproject.toml. A .env
    file is loaded first so JSONL_VIEWER_CONFIG can be set there.
    """
    load_dotenv()
    cli()
