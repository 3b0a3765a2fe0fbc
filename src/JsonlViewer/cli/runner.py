"""Command runner for coordinating CLI execution.

Configures logging, builds the session, loads the source, runs a command,
finalizes output and turns failures into `click.Abort`.
"""

from __future__ import annotations

from typing import Callable

import click

from JsonlViewer.cli.commands import Command
from JsonlViewer.config import AppConfig
from JsonlViewer.renderers import OutputWriter
from JsonlViewer.services import create_session
from JsonlViewer.services.session import ViewerSession
from JsonlViewer.utils.log import configure_logging, log

STDIN_SOURCE = "-"


def load_source(session: ViewerSession, source: str) -> None:
    """Load `source` into the session; "-" reads pasted bytes from stdin."""
    if source == STDIN_SOURCE:
        session.load_bytes(click.get_binary_stream("stdin").read())
    else:
        session.load_file(source)


class CommandRunner:
    """Orchestrates command execution for one CLI invocation."""

    def __init__(self, config: AppConfig) -> None:
        """Initialize command runner.

        Args:
            config: Application configuration.
        """
        self.config = config

    def run(
        self,
        action: str,
        source: str,
        build_command: Callable[[ViewerSession], Command],
        output_writer: OutputWriter | None = None,
    ) -> None:
        """Load `source`, then build and execute one command.

        Args:
            action: The CLI command name (e.g., 'search').
            source: File path, or "-" for stdin.
            build_command: Creates the command once the session is loaded.
            output_writer: Writer to finalize after the command ran.

        Raises:
            click.Abort: When loading or the command fails.
        """
        configure_logging(
            level=self.config.runtime.level,
            action=action,
            log_to_file=self.config.runtime.to_file,
            log_dir=self.config.runtime.dir,
        )
        try:
            session = create_session(self.config)
            load_source(session, source)
            stats = session.stats
            if stats.invalid_line_numbers:
                log.warning(
                    "%d malformed lines skipped (first: %d)",
                    len(stats.invalid_line_numbers),
                    stats.invalid_line_numbers[0],
                )

            command = build_command(session)
            command.execute()
            if output_writer is not None:
                output_writer.finalize(action)
        except Exception as e:  # noqa: BLE001 - cli boundary
            log.error("%s failed: %s", action.capitalize(), e)
            raise click.Abort from e
