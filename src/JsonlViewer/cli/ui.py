"""Click CLI interface definitions.

Defines the command-line interface structure and routes commands to the
runner. Every command takes a SOURCE: a JSONL file path, or "-" to read
pasted text from stdin.
"""

from __future__ import annotations

from pathlib import Path
from typing import Callable, Sequence

import click

from JsonlViewer.cli.commands import (
    CheckCommand,
    ExportCommand,
    FieldsCommand,
    LineCommand,
    PageCommand,
    RangeCommand,
    SearchCommand,
    StatsCommand,
)
from JsonlViewer.cli.runner import CommandRunner
from JsonlViewer.config import DEFAULT_CONFIG_PATH, AppConfig, load_config, load_config_with_defaults, parse_config_dict
from JsonlViewer.core.models import FieldVisibility, SearchRequest
from JsonlViewer.renderers import OUTPUT_FORMATS, create_output_writer
from JsonlViewer.services.export import default_export_path


def resolve_config(config_path: Path) -> AppConfig:
    """Load the config file, merging over the defaults file when both exist.

    A missing default config falls back to built-in defaults.

    Raises:
        click.BadParameter: If an explicitly given config file does not exist.
    """
    if config_path.exists():
        if config_path != DEFAULT_CONFIG_PATH and DEFAULT_CONFIG_PATH.exists():
            return load_config_with_defaults(config_path, default_path=DEFAULT_CONFIG_PATH)
        return load_config(config_path)
    if config_path == DEFAULT_CONFIG_PATH:
        return parse_config_dict({"log": {}})
    raise click.BadParameter(f"Config file not found: {config_path}", param_hint="--config")


def _source_argument(func: Callable) -> Callable:
    return click.argument("source", type=click.Path(dir_okay=False, allow_dash=True))(func)


def _visibility_options(func: Callable) -> Callable:
    func = click.option(
        "--hide",
        "hide",
        multiple=True,
        help="Field to hide (ignored when --show is given). Repeatable.",
    )(func)
    func = click.option(
        "--show",
        "show",
        multiple=True,
        help="Only show this field. Repeatable.",
    )(func)
    return func


def _format_options(func: Callable) -> Callable:
    func = click.option(
        "--json-output",
        "json_output",
        type=click.Path(path_type=Path, dir_okay=False),
        default=None,
        help="Write JSON output to this file instead of stdout.",
    )(func)
    func = click.option(
        "--format",
        "formats",
        type=click.Choice(OUTPUT_FORMATS, case_sensitive=False),
        multiple=True,
        default=("console",),
        show_default=True,
        help="Output format. Repeatable.",
    )(func)
    return func


@click.group(help="JsonlViewer: browse, search and export JSONL files.")
@click.option(
    "--config",
    "config_path",
    type=click.Path(path_type=Path, dir_okay=False),
    default=DEFAULT_CONFIG_PATH,
    show_default=True,
    envvar="JSONL_VIEWER_CONFIG",
    help="Path to YAML config file.",
)
@click.pass_context
def cli(ctx: click.Context, config_path: Path) -> None:
    """CLI entry group.

    Args:
        ctx: Click context.
        config_path: Path to YAML config file.
    """
    ctx.obj = resolve_config(config_path)


@cli.command("stats")
@_source_argument
@_format_options
@click.pass_context
def stats_cmd(ctx: click.Context, source: str, formats: Sequence[str], json_output: Path | None) -> None:
    """Show file information and load statistics."""
    writer = create_output_writer(formats, json_output)
    CommandRunner(ctx.obj).run(
        ctx.command.name,
        source,
        lambda session: StatsCommand(session=session, output_writer=writer),
        writer,
    )


@cli.command("page")
@_source_argument
@click.option("--offset", type=int, default=0, show_default=True, help="Index of the first record.")
@click.option("--limit", type=int, default=0, help="Records per page (default: viewer.page_size).")
@_visibility_options
@_format_options
@click.pass_context
def page_cmd(
    ctx: click.Context,
    source: str,
    offset: int,
    limit: int,
    show: Sequence[str],
    hide: Sequence[str],
    formats: Sequence[str],
    json_output: Path | None,
) -> None:
    """Show a page of records in file order."""
    writer = create_output_writer(formats, json_output)
    CommandRunner(ctx.obj).run(
        ctx.command.name,
        source,
        lambda session: PageCommand(
            session=session,
            output_writer=writer,
            offset=offset,
            limit=limit,
            visibility=FieldVisibility.of(show, hide),
        ),
        writer,
    )


@cli.command("line")
@_source_argument
@click.argument("line_number", type=int)
@_visibility_options
@_format_options
@click.pass_context
def line_cmd(
    ctx: click.Context,
    source: str,
    line_number: int,
    show: Sequence[str],
    hide: Sequence[str],
    formats: Sequence[str],
    json_output: Path | None,
) -> None:
    """Show the record at LINE_NUMBER."""
    writer = create_output_writer(formats, json_output)
    CommandRunner(ctx.obj).run(
        ctx.command.name,
        source,
        lambda session: LineCommand(
            session=session,
            output_writer=writer,
            line_number=line_number,
            visibility=FieldVisibility.of(show, hide),
        ),
        writer,
    )


@cli.command("range")
@_source_argument
@click.argument("start_line", type=int)
@click.argument("end_line", type=int)
@_visibility_options
@_format_options
@click.pass_context
def range_cmd(
    ctx: click.Context,
    source: str,
    start_line: int,
    end_line: int,
    show: Sequence[str],
    hide: Sequence[str],
    formats: Sequence[str],
    json_output: Path | None,
) -> None:
    """Show records between START_LINE and END_LINE (inclusive)."""
    writer = create_output_writer(formats, json_output)
    CommandRunner(ctx.obj).run(
        ctx.command.name,
        source,
        lambda session: RangeCommand(
            session=session,
            output_writer=writer,
            start_line=start_line,
            end_line=end_line,
            visibility=FieldVisibility.of(show, hide),
        ),
        writer,
    )


@cli.command("fields")
@_source_argument
@click.option("--common", is_flag=True, help="Only fields present in at least half of the records.")
@_format_options
@click.pass_context
def fields_cmd(
    ctx: click.Context,
    source: str,
    common: bool,
    formats: Sequence[str],
    json_output: Path | None,
) -> None:
    """List field names."""
    writer = create_output_writer(formats, json_output)
    CommandRunner(ctx.obj).run(
        ctx.command.name,
        source,
        lambda session: FieldsCommand(session=session, output_writer=writer, common_only=common),
        writer,
    )


@cli.command("search")
@_source_argument
@click.argument("query")
@click.option(
    "--case-sensitive/--ignore-case",
    "case_sensitive",
    default=None,
    help="Match values with exact case (default: viewer.case_sensitive).",
)
@click.option("--offset", type=int, default=0, show_default=True, help="Index of the first match.")
@click.option("--limit", type=int, default=0, help="Matches per page (default: viewer.page_size).")
@click.option(
    "--plain/--query-language",
    "plain",
    default=None,
    help="Plain substring search instead of the query language (default: viewer.query_language).",
)
@click.option("--field", "selected_field", default=None, help="Plain search only: restrict to this field.")
@click.option("--highlight", is_flag=True, help="Report match positions in each line.")
@_visibility_options
@_format_options
@click.pass_context
def search_cmd(
    ctx: click.Context,
    source: str,
    query: str,
    case_sensitive: bool | None,
    offset: int,
    limit: int,
    plain: bool | None,
    selected_field: str | None,
    highlight: bool,
    show: Sequence[str],
    hide: Sequence[str],
    formats: Sequence[str],
    json_output: Path | None,
) -> None:
    """Search records with QUERY.

    Query syntax: `field:value`, `"phrase"`, `field:"phrase"`, `*` wildcards,
    combined with `AND`, `OR` and a `NOT ` prefix (no parentheses).
    """
    cfg: AppConfig = ctx.obj
    request = SearchRequest(
        query=query,
        case_sensitive=cfg.viewer.case_sensitive if case_sensitive is None else case_sensitive,
        offset=offset,
        limit=limit if limit > 0 else cfg.viewer.page_size,
        use_query_language=cfg.viewer.query_language if plain is None else not plain,
        selected_field=selected_field,
    )
    writer = create_output_writer(formats, json_output)
    CommandRunner(cfg).run(
        ctx.command.name,
        source,
        lambda session: SearchCommand(
            session=session,
            output_writer=writer,
            request=request,
            visibility=FieldVisibility.of(show, hide),
            highlight=highlight,
        ),
        writer,
    )


@cli.command("export")
@_source_argument
@click.argument("query", required=False, default="")
@_visibility_options
@click.option(
    "--case-sensitive/--ignore-case",
    "case_sensitive",
    default=None,
    help="Match values with exact case (default: viewer.case_sensitive).",
)
@click.option(
    "--output",
    "output",
    type=click.Path(dir_okay=False, allow_dash=True),
    default=None,
    help="Destination file, or - for stdout (default: timestamped file in export.dir).",
)
@click.pass_context
def export_cmd(
    ctx: click.Context,
    source: str,
    query: str,
    show: Sequence[str],
    hide: Sequence[str],
    case_sensitive: bool | None,
    output: str | None,
) -> None:
    """Export every record matching QUERY (all records when omitted) as JSONL."""
    cfg: AppConfig = ctx.obj
    if output == "-":
        destination = None
    elif output:
        destination = Path(output)
    else:
        destination = default_export_path(cfg.export.dir, cfg.export.filename_prefix, cfg.export.timestamp_format)

    CommandRunner(cfg).run(
        ctx.command.name,
        source,
        lambda session: ExportCommand(
            session=session,
            query=query,
            visibility=FieldVisibility.of(show, hide),
            destination=destination,
            case_sensitive=cfg.viewer.case_sensitive if case_sensitive is None else case_sensitive,
        ),
    )


@cli.command("check")
@_source_argument
@click.option("--reload", "reload_", is_flag=True, help="Reload the file when it changed.")
@click.option("--interval", type=float, default=0.0, show_default=True, help="Seconds to wait before each check.")
@click.option("--rounds", type=int, default=1, show_default=True, help="Number of checks.")
@_format_options
@click.pass_context
def check_cmd(
    ctx: click.Context,
    source: str,
    reload_: bool,
    interval: float,
    rounds: int,
    formats: Sequence[str],
    json_output: Path | None,
) -> None:
    """Watch SOURCE for modifications."""
    writer = create_output_writer(formats, json_output)
    CommandRunner(ctx.obj).run(
        ctx.command.name,
        source,
        lambda session: CheckCommand(
            session=session,
            output_writer=writer,
            reload=reload_,
            interval=interval,
            rounds=rounds,
        ),
        writer,
    )
