"""CLI entry point for exporting events."""

from __future__ import annotations

import asyncio
from datetime import datetime
from pathlib import Path
from typing import Annotated

import typer

from hubshift.cli.common import (
    ClientIdOption,
    ClientSecretOption,
    ConfigOption,
    HubIdOption,
    LogFileOption,
    create_client,
    load_config_or_exit,
)
from hubshift.core.config import ConfigurationParameters
from hubshift.core.dates import relative_date
from hubshift.export.events import EventExporter, EventExportOptions
from hubshift.log.file_log import FileLog
from hubshift.log.paths import default_log_path

app = typer.Typer(help="Export events with their editions and slots.")

DirArgument = Annotated[
    Path,
    typer.Argument(help="Output directory for the exported events."),
]
EventIdOption = Annotated[
    str | None,
    typer.Option("--id", help="Export a single event by ID, rather than fetching all of them."),
]
FromDateOption = Annotated[
    str | None,
    typer.Option(
        "--from-date",
        help='Start date for filtering events. Either "NOW" or "<number>:<unit>", e.g. "-7:DAYS".',
    ),
]
ToDateOption = Annotated[
    str | None,
    typer.Option(
        "--to-date",
        help='End date for filtering events. Either "NOW" or "<number>:<unit>", e.g. "-7:DAYS".',
    ),
]
ForceFlag = Annotated[
    bool,
    typer.Option("--force", "-f", help="Overwrite previously exported files without asking."),
]
SilentFlag = Annotated[
    bool,
    typer.Option("--silent", help="Only print the summary table and prompts."),
]


def _parse_relative(value: str | None, option: str) -> datetime | None:
    if value is None:
        return None
    try:
        return relative_date(value)
    except ValueError as exc:
        raise typer.BadParameter(str(exc), param_hint=option) from exc


async def _run_export(
    config: ConfigurationParameters, options: EventExportOptions, log: FileLog
) -> bool:
    client = create_client(config)
    try:
        return await EventExporter(client).export(options, log)
    finally:
        await client.aclose()


def export(
    dir: DirArgument,
    event_id: EventIdOption = None,
    from_date: FromDateOption = None,
    to_date: ToDateOption = None,
    force: ForceFlag = False,
    silent: SilentFlag = False,
    log_file: LogFileOption = None,
    client_id: ClientIdOption = None,
    client_secret: ClientSecretOption = None,
    hub_id: HubIdOption = None,
    config_path: ConfigOption = None,
) -> None:
    """Export events to a directory, one JSON file per event."""

    options = EventExportOptions(
        dir=dir,
        hub_id="",
        event_id=event_id,
        from_date=_parse_relative(from_date, "--from-date"),
        to_date=_parse_relative(to_date, "--to-date"),
        force=force,
    )
    config = load_config_or_exit(config_path, client_id, client_secret, hub_id)
    options.hub_id = config.hub_id

    log = FileLog(
        log_file or default_log_path("event", "export"),
        title="Event Export Log",
        silent=silent,
    )
    try:
        succeeded = asyncio.run(_run_export(config, options, log))
    finally:
        log.close()

    if not succeeded:
        raise typer.Exit(code=1)


app.command("export")(export)
