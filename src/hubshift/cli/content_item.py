"""CLI entry point for moving content items and reverting moves."""

from __future__ import annotations

import asyncio
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
from hubshift.content.copy import ContentCopier, CopyOptions
from hubshift.content.import_revert import ImportRevert
from hubshift.content.move import MoveOrchestrator, MoveReport
from hubshift.content.revert import RevertEngine, RevertReport
from hubshift.core.config import ConfigurationParameters, destination_configuration
from hubshift.log.file_log import FileLog
from hubshift.log.paths import default_log_path

app = typer.Typer(help="Move content items. The active hub is the source for the move.")

RevertLogOption = Annotated[
    Path | None,
    typer.Option(
        "--revert-log",
        help=(
            "Path to a move log to revert. Unarchives the moved items at the "
            "source and archives the copies created at the destination."
        ),
    ),
]
SrcRepoOption = Annotated[
    str | None,
    typer.Option("--src-repo", help="Repository to move content out of."),
]
SrcFolderOption = Annotated[
    str | None,
    typer.Option("--src-folder", help="Only move content from this folder."),
]
DstRepoOption = Annotated[
    str | None,
    typer.Option("--dst-repo", help="Repository to move content into."),
]
DstFolderOption = Annotated[
    str | None,
    typer.Option("--dst-folder", help="Folder to create moved content in."),
]
DstHubOption = Annotated[
    str | None,
    typer.Option("--dst-hub-id", help="Destination hub ID. Defaults to the source hub."),
]
DstClientOption = Annotated[
    str | None,
    typer.Option(
        "--dst-client-id",
        help="Destination account's client ID. Defaults to the source client.",
    ),
]
DstSecretOption = Annotated[
    str | None,
    typer.Option(
        "--dst-secret",
        help="Destination account's secret. Defaults to the source secret.",
    ),
]
ValidateFlag = Annotated[
    bool,
    typer.Option(
        "--validate", "-v", help="Only validate content, nothing is copied or archived."
    ),
]
SkipIncompleteFlag = Annotated[
    bool,
    typer.Option(
        "--skip-incomplete", help="Skip content items that fail to copy instead of failing."
    ),
]
ExcludeKeysFlag = Annotated[
    bool,
    typer.Option("--exclude-keys", help="Exclude delivery keys when copying content items."),
]


async def _run_move(
    config: ConfigurationParameters,
    destination: ConfigurationParameters,
    options: CopyOptions,
    log: FileLog,
) -> MoveReport:
    source_client = create_client(config)
    destination_client = create_client(destination)
    try:
        copier = ContentCopier(source_client, destination_client)
        return await MoveOrchestrator(source_client, copier).move(options, log)
    finally:
        await destination_client.aclose()
        await source_client.aclose()


async def _run_revert(
    config: ConfigurationParameters,
    destination: ConfigurationParameters,
    revert_log: Path,
) -> RevertReport:
    source_client = create_client(config)
    try:
        engine = RevertEngine(source_client, ImportRevert(client_factory=create_client))
        return await engine.revert(revert_log, destination)
    finally:
        await source_client.aclose()


def move(
    revert_log: RevertLogOption = None,
    src_repo: SrcRepoOption = None,
    src_folder: SrcFolderOption = None,
    dst_repo: DstRepoOption = None,
    dst_folder: DstFolderOption = None,
    dst_hub_id: DstHubOption = None,
    dst_client_id: DstClientOption = None,
    dst_secret: DstSecretOption = None,
    validate: ValidateFlag = False,
    skip_incomplete: SkipIncompleteFlag = False,
    exclude_keys: ExcludeKeysFlag = False,
    log_file: LogFileOption = None,
    client_id: ClientIdOption = None,
    client_secret: ClientSecretOption = None,
    hub_id: HubIdOption = None,
    config_path: ConfigOption = None,
) -> None:
    """Copy content to the destination, then archive it at the source."""

    config = load_config_or_exit(config_path, client_id, client_secret, hub_id)
    destination = destination_configuration(
        config, hub_id=dst_hub_id, client_id=dst_client_id, client_secret=dst_secret
    )

    if revert_log is not None:
        revert_report = asyncio.run(_run_revert(config, destination, revert_log))
        if not revert_report.success:
            raise typer.Exit(code=1)
        typer.secho(
            f"Reverted move: {len(revert_report.unarchived_ids)} unarchived, "
            f"{len(revert_report.already_active_ids)} already active, "
            f"{len(revert_report.skipped_ids)} skipped.",
            fg=typer.colors.GREEN,
        )
        return

    if not src_repo or not dst_repo:
        typer.secho(
            "Both --src-repo and --dst-repo are required to move content.",
            err=True,
            fg=typer.colors.RED,
        )
        raise typer.Exit(code=1)

    options = CopyOptions(
        src_repo=src_repo,
        dst_repo=dst_repo,
        src_folder=src_folder,
        dst_folder=dst_folder,
        validate=validate,
        skip_incomplete=skip_incomplete,
        exclude_keys=exclude_keys,
    )
    log = FileLog(
        log_file or default_log_path("item", "move"), title="Content Item Move Log"
    )

    report = asyncio.run(_run_move(config, destination, options, log))
    if not report.success:
        typer.secho(
            "Copy failed, no content was archived at the source.",
            err=True,
            fg=typer.colors.RED,
        )
        raise typer.Exit(code=1)

    typer.secho(
        f"Moved {len(report.moved_ids)} of {len(report.copied_ids)} content items.",
        fg=typer.colors.GREEN,
    )
    if report.failed_ids:
        typer.secho(
            f"{len(report.failed_ids)} items could not be archived and remain active "
            "at the source.",
            fg=typer.colors.YELLOW,
        )
    typer.echo(f"Log written to {log.path}")


app.command("move")(move)
