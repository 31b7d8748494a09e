"""Options and helpers shared by the hubshift commands."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer

from hubshift.api.client import ContentClient
from hubshift.core.config import ConfigurationParameters, load_configuration
from hubshift.core.errors import ConfigurationError

ClientIdOption = Annotated[
    str | None,
    typer.Option("--client-id", help="Client ID, overrides the configured value."),
]
ClientSecretOption = Annotated[
    str | None,
    typer.Option("--client-secret", help="Client secret, overrides the configured value."),
]
HubIdOption = Annotated[
    str | None,
    typer.Option("--hub-id", help="Hub ID, overrides the configured value."),
]
ConfigOption = Annotated[
    Path | None,
    typer.Option("--config", help="Path to the hubshift config file."),
]
LogFileOption = Annotated[
    Path | None,
    typer.Option("--log-file", help="Path to a log file to write to."),
]


def create_client(config: ConfigurationParameters) -> ContentClient:
    return ContentClient.from_config(config)


def load_config_or_exit(
    config_path: Path | None,
    client_id: str | None,
    client_secret: str | None,
    hub_id: str | None,
) -> ConfigurationParameters:
    """Load configuration, exiting with code 1 if it is incomplete."""

    try:
        return load_configuration(
            config_path,
            client_id=client_id,
            client_secret=client_secret,
            hub_id=hub_id,
        )
    except ConfigurationError as exc:
        typer.secho(str(exc), err=True, fg=typer.colors.RED)
        raise typer.Exit(code=1) from exc
