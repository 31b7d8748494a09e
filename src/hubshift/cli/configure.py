"""CLI command for storing account credentials."""

from __future__ import annotations

from typing import Annotated

import typer

from hubshift.cli.common import ConfigOption
from hubshift.core.config import ConfigurationParameters, save_configuration


def configure(
    client_id: Annotated[str, typer.Option("--client-id", help="Client ID.")],
    client_secret: Annotated[
        str, typer.Option("--client-secret", help="Client secret.", prompt=True, hide_input=True)
    ],
    hub_id: Annotated[str, typer.Option("--hub-id", help="Hub ID.")],
    config_path: ConfigOption = None,
) -> None:
    """Write client credentials and the active hub to the config file."""

    params = ConfigurationParameters(
        client_id=client_id, client_secret=client_secret, hub_id=hub_id
    )
    written = save_configuration(params, config_path)
    typer.secho(f"Configuration saved to {written}", fg=typer.colors.GREEN)
