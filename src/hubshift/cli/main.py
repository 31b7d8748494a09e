"""Root command for the hubshift CLI."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Annotated

import typer

from hubshift.cli.configure import configure
from hubshift.cli.content_item import app as content_item_app
from hubshift.cli.event import app as event_app
from hubshift.utils.logging import configure_logging

app = typer.Typer(
    help="Move, revert and export content between Dynamic Content hubs.",
    no_args_is_help=True,
)


@app.callback()
def main(
    verbose: Annotated[
        bool, typer.Option("--verbose", help="Emit debug-level structured logs.")
    ] = False,
) -> None:
    configure_logging(verbose)


app.command("configure")(configure)
app.add_typer(content_item_app, name="content-item")
app.add_typer(event_app, name="event")


def run_cli(args: Sequence[str] | None = None) -> None:
    app(args=args)
