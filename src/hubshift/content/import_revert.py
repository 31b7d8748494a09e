"""Undo the destination side of a copy recorded in an action log."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
from typing import Any, Protocol

import structlog
from rich.console import Console

from hubshift.api.client import ContentClient
from hubshift.api.models import Status
from hubshift.core.config import ConfigurationParameters
from hubshift.core.errors import ApiError, LogLoadError
from hubshift.log.file_log import ActionKind, FileLog

ClientFactory = Callable[[ConfigurationParameters], ContentClient]


class ImportReverter(Protocol):
    async def revert(
        self, destination: ConfigurationParameters, log_path: str | Path
    ) -> bool: ...


class ImportRevert:
    """Archives every item a copy created at the destination.

    Each ``CREATE`` entry is handled independently; an item that cannot be
    fetched or archived is reported and skipped.
    """

    def __init__(
        self,
        client_factory: ClientFactory = ContentClient.from_config,
        ui: Console | None = None,
        logger: Any = None,
    ) -> None:
        self._client_factory = client_factory
        self._ui = ui or Console()
        self._logger = logger or structlog.get_logger(__name__)

    async def revert(
        self, destination: ConfigurationParameters, log_path: str | Path
    ) -> bool:
        """Archive destination items created by the logged import.

        Returns:
            False if the log could not be loaded, True otherwise
        """
        try:
            log = FileLog().load_from_file(log_path)
        except LogLoadError as exc:
            self._ui.print("[red]Could not open the import log! Aborting.[/red]")
            self._logger.error("import_revert.log_unreadable", path=exc.path)
            return False

        created = log.get_data(ActionKind.CREATE)
        client = self._client_factory(destination)
        try:
            for item_id in created:
                if not item_id:
                    continue
                try:
                    item = await client.content_items.find(item_id)
                except ApiError:
                    item = None
                if item is None:
                    self._ui.print(
                        f"Could not find created item with id {item_id}, skipping."
                    )
                    continue

                if item.status == Status.ARCHIVED:
                    continue

                try:
                    await client.content_items.archive(item)
                except ApiError as exc:
                    self._ui.print(
                        f"Could not archive created item with id {item_id}, skipping."
                    )
                    self._logger.warning(
                        "import_revert.archive_failed", item_id=item_id, **exc.to_dict()
                    )
        finally:
            await client.aclose()

        self._logger.info(
            "import_revert.summary", hub_id=destination.hub_id, created=len(created)
        )
        return True
