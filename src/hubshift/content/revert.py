"""Revert a move from its action log.

Every ``MOVED`` entry names a source item that the move archived. Reverting
unarchives each of them independently, then hands the same log to the
import reverter so it can undo what was created at the destination. Revert is
a best-effort corrective pass; it has no rollback of its own.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import structlog
from rich.console import Console

from hubshift.api.client import ContentClient
from hubshift.api.models import Status
from hubshift.content.import_revert import ImportReverter
from hubshift.core.config import ConfigurationParameters
from hubshift.core.errors import ApiError, LogLoadError
from hubshift.log.file_log import ActionKind, FileLog


@dataclass
class RevertReport:
    """Summary of a revert.

    Attributes:
        success: False only when the log could not be loaded
        unarchived_ids: Source IDs restored by this run
        already_active_ids: Source IDs that needed no change
        skipped_ids: Source IDs that could not be found or unarchived
    """

    success: bool = True
    unarchived_ids: list[str] = field(default_factory=list)
    already_active_ids: list[str] = field(default_factory=list)
    skipped_ids: list[str] = field(default_factory=list)


class RevertEngine:
    def __init__(
        self,
        source: ContentClient,
        import_reverter: ImportReverter,
        logger: Any = None,
        ui: Console | None = None,
    ) -> None:
        self._source = source
        self._import_reverter = import_reverter
        self._logger = logger or structlog.get_logger(__name__)
        self._ui = ui or Console()

    async def revert(
        self, log_path: str | Path, destination: ConfigurationParameters
    ) -> RevertReport:
        """Unarchive moved sources, then revert the destination import.

        Args:
            log_path: Log written by the move being reverted
            destination: Credentials and hub for the destination side

        Returns:
            RevertReport; individual skips do not make the revert fail
        """
        bound_logger = self._logger.bind(log_path=str(log_path))

        try:
            log = FileLog().load_from_file(log_path)
        except LogLoadError as exc:
            self._ui.print("[red]Could not open the import log! Aborting.[/red]")
            bound_logger.error("revert.log_unreadable", reason=exc.reason)
            return RevertReport(success=False)

        report = RevertReport()
        for item_id in log.get_data(ActionKind.MOVED):
            try:
                item = await self._source.content_items.find(item_id)
            except ApiError:
                item = None
            if item is None:
                self._ui.print(f"Could not find item with id {item_id}, skipping.")
                report.skipped_ids.append(item_id)
                continue

            if item.status == Status.ACTIVE:
                self._ui.print(f"Item with id {item_id} is already unarchived, skipping.")
                report.already_active_ids.append(item_id)
                continue

            try:
                await self._source.content_items.unarchive(item)
            except ApiError as exc:
                self._ui.print(f"Could not unarchive item with id {item_id}, skipping.")
                bound_logger.warning("revert.unarchive_failed", item_id=item_id, **exc.to_dict())
                report.skipped_ids.append(item_id)
                continue

            report.unarchived_ids.append(item_id)

        await self._import_reverter.revert(destination, log_path)

        bound_logger.info(
            "revert.summary",
            unarchived_count=len(report.unarchived_ids),
            already_active_count=len(report.already_active_ids),
            skipped_count=len(report.skipped_ids),
        )
        return report
