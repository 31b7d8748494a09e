"""Move orchestration: copy content to a destination, then archive the source.

A move runs through three states:

    COPYING -> ARCHIVING -> DONE
        \\-> ABORTED

Archiving only starts once the copy as a whole has reported success, and it
only touches items the copy reported as copied. If anything goes wrong later
an item may exist in both places, which the action log makes visible, but
it never exists in neither.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any

import structlog
from rich.console import Console
from rich.markup import escape

from hubshift.api.client import ContentClient
from hubshift.api.models import Status
from hubshift.content.copy import Copier, CopyOptions
from hubshift.core.errors import ApiError, HubShiftError
from hubshift.log.file_log import ActionKind, FileLog


class MoveState(str, Enum):
    COPYING = "COPYING"
    ARCHIVING = "ARCHIVING"
    DONE = "DONE"
    ABORTED = "ABORTED"


@dataclass
class MoveReport:
    """Summary of a move.

    Attributes:
        state: Final state, DONE or ABORTED
        copied_ids: Source IDs the copy phase reported as copied
        moved_ids: Source IDs archived by this run
        already_archived_ids: Source IDs skipped because they were archived
        failed_ids: Source IDs that could not be fetched or archived
        log_path: File the action log was written to
    """

    state: MoveState = MoveState.COPYING
    copied_ids: list[str] = field(default_factory=list)
    moved_ids: list[str] = field(default_factory=list)
    already_archived_ids: list[str] = field(default_factory=list)
    failed_ids: list[str] = field(default_factory=list)
    log_path: Path | None = None

    @property
    def success(self) -> bool:
        return self.state == MoveState.DONE


class MoveOrchestrator:
    """Sequences copy, archive and log close for one move invocation."""

    def __init__(
        self,
        source: ContentClient,
        copier: Copier,
        logger: Any = None,
        ui: Console | None = None,
    ) -> None:
        """Initialize the orchestrator.

        Args:
            source: Client for the hub content is moved out of
            copier: Collaborator that creates the destination copies
            logger: Optional structlog logger instance
            ui: Optional Rich console for output
        """
        self._source = source
        self._copier = copier
        self._logger = logger or structlog.get_logger(__name__)
        self._ui = ui or Console()

    async def move(self, options: CopyOptions, log: FileLog) -> MoveReport:
        """Copy matching items, then archive the copied sources.

        The log is closed on every exit path.

        Args:
            options: Copy options passed through to the copier
            log: Action log owned by this invocation

        Returns:
            MoveReport with the final state and per-item outcome
        """
        report = MoveReport(log_path=log.path)
        bound_logger = self._logger.bind(
            src_repo=options.src_repo,
            dst_repo=options.dst_repo,
            log_path=str(log.path) if log.path else None,
        )

        try:
            try:
                result = await self._copier.copy(options, log)
            except HubShiftError as exc:
                log.error("Copy failed unexpectedly.", exc)
                report.state = MoveState.ABORTED
                bound_logger.error("move.copy_error", error=str(exc))
                return report

            if not result.success:
                report.state = MoveState.ABORTED
                bound_logger.warning("move.aborted", reason="copy_failed")
                return report

            report.copied_ids = list(result.exported_ids)
            report.state = MoveState.ARCHIVING
            await self.archive_sources(report.copied_ids, log, report, bound_logger)
            report.state = MoveState.DONE

            bound_logger.info(
                "move.summary",
                copied_count=len(report.copied_ids),
                moved_count=len(report.moved_ids),
                already_archived_count=len(report.already_archived_ids),
                failed_count=len(report.failed_ids),
            )
            return report
        finally:
            log.close()

    async def archive_sources(
        self,
        item_ids: list[str],
        log: FileLog,
        report: MoveReport | None = None,
        bound_logger: Any = None,
    ) -> MoveReport:
        """Archive each source item in order, logging a MOVED entry per success.

        Items that are already archived are skipped without a log entry, so
        running this twice over the same IDs never records a second MOVED.
        Failures are recorded as comments and do not stop the batch.
        """
        report = report if report is not None else MoveReport(state=MoveState.ARCHIVING)
        bound_logger = bound_logger or self._logger

        for item_id in item_ids:
            try:
                item = await self._source.content_items.get(item_id)
            except ApiError as exc:
                self._record_failure(item_id, exc, log, report, bound_logger)
                continue

            if item.status == Status.ARCHIVED:
                report.already_archived_ids.append(item_id)
                continue

            try:
                await self._source.content_items.archive(item)
            except ApiError as exc:
                self._record_failure(item_id, exc, log, report, bound_logger)
                continue

            log.add_action(ActionKind.MOVED, item_id)
            report.moved_ids.append(item_id)

        return report

    def _record_failure(
        self,
        item_id: str,
        exc: ApiError,
        log: FileLog,
        report: MoveReport,
        bound_logger: Any,
    ) -> None:
        log.add_comment(f"ARCHIVE FAILED: {item_id}")
        log.add_comment(str(exc))
        report.failed_ids.append(item_id)
        bound_logger.warning("move.archive_failed", item_id=item_id, **exc.to_dict())
        self._ui.print(
            f"[yellow]Could not archive source item {escape(item_id)}: "
            f"{escape(str(exc))}[/yellow]"
        )
