"""Event export: fetch events with their editions and slots, then write them.

Events are exported as aggregates. Each event is enriched with its editions
and each edition with its slots before export; if any tier fails to load,
the event is left out of the export rather than written half-populated.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

import structlog
from rich.console import Console

from hubshift.api.client import ContentClient
from hubshift.api.models import Edition, Event
from hubshift.core.errors import ApiError
from hubshift.export.service import (
    ConfirmOverwrite,
    ExportOutcome,
    export_entities,
    load_exported_index,
    nothing_exported_exit,
)
from hubshift.log.file_log import FileLog


@dataclass
class EventExportOptions:
    """Options for ``event export``.

    Attributes:
        dir: Output directory
        hub_id: Hub to export from
        event_id: Export a single event instead of listing the hub
        from_date: Drop events that end before this moment
        to_date: Drop events that start after this moment
        force: Overwrite previously exported files without asking
    """

    dir: Path
    hub_id: str
    event_id: str | None = None
    from_date: datetime | None = None
    to_date: datetime | None = None
    force: bool = False


def _parse_timestamp(value: str | None) -> datetime | None:
    if not value:
        return None
    try:
        parsed = datetime.fromisoformat(value)
    except ValueError:
        return None
    return parsed if parsed.tzinfo else parsed.replace(tzinfo=UTC)


def filter_events(
    events: Sequence[Event], from_date: datetime | None, to_date: datetime | None
) -> list[Event]:
    """Keep events overlapping the ``[from_date, to_date]`` window.

    Events whose start or end cannot be parsed are kept.
    """
    kept: list[Event] = []
    for event in events:
        start = _parse_timestamp(event.start)
        end = _parse_timestamp(event.end)
        if from_date and end and end < from_date:
            continue
        if to_date and start and start > to_date:
            continue
        kept.append(event)
    return kept


async def enrich_editions(client: ContentClient, editions: list[Edition]) -> list[Edition]:
    """Attach every page of slots to each edition. Errors propagate."""
    for edition in editions:
        if not edition.id:
            edition.slots = []
            continue
        edition.slots = await client.editions.list_slots(edition.id)
    return editions


async def enrich_events(
    client: ContentClient, events: Sequence[Event], log: FileLog | None = None
) -> list[Event]:
    """Attach editions and slots to each event, dropping events that fail.

    Args:
        client: API client for the source hub
        events: Events to enrich, in order
        log: Optional action log for progress and errors

    Returns:
        Fully enriched events, in input order
    """
    enriched: list[Event] = []
    for event in events:
        if log:
            log.append_line(f"Fetching {event.name} with editions.")

        if not event.id:
            continue

        try:
            editions = await client.events.list_editions(event.id)
            event.editions = await enrich_editions(client, editions)
        except ApiError as exc:
            if log:
                log.error(f"Failed to fetch editions for {event.name}, skipping.", exc)
            continue

        enriched.append(event)
    return enriched


class EventExporter:
    """Runs an event export against one hub."""

    def __init__(
        self,
        client: ContentClient,
        logger: Any = None,
        ui: Console | None = None,
        confirm: ConfirmOverwrite | None = None,
    ) -> None:
        self._client = client
        self._logger = logger or structlog.get_logger(__name__)
        self._ui = ui or Console()
        self._confirm = confirm

    async def export(self, options: EventExportOptions, log: FileLog) -> bool:
        """Export events to ``options.dir``.

        Returns:
            False when the run was aborted (hub or single event unavailable),
            True otherwise, including when nothing was exported
        """
        bound_logger = self._logger.bind(hub_id=options.hub_id, dir=str(options.dir))
        previously_exported = load_exported_index(options.dir, Event)

        try:
            await self._client.hubs.get(options.hub_id)
        except ApiError as exc:
            log.error(f"Couldn't get hub with id {options.hub_id}, aborting.", exc)
            bound_logger.error("export.hub_unavailable", **exc.to_dict())
            return False

        if options.event_id:
            try:
                events = [await self._client.events.get(options.event_id)]
            except ApiError as exc:
                log.error(f"Failed to get event with id {options.event_id}, aborting.", exc)
                return False
            log.append_line(f"Exporting single event {events[0].name}.")
        else:
            try:
                stored = await self._client.events.list(options.hub_id)
                events = filter_events(stored, options.from_date, options.to_date)
                log.append_line(f"Exporting {len(events)} of {len(stored)} events...")
            except ApiError as exc:
                log.error("Failed to list events.", exc)
                events = []

        outcome = await self.process_events(options, previously_exported, events, log)
        bound_logger.info("export.finished", outcome=outcome.value)
        log.append_line("Done.")
        return True

    async def process_events(
        self,
        options: EventExportOptions,
        previously_exported: dict[str, Event],
        events: Sequence[Event],
        log: FileLog,
    ) -> ExportOutcome:
        if not events:
            return nothing_exported_exit(
                self._ui, "No events to export from this hub, exiting."
            )

        enriched = await enrich_events(self._client, events, log)
        return export_entities(
            options.dir,
            previously_exported,
            enriched,
            ui=self._ui,
            confirm=self._confirm,
            force=options.force,
            logger=self._logger,
        )
