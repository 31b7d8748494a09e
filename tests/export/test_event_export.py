"""Tests for event export with edition and slot enrichment."""

import json
from datetime import UTC, datetime
from pathlib import Path

import httpx
import pytest
from rich.console import Console

from hubshift.api.client import AUTH_URL, ContentClient
from hubshift.api.models import Edition, EditionSlot, Event
from hubshift.export.events import (
    EventExporter,
    EventExportOptions,
    enrich_events,
    filter_events,
)
from hubshift.log.file_log import FileLog


def _event(
    event_id: str,
    name: str,
    start: str = "2024-05-01T00:00:00Z",
    end: str = "2024-05-10T00:00:00Z",
) -> Event:
    return Event(id=event_id, name=name, start=start, end=end)


@pytest.fixture
def hub_client(client_factory):
    client = client_factory()
    client.events.events = [_event("e1", "Spring"), _event("e2", "Summer")]
    client.events.editions = {
        "e1": [Edition(id="ed1", name="Spring edition")],
        "e2": [Edition(id="ed2", name="Summer edition")],
    }
    client.editions.slots = {
        "ed1": [EditionSlot(id="s1", slot_id="slot-1")],
        "ed2": [EditionSlot(id="s2", slot_id="slot-2")],
    }
    return client


class TestFilterEvents:
    def test_window_keeps_overlapping_events(self) -> None:
        events = [
            _event("old", "Old", "2023-01-01T00:00:00Z", "2023-01-02T00:00:00Z"),
            _event("now", "Now", "2024-05-01T00:00:00Z", "2024-05-10T00:00:00Z"),
            _event("later", "Later", "2025-01-01T00:00:00Z", "2025-01-02T00:00:00Z"),
        ]

        kept = filter_events(
            events,
            datetime(2024, 1, 1, tzinfo=UTC),
            datetime(2024, 12, 31, tzinfo=UTC),
        )

        assert [e.id for e in kept] == ["now"]

    def test_no_window_keeps_everything(self) -> None:
        events = [_event("a", "A"), Event(id="b", name="B")]

        assert filter_events(events, None, None) == events

    def test_unparseable_dates_are_kept(self) -> None:
        event = Event(id="x", name="X", start="soon", end="later")

        assert filter_events([event], datetime(2030, 1, 1, tzinfo=UTC), None) == [event]


class TestEnrichEvents:
    @pytest.mark.asyncio
    async def test_attaches_editions_and_slots(self, hub_client) -> None:
        enriched = await enrich_events(hub_client, hub_client.events.events)

        assert [e.id for e in enriched] == ["e1", "e2"]
        assert enriched[0].editions[0].slots[0].slot_id == "slot-1"

    @pytest.mark.asyncio
    async def test_event_with_failed_slots_is_dropped(self, hub_client, console: Console) -> None:
        """An event is exported whole or not at all."""
        hub_client.editions.fail_slots_for.add("ed1")
        log = FileLog(console=console)

        enriched = await enrich_events(hub_client, hub_client.events.events, log)

        assert [e.id for e in enriched] == ["e2"]
        assert "Failed to fetch editions for Spring, skipping." in log.to_text()

    @pytest.mark.asyncio
    async def test_event_with_failed_editions_is_dropped(self, hub_client) -> None:
        hub_client.events.fail_editions_for.add("e2")

        enriched = await enrich_events(hub_client, hub_client.events.events)

        assert [e.id for e in enriched] == ["e1"]

    @pytest.mark.asyncio
    async def test_non_json_editions_response_drops_only_that_event(self) -> None:
        def route(request: httpx.Request) -> httpx.Response:
            if str(request.url) == AUTH_URL:
                return httpx.Response(200, json={"access_token": "t"})
            if request.url.path.endswith("/events/bad/editions"):
                return httpx.Response(200, text="upstream hiccup")
            return httpx.Response(
                200, json={"_embedded": {}, "page": {"number": 0, "totalPages": 1}}
            )

        client = ContentClient(
            "id", "secret", http_client=httpx.AsyncClient(transport=httpx.MockTransport(route))
        )
        events = [_event("bad", "Broken"), _event("good", "Fine")]

        enriched = await enrich_events(client, events, FileLog(silent=True))
        await client.aclose()

        assert [e.id for e in enriched] == ["good"]
        assert enriched[0].editions == []


class TestEventExporter:
    @pytest.mark.asyncio
    async def test_exports_enriched_events(
        self, tmp_path: Path, hub_client, console: Console
    ) -> None:
        out = tmp_path / "events"
        exporter = EventExporter(hub_client, ui=console)

        ok = await exporter.export(EventExportOptions(dir=out, hub_id="hub-1"), FileLog())

        assert ok
        spring = json.loads((out / "Spring.json").read_text(encoding="utf-8"))
        assert "id" not in spring
        assert spring["editions"][0]["slots"][0]["slotId"] == "slot-1"
        assert (out / "Summer.json").exists()

    @pytest.mark.asyncio
    async def test_single_event(self, tmp_path: Path, hub_client, console: Console) -> None:
        out = tmp_path / "events"

        ok = await EventExporter(hub_client, ui=console).export(
            EventExportOptions(dir=out, hub_id="hub-1", event_id="e2"), FileLog()
        )

        assert ok
        assert [p.name for p in out.iterdir()] == ["Summer.json"]

    @pytest.mark.asyncio
    async def test_missing_single_event_aborts(
        self, tmp_path: Path, hub_client, console: Console
    ) -> None:
        ok = await EventExporter(hub_client, ui=console).export(
            EventExportOptions(dir=tmp_path / "events", hub_id="hub-1", event_id="nope"),
            FileLog(),
        )

        assert not ok
        assert not (tmp_path / "events").exists()

    @pytest.mark.asyncio
    async def test_unavailable_hub_aborts(
        self, tmp_path: Path, hub_client, console: Console
    ) -> None:
        hub_client.hubs.fail = True
        log = FileLog()

        ok = await EventExporter(hub_client, ui=console).export(
            EventExportOptions(dir=tmp_path / "events", hub_id="hub-1"), log
        )

        assert not ok
        assert "Couldn't get hub with id hub-1, aborting." in log.to_text()

    @pytest.mark.asyncio
    async def test_empty_hub_exports_nothing(
        self, tmp_path: Path, client_factory, console: Console
    ) -> None:
        out = tmp_path / "events"

        ok = await EventExporter(client_factory(), ui=console).export(
            EventExportOptions(dir=out, hub_id="hub-1"), FileLog()
        )

        assert ok
        assert not out.exists()
        assert "No events to export from this hub, exiting." in console.export_text()

    @pytest.mark.asyncio
    async def test_reexport_asks_before_overwriting(
        self, tmp_path: Path, hub_client, console: Console
    ) -> None:
        out = tmp_path / "events"
        out.mkdir()
        (out / "Spring.json").write_text(json.dumps({"id": "e1", "name": "Spring"}))
        asked: list[list[tuple[str, str]]] = []

        def decline(pairs: list[tuple[str, str]]) -> bool:
            asked.append(pairs)
            return False

        ok = await EventExporter(hub_client, ui=console, confirm=decline).export(
            EventExportOptions(dir=out, hub_id="hub-1"), FileLog()
        )

        assert ok
        assert asked == [[("e1", str(out / "Spring.json"))]]
        assert [p.name for p in out.iterdir()] == ["Spring.json"]
