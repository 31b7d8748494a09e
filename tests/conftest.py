"""Pytest configuration and fixtures for hubshift tests."""

from __future__ import annotations

import io
from collections.abc import Callable
from typing import Any

import pytest
from rich.console import Console

from hubshift.api.models import ContentItem, Edition, EditionSlot, Event, Hub, Status
from hubshift.core.errors import ApiError, NotFoundError


class FakeContentItems:
    """In-memory stand-in for ``ContentClient.content_items``."""

    def __init__(self, items: dict[str, ContentItem]) -> None:
        self.items = items
        self.archive_calls: list[str] = []
        self.unarchive_calls: list[str] = []
        self.created: list[ContentItem] = []
        self.fail_get: set[str] = set()
        self.fail_archive: set[str] = set()
        self.fail_unarchive: set[str] = set()
        self.fail_create_labels: set[str] = set()
        self.fail_list = False

    async def get(self, item_id: str) -> ContentItem:
        if item_id in self.fail_get:
            raise ApiError("content_items.get", status_code=500)
        if item_id not in self.items:
            raise NotFoundError("content_items.get", item_id)
        return self.items[item_id].model_copy(deep=True)

    async def find(self, item_id: str) -> ContentItem | None:
        try:
            return await self.get(item_id)
        except NotFoundError:
            return None

    async def list(
        self, repository_id: str, folder_id: str | None = None, status: str | None = "ACTIVE"
    ) -> list[ContentItem]:
        if self.fail_list:
            raise ApiError("content_items.list", status_code=503)
        return [
            item.model_copy(deep=True)
            for item in self.items.values()
            if item.content_repository_id == repository_id
            and (folder_id is None or item.folder_id == folder_id)
            and (status is None or item.status == Status(status))
        ]

    async def create(
        self, repository_id: str, item: ContentItem, folder_id: str | None = None
    ) -> ContentItem:
        if item.label in self.fail_create_labels:
            raise ApiError("content_items.create", status_code=400, detail="invalid body")
        created = item.model_copy(
            update={
                "id": f"dst-{len(self.created) + 1}",
                "status": Status.ACTIVE,
                "version": 1,
                "content_repository_id": repository_id,
                "folder_id": folder_id,
            }
        )
        self.created.append(created)
        self.items[created.id or ""] = created
        return created

    async def archive(self, item: ContentItem) -> ContentItem:
        return self._set_status(item, Status.ARCHIVED, self.archive_calls, self.fail_archive)

    async def unarchive(self, item: ContentItem) -> ContentItem:
        return self._set_status(item, Status.ACTIVE, self.unarchive_calls, self.fail_unarchive)

    def _set_status(
        self, item: ContentItem, status: Status, calls: list[str], failures: set[str]
    ) -> ContentItem:
        item_id = item.id or ""
        calls.append(item_id)
        if item_id in failures:
            raise ApiError("content_items.status", status_code=409, detail="version conflict")
        updated = self.items[item_id].model_copy(update={"status": status})
        self.items[item_id] = updated
        return updated


class FakeEvents:
    def __init__(self) -> None:
        self.events: list[Event] = []
        self.editions: dict[str, list[Edition]] = {}
        self.fail_list = False
        self.fail_editions_for: set[str] = set()

    async def get(self, event_id: str) -> Event:
        for event in self.events:
            if event.id == event_id:
                return event.model_copy(deep=True)
        raise NotFoundError("events.get", event_id)

    async def list(self, hub_id: str) -> list[Event]:
        if self.fail_list:
            raise ApiError("events.list", status_code=500)
        return [event.model_copy(deep=True) for event in self.events]

    async def list_editions(self, event_id: str) -> list[Edition]:
        if event_id in self.fail_editions_for:
            raise ApiError("events.list_editions", status_code=500)
        return [edition.model_copy(deep=True) for edition in self.editions.get(event_id, [])]


class FakeEditions:
    def __init__(self) -> None:
        self.slots: dict[str, list[EditionSlot]] = {}
        self.fail_slots_for: set[str] = set()

    async def list_slots(self, edition_id: str) -> list[EditionSlot]:
        if edition_id in self.fail_slots_for:
            raise ApiError("editions.list_slots", status_code=500)
        return [slot.model_copy(deep=True) for slot in self.slots.get(edition_id, [])]


class FakeHubs:
    def __init__(self) -> None:
        self.fail = False

    async def get(self, hub_id: str) -> Hub:
        if self.fail:
            raise NotFoundError("hubs.get", hub_id)
        return Hub(id=hub_id, name="hub")


class FakeContentClient:
    """Stand-in for ContentClient exposing the same resource attributes."""

    def __init__(self, items: dict[str, ContentItem] | None = None) -> None:
        self.content_items = FakeContentItems(items if items is not None else {})
        self.events = FakeEvents()
        self.editions = FakeEditions()
        self.hubs = FakeHubs()
        self.closed = False

    async def aclose(self) -> None:
        self.closed = True


def make_item(
    item_id: str,
    *,
    status: Status = Status.ACTIVE,
    repo: str = "src-repo",
    label: str | None = None,
    folder_id: str | None = None,
) -> ContentItem:
    return ContentItem(
        id=item_id,
        label=label or f"Item {item_id}",
        status=status,
        version=1,
        body={"_meta": {"schema": "https://example.com/banner.json"}, "title": item_id},
        content_repository_id=repo,
        folder_id=folder_id,
    )


@pytest.fixture
def item_factory() -> Callable[..., ContentItem]:
    """Factory for content items with sensible defaults."""
    return make_item


@pytest.fixture
def client_factory() -> Callable[..., FakeContentClient]:
    """Factory for in-memory content clients."""

    def _make(items: list[ContentItem] | None = None) -> FakeContentClient:
        return FakeContentClient({item.id or "": item for item in items or []})

    return _make


@pytest.fixture
def console() -> Console:
    """Rich console writing to an in-memory buffer; read with ``export_text``."""
    return Console(file=io.StringIO(), width=200, record=True)


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Any) -> None:
    """Keep tests away from real credentials, config files and log dirs."""
    for var in (
        "HUBSHIFT_CLIENT_ID",
        "HUBSHIFT_CLIENT_SECRET",
        "HUBSHIFT_HUB_ID",
    ):
        monkeypatch.delenv(var, raising=False)
    monkeypatch.setenv("HUBSHIFT_CONFIG_PATH", str(tmp_path / "config" / "config.json"))
    monkeypatch.setenv("HUBSHIFT_LOG_DIR", str(tmp_path / "logs"))
