"""Tests for reverting the destination side of a copy."""

from pathlib import Path

import pytest
from rich.console import Console

from hubshift.api.models import Status
from hubshift.content.import_revert import ImportRevert
from hubshift.core.config import ConfigurationParameters

DESTINATION = ConfigurationParameters(client_id="c", client_secret="s", hub_id="dst-hub")


@pytest.mark.asyncio
async def test_archives_created_items(
    tmp_path: Path, client_factory, item_factory, console: Console
) -> None:
    destination = client_factory(
        [
            item_factory("dst-1", repo="dst-repo"),
            item_factory("dst-2", repo="dst-repo", status=Status.ARCHIVED),
        ]
    )
    requested: list[ConfigurationParameters] = []

    def factory(config: ConfigurationParameters):
        requested.append(config)
        return destination

    log_path = tmp_path / "move.log"
    log_path.write_text("CREATE dst-1\nCREATE dst-2\nCREATE dst-gone\nMOVED src-1\n")

    result = await ImportRevert(client_factory=factory, ui=console).revert(
        DESTINATION, log_path
    )

    assert result is True
    assert requested == [DESTINATION]
    assert destination.content_items.archive_calls == ["dst-1"]
    assert "Could not find created item with id dst-gone" in console.export_text()
    assert destination.closed


@pytest.mark.asyncio
async def test_unreadable_log_returns_false(tmp_path: Path, console: Console) -> None:
    def factory(config: ConfigurationParameters):
        raise AssertionError("no client should be created")

    result = await ImportRevert(client_factory=factory, ui=console).revert(
        DESTINATION, tmp_path / "missing.log"
    )

    assert result is False
