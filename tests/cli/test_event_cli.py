"""CLI tests for ``event export``."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from typer.testing import CliRunner

from hubshift.api.models import Edition, Event
from hubshift.cli.main import app

runner = CliRunner()

CREDENTIALS = ["--client-id", "cid", "--client-secret", "secret", "--hub-id", "hub-1"]


@pytest.fixture
def hub(monkeypatch: pytest.MonkeyPatch, client_factory):
    client = client_factory()
    client.events.events = [
        Event(id="e1", name="Spring", start="2024-03-01T00:00:00Z", end="2024-03-31T00:00:00Z")
    ]
    client.events.editions = {"e1": [Edition(id="ed1", name="First")]}
    monkeypatch.setattr("hubshift.cli.event.create_client", lambda config: client)
    return client


def test_export_writes_files_and_log(tmp_path: Path, hub) -> None:
    out = tmp_path / "events"
    log_path = tmp_path / "export.log"

    result = runner.invoke(
        app, ["event", "export", str(out), "--log-file", str(log_path), *CREDENTIALS]
    )

    assert result.exit_code == 0, result.output
    exported = json.loads((out / "Spring.json").read_text(encoding="utf-8"))
    assert exported["editions"][0]["name"] == "First"
    assert "id" not in exported
    assert log_path.read_text(encoding="utf-8").startswith("// Event Export Log\n")
    assert hub.closed


def test_reexport_with_force_overwrites(tmp_path: Path, hub) -> None:
    out = tmp_path / "events"
    out.mkdir()
    (out / "Spring.json").write_text(json.dumps({"id": "e1", "name": "Old"}), encoding="utf-8")

    result = runner.invoke(app, ["event", "export", str(out), "--force", *CREDENTIALS])

    assert result.exit_code == 0, result.output
    assert json.loads((out / "Spring.json").read_text(encoding="utf-8"))["name"] == "Spring"


def test_reexport_declined_at_prompt(tmp_path: Path, hub) -> None:
    out = tmp_path / "events"
    out.mkdir()
    (out / "Spring.json").write_text(json.dumps({"id": "e1", "name": "Old"}), encoding="utf-8")

    result = runner.invoke(app, ["event", "export", str(out), *CREDENTIALS], input="n\n")

    assert result.exit_code == 0, result.output
    assert "will be overwritten" in result.output
    assert json.loads((out / "Spring.json").read_text(encoding="utf-8"))["name"] == "Old"


def test_date_window_excludes_past_events(tmp_path: Path, hub) -> None:
    out = tmp_path / "events"

    result = runner.invoke(
        app, ["event", "export", str(out), "--from-date", "NOW", *CREDENTIALS]
    )

    assert result.exit_code == 0, result.output
    assert "No events to export from this hub, exiting." in result.output
    assert not out.exists()


def test_invalid_relative_date_is_rejected(tmp_path: Path, hub) -> None:
    result = runner.invoke(
        app, ["event", "export", str(tmp_path), "--to-date", "tomorrow", *CREDENTIALS]
    )

    assert result.exit_code == 2


def test_unavailable_hub_exits_with_error(tmp_path: Path, hub) -> None:
    hub.hubs.fail = True

    result = runner.invoke(app, ["event", "export", str(tmp_path / "events"), *CREDENTIALS])

    assert result.exit_code == 1
    assert "Couldn't get hub with id hub-1, aborting." in result.output
