"""Tests for structlog configuration."""

import pytest
import structlog

from hubshift.utils.logging import configure_logging


@pytest.fixture(autouse=True)
def reset_structlog():
    yield
    structlog.reset_defaults()


def test_warnings_reach_stderr(capsys: pytest.CaptureFixture[str]) -> None:
    configure_logging()

    structlog.get_logger("test").warning("move.archive_failed", item_id="a")

    captured = capsys.readouterr()
    assert captured.out == ""
    assert "move.archive_failed" in captured.err
    assert "item_id=a" in captured.err


def test_info_hidden_unless_verbose(capsys: pytest.CaptureFixture[str]) -> None:
    configure_logging(verbose=False)
    structlog.get_logger("test").info("move.summary")
    assert "move.summary" not in capsys.readouterr().err

    configure_logging(verbose=True)
    structlog.get_logger("test").info("move.summary")
    assert "move.summary" in capsys.readouterr().err
