"""CLI entrypoints for hubshift."""

from hubshift.cli.content_item import app as content_item_app
from hubshift.cli.event import app as event_app
from hubshift.cli.main import app

__all__ = ["app", "content_item_app", "event_app"]
