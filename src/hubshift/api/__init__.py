"""Content management API client and resource models."""

from hubshift.api.client import ContentClient
from hubshift.api.models import (
    ContentItem,
    Edition,
    EditionSlot,
    Event,
    Hub,
    RemoteEntity,
    Status,
)
from hubshift.api.paginator import Page, paginate

__all__ = [
    "ContentClient",
    "ContentItem",
    "Edition",
    "EditionSlot",
    "Event",
    "Hub",
    "Page",
    "RemoteEntity",
    "Status",
    "paginate",
]
