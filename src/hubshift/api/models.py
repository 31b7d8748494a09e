"""Pydantic models for content management API resources.

Only the fields that drive move, revert and export logic are declared.
Every model allows extra fields so that a fetched entity can be written back
to disk without losing attributes this package does not know about.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class Status(str, Enum):
    """Visibility status of a content item.

    Attributes:
        ACTIVE: Visible and editable
        ARCHIVED: Soft-deleted, restorable with unarchive
        DELETED: Permanently removed
    """

    ACTIVE = "ACTIVE"
    ARCHIVED = "ARCHIVED"
    DELETED = "DELETED"


class RemoteEntity(BaseModel):
    """Common base for API resources.

    Attributes:
        id: Remote identifier; absent on entities loaded from export files
        links: HAL links, never serialized
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="allow",
    )

    id: str | None = None
    links: dict[str, Any] = Field(default_factory=dict, alias="_links", exclude=True)

    def to_export_dict(self) -> dict[str, Any]:
        """Serialize for an export file, without the remote ID.

        Only fields that were set are written, so an explicit null from the
        API survives while unset defaults are omitted.
        """
        data = self.model_dump(by_alias=True, exclude_unset=True, mode="json")
        data.pop("id", None)
        return data


class Hub(RemoteEntity):
    name: str | None = None
    label: str | None = None


class ContentItem(RemoteEntity):
    """A content item in a content repository."""

    label: str | None = None
    status: Status | None = None
    version: int | None = None
    body: dict[str, Any] = Field(default_factory=dict)
    folder_id: str | None = None
    locale: str | None = None
    content_repository_id: str | None = None


class EditionSlot(RemoteEntity):
    slot_id: str | None = None
    slot_label: str | None = None
    content: dict[str, Any] | None = None


class Edition(RemoteEntity):
    name: str | None = None
    start: str | None = None
    end: str | None = None
    publishing_status: str | None = None
    slots: list[EditionSlot] | None = None


class Event(RemoteEntity):
    """A scheduled event; ``editions`` is filled in by enrichment."""

    name: str | None = None
    start: str | None = None
    end: str | None = None
    editions: list[Edition] | None = None
