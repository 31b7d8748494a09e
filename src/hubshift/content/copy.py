"""Copy content items from a source repository to a destination repository.

The copier is the collaborator the move command delegates to. It reports
overall success and the source IDs it copied; every destination item it
creates is recorded as a ``CREATE`` action so the import can be reverted.
"""

from __future__ import annotations

import copy as _copy
from dataclasses import dataclass, field
from typing import Any, Protocol

import structlog

from hubshift.api.client import ContentClient
from hubshift.api.models import ContentItem
from hubshift.core.errors import ApiError
from hubshift.log.file_log import ActionKind, FileLog


@dataclass
class CopyOptions:
    """Options for copying content between repositories.

    Attributes:
        src_repo: Source content repository ID
        dst_repo: Destination content repository ID
        src_folder: Restrict the copy to one folder of the source repository
        dst_folder: Folder to create copied items in
        validate: List and check items only, create nothing
        skip_incomplete: Skip items that fail to copy instead of failing
        exclude_keys: Drop delivery keys from copied item bodies
    """

    src_repo: str
    dst_repo: str
    src_folder: str | None = None
    dst_folder: str | None = None
    validate: bool = False
    skip_incomplete: bool = False
    exclude_keys: bool = False


@dataclass
class CopyResult:
    """Outcome of a copy.

    Attributes:
        success: False when the copy as a whole failed
        exported_ids: Source item IDs that were copied, in copy order
    """

    success: bool
    exported_ids: list[str] = field(default_factory=list)


class Copier(Protocol):
    async def copy(self, options: CopyOptions, log: FileLog) -> CopyResult: ...


def strip_delivery_key(body: dict[str, Any]) -> dict[str, Any]:
    """Return a copy of ``body`` without ``_meta.deliveryKey``."""
    stripped = _copy.deepcopy(body)
    meta = stripped.get("_meta")
    if isinstance(meta, dict):
        meta.pop("deliveryKey", None)
    return stripped


class ContentCopier:
    """Creates source items in the destination repository one at a time."""

    def __init__(
        self,
        source: ContentClient,
        destination: ContentClient,
        logger: Any = None,
    ) -> None:
        self._source = source
        self._destination = destination
        self._logger = logger or structlog.get_logger(__name__)

    async def copy(self, options: CopyOptions, log: FileLog) -> CopyResult:
        """Copy every active item matching ``options``.

        Args:
            options: Source, destination and behaviour flags
            log: Action log shared with the calling command

        Returns:
            CopyResult; ``exported_ids`` lists source IDs that now exist at
            the destination
        """
        bound_logger = self._logger.bind(
            src_repo=options.src_repo,
            dst_repo=options.dst_repo,
            src_folder=options.src_folder,
        )

        try:
            items = await self._source.content_items.list(
                options.src_repo, folder_id=options.src_folder
            )
        except ApiError as exc:
            log.error("Failed to list source content items, aborting.", exc)
            bound_logger.error("copy.list_failed", **exc.to_dict())
            return CopyResult(success=False)

        log.append_line(f"Copying {len(items)} content items.")

        if options.validate:
            log.append_line("Validation only, no content items were created.")
            return CopyResult(success=True)

        exported_ids: list[str] = []
        success = True
        for item in items:
            if not item.id:
                continue

            body = strip_delivery_key(item.body) if options.exclude_keys else item.body
            candidate = ContentItem(label=item.label, body=body, locale=item.locale)
            try:
                created = await self._destination.content_items.create(
                    options.dst_repo, candidate, folder_id=options.dst_folder
                )
            except ApiError as exc:
                log.error(f"Failed to copy content item {item.label} ({item.id}).", exc)
                bound_logger.warning("copy.item_failed", item_id=item.id, **exc.to_dict())
                if options.skip_incomplete:
                    continue
                success = False
                break

            log.add_action(ActionKind.CREATE, created.id or "")
            exported_ids.append(item.id)

        bound_logger.info(
            "copy.summary",
            total_items=len(items),
            copied_count=len(exported_ids),
            success=success,
        )
        return CopyResult(success=success, exported_ids=exported_ids)
