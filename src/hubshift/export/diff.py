"""Reconcile freshly fetched entities against previously exported files.

Each fetched entity is matched by remote ID against the index of files
already in the output directory:

- no match: CREATED, with a new filename derived from the entity's name
  and made unique against indexed files, reserved filenames (files on
  disk that could not be indexed) and names allocated earlier in the
  same batch
- match: UPDATED, reusing the existing filename

Matched entities are never compared for structural equality, so an
UPDATED record is always rewritten. UP-TO-DATE exists for the summary
table but is not produced here.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, MutableMapping, Sequence
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Generic, TypeVar

from hubshift.api.models import RemoteEntity

E = TypeVar("E", bound=RemoteEntity)

_ILLEGAL_FILENAME_CHARS = re.compile(r'[<>:"/\\|?*\x00-\x1f]')


class ExportStatus(str, Enum):
    CREATED = "CREATED"
    UPDATED = "UPDATED"
    UP_TO_DATE = "UP-TO-DATE"


@dataclass(frozen=True)
class ExportRecord(Generic[E]):
    """Decision for one entity in one export run.

    Attributes:
        filename: Path of the file the entity is written to
        status: Classification against the previous export
        entity: The fetched entity
    """

    filename: str
    status: ExportStatus
    entity: E


def display_name(entity: RemoteEntity) -> str:
    for attr in ("name", "label"):
        value = getattr(entity, attr, None)
        if isinstance(value, str) and value.strip():
            return value
    return ""


def sanitize_filename(name: str) -> str:
    """Replace characters that are not allowed in filenames."""
    cleaned = _ILLEGAL_FILENAME_CHARS.sub("_", name).strip().rstrip(".")
    return cleaned or "unnamed"


def unique_filename(
    output_dir: str | Path, name: str, extension: str, used: Iterable[str]
) -> str:
    """Allocate ``<dir>/<name>.<ext>``, appending -1, -2, ... until unused.

    Args:
        output_dir: Directory the file will live in
        name: Display name of the entity
        extension: File extension without the dot
        used: Filenames that are already taken

    Returns:
        Filename not present in ``used``
    """
    taken = set(used)
    base = str(Path(output_dir) / sanitize_filename(name))
    candidate = f"{base}.{extension}"
    suffix = 0
    while candidate in taken:
        suffix += 1
        candidate = f"{base}-{suffix}.{extension}"
    return candidate


def get_export_record(
    entity: E,
    output_dir: str | Path,
    previously_exported: MutableMapping[str, E],
    reserved: Iterable[str] = (),
) -> ExportRecord[E]:
    """Classify one entity and pick its filename.

    A newly allocated filename is inserted into ``previously_exported`` so a
    later entity in the same batch cannot reuse it. Names in ``reserved``
    are never allocated.
    """
    if entity.id:
        for filename, exported in previously_exported.items():
            if exported.id == entity.id:
                return ExportRecord(filename, ExportStatus.UPDATED, entity)

    filename = unique_filename(
        output_dir,
        display_name(entity),
        "json",
        [*previously_exported.keys(), *reserved],
    )
    previously_exported[filename] = entity
    return ExportRecord(filename, ExportStatus.CREATED, entity)


def get_exports(
    output_dir: str | Path,
    previously_exported: MutableMapping[str, E],
    entities: Sequence[E],
    reserved: Iterable[str] = (),
) -> tuple[list[ExportRecord[E]], list[tuple[str, str]]]:
    """Build export records for a batch, in input order.

    Entities without a remote ID cannot match a previous export and are
    always CREATED.

    Args:
        output_dir: Directory the files live in
        previously_exported: Filename -> entity index, extended in place
        entities: Fetched entities, in order
        reserved: Existing filenames that must not be allocated even though
            they are not in the index

    Returns:
        All records, and ``(entity id, filename)`` pairs for the UPDATED ones
    """
    records: list[ExportRecord[E]] = []
    updated: list[tuple[str, str]] = []
    reserved_names = frozenset(reserved)
    for entity in entities:
        record = get_export_record(
            entity, output_dir, previously_exported, reserved_names
        )
        records.append(record)
        if record.status == ExportStatus.UPDATED:
            updated.append((entity.id or "", record.filename))
    return records, updated
