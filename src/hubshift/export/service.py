"""Reading and writing export directories.

The JSON files in an output directory are the only record of what was
exported before; ``load_exported_index`` rebuilds the filename -> entity
index from them at the start of every export.
"""

from __future__ import annotations

import json
from collections.abc import Callable, Sequence
from enum import Enum
from pathlib import Path
from typing import Any, TypeVar

import structlog
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape
from rich.prompt import Confirm
from rich.table import Table

from hubshift.api.models import RemoteEntity
from hubshift.export.diff import ExportRecord, ExportStatus, display_name, get_exports
from hubshift.utils.debug import debug

E = TypeVar("E", bound=RemoteEntity)

ConfirmOverwrite = Callable[[list[tuple[str, str]]], bool]


class ExportOutcome(str, Enum):
    EXPORTED = "exported"
    NOTHING_TO_EXPORT = "nothing_to_export"
    DECLINED = "declined"


def load_exported_index(directory: str | Path, model: type[E]) -> dict[str, E]:
    """Parse every ``*.json`` file in ``directory`` into ``model``.

    Unreadable or invalid files are skipped. A missing directory yields an
    empty index.

    Returns:
        Mapping of filename to the previously exported entity
    """
    root = Path(directory)
    index: dict[str, E] = {}
    if not root.is_dir():
        return index

    for path in sorted(root.glob("*.json")):
        try:
            raw = json.loads(path.read_text(encoding="utf-8"))
            index[str(path)] = model.model_validate(raw)
        except (OSError, json.JSONDecodeError, ValidationError) as exc:
            debug(f"Skipping unreadable export file {path}: {exc}")
    return index


def existing_export_filenames(directory: str | Path) -> set[str]:
    """Every ``*.json`` filename in ``directory``, parseable or not."""
    root = Path(directory)
    if not root.is_dir():
        return set()
    return {str(path) for path in root.glob("*.json")}


def ensure_directory_exists(directory: str | Path) -> Path:
    path = Path(directory)
    path.mkdir(parents=True, exist_ok=True)
    return path


def write_json_to_file(filename: str | Path, data: Any) -> None:
    Path(filename).write_text(
        json.dumps(data, indent=2, ensure_ascii=False) + "\n", encoding="utf-8"
    )


def nothing_exported_exit(
    ui: Console, message: str = "Nothing was exported, exiting."
) -> ExportOutcome:
    ui.print(message)
    return ExportOutcome.NOTHING_TO_EXPORT


def prompt_to_overwrite_exports(
    updated: list[tuple[str, str]], ui: Console | None = None
) -> bool:
    """List the files about to be overwritten and ask the user to continue."""
    console = ui or Console()
    console.print("[bold]The following files will be overwritten:[/bold]")
    table = Table("ID", "File")
    for entity_id, filename in updated:
        table.add_row(escape(entity_id), escape(filename))
    console.print(table)
    return Confirm.ask("Do you want to continue?", console=console, default=False)


def export_entities(
    output_dir: str | Path,
    previously_exported: dict[str, E],
    entities: Sequence[E],
    *,
    ui: Console | None = None,
    confirm: ConfirmOverwrite | None = None,
    force: bool = False,
    logger: Any = None,
) -> ExportOutcome:
    """Classify, confirm and write a batch of entities.

    Nothing is written and the output directory is not created when the
    batch is empty or the user declines to overwrite UPDATED files. Files
    already in ``output_dir`` that are missing from ``previously_exported``
    (unparseable ones) are never chosen as a CREATED filename.

    Args:
        output_dir: Directory for the export files
        previously_exported: Index from ``load_exported_index``; newly
            allocated filenames are added to it
        entities: Entities to export, in order
        ui: Rich console for prompts and the summary table
        confirm: Overwrite confirmation callback, defaults to an interactive prompt
        force: Overwrite without asking
        logger: Optional structlog logger instance

    Returns:
        ExportOutcome describing what happened
    """
    console = ui or Console()
    bound_logger = (logger or structlog.get_logger(__name__)).bind(
        output_dir=str(output_dir)
    )

    records, updated = get_exports(
        output_dir,
        previously_exported,
        entities,
        reserved=existing_export_filenames(output_dir),
    )
    if not records:
        return nothing_exported_exit(console)

    if updated and not force:
        ask = confirm or (lambda pairs: prompt_to_overwrite_exports(pairs, console))
        if not ask(updated):
            bound_logger.info("export.declined", updated_count=len(updated))
            nothing_exported_exit(console)
            return ExportOutcome.DECLINED

    ensure_directory_exists(output_dir)
    write_export_records(records, console)

    bound_logger.info(
        "export.summary",
        total=len(records),
        created=sum(1 for r in records if r.status == ExportStatus.CREATED),
        updated=len(updated),
    )
    return ExportOutcome.EXPORTED


def write_export_records(records: Sequence[ExportRecord[Any]], ui: Console) -> None:
    """Write every non-up-to-date record and print one summary row per record."""
    table = Table("File", "Name", "Result")
    for record in records:
        if record.status != ExportStatus.UP_TO_DATE:
            write_json_to_file(record.filename, record.entity.to_export_dict())
        table.add_row(
            escape(record.filename),
            escape(display_name(record.entity)),
            record.status.value,
        )
    ui.print(table)
