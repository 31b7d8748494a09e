"""Export remote entities to a directory of JSON files."""

from hubshift.export.diff import (
    ExportRecord,
    ExportStatus,
    get_export_record,
    get_exports,
    unique_filename,
)
from hubshift.export.events import (
    EventExporter,
    EventExportOptions,
    enrich_events,
    filter_events,
)
from hubshift.export.service import (
    ExportOutcome,
    export_entities,
    load_exported_index,
)

__all__ = [
    "EventExportOptions",
    "EventExporter",
    "ExportOutcome",
    "ExportRecord",
    "ExportStatus",
    "enrich_events",
    "export_entities",
    "filter_events",
    "get_export_record",
    "get_exports",
    "load_exported_index",
    "unique_filename",
]
