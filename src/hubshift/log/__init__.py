"""Action logs for auditing and reverting content operations."""

from hubshift.log.file_log import ActionKind, FileLog, LogEntry
from hubshift.log.paths import default_log_path

__all__ = ["ActionKind", "FileLog", "LogEntry", "default_log_path"]
