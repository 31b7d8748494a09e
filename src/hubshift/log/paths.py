"""Helpers for resolving default action log paths."""

from __future__ import annotations

import os
from datetime import datetime
from pathlib import Path

__all__ = ["default_log_path", "resolve_log_dir"]


def resolve_log_dir() -> Path:
    """Directory for command logs (``HUBSHIFT_LOG_DIR`` or ~/.amplience/logs)."""

    env_dir = os.getenv("HUBSHIFT_LOG_DIR")
    if env_dir:
        return Path(env_dir).expanduser()
    return Path.home() / ".amplience" / "logs"


def default_log_path(
    entity_type: str, action: str, now: datetime | None = None
) -> Path:
    """Timestamped log path for one command run.

    Args:
        entity_type: Entity the command acts on (e.g. 'item', 'event')
        action: Command name (e.g. 'move', 'export')
        now: Timestamp to embed, defaults to the current local time

    Returns:
        Path like ``~/.amplience/logs/item-move-20261018091244.log``
    """

    stamp = (now or datetime.now()).strftime("%Y%m%d%H%M%S")
    return resolve_log_dir() / f"{entity_type}-{action}-{stamp}.log"
