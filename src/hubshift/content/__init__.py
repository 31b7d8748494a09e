"""Content item copy, move and revert.

This package provides the move protocol (copy, then archive the source) and
its inverse, driven by the action log the move writes.
"""

from hubshift.content.copy import ContentCopier, CopyOptions, CopyResult
from hubshift.content.import_revert import ImportRevert
from hubshift.content.move import MoveOrchestrator, MoveReport, MoveState
from hubshift.content.revert import RevertEngine, RevertReport

__all__ = [
    "ContentCopier",
    "CopyOptions",
    "CopyResult",
    "ImportRevert",
    "MoveOrchestrator",
    "MoveReport",
    "MoveState",
    "RevertEngine",
    "RevertReport",
]
