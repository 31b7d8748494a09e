"""Shared utilities for hubshift."""

from hubshift.utils.debug import debug
from hubshift.utils.logging import configure_logging

__all__ = ["configure_logging", "debug"]
