"""Debug utility for hubshift.

Provides a single debug() function that can be toggled via the
HUBSHIFT_DEBUG environment variable.

Usage:
    from hubshift.utils.debug import debug

    debug("Loaded 12 exported events")

Environment:
    HUBSHIFT_DEBUG: Set to '1', 'true', 'yes' (case-insensitive) to enable
                    debug output. Any other value or unset disables it.
"""

import os
import sys
from typing import Any

_DEBUG_ENABLED = os.environ.get("HUBSHIFT_DEBUG", "").lower() in (
    "1",
    "true",
    "yes",
)


def debug(msg: Any) -> None:
    """Print debug message to stderr if HUBSHIFT_DEBUG is enabled.

    Args:
        msg: Message to print. Will be converted to string.

    Note:
        The environment variable is read once at import time.
    """
    if _DEBUG_ENABLED:
        print(f"[DEBUG] {msg}", file=sys.stderr)
