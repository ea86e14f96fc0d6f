"""Shared helpers used by the engine client and the presentation contract.

This module provides:
- file URI construction for the engine
- elapsed/duration label formatting
"""

# ============================================================================
# Standard Library Imports (alphabetical)
# ============================================================================
import os
from pathlib import Path

# ============================================================================
# Third-Party Imports (alphabetical, with version requirements)
# ============================================================================
# None

# ============================================================================
# Local Imports (grouped by package, alphabetical)
# ============================================================================
# None


def file_uri(file_path: str) -> str:
    """Build a file:// URI for a local path, resolving relative paths.

    Args:
        file_path: Absolute or relative filesystem path.

    Returns:
        Percent-encoded file URI.
    """
    return Path(os.path.abspath(file_path)).as_uri()


def format_time(seconds: int) -> str:
    """Format a time in whole seconds as m:ss (minutes are not wrapped into hours).

    Args:
        seconds: Non-negative number of seconds; negatives are treated as 0.

    Returns:
        Label such as "0:07", "3:05" or "75:00".
    """
    seconds = max(0, int(seconds))
    minutes, secs = divmod(seconds, 60)
    return "%d:%02d" % (minutes, secs)
