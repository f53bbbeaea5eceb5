"""
Read and write the model registry document.

The registry is one JSON file holding {"models": [...]}. Both helpers fail
soft, so a damaged or unwritable registry degrades to "no records" or
"not persisted" instead of failing the request that touched it:

- json_read returns None for a missing, unreadable or non-JSON file
- json_write returns False when the document could not be written

The shape of the parsed document is left to the registry to check.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Optional

logger = logging.getLogger(__name__)


def json_read(path: Path) -> Optional[Any]:
    """
    Parse the registry document at `path`.

    A file that does not exist yet is the normal state of a fresh install
    and returns None silently. A file that exists but cannot be opened or
    decoded also returns None, with a warning naming the file.
    """
    try:
        if not path.exists():
            return None
        with open(path, "r", encoding="utf-8") as f:
            return json.load(f)
    except (OSError, ValueError) as exc:
        logger.warning("Registry document %s is unreadable: %s", path, exc)
        return None


def json_write(path: Path, data: Any) -> bool:
    """
    Overwrite the registry document at `path` with `data`.

    The parent directory is created on first write. Output is UTF-8 with
    2-space indentation, and non-ASCII model names are written as-is.
    Returns True on success; on failure logs an error and returns False.
    """
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2, ensure_ascii=False)
    except (OSError, TypeError, ValueError) as exc:
        logger.error("Could not write registry document %s: %s", path, exc)
        return False
    return True


__all__ = [
    "json_read",
    "json_write",
]
