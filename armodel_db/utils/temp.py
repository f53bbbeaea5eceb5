"""
Temporary file utilities.

Centralized helpers for staging uploaded files before placement and
cleaning them up afterwards. Cleanup is best-effort and error-tolerant.
"""

from __future__ import annotations

import logging
import os
import shutil
import tempfile
from pathlib import Path
from typing import BinaryIO, Optional

logger = logging.getLogger(__name__)


def stage_upload(stream: BinaryIO, filename: str, prefix: str = "armodel_upload_") -> Path:
    """
    Copy an incoming upload stream into a fresh temporary file.

    The original extension is kept so downstream content-type inference
    still works on the staged copy.

    Returns
    -------
    Path
        Path of the staged file. Remove it with remove_temp_file().
        Nothing is left behind when copying the stream fails.
    """
    suffix = Path(filename or "").suffix
    fd, raw_path = tempfile.mkstemp(prefix=prefix, suffix=suffix)
    try:
        with os.fdopen(fd, "wb") as out:
            shutil.copyfileobj(stream, out)
    except BaseException:
        remove_temp_file(Path(raw_path))
        raise
    return Path(raw_path)


def remove_temp_file(path: Optional[Path]) -> None:
    """
    Remove a single staged file if it still exists.

    Errors are logged and suppressed; a leftover temp file never fails a
    request.
    """
    if not path:
        return

    try:
        Path(path).unlink(missing_ok=True)
    except OSError as exc:
        logger.warning("Could not remove temporary file %s: %s", path, exc)


__all__ = [
    "stage_upload",
    "remove_temp_file",
]
