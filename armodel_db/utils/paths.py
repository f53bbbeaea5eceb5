"""
Key-building utilities for object-store paths.

These helpers produce normalized keys so that uploaded assets and link-code
images land under a predictable namespace, independent of backend storage
(local filesystem or remote bucket).

All keys are POSIX-style ("a/b/c") with no leading slashes.
"""

from __future__ import annotations

import posixpath
import time
from pathlib import Path
from typing import Optional


UPLOADS_PREFIX = "uploads"
LINK_CODES_PREFIX = "qr-codes"

DEFAULT_CONTENT_TYPE = "application/octet-stream"

CONTENT_TYPES = {
    ".glb": "model/gltf-binary",
    ".gltf": "model/gltf+json",
    ".png": "image/png",
}


# ----------------------------------------------------------------------
# Uploaded assets
# ----------------------------------------------------------------------

def safe_filename(filename: str) -> str:
    """
    Reduce a client-supplied filename to its final path component.

    Example:
        "../../etc/cube.glb" -> "cube.glb"
        "C:\\models\\cube.glb" -> "cube.glb"
    """
    name = (filename or "").replace("\\", "/")
    name = posixpath.basename(name).strip()
    return name or "upload.bin"


def build_upload_key(filename: str, stamp_ms: Optional[int] = None) -> str:
    """
    Collision-resistant key for an uploaded asset.

    Example:
        filename = "cube.glb", stamp_ms = 1700000000000
        -> "uploads/1700000000000-cube.glb"
    """
    if stamp_ms is None:
        stamp_ms = int(time.time() * 1000)
    return f"{UPLOADS_PREFIX}/{stamp_ms}-{safe_filename(filename)}"


# ----------------------------------------------------------------------
# Link codes
# ----------------------------------------------------------------------

def build_link_code_key(record_id: str) -> str:
    """
    Key for the link-code image of one record.

    Example:
        record_id = "model_3"
        -> "qr-codes/qr-model_3.png"
    """
    record_id = record_id.strip("/")
    return f"{LINK_CODES_PREFIX}/qr-{record_id}.png"


# ----------------------------------------------------------------------
# Content types
# ----------------------------------------------------------------------

def content_type_for(path: str) -> str:
    """
    Map a file name or key onto the MIME type used when serving it.

    Unknown extensions fall back to application/octet-stream.
    """
    return CONTENT_TYPES.get(Path(path).suffix.lower(), DEFAULT_CONTENT_TYPE)


__all__ = [
    "UPLOADS_PREFIX",
    "LINK_CODES_PREFIX",
    "safe_filename",
    "build_upload_key",
    "build_link_code_key",
    "content_type_for",
]
