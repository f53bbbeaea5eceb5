"""
Base object store interface for armodel_db.

Object stores persist the binary artifacts of the upload pipeline:
    - uploaded 3D assets (.glb / .gltf)
    - generated link-code PNGs

Concrete implementations:
    - LocalFSObjectStore (web-servable local directory)
    - HTTPBucketObjectStore (external object-storage bucket)

The strategy is chosen once at configuration time; callers only see this
interface.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO, Optional, Protocol


# ----------------------------------------------------------------------
# Configuration
# ----------------------------------------------------------------------

@dataclass
class ObjectStoreConfig:
    """
    Configuration for an object store backend.

    Parameters
    ----------
    base_path : str
        Root directory (local) or bucket endpoint (remote).
    bucket : Optional[str]
        Bucket name for remote stores (unused in local FS).
    public_url : Optional[str]
        Public origin objects are served from. Local stores serve keys
        relative to the web root when this is unset.
    token : Optional[str]
        Bearer token for remote writes.
    timeout : float
        Seconds to wait on one remote request.
    """
    base_path: str
    bucket: Optional[str] = None
    public_url: Optional[str] = None
    token: Optional[str] = None
    timeout: float = 60.0


# ----------------------------------------------------------------------
# Protocol (interface)
# ----------------------------------------------------------------------

class ObjectStore(Protocol):
    """
    Abstract interface used by armodel_db for storing binaries.

    Logical keys such as:
        "uploads/1700000000000-cube.glb"
        "qr-codes/qr-model_1.png"
    map to real storage paths or bucket object names.
    """

    config: ObjectStoreConfig

    def save_bytes(self, key: str, data: bytes, content_type: str) -> None:
        """Persist a binary blob to the object store."""
        raise NotImplementedError

    def save_file(self, key: str, source: Path, content_type: str) -> None:
        """Copy a local file into the object store. The source is left in place."""
        raise NotImplementedError

    def open(self, key: str) -> BinaryIO:
        """Open an object as a readable binary stream."""
        raise NotImplementedError

    def public_url(self, key: str) -> str:
        """Return the URL clients use to retrieve the object."""
        raise NotImplementedError
