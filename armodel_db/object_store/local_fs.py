"""
Local filesystem object store backend.

Keys map to subdirectories under `config.base_path`, which is the web root
the API serves uploads and link codes from.

Example mapping:
    key = "uploads/1700000000000-cube.glb"
    real_path = "<base_path>/uploads/1700000000000-cube.glb"
    public_url = "/uploads/1700000000000-cube.glb"
"""

from __future__ import annotations

import logging
import os
import shutil
from pathlib import Path
from typing import BinaryIO

from .base import ObjectStore, ObjectStoreConfig

logger = logging.getLogger(__name__)


class LocalFSObjectStore(ObjectStore):
    """
    Local filesystem implementation of ObjectStore.

    The key namespace is entirely under config.base_path.
    """

    def __init__(self, config: ObjectStoreConfig):
        self.config = config
        os.makedirs(self.config.base_path, exist_ok=True)

    # ------------------------------------------------------------------
    # Key resolution
    # ------------------------------------------------------------------

    def _resolve(self, key: str) -> str:
        """
        Translate logical key into a physical filesystem path under base_path.

        Ensures:
          - no leading slash
          - no Windows backslashes
          - no path traversal
        """
        key = key.strip("/").replace("\\", "/")
        path = os.path.abspath(os.path.join(self.config.base_path, key))

        base = os.path.abspath(self.config.base_path)
        if not path.startswith(base + os.sep):
            raise ValueError(f"Suspicious key outside root: {key}")

        return path

    # ------------------------------------------------------------------
    # Core interface
    # ------------------------------------------------------------------

    def save_bytes(self, key: str, data: bytes, content_type: str = "") -> None:
        path = self._resolve(key)
        os.makedirs(os.path.dirname(path), exist_ok=True)
        with open(path, "wb") as f:
            f.write(data)
        logger.info("Stored %d bytes at %s", len(data), key)

    def save_file(self, key: str, source: Path, content_type: str = "") -> None:
        path = self._resolve(key)
        os.makedirs(os.path.dirname(path), exist_ok=True)
        shutil.copyfile(source, path)
        logger.info("Copied %s to %s", source, key)

    def open(self, key: str) -> BinaryIO:
        path = self._resolve(key)
        if not os.path.isfile(path):
            raise FileNotFoundError(f"Object not found: {key}")
        return open(path, "rb")

    def public_url(self, key: str) -> str:
        key = key.strip("/")
        if self.config.public_url:
            return f"{self.config.public_url.rstrip('/')}/{key}"
        return f"/{key}"
