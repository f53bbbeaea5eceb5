"""
Remote object store backend for HTTP object-storage buckets.

Objects are written with a single authenticated PUT and read back from the
bucket's public origin:

    write:  PUT  {endpoint}/{bucket}/{key}      (Authorization: Bearer <token>)
    read:   GET  {public_url}/{key}

Any transport error or non-2xx answer on write raises RemoteStorageError.
Nothing is retried.
"""

from __future__ import annotations

import io
import logging
from pathlib import Path
from typing import BinaryIO, Dict

import requests

from .base import ObjectStore, ObjectStoreConfig
from ..errors import RemoteStorageError

logger = logging.getLogger(__name__)


class HTTPBucketObjectStore(ObjectStore):
    """
    Bucket-backed implementation of ObjectStore.

    `config.base_path` holds the bucket endpoint, `config.bucket` the bucket
    name and `config.public_url` the origin objects are publicly served from.
    """

    def __init__(self, config: ObjectStoreConfig):
        if not config.bucket:
            raise ValueError("HTTPBucketObjectStore requires a bucket name")
        if not config.public_url:
            raise ValueError("HTTPBucketObjectStore requires a public URL")
        self.config = config

    # ------------------------------------------------------------------
    # URL helpers
    # ------------------------------------------------------------------

    def _object_url(self, key: str) -> str:
        endpoint = self.config.base_path.rstrip("/")
        return f"{endpoint}/{self.config.bucket}/{key.strip('/')}"

    def _headers(self, content_type: str) -> Dict[str, str]:
        headers = {"Content-Type": content_type or "application/octet-stream"}
        if self.config.token:
            headers["Authorization"] = f"Bearer {self.config.token}"
        return headers

    # ------------------------------------------------------------------
    # Core interface
    # ------------------------------------------------------------------

    def save_bytes(self, key: str, data: bytes, content_type: str = "") -> None:
        url = self._object_url(key)
        try:
            resp = requests.put(
                url,
                data=data,
                headers=self._headers(content_type),
                timeout=self.config.timeout,
            )
            resp.raise_for_status()
        except requests.RequestException as exc:
            body = ""
            response = getattr(exc, "response", None)
            if response is not None:
                body = (response.text or "")[:400]
            raise RemoteStorageError(
                f"Bucket upload failed ({url}): {exc} :: {body}"
            ) from exc

        logger.info("Uploaded %d bytes to bucket %s at %s",
                    len(data), self.config.bucket, key)

    def save_file(self, key: str, source: Path, content_type: str = "") -> None:
        with open(source, "rb") as f:
            data = f.read()
        self.save_bytes(key, data, content_type)

    def open(self, key: str) -> BinaryIO:
        url = self.public_url(key)
        try:
            resp = requests.get(url, timeout=self.config.timeout)
        except requests.RequestException as exc:
            raise RemoteStorageError(f"Bucket download failed ({url}): {exc}") from exc

        if resp.status_code == 404:
            raise FileNotFoundError(f"Object not found: {key}")
        if not resp.ok:
            raise RemoteStorageError(
                f"Bucket download failed ({url}): HTTP {resp.status_code}"
            )
        return io.BytesIO(resp.content)

    def public_url(self, key: str) -> str:
        return f"{self.config.public_url.rstrip('/')}/{key.strip('/')}"
