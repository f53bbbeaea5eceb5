"""
Asset placement for uploaded model files.

Moves a staged upload into the configured object store and reports where
clients can fetch it.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from .object_store.base import ObjectStore
from .utils.paths import build_upload_key, content_type_for
from .utils.temp import remove_temp_file

logger = logging.getLogger(__name__)


@dataclass
class PlacedAsset:
    """
    Result of placing an upload.

    Attributes
    ----------
    key : str
        Object-store key of the stored copy.
    url : str
        Retrieval URL (relative path for local stores, absolute for buckets).
    content_type : str
        MIME type inferred from the original filename.
    """
    key: str
    url: str
    content_type: str


def place_upload(
    store: ObjectStore,
    temp_path: Path,
    original_filename: str,
    *,
    stamp_ms: Optional[int] = None,
) -> PlacedAsset:
    """
    Copy a staged upload into `store` under a timestamped key.

    The temporary file is removed afterwards whether or not the copy
    succeeded. Storage errors propagate to the caller.
    """
    key = build_upload_key(original_filename, stamp_ms)
    content_type = content_type_for(original_filename)

    try:
        store.save_file(key, Path(temp_path), content_type)
    finally:
        remove_temp_file(Path(temp_path))

    url = store.public_url(key)
    logger.info("Placed upload %s at %s", original_filename, url)
    return PlacedAsset(key=key, url=url, content_type=content_type)
