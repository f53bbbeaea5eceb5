from __future__ import annotations

"""
Core façade for the armodel_db subsystem.

ARModelDB is the single, high-level entrypoint used by the backend API to:

    - accept uploads (place asset, create record, attach link code),
    - list and fetch model records,
    - read stored asset and link-code bytes back.

It wraps:

    - the record store (ModelRegistry)
    - the object store selected for this deployment (local or remote)
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

from .config import ARModelConfig, STORAGE_REMOTE, load_config
from .errors import RecordNotFound, StorageError, UploadValidationError
from .linkcode import generate_link_code
from .object_store.base import ObjectStore, ObjectStoreConfig
from .object_store.http_bucket import HTTPBucketObjectStore
from .object_store.local_fs import LocalFSObjectStore
from .placement import place_upload
from .registry.base import ModelRegistry
from .registry.model_registry import JSONModelRegistry
from .registry.models import ModelRecord
from .utils.temp import remove_temp_file

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Object store selection
# ---------------------------------------------------------------------------

def _create_object_store(cfg: ARModelConfig) -> ObjectStore:
    """Pick the placement strategy once, from configuration."""
    if cfg.storage_mode == STORAGE_REMOTE:
        return HTTPBucketObjectStore(
            ObjectStoreConfig(
                base_path=cfg.bucket_endpoint or "",
                bucket=cfg.bucket_name,
                public_url=cfg.bucket_public_url,
                token=cfg.bucket_token,
                timeout=cfg.bucket_timeout,
            )
        )

    return LocalFSObjectStore(
        ObjectStoreConfig(base_path=os.path.abspath(cfg.public_root))
    )


# ---------------------------------------------------------------------------
# ARModelDB façade
# ---------------------------------------------------------------------------

@dataclass
class ARModelDB:
    """
    High-level façade over the model registry and asset pipeline.

    One instance per process; safe to hand to API handlers.

    Attributes
    ----------
    config:
        ARModelConfig used to construct this instance.

    registry:
        Record store holding every ModelRecord.

    object_store:
        Where uploaded assets and link-code images are placed.
    """

    config: ARModelConfig
    registry: ModelRegistry
    object_store: ObjectStore

    # ------------------------------------------------------------------
    # Construction helpers
    # ------------------------------------------------------------------

    @classmethod
    def from_config(cls, config: Optional[ARModelConfig] = None) -> "ARModelDB":
        """
        Construct an ARModelDB instance from an ARModelConfig.

        Raises ValueError if the configuration is incomplete (for example
        remote mode without a bucket).
        """
        cfg = config or load_config()
        cfg.validate()

        if cfg.enable_logging:
            logging.basicConfig(level=logging.INFO)
            logger.info("Initializing ARModelDB with config: %s", cfg)

        return cls(
            config=cfg,
            registry=JSONModelRegistry(cfg.registry_path),
            object_store=_create_object_store(cfg),
        )

    @classmethod
    def from_env(cls) -> "ARModelDB":
        """Construct ARModelDB using environment variables."""
        return cls.from_config(load_config())

    # ------------------------------------------------------------------
    # Upload intake
    # ------------------------------------------------------------------

    def ingest_upload(
        self,
        *,
        name: Optional[str],
        description: Optional[str],
        temp_path: Optional[Path],
        original_filename: Optional[str],
    ) -> ModelRecord:
        """
        Accept one uploaded model.

        Steps (none retried, any exception aborts):
            1. place the staged file in the object store
            2. create the record without a link code
            3. render and store the link code for the new id
            4. attach the link-code URL to the record

        The staged file is always removed. An asset placed before a later
        failure is left where it is.
        """
        name = (name or "").strip()
        if not name or temp_path is None:
            remove_temp_file(temp_path)
            raise UploadValidationError("Missing name or file")

        placed = place_upload(
            self.object_store,
            Path(temp_path),
            original_filename or Path(temp_path).name,
        )

        record = self.registry.create(
            name=name,
            description=description or None,
            asset_url=placed.url,
            link_code_url=None,
        )

        link_code_url = generate_link_code(
            self.object_store, record.id, self.config.base_url
        )

        updated = self.registry.update(record.id, link_code_url=link_code_url)
        if updated is None:
            # create() saves soft; a lost save surfaces here
            raise StorageError(f"Model record {record.id} was not persisted")

        logger.info("Upload complete: %s -> %s", updated.id, updated.asset_url)
        return updated

    # ------------------------------------------------------------------
    # Read operations
    # ------------------------------------------------------------------

    def list_models(self) -> List[ModelRecord]:
        return self.registry.list_all()

    def get_model(self, record_id: str) -> ModelRecord:
        record = self.registry.get_by_id(record_id)
        if record is None:
            raise RecordNotFound(record_id)
        return record

    def read_object(self, key: str) -> bytes:
        """Bytes of a stored asset or link code; FileNotFoundError if absent."""
        with self.object_store.open(key) as f:
            return f.read()
