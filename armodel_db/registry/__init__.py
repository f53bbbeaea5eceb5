"""
armodel_db - Registry package.

This package provides:
    - ModelRecord, the persisted metadata of one uploaded 3D asset
    - ModelRegistry, the record-store protocol
    - JSONModelRegistry, the single-document JSON implementation
"""

from .models import ModelRecord
from .base import ModelRegistry
from .model_registry import JSONModelRegistry, next_record_id

__all__ = [
    "ModelRecord",
    "ModelRegistry",
    "JSONModelRegistry",
    "next_record_id",
]
