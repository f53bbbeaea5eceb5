"""
Exception types shared by the registry, placement and orchestration layers.

The API layer maps them onto HTTP status codes:

    UploadValidationError  -> 400
    RecordNotFound         -> 404
    StorageError           -> 500
"""

from __future__ import annotations


class UploadValidationError(ValueError):
    """An upload request is missing required fields."""


class RecordNotFound(KeyError):
    """No model record exists for the requested id."""

    def __init__(self, record_id: str):
        super().__init__(record_id)
        self.record_id = record_id

    def __str__(self) -> str:
        return f"Model {self.record_id} not found"


class StorageError(RuntimeError):
    """Persisting or reading a binary object failed."""


class RemoteStorageError(StorageError):
    """The external object-storage bucket rejected or failed a request."""


__all__ = [
    "UploadValidationError",
    "RecordNotFound",
    "StorageError",
    "RemoteStorageError",
]
