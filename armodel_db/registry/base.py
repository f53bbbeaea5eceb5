"""
Record store interface.

Callers (the upload orchestrator and the API) depend on this protocol only,
so the JSON-document implementation can be swapped for a transactional
store without touching them.
"""

from __future__ import annotations

from typing import List, Optional, Protocol

from .models import ModelRecord


class ModelRegistry(Protocol):
    """Identifier -> ModelRecord mapping."""

    def load(self) -> List[ModelRecord]:
        """Return every stored record in storage order."""
        raise NotImplementedError

    def save(self, records: List[ModelRecord]) -> bool:
        """Replace the stored records."""
        raise NotImplementedError

    def create(
        self,
        *,
        name: str,
        asset_url: str,
        description: Optional[str] = None,
        link_code_url: Optional[str] = None,
    ) -> ModelRecord:
        """Assign an id and creation time, persist, return the record."""
        raise NotImplementedError

    def get_by_id(self, record_id: str) -> Optional[ModelRecord]:
        raise NotImplementedError

    def list_all(self) -> List[ModelRecord]:
        """Every record, newest first."""
        raise NotImplementedError

    def update(self, record_id: str, **fields) -> Optional[ModelRecord]:
        """Shallow-merge fields over an existing record."""
        raise NotImplementedError
