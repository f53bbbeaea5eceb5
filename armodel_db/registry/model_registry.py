"""
JSON-document Model Registry.

The whole registry lives in one file:

    {
      "models": [
        {"id": "model_1", "name": "...", "description": null,
         "fileUrl": "/uploads/...", "qrCodeUrl": "/qr-codes/...",
         "createdAt": "2024-01-01T00:00:00.000Z"},
        ...
      ]
    }

Every operation is a full load-modify-save cycle without locking. Concurrent
writers race and the last save wins; this store is meant for a single
writer.
"""

from __future__ import annotations

import dataclasses
import logging
import re
from pathlib import Path
from typing import Any, Iterable, List, Optional, Sequence

from .base import ModelRegistry
from .models import ModelRecord, parse_timestamp, utc_timestamp
from ..utils.json_io import json_read, json_write

logger = logging.getLogger(__name__)

ID_PREFIX = "model_"

_ID_SUFFIX = re.compile(r"\d+")

_UPDATABLE_FIELDS = frozenset({"name", "description", "asset_url", "link_code_url"})


def id_number(record_id: str) -> int:
    """
    Numeric suffix of a record id ("model_12" -> 12). Ids without a leading
    numeric suffix count as 0.
    """
    rest = record_id[len(ID_PREFIX):] if record_id.startswith(ID_PREFIX) else record_id
    match = _ID_SUFFIX.match(rest)
    return int(match.group()) if match else 0


def next_record_id(record_ids: Iterable[str]) -> str:
    """One more than the largest numeric suffix in use, starting at 1."""
    highest = max((id_number(i) for i in record_ids), default=0)
    return f"{ID_PREFIX}{highest + 1}"


def _entry_id(entry: Any) -> str:
    if isinstance(entry, dict) and entry.get("id") is not None:
        return str(entry["id"])
    return ""


def _parse_entry(entry: Any) -> Optional[ModelRecord]:
    try:
        return ModelRecord.from_dict(entry)
    except (KeyError, TypeError, AttributeError) as exc:
        logger.warning("Skipping malformed model entry %r: %s", entry, exc)
        return None


class JSONModelRegistry(ModelRegistry):
    """
    File-backed registry for model records.

    Reads never raise: a missing or unreadable document behaves as an empty
    registry. Failed saves are logged and reported through the return value.

    Entries that do not parse into a ModelRecord are hidden from reads but
    kept on disk by create() and update(), and their ids stay reserved.
    """

    def __init__(self, path: Path | str):
        self.path = Path(path)

    # ------------------------------------------------------------------
    # Document I/O
    # ------------------------------------------------------------------

    def _read_entries(self) -> List[Any]:
        data = json_read(self.path)
        if data is None:
            return []

        if not isinstance(data, dict) or not isinstance(data.get("models", []), list):
            logger.warning("Ignoring registry document with unexpected shape: %s", self.path)
            return []
        return list(data.get("models", []))

    def _write_entries(self, entries: List[Any]) -> bool:
        ok = json_write(self.path, {"models": entries})
        if not ok:
            logger.error("Registry save failed; %d entries not persisted to %s",
                         len(entries), self.path)
        return ok

    def load(self) -> List[ModelRecord]:
        parsed = (_parse_entry(entry) for entry in self._read_entries())
        return [record for record in parsed if record is not None]

    def save(self, records: Sequence[ModelRecord]) -> bool:
        return self._write_entries([r.to_dict() for r in records])

    # ------------------------------------------------------------------
    # Creation
    # ------------------------------------------------------------------

    def create(
        self,
        *,
        name: str,
        asset_url: str,
        description: Optional[str] = None,
        link_code_url: Optional[str] = None,
    ) -> ModelRecord:
        entries = self._read_entries()
        record = ModelRecord(
            id=next_record_id(_entry_id(entry) for entry in entries),
            name=name,
            description=description,
            asset_url=asset_url,
            link_code_url=link_code_url,
            created_at=utc_timestamp(),
        )
        entries.append(record.to_dict())
        self._write_entries(entries)

        logger.info("Created model record %s (%s)", record.id, record.name)
        return record

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------

    def get_by_id(self, record_id: str) -> Optional[ModelRecord]:
        return next((r for r in self.load() if r.id == record_id), None)

    def list_all(self) -> List[ModelRecord]:
        # Equal timestamps fall back to the id sequence so later records stay first.
        return sorted(
            self.load(),
            key=lambda r: (parse_timestamp(r.created_at), id_number(r.id)),
            reverse=True,
        )

    # ------------------------------------------------------------------
    # Updates
    # ------------------------------------------------------------------

    def update(self, record_id: str, **fields) -> Optional[ModelRecord]:
        """
        Replace the given fields on an existing record.

        Only name, description, asset_url and link_code_url may change.
        Returns None, without writing, when record_id is unknown or its
        entry is malformed.
        """
        unknown = set(fields) - _UPDATABLE_FIELDS
        if unknown:
            raise ValueError(f"Cannot update fields: {', '.join(sorted(unknown))}")

        entries = self._read_entries()
        for index, entry in enumerate(entries):
            if _entry_id(entry) != record_id:
                continue
            record = _parse_entry(entry)
            if record is None:
                continue
            updated = dataclasses.replace(record, **fields)
            entries[index] = updated.to_dict()
            self._write_entries(entries)
            return updated
        return None
