from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Optional


def utc_timestamp() -> str:
    """Current UTC time as ISO-8601 with millisecond precision and a Z suffix."""
    now = datetime.now(timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def parse_timestamp(value: str) -> datetime:
    """
    Parse a stored createdAt string. Unparseable values sort as the oldest
    possible time.
    """
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except (AttributeError, ValueError):
        return datetime.min.replace(tzinfo=timezone.utc)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


# ----------------------------------------------------------------------
# Model record
# ----------------------------------------------------------------------

@dataclass(frozen=True)
class ModelRecord:
    id: str
    name: str
    asset_url: str
    description: Optional[str] = None
    link_code_url: Optional[str] = None
    created_at: str = field(default_factory=utc_timestamp)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize using the persisted / wire field names."""
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "fileUrl": self.asset_url,
            "qrCodeUrl": self.link_code_url,
            "createdAt": self.created_at,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ModelRecord":
        """
        Build a record from its persisted form. Raises KeyError when id or
        name is missing, or when fileUrl or createdAt is missing or empty.
        """
        if not data.get("createdAt"):
            raise KeyError("createdAt")
        # assetUrl / linkCodeUrl are accepted as aliases of the stored names
        return cls(
            id=str(data["id"]),
            name=data["name"],
            description=data.get("description"),
            asset_url=data.get("fileUrl") or data["assetUrl"],
            link_code_url=data.get("qrCodeUrl", data.get("linkCodeUrl")),
            created_at=data["createdAt"],
        )
