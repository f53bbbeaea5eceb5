from typing import List, Optional

from pydantic import BaseModel

from armodel_db.registry.models import ModelRecord


# ============================================================
# 1. Model records
# ============================================================

class Model3D(BaseModel):
    id: str
    name: str
    description: Optional[str] = None
    fileUrl: str
    qrCodeUrl: Optional[str] = None
    createdAt: str

    @classmethod
    def from_record(cls, record: ModelRecord) -> "Model3D":
        return cls(**record.to_dict())


class ModelResponse(BaseModel):
    model: Model3D


class ModelListResponse(BaseModel):
    models: List[Model3D]


# ============================================================
# 2. Errors
# ============================================================

class ErrorResponse(BaseModel):
    error: str
    details: Optional[str] = None
