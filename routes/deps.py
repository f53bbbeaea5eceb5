from __future__ import annotations

import re

from fastapi import HTTPException, Request

from armodel_db.core import ARModelDB

_MODEL_ID = re.compile(r"^[A-Za-z0-9_-]{1,64}$")


def get_db(request: Request) -> ARModelDB:
    return request.app.state.db


def check_model_id(model_id: str) -> str:
    """Reject ids that could not have been issued by the registry."""
    if not model_id or not _MODEL_ID.match(model_id):
        raise HTTPException(400, "Invalid model ID")
    return model_id
