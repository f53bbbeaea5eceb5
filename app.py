from __future__ import annotations

"""
AR Model Viewer Backend API

Uploads 3D models, generates link codes pointing at the AR viewer and serves
records, assets and viewer pages.

    uvicorn app:create_app --factory
"""

import json
import time
import traceback
from pathlib import Path
from typing import Any, Optional

from fastapi import (
    APIRouter, Depends, FastAPI, File, Form, HTTPException, UploadFile
)
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse, JSONResponse, Response
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.requests import Request

from armodel_db import ARModelDB
from armodel_db.errors import RecordNotFound, UploadValidationError
from armodel_db.utils.paths import LINK_CODES_PREFIX, UPLOADS_PREFIX, content_type_for
from armodel_db.utils.temp import remove_temp_file, stage_upload
from models import ErrorResponse, ModelListResponse, ModelResponse, Model3D
from routes.deps import check_model_id, get_db
from routes import viewers

CACHE_FOREVER = "public, max-age=31536000"

# ============================================================================
# Helpers
# ============================================================================

def _log(msg: str, **extra: Any) -> None:
    """
    Centralised structured logging.

    All logs go through here so we can easily tweak format or sink later.
    """
    try:
        print(json.dumps({"msg": msg, **extra}, ensure_ascii=False, default=str))
    except Exception:
        # Last-ditch fallback - never let logging crash the app
        print(f"{msg} {extra}")


def _server_error(db: ARModelDB, message: str, exc: Exception) -> JSONResponse:
    """500 response; the traceback is only exposed in development."""
    body = {"error": message}
    if db.config.is_development:
        body["details"] = "".join(
            traceback.format_exception(type(exc), exc, exc.__traceback__)
        )
    return JSONResponse(body, status_code=500)


# ============================================================================
# Router
# ============================================================================

router = APIRouter(
    prefix="/api",
    responses={
        400: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
)

# ============================================================================
# Records
# ============================================================================

@router.get("/models", response_model=ModelListResponse)
def api_list_models(db: ARModelDB = Depends(get_db)):
    try:
        records = db.list_models()
    except Exception as exc:
        _log("[api] list_models failed", error=str(exc),
             traceback=traceback.format_exc())
        raise HTTPException(500, "Internal server error")
    return {"models": [Model3D.from_record(r) for r in records]}


@router.get("/models/{model_id}", response_model=ModelResponse)
def api_get_model(model_id: str, db: ARModelDB = Depends(get_db)):
    check_model_id(model_id)
    try:
        record = db.get_model(model_id)
    except RecordNotFound:
        raise HTTPException(404, "Model not found")
    except Exception as exc:
        _log("[api] get_model failed", model_id=model_id, error=str(exc),
             traceback=traceback.format_exc())
        raise HTTPException(500, "Internal server error")
    return {"model": Model3D.from_record(record)}

# ============================================================================
# Upload
# ============================================================================

@router.post("/upload-model", response_model=ModelResponse)
def api_upload_model(
    name: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    file: Optional[UploadFile] = File(None),
    db: ARModelDB = Depends(get_db),
):
    if not (name or "").strip() or file is None or not file.filename:
        raise HTTPException(400, "Missing name or file")

    _log("[api] upload_model", name=name, filename=file.filename)

    temp_path: Optional[Path] = None
    try:
        temp_path = stage_upload(file.file, file.filename)
        record = db.ingest_upload(
            name=name,
            description=description,
            temp_path=temp_path,
            original_filename=file.filename,
        )
    except UploadValidationError as exc:
        raise HTTPException(400, str(exc))
    except Exception as exc:
        _log("[api] upload_model failed", name=name, filename=file.filename,
             error=str(exc), traceback=traceback.format_exc())
        return _server_error(db, "Upload error", exc)
    finally:
        remove_temp_file(temp_path)

    _log("[api] upload_model complete", model_id=record.id,
         file_url=record.asset_url)
    return {"model": Model3D.from_record(record)}

# ============================================================================
# Stored bytes
# ============================================================================

def _serve_object(db: ARModelDB, prefix: str, file_path: str, media_type: Optional[str]) -> Response:
    if not file_path.strip("/"):
        raise HTTPException(400, "Invalid file path")

    key = f"{prefix}/{file_path.strip('/')}"
    try:
        data = db.read_object(key)
    except ValueError:
        raise HTTPException(400, "Invalid file path")
    except FileNotFoundError:
        raise HTTPException(404, "File not found")
    except Exception as exc:
        _log("[api] serve_object failed", key=key, error=str(exc),
             traceback=traceback.format_exc())
        raise HTTPException(500, "Internal server error")

    return Response(
        content=data,
        media_type=media_type or content_type_for(key),
        headers={"Cache-Control": CACHE_FOREVER},
    )


def serve_upload(file_path: str, db: ARModelDB = Depends(get_db)):
    return _serve_object(db, UPLOADS_PREFIX, file_path, None)


def serve_link_code(file_path: str, db: ARModelDB = Depends(get_db)):
    return _serve_object(db, LINK_CODES_PREFIX, file_path, "image/png")


static_router = APIRouter()

for _path in ("/uploads/{file_path:path}", "/api/static/uploads/{file_path:path}"):
    static_router.add_api_route(_path, serve_upload, methods=["GET"],
                                include_in_schema=False)

for _path in ("/qr-codes/{file_path:path}", "/api/static/qr-codes/{file_path:path}"):
    static_router.add_api_route(_path, serve_link_code, methods=["GET"],
                                include_in_schema=False)

# ============================================================================
# App factory
# ============================================================================

def create_app(db: Optional[ARModelDB] = None) -> FastAPI:
    """
    Build the FastAPI application.

    `db` defaults to ARModelDB.from_env(); tests inject their own.
    """
    app = FastAPI(
        title="AR Model Viewer API",
        version="0.1.0",
    )
    app.state.db = db or ARModelDB.from_env()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        start = time.time()
        _log("[http] request", method=request.method, path=request.url.path)
        try:
            resp = await call_next(request)
        except Exception as exc:
            _log("[http] error", error=str(exc), traceback=traceback.format_exc())
            raise
        _log(
            "[http] response",
            path=request.url.path,
            duration_ms=int((time.time() - start) * 1000),
            status_code=getattr(resp, "status_code", None),
        )
        return resp

    @app.exception_handler(StarletteHTTPException)
    async def http_error(request: Request, exc: StarletteHTTPException):
        return JSONResponse({"error": exc.detail}, status_code=exc.status_code,
                            headers=getattr(exc, "headers", None))

    @app.exception_handler(RequestValidationError)
    async def validation_error(request: Request, exc: RequestValidationError):
        return JSONResponse({"error": "Invalid request"}, status_code=400)

    @app.get("/", response_class=HTMLResponse)
    async def root():
        return '<h1>AR Model Viewer API Running</h1><p><a href="/models">Models</a> &middot; <a href="/upload">Upload</a></p>'

    @app.get("/health")
    async def health():
        return {"status": "ok", "time": time.time()}

    app.include_router(router)
    app.include_router(static_router)
    app.include_router(viewers.router)
    return app

# ============================================================================
# Entrypoint
# ============================================================================

if __name__ == "__main__":
    import uvicorn
    uvicorn.run("app:create_app", factory=True, host="0.0.0.0", port=8000, reload=True)
