"""FastAPI application for the asset tracking engines."""
from __future__ import annotations

import logging
import time

from fastapi import FastAPI, HTTPException, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from asset_engines.asset_records.routes import router as assets_router
from asset_engines.common.error_envelope import build_error_envelope
from asset_engines.dropdowns.routes import router as dropdowns_router
from asset_engines.provisioning.routes import router as provisioning_router

logger = logging.getLogger(__name__)


async def _http_exception_handler(request: Request, exc: HTTPException):
    detail = exc.detail
    if isinstance(detail, dict) and "error" in detail:
        return JSONResponse(content=detail, status_code=exc.status_code)
    envelope = build_error_envelope(
        code="http.exception",
        message=str(detail) if detail else "HTTP exception",
        status_code=exc.status_code,
    )
    return JSONResponse(content=envelope.model_dump(), status_code=exc.status_code)


async def _validation_exception_handler(request: Request, exc: RequestValidationError):
    envelope = build_error_envelope(
        code="validation.error",
        message="Validation failed",
        status_code=400,
        details={"errors": jsonable_encoder(exc.errors())},
    )
    return JSONResponse(content=envelope.model_dump(), status_code=400)


async def _generic_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    envelope = build_error_envelope(
        code="internal.error",
        message="Internal server error",
        status_code=500,
    )
    return JSONResponse(content=envelope.model_dump(), status_code=500)


def register_error_handlers(target_app: FastAPI) -> None:
    target_app.add_exception_handler(HTTPException, _http_exception_handler)
    target_app.add_exception_handler(RequestValidationError, _validation_exception_handler)
    target_app.add_exception_handler(Exception, _generic_exception_handler)


def create_app() -> FastAPI:
    app = FastAPI(title="Asset Tracker", version="0.1.0")
    register_error_handlers(app)

    app.include_router(assets_router)
    app.include_router(dropdowns_router)
    app.include_router(provisioning_router)

    @app.get("/health")
    async def health_check():
        return {"service": "asset_tracker", "version": "0.1.0", "time": time.time(), "status": "ok"}

    return app
