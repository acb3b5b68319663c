"""JSON error body shared by the assets, dropdowns and provisioning routes.

A failed ``OperationResult`` reaches the client as::

    {"error": {"code": "asset.not_found", "message": "No asset at row 9",
               "http_status": 404, "resource_kind": "assets", "details": {}}}

``code`` is the domain error code (``validation.error``, ``asset.not_found``,
``dropdown.duplicate``, ``notification.delivery_failed``, ...). ``details``
names the offending form field when there is one (``{"field": "material"}``).
"""
from __future__ import annotations

from typing import Any, Dict, NoReturn, Optional

from fastapi import HTTPException
from pydantic import BaseModel, Field


class ErrorDetail(BaseModel):
    code: str
    message: str
    http_status: int
    resource_kind: Optional[str] = None
    details: Dict[str, Any] = Field(default_factory=dict)


class ErrorEnvelope(BaseModel):
    error: ErrorDetail


def build_error_envelope(
    code: str,
    message: str,
    status_code: int = 400,
    resource_kind: Optional[str] = None,
    details: Optional[Dict[str, Any]] = None,
) -> ErrorEnvelope:
    """Envelope for exception handlers that write the response themselves."""
    return ErrorEnvelope(
        error=ErrorDetail(
            code=code,
            message=message,
            http_status=status_code,
            resource_kind=resource_kind,
            details=details or {},
        )
    )


def error_response(
    code: str,
    message: str,
    status_code: int = 400,
    resource_kind: Optional[str] = None,
    details: Optional[Dict[str, Any]] = None,
) -> NoReturn:
    """Abort a route with the envelope as the ``HTTPException`` detail.

    The HTTPException handler in ``asset_engines.server`` returns the detail
    unchanged when it already carries an ``error`` key.
    """
    envelope = build_error_envelope(code, message, status_code, resource_kind, details)
    raise HTTPException(status_code=status_code, detail=envelope.model_dump())
