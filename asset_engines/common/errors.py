"""Domain errors raised by the asset engines.

Services raise these; the operations facade turns them into failed
``OperationResult`` objects and routes turn those into error envelopes.
"""
from __future__ import annotations

from typing import Any, Dict, Optional


class AssetEngineError(Exception):
    code = "asset.error"
    status_code = 400

    def __init__(self, message: str, code: Optional[str] = None, details: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message)
        self.message = message
        if code:
            self.code = code
        self.details = details or {}


class ValidationError(AssetEngineError):
    """Missing or malformed input; raised before anything is written."""

    code = "validation.error"
    status_code = 400


class NotFoundError(AssetEngineError):
    code = "not_found"
    status_code = 404


class DuplicateError(AssetEngineError):
    code = "duplicate"
    status_code = 409


class ExternalDeliveryError(AssetEngineError):
    """Messaging collaborator failed; the originating change stays applied."""

    code = "notification.delivery_failed"
    status_code = 502
