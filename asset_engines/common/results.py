from __future__ import annotations

from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict

from asset_engines.common.error_envelope import error_response
from asset_engines.common.errors import AssetEngineError


class OperationResult(BaseModel):
    """Result object handed back to the rendering layer.

    Extra keys carry the operation payload (``row_reference``, ``record``, ...).
    """

    model_config = ConfigDict(extra="allow")

    success: bool
    message: str
    code: Optional[str] = None
    status_code: int = 200

    @classmethod
    def ok(cls, message: str, **payload: Any) -> "OperationResult":
        return cls(success=True, message=message, **payload)

    @classmethod
    def failed(cls, exc: AssetEngineError, **payload: Any) -> "OperationResult":
        return cls(
            success=False,
            message=exc.message,
            code=exc.code,
            status_code=exc.status_code,
            details=exc.details,
            **payload,
        )

    @property
    def payload(self) -> Dict[str, Any]:
        return dict(self.model_extra or {})


def unwrap_or_raise(result: OperationResult, resource_kind: str) -> OperationResult:
    if result.success:
        return result
    error_response(
        code=result.code or "asset.error",
        message=result.message,
        status_code=result.status_code,
        resource_kind=resource_kind,
        details=result.payload.get("details") or {},
    )
