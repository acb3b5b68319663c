"""Request scope for asset engines and the FastAPI context builder."""
from __future__ import annotations

import os
import re
import uuid
from dataclasses import dataclass, field
from typing import Optional

from fastapi import Header, HTTPException

VALID_TENANT_PATTERN = re.compile(r"^t_[a-z0-9_-]+$")
DEFAULT_PROJECT_ID = "p_default"


def _default_env() -> str:
    env_value = os.getenv("ENV") or os.getenv("APP_ENV")
    return env_value.lower() if env_value else "dev"


@dataclass
class RequestContext:
    """Identifies which workbook a call operates on (tenant/env/project)."""

    tenant_id: str
    env: Optional[str] = None
    project_id: str = field(default=DEFAULT_PROJECT_ID)
    user_id: Optional[str] = None
    request_id: str = field(default_factory=lambda: uuid.uuid4().hex)

    def __post_init__(self) -> None:
        if not self.tenant_id:
            raise ValueError("tenant_id is required")
        if not VALID_TENANT_PATTERN.match(self.tenant_id):
            raise ValueError(
                f"tenant_id must match pattern ^t_[a-z0-9_-]+$, got: {self.tenant_id}"
            )
        if not self.project_id:
            raise ValueError("project_id is required")
        self.env = (self.env or _default_env()).lower()

    @property
    def scope_key(self) -> tuple[str, str, str]:
        return (self.tenant_id, self.env or "dev", self.project_id)


def get_request_context(
    header_tenant: Optional[str] = Header(default=None, alias="X-Tenant-Id"),
    header_env: Optional[str] = Header(default=None, alias="X-Env"),
    header_project: Optional[str] = Header(default=None, alias="X-Project-Id"),
    header_user: Optional[str] = Header(default=None, alias="X-User-Id"),
    header_request_id: Optional[str] = Header(default=None, alias="X-Request-Id"),
) -> RequestContext:
    if not header_tenant:
        raise HTTPException(status_code=400, detail="X-Tenant-Id header is required")
    try:
        return RequestContext(
            tenant_id=header_tenant,
            env=header_env,
            project_id=header_project or DEFAULT_PROJECT_ID,
            user_id=header_user,
            request_id=header_request_id or uuid.uuid4().hex,
        )
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
