from __future__ import annotations

from datetime import datetime, timezone
from typing import List, Optional

from pydantic import BaseModel, Field


def _now() -> datetime:
    return datetime.now(timezone.utc)


class NotificationPayload(BaseModel):
    asset_id: str
    asset_name: str = ""
    area: str = ""
    venue: str = ""
    location: str = ""
    row_reference: int
    location_reference: str
    comment: str
    recipients: List[str] = Field(default_factory=list)
    subject: str
    body: str
    created_at: datetime = Field(default_factory=_now)


class DeliveryResult(BaseModel):
    success: bool
    message: str
    notification_id: Optional[str] = None
