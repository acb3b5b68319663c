from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import BaseModel


class AssetStatus(str, Enum):
    """Known status values; the status column also accepts free-form text."""
    NEW = "New"
    IN_PROGRESS = "In Progress"
    AWAITING_APPROVAL = "Awaiting Approval"
    APPROVED = "Approved"
    IN_PRODUCTION = "In Production"
    DELIVERED = "Delivered"
    ON_HOLD = "On Hold"
    REQUIRES_ATTENTION = "Requires Attention"


NEW_STATUS = AssetStatus.NEW.value


class SideEffect(str, Enum):
    NONE = "none"
    ATTENTION_NOTICE = "attention_notice"  # collect comment, notify recipients


class Treatment(BaseModel):
    background: Optional[str] = None
    side_effect: SideEffect = SideEffect.NONE
