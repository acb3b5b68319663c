from __future__ import annotations

import json
from datetime import datetime, timezone
from typing import Any, Dict, List

from pydantic import BaseModel, Field

TABLE_NAME = "AuditLog"
HEADER = ["LogID", "RowReference", "Timestamp", "Snapshot"]
LOG_ID_PREFIX = "LOG"


def _now() -> datetime:
    return datetime.now(timezone.utc)


def make_log_id(row_reference: int, at: datetime) -> str:
    # Two submissions for the same row within one millisecond share an id.
    return f"{LOG_ID_PREFIX}-{int(at.timestamp() * 1000)}-{row_reference}"


class AuditLogEntry(BaseModel):
    log_id: str
    row_reference: int
    timestamp: datetime = Field(default_factory=_now)
    snapshot: Dict[str, Any] = Field(default_factory=dict)

    def to_row(self) -> List[Any]:
        return [
            self.log_id,
            self.row_reference,
            self.timestamp.isoformat(),
            json.dumps(self.snapshot, default=str, sort_keys=True),
        ]

    @classmethod
    def from_row(cls, values: List[Any]) -> "AuditLogEntry":
        log_id, row_ref, ts, snapshot = values
        return cls(
            log_id=str(log_id),
            row_reference=int(row_ref),
            timestamp=datetime.fromisoformat(str(ts)),
            snapshot=json.loads(snapshot) if snapshot else {},
        )
