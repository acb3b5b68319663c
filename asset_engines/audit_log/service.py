"""Last-submitted-state trail, one entry per asset row.

Recording for a row that already has an entry overwrites it in place; earlier
snapshots for that row are not retained.
"""
from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from asset_engines.audit_log.models import AuditLogEntry, make_log_id
from asset_engines.audit_log.repository import AuditLogRepository, SheetAuditLogRepository
from asset_engines.common.identity import RequestContext

logger = logging.getLogger(__name__)


class AuditLogService:
    def __init__(self, repo: Optional[AuditLogRepository] = None) -> None:
        self.repo = repo or SheetAuditLogRepository()

    def record(self, ctx: RequestContext, row_reference: int, snapshot: Dict[str, Any]) -> str:
        at = datetime.now(timezone.utc)
        entry = AuditLogEntry(
            log_id=make_log_id(row_reference, at),
            row_reference=row_reference,
            timestamp=at,
            snapshot=dict(snapshot),
        )
        self.repo.upsert(ctx, entry)
        logger.debug("Audit entry %s recorded for row %s", entry.log_id, row_reference)
        return entry.log_id

    def get(self, ctx: RequestContext, row_reference: int) -> Optional[AuditLogEntry]:
        return self.repo.find(ctx, row_reference)

    def list_entries(self, ctx: RequestContext) -> List[AuditLogEntry]:
        return self.repo.list(ctx)

    def rebind(self, ctx: RequestContext, moves: Dict[int, int]) -> int:
        return self.repo.rebind(ctx, moves)


_default_service: Optional[AuditLogService] = None


def get_audit_log_service() -> AuditLogService:
    global _default_service
    if _default_service is None:
        _default_service = AuditLogService()
    return _default_service


def set_audit_log_service(service: AuditLogService) -> None:
    global _default_service
    _default_service = service
