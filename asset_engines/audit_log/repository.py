from __future__ import annotations

import logging
from typing import Dict, List, Optional, Protocol

from asset_engines.audit_log.models import HEADER, TABLE_NAME, AuditLogEntry
from asset_engines.common.identity import RequestContext
from asset_engines.storage.sheet_store import SheetTable, open_workbook

logger = logging.getLogger(__name__)


class AuditLogRepository(Protocol):
    def list(self, ctx: RequestContext) -> List[AuditLogEntry]: ...
    def find(self, ctx: RequestContext, row_reference: int) -> Optional[AuditLogEntry]: ...
    def upsert(self, ctx: RequestContext, entry: AuditLogEntry) -> AuditLogEntry: ...
    def rebind(self, ctx: RequestContext, moves: Dict[int, int]) -> int: ...


class SheetAuditLogRepository:
    def _table(self, ctx: RequestContext) -> SheetTable:
        return open_workbook(ctx).create_table(TABLE_NAME, HEADER)

    def _row_of(self, table: SheetTable, row_reference: int) -> Optional[int]:
        for log_ref, values in zip(table.row_refs(), table.rows()):
            if str(values[1]) == str(row_reference):
                return log_ref
        return None

    def list(self, ctx: RequestContext) -> List[AuditLogEntry]:
        entries = []
        for values in self._table(ctx).rows():
            try:
                entries.append(AuditLogEntry.from_row(values))
            except (TypeError, ValueError) as exc:
                logger.warning("Skipping malformed audit row %s: %s", values[:2], exc)
        return entries

    def find(self, ctx: RequestContext, row_reference: int) -> Optional[AuditLogEntry]:
        table = self._table(ctx)
        log_ref = self._row_of(table, row_reference)
        if log_ref is None:
            return None
        return AuditLogEntry.from_row(table.read_row(log_ref) or [])

    def upsert(self, ctx: RequestContext, entry: AuditLogEntry) -> AuditLogEntry:
        table = self._table(ctx)
        log_ref = self._row_of(table, entry.row_reference)
        if log_ref is None:
            table.append_row(entry.to_row())
        else:
            table.write_row(log_ref, entry.to_row())
        return entry

    def rebind(self, ctx: RequestContext, moves: Dict[int, int]) -> int:
        """Apply old->new row reference moves to every entry at once."""
        if not moves:
            return 0
        table = self._table(ctx)
        rows = table.rows()
        changed = 0
        for values in rows:
            try:
                current = int(values[1])
            except (TypeError, ValueError):
                continue
            if current in moves:
                values[1] = moves[current]
                changed += 1
        if changed:
            table.replace_rows(rows, table.formats())
        return changed
