from __future__ import annotations

import logging
from typing import List, Optional, Protocol

from asset_engines.asset_records.models import ROW_SCHEMA, TABLE_NAME, AssetRecord
from asset_engines.common.identity import RequestContext
from asset_engines.storage.sheet_store import SheetTable, open_workbook

logger = logging.getLogger(__name__)


class AssetRepository(Protocol):
    def table(self, ctx: RequestContext) -> SheetTable: ...
    def list(self, ctx: RequestContext) -> List[AssetRecord]: ...
    def get(self, ctx: RequestContext, row_reference: int) -> Optional[AssetRecord]: ...
    def append(self, ctx: RequestContext, record: AssetRecord) -> int: ...
    def write(self, ctx: RequestContext, row_reference: int, record: AssetRecord) -> None: ...
    def identifiers(self, ctx: RequestContext) -> List[str]: ...


class SheetAssetRepository:
    """Assets stored one per row in the ``Assets`` table."""

    def table(self, ctx: RequestContext) -> SheetTable:
        return open_workbook(ctx).create_table(TABLE_NAME, ROW_SCHEMA)

    def _materialize(self, table: SheetTable, row_reference: int, values: list) -> AssetRecord:
        record = AssetRecord.from_row(values, row_reference=row_reference)
        record.background = table.row_format(row_reference)
        return record

    def list(self, ctx: RequestContext) -> List[AssetRecord]:
        table = self.table(ctx)
        records = []
        for row_ref, values in zip(table.row_refs(), table.rows()):
            try:
                records.append(self._materialize(table, row_ref, values))
            except ValueError as exc:
                logger.warning("Skipping unreadable asset row %s: %s", row_ref, exc)
        return records

    def get(self, ctx: RequestContext, row_reference: int) -> Optional[AssetRecord]:
        table = self.table(ctx)
        values = table.read_row(row_reference)
        if values is None:
            return None
        return self._materialize(table, row_reference, values)

    def append(self, ctx: RequestContext, record: AssetRecord) -> int:
        return self.table(ctx).append_row(record.to_row(), background=record.background)

    def write(self, ctx: RequestContext, row_reference: int, record: AssetRecord) -> None:
        table = self.table(ctx)
        table.write_row(row_reference, record.to_row())
        table.set_row_format(row_reference, record.background)

    def identifiers(self, ctx: RequestContext) -> List[str]:
        return [str(v).strip() for v in self.table(ctx).column_values("ID") if str(v).strip()]
