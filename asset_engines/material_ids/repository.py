from __future__ import annotations

from typing import List, Optional, Protocol

from asset_engines.common.identity import RequestContext
from asset_engines.material_ids.models import HEADER, TABLE_NAME, MaterialPrefix
from asset_engines.storage.sheet_store import SheetTable, open_workbook


class MaterialIDRepository(Protocol):
    def list(self, ctx: RequestContext) -> List[MaterialPrefix]: ...
    def get(self, ctx: RequestContext, material: str) -> Optional[MaterialPrefix]: ...
    def add(self, ctx: RequestContext, entry: MaterialPrefix) -> MaterialPrefix: ...
    def rename(self, ctx: RequestContext, old: str, new: str) -> bool: ...
    def delete(self, ctx: RequestContext, material: str) -> bool: ...


class SheetMaterialIDRepository:
    """Material -> prefix rows kept in the ``MaterialIDs`` table."""

    def _table(self, ctx: RequestContext) -> SheetTable:
        return open_workbook(ctx).create_table(TABLE_NAME, HEADER)

    def _find(self, table: SheetTable, material: str) -> Optional[int]:
        for row_ref, values in zip(table.row_refs(), table.rows()):
            if str(values[0]).strip() == material:
                return row_ref
        return None

    def list(self, ctx: RequestContext) -> List[MaterialPrefix]:
        return [
            MaterialPrefix(material=str(m).strip(), prefix=str(p).strip())
            for m, p in self._table(ctx).rows()
            if str(m).strip()
        ]

    def get(self, ctx: RequestContext, material: str) -> Optional[MaterialPrefix]:
        for entry in self.list(ctx):
            if entry.material == material:
                return entry
        return None

    def add(self, ctx: RequestContext, entry: MaterialPrefix) -> MaterialPrefix:
        self._table(ctx).append_row([entry.material, entry.prefix])
        return entry

    def rename(self, ctx: RequestContext, old: str, new: str) -> bool:
        table = self._table(ctx)
        row_ref = self._find(table, old)
        if row_ref is None:
            return False
        _, prefix = table.read_row(row_ref) or ["", ""]
        table.write_row(row_ref, [new, prefix])
        return True

    def delete(self, ctx: RequestContext, material: str) -> bool:
        table = self._table(ctx)
        row_ref = self._find(table, material)
        if row_ref is None:
            return False
        keep = [(v, f) for ref, v, f in zip(table.row_refs(), table.rows(), table.formats()) if ref != row_ref]
        table.replace_rows([v for v, _ in keep], [f for _, f in keep])
        return True
