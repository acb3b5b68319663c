from __future__ import annotations

from itertools import zip_longest
from typing import List, Protocol

from asset_engines.common.identity import RequestContext
from asset_engines.dropdowns.models import HEADER, TABLE_NAME
from asset_engines.storage.sheet_store import SheetTable, open_workbook


class DropdownRepository(Protocol):
    def values(self, ctx: RequestContext, column: str) -> List[str]: ...
    def save(self, ctx: RequestContext, column: str, values: List[str]) -> None: ...


class SheetDropdownRepository:
    """Each dropdown is one column of the ``Dropdowns`` table, top-aligned."""

    def _table(self, ctx: RequestContext) -> SheetTable:
        return open_workbook(ctx).create_table(TABLE_NAME, HEADER)

    def values(self, ctx: RequestContext, column: str) -> List[str]:
        return [str(v).strip() for v in self._table(ctx).column_values(column) if str(v).strip()]

    def save(self, ctx: RequestContext, column: str, values: List[str]) -> None:
        table = self._table(ctx)
        columns = [
            values if name == column else [str(v).strip() for v in table.column_values(name) if str(v).strip()]
            for name in table.header
        ]
        rows = [list(r) for r in zip_longest(*columns, fillvalue="")]
        table.replace_rows(rows)
