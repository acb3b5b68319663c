"""Display order for the Assets table.

Rows whose status is exactly ``New`` come first, in their current relative
order; every other row follows, sorted by identifier using plain string
comparison. Re-running on an ordered table changes nothing.
"""
from __future__ import annotations

import logging
from typing import Dict, List, Optional

from asset_engines.asset_records.models import ROW_SCHEMA
from asset_engines.asset_records.repository import AssetRepository, SheetAssetRepository
from asset_engines.common.identity import RequestContext
from asset_engines.status_flow.machine import background_for
from asset_engines.status_flow.models import NEW_STATUS
from asset_engines.storage.sheet_store import FIRST_DATA_ROW, open_workbook

logger = logging.getLogger(__name__)

_ID_COL = ROW_SCHEMA.index("ID")
_STATUS_COL = ROW_SCHEMA.index("Status")


def display_order(rows: List[List]) -> List[int]:
    """Indices of ``rows`` in display order."""
    pinned = [i for i, r in enumerate(rows) if str(r[_STATUS_COL]).strip() == NEW_STATUS]
    rest = [i for i, r in enumerate(rows) if str(r[_STATUS_COL]).strip() != NEW_STATUS]
    rest.sort(key=lambda i: str(rows[i][_ID_COL]))
    return pinned + rest


class OrderMaintainer:
    def __init__(self, repo: Optional[AssetRepository] = None) -> None:
        self.repo = repo or SheetAssetRepository()

    def apply(self, ctx: RequestContext) -> Dict[int, int]:
        """Reorder the table if needed; returns ``{old_row: new_row}`` for moved rows."""
        with open_workbook(ctx).lock:
            table = self.repo.table(ctx)
            rows = table.rows()
            order = display_order(rows)
            if order == list(range(len(rows))):
                logger.debug("Assets table already ordered (%s rows)", len(rows))
                return {}

            reordered = [rows[i] for i in order]
            # moved rows lose their old formatting, so recolour from status
            formats = [background_for(r[_STATUS_COL]) for r in reordered]
            table.replace_rows(reordered, formats)

        moves = {
            FIRST_DATA_ROW + old: FIRST_DATA_ROW + new
            for new, old in enumerate(order)
            if old != new
        }
        logger.info("Reordered assets table: %s row(s) moved", len(moves))
        return moves
