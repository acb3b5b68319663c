from __future__ import annotations

import logging
from typing import Optional

from asset_engines.asset_records.models import AssetRecord
from asset_engines.asset_records.service import AssetRecordService, get_asset_record_service
from asset_engines.common.errors import ValidationError
from asset_engines.common.identity import RequestContext
from asset_engines.status_flow.models import NEW_STATUS
from asset_engines.storage.sheet_store import open_workbook

logger = logging.getLogger(__name__)


class ReorderService:
    """Clones an asset into a new ``New`` row that points back at its source."""

    def __init__(self, records: Optional[AssetRecordService] = None) -> None:
        self.records = records or get_asset_record_service()

    def clone(self, ctx: RequestContext, source_row: int, quantity: int) -> AssetRecord:
        if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity < 1:
            raise ValidationError("Quantity must be a positive whole number", details={"field": "quantity"})

        with open_workbook(ctx).lock:
            source = self.records.get(ctx, source_row)
            prefix = self.records.registry.prefix_of(ctx, source.material)
            clone = source.model_copy(
                update={
                    "id": self.records.identifiers.next(ctx, prefix),
                    "asset_name": f"{source.id} - {source.asset_name}",
                    "status": NEW_STATUS,
                    "quantity": quantity,
                    "row_reference": None,
                }
            )
            snapshot = clone.model_dump(mode="json", exclude={"row_reference", "background"})
            snapshot["reorderedFrom"] = source.id
            clone = self.records.insert(ctx, clone, snapshot)
        logger.info("Reordered %s as %s (qty %s)", source.id, clone.id, quantity)
        return clone

