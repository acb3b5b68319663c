"""Bootstrap helpers that lay out a project workbook."""
from __future__ import annotations

import logging
from typing import List

from pydantic import BaseModel, Field

from asset_engines.asset_records import models as asset_models
from asset_engines.audit_log import models as audit_models
from asset_engines.common.identity import RequestContext
from asset_engines.dropdowns import models as dropdown_models
from asset_engines.material_ids import models as material_models
from asset_engines.storage.sheet_store import open_workbook

logger = logging.getLogger(__name__)

WORKBOOK_LAYOUT = [
    (asset_models.TABLE_NAME, asset_models.ROW_SCHEMA),
    (audit_models.TABLE_NAME, audit_models.HEADER),
    (material_models.TABLE_NAME, material_models.HEADER),
    (dropdown_models.TABLE_NAME, dropdown_models.HEADER),
]


class ProvisioningResult(BaseModel):
    created: List[str] = Field(default_factory=list)
    existing: List[str] = Field(default_factory=list)


def provision_workbook(ctx: RequestContext) -> ProvisioningResult:
    """Create any missing tables; existing tables and their rows are left alone."""
    workbook = open_workbook(ctx)
    result = ProvisioningResult()
    with workbook.lock:
        for name, header in WORKBOOK_LAYOUT:
            if workbook.get_table(name) is not None:
                result.existing.append(name)
                continue
            workbook.create_table(name, header)
            result.created.append(name)
    if result.created:
        logger.info("Provisioned %s for %s", ", ".join(result.created), "/".join(ctx.scope_key))
    return result
