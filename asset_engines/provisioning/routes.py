from __future__ import annotations

from fastapi import APIRouter, Depends

from asset_engines.common.identity import RequestContext, get_request_context
from asset_engines.provisioning.bootstrap import ProvisioningResult, provision_workbook

router = APIRouter(prefix="/provisioning", tags=["provisioning"])


@router.post("", response_model=ProvisioningResult)
def provision(context: RequestContext = Depends(get_request_context)) -> ProvisioningResult:
    return provision_workbook(context)
