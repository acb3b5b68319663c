from __future__ import annotations

from fastapi import APIRouter, Depends, Path

from asset_engines.asset_records.operations import AssetOperations, get_asset_operations
from asset_engines.common.identity import RequestContext, get_request_context
from asset_engines.common.results import OperationResult, unwrap_or_raise
from asset_engines.dropdowns.models import DropdownRenameRequest, DropdownValueRequest

RESOURCE_KIND = "dropdowns"

router = APIRouter(prefix="/dropdowns", tags=["dropdowns"])


@router.get("/{field}", response_model=OperationResult)
def list_values(
    field: str = Path(...),
    context: RequestContext = Depends(get_request_context),
    operations: AssetOperations = Depends(get_asset_operations),
) -> OperationResult:
    return unwrap_or_raise(operations.list_dropdown_values(context, field), RESOURCE_KIND)


@router.post("/{field}", response_model=OperationResult)
def add_value(
    payload: DropdownValueRequest,
    field: str = Path(...),
    context: RequestContext = Depends(get_request_context),
    operations: AssetOperations = Depends(get_asset_operations),
) -> OperationResult:
    return unwrap_or_raise(operations.add_dropdown_value(context, field, payload.value), RESOURCE_KIND)


@router.put("/{field}", response_model=OperationResult)
def update_value(
    payload: DropdownRenameRequest,
    field: str = Path(...),
    context: RequestContext = Depends(get_request_context),
    operations: AssetOperations = Depends(get_asset_operations),
) -> OperationResult:
    return unwrap_or_raise(
        operations.update_dropdown_value(context, field, payload.old, payload.new), RESOURCE_KIND
    )


@router.delete("/{field}/{value}", response_model=OperationResult)
def delete_value(
    field: str = Path(...),
    value: str = Path(...),
    context: RequestContext = Depends(get_request_context),
    operations: AssetOperations = Depends(get_asset_operations),
) -> OperationResult:
    return unwrap_or_raise(operations.delete_dropdown_value(context, field, value), RESOURCE_KIND)
