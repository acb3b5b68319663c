from __future__ import annotations

from fastapi import APIRouter, Depends, Path

from asset_engines.asset_records.models import AssetSubmission, AttentionRequest, ReorderRequest
from asset_engines.asset_records.operations import AssetOperations, get_asset_operations
from asset_engines.common.identity import RequestContext, get_request_context
from asset_engines.common.results import OperationResult, unwrap_or_raise

RESOURCE_KIND = "assets"

router = APIRouter(prefix="/assets", tags=["assets"])


@router.post("", response_model=OperationResult)
def submit_new(
    payload: AssetSubmission,
    context: RequestContext = Depends(get_request_context),
    operations: AssetOperations = Depends(get_asset_operations),
) -> OperationResult:
    return unwrap_or_raise(operations.submit_new(context, payload), RESOURCE_KIND)


@router.get("", response_model=OperationResult)
def list_assets(
    context: RequestContext = Depends(get_request_context),
    operations: AssetOperations = Depends(get_asset_operations),
) -> OperationResult:
    return operations.list_assets(context)


@router.get("/rows/{row_reference}", response_model=OperationResult)
def fetch(
    row_reference: int = Path(...),
    context: RequestContext = Depends(get_request_context),
    operations: AssetOperations = Depends(get_asset_operations),
) -> OperationResult:
    return unwrap_or_raise(operations.fetch(context, row_reference), RESOURCE_KIND)


@router.put("/rows/{row_reference}", response_model=OperationResult)
def submit_edit(
    payload: AssetSubmission,
    row_reference: int = Path(...),
    context: RequestContext = Depends(get_request_context),
    operations: AssetOperations = Depends(get_asset_operations),
) -> OperationResult:
    return unwrap_or_raise(operations.submit_edit(context, row_reference, payload), RESOURCE_KIND)


@router.post("/rows/{row_reference}/reorder", response_model=OperationResult)
def reorder(
    payload: ReorderRequest,
    row_reference: int = Path(...),
    context: RequestContext = Depends(get_request_context),
    operations: AssetOperations = Depends(get_asset_operations),
) -> OperationResult:
    return unwrap_or_raise(operations.reorder(context, row_reference, payload.quantity), RESOURCE_KIND)


@router.post("/rows/{row_reference}/attention", response_model=OperationResult)
def notify_attention(
    payload: AttentionRequest,
    row_reference: int = Path(...),
    context: RequestContext = Depends(get_request_context),
    operations: AssetOperations = Depends(get_asset_operations),
) -> OperationResult:
    return unwrap_or_raise(operations.notify_attention(context, row_reference, payload.comment), RESOURCE_KIND)
