"""Operations exposed to the add/edit forms.

Every call returns an ``OperationResult``; domain errors never escape. Anything
else (storage or environment failures) propagates to the host.
"""
from __future__ import annotations

import logging
from typing import Any, Callable, Dict, Optional, Union

import pydantic

from asset_engines.asset_records.models import AssetSubmission
from asset_engines.asset_records.reorder import ReorderService
from asset_engines.asset_records.service import AssetRecordService, get_asset_record_service
from asset_engines.common.errors import AssetEngineError, ValidationError
from asset_engines.common.identity import RequestContext
from asset_engines.common.results import OperationResult
from asset_engines.dropdowns.service import DropdownService

logger = logging.getLogger(__name__)

Fields = Union[AssetSubmission, Dict[str, Any]]


def _submission(fields: Fields) -> AssetSubmission:
    if isinstance(fields, AssetSubmission):
        return fields
    try:
        return AssetSubmission.model_validate(fields or {})
    except pydantic.ValidationError as exc:
        first = exc.errors()[0]
        field = ".".join(str(p) for p in first.get("loc", ())) or "fields"
        raise ValidationError(f"Invalid value for {field}: {first.get('msg')}", details={"field": field}) from exc


def _guard(action: str, fn: Callable[[], OperationResult]) -> OperationResult:
    try:
        return fn()
    except AssetEngineError as exc:
        logger.info("%s rejected: %s (%s)", action, exc.message, exc.code)
        return OperationResult.failed(exc)


class AssetOperations:
    def __init__(
        self,
        records: Optional[AssetRecordService] = None,
        reorders: Optional[ReorderService] = None,
        dropdowns: Optional[DropdownService] = None,
    ) -> None:
        self.records = records or get_asset_record_service()
        self.reorders = reorders or ReorderService(self.records)
        self.dropdowns = dropdowns or DropdownService(registry=self.records.registry)

    def submit_new(self, ctx: RequestContext, fields: Fields) -> OperationResult:
        def run() -> OperationResult:
            record = self.records.create(ctx, _submission(fields))
            return OperationResult.ok(
                f"Asset {record.id} created",
                row_reference=record.row_reference,
                record=record.model_dump(mode="json", by_alias=True),
            )
        return _guard("submit_new", run)

    def submit_edit(self, ctx: RequestContext, row_reference: int, fields: Fields) -> OperationResult:
        def run() -> OperationResult:
            outcome = self.records.update(ctx, row_reference, _submission(fields))
            record = outcome.record
            message = f"Asset {record.id} updated"
            if outcome.needs_comment:
                message += "; a comment is needed to notify recipients"
            elif outcome.delivery_error:
                message += f"; notification failed: {outcome.delivery_error}"
            elif outcome.notification:
                message += "; recipients notified"
            return OperationResult.ok(
                message,
                row_reference=record.row_reference,
                record=record.model_dump(mode="json", by_alias=True),
                needs_comment=outcome.needs_comment,
                notification_sent=bool(outcome.notification and outcome.notification.success),
                delivery_error=outcome.delivery_error,
            )
        return _guard("submit_edit", run)

    def reorder(self, ctx: RequestContext, source_row: int, quantity: Any) -> OperationResult:
        def run() -> OperationResult:
            clone = self.reorders.clone(ctx, source_row, quantity)
            return OperationResult.ok(
                f"Asset {clone.id} created as a reorder",
                row_reference=clone.row_reference,
                record=clone.model_dump(mode="json", by_alias=True),
            )
        return _guard("reorder", run)

    def fetch(self, ctx: RequestContext, row_reference: int) -> OperationResult:
        def run() -> OperationResult:
            record = self.records.get(ctx, row_reference)
            return OperationResult.ok(
                f"Asset {record.id} loaded",
                row_reference=row_reference,
                record=record.model_dump(mode="json", by_alias=True),
            )
        return _guard("fetch", run)

    def list_assets(self, ctx: RequestContext) -> OperationResult:
        records = self.records.list_records(ctx)
        return OperationResult.ok(
            f"{len(records)} asset(s)",
            records=[r.model_dump(mode="json", by_alias=True) for r in records],
        )

    def notify_attention(self, ctx: RequestContext, row_reference: int, comment: str) -> OperationResult:
        def run() -> OperationResult:
            result = self.records.notify_attention(ctx, row_reference, comment)
            return OperationResult.ok("Notification sent", notification_id=result.notification_id)
        return _guard("notify_attention", run)

    # --- dropdowns ---
    def list_dropdown_values(self, ctx: RequestContext, field: str) -> OperationResult:
        return _guard("list_dropdown_values", lambda: self._dropdown_result(self.dropdowns.list_values(ctx, field), "loaded"))

    def add_dropdown_value(self, ctx: RequestContext, field: str, value: str) -> OperationResult:
        return _guard("add_dropdown_value", lambda: self._dropdown_result(self.dropdowns.add_value(ctx, field, value), "added"))

    def update_dropdown_value(self, ctx: RequestContext, field: str, old: str, new: str) -> OperationResult:
        return _guard(
            "update_dropdown_value",
            lambda: self._dropdown_result(self.dropdowns.update_value(ctx, field, old, new), "updated"),
        )

    def delete_dropdown_value(self, ctx: RequestContext, field: str, value: str) -> OperationResult:
        return _guard(
            "delete_dropdown_value",
            lambda: self._dropdown_result(self.dropdowns.delete_value(ctx, field, value), "deleted"),
        )

    @staticmethod
    def _dropdown_result(dropdown, verb: str) -> OperationResult:
        return OperationResult.ok(f"Dropdown {dropdown.field} {verb}", field=dropdown.field, values=dropdown.values)


_default_operations: Optional[AssetOperations] = None


def get_asset_operations() -> AssetOperations:
    global _default_operations
    if _default_operations is None:
        _default_operations = AssetOperations()
    return _default_operations


def set_asset_operations(operations: AssetOperations) -> None:
    global _default_operations
    _default_operations = operations
