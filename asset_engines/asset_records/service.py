"""
Asset Record Service.

Creates and edits asset rows. Every mutation runs under the workbook lock in a
fixed order (identifier, row write, treatment, audit entry, reorder) so a
reserved identifier is never visible without its row. The attention notice is
sent after the lock is released and never undoes the status change.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from pydantic import BaseModel

from asset_engines.asset_records.identifiers import IdentifierGenerator
from asset_engines.asset_records.models import AssetRecord, AssetSubmission
from asset_engines.asset_records.ordering import OrderMaintainer
from asset_engines.asset_records.repository import AssetRepository, SheetAssetRepository
from asset_engines.audit_log.service import AuditLogService, get_audit_log_service
from asset_engines.common.errors import ExternalDeliveryError, NotFoundError, ValidationError
from asset_engines.common.identity import RequestContext
from asset_engines.material_ids.service import MaterialIDRegistry, get_material_registry
from asset_engines.notifications.models import DeliveryResult
from asset_engines.notifications.service import NotificationService, get_notification_service
from asset_engines.status_flow.machine import background_for, entered_attention, normalize_status
from asset_engines.status_flow.models import NEW_STATUS, AssetStatus
from asset_engines.storage.sheet_store import open_workbook

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("material", "asset_name", "quantity")
_TEXT_FIELDS = (
    "area", "asset_name", "status", "dimensions", "item", "material", "venue",
    "location", "artwork_ref", "image_ref", "production_status",
)


class UpdateOutcome(BaseModel):
    record: AssetRecord
    needs_comment: bool = False
    notification: Optional[DeliveryResult] = None
    delivery_error: Optional[str] = None


def _validate_required(fields: Dict[str, Any]) -> None:
    for name in REQUIRED_FIELDS:
        value = fields.get(name)
        if value is None or (isinstance(value, str) and not value.strip()):
            raise ValidationError(f"Missing required field: {name}", details={"field": name})
    quantity = fields["quantity"]
    if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity < 1:
        raise ValidationError("Quantity must be a positive whole number", details={"field": "quantity"})


def _clean_fields(fields: Dict[str, Any]) -> Dict[str, Any]:
    cleaned = dict(fields)
    for name in _TEXT_FIELDS:
        if name in cleaned and cleaned[name] is None:
            cleaned[name] = ""
    for name in ("double_sided", "die_cut"):
        if name in cleaned and cleaned[name] is None:
            cleaned[name] = False
    return cleaned


class AssetRecordService:
    def __init__(
        self,
        repo: Optional[AssetRepository] = None,
        registry: Optional[MaterialIDRegistry] = None,
        audit: Optional[AuditLogService] = None,
        notifications: Optional[NotificationService] = None,
    ) -> None:
        self.repo = repo or SheetAssetRepository()
        self.registry = registry or get_material_registry()
        self.audit = audit or get_audit_log_service()
        self.notifications = notifications or get_notification_service()
        self.identifiers = IdentifierGenerator(self.repo)
        self.ordering = OrderMaintainer(self.repo)

    # --- reads ---
    def read(self, ctx: RequestContext, row_reference: int) -> Optional[AssetRecord]:
        return self.repo.get(ctx, row_reference)

    def get(self, ctx: RequestContext, row_reference: int) -> AssetRecord:
        record = self.repo.get(ctx, row_reference)
        if not record:
            raise NotFoundError(f"No asset at row {row_reference}", code="asset.not_found")
        return record

    def list_records(self, ctx: RequestContext) -> List[AssetRecord]:
        return self.repo.list(ctx)

    # --- mutations ---
    def create(self, ctx: RequestContext, submission: AssetSubmission) -> AssetRecord:
        fields = _clean_fields(submission.record_fields())
        _validate_required(fields)
        fields["status"] = NEW_STATUS

        with open_workbook(ctx).lock:
            prefix = self.registry.assign(ctx, fields["material"])
            record = AssetRecord(id=self.identifiers.next(ctx, prefix), **fields)
            snapshot = record.model_dump(mode="json", exclude={"row_reference", "background"})
            record = self.insert(ctx, record, snapshot)
        logger.info("Created asset %s at row %s", record.id, record.row_reference)
        return record

    def insert(self, ctx: RequestContext, record: AssetRecord, snapshot: Dict[str, Any]) -> AssetRecord:
        """Append a fully built record, audit it and restore table order."""
        with open_workbook(ctx).lock:
            record.background = background_for(record.status)
            row_ref = self.repo.append(ctx, record)
            self.audit.record(ctx, row_ref, snapshot)
            final_ref = self._reorder(ctx).get(row_ref, row_ref)
        record.row_reference = final_ref
        return record

    def update(self, ctx: RequestContext, row_reference: int, submission: AssetSubmission) -> UpdateOutcome:
        changes = _clean_fields(submission.record_fields())
        with open_workbook(ctx).lock:
            existing = self.get(ctx, row_reference)
            merged = {
                **existing.model_dump(exclude={"id", "row_reference", "background"}),
                **changes,
            }
            _validate_required(merged)
            if merged["material"] != existing.material:
                # the id keeps its old prefix; the registry just learns the material
                self.registry.assign(ctx, merged["material"])
            merged["status"] = normalize_status(merged.get("status"))
            record = AssetRecord(id=existing.id, **merged)
            record.background = background_for(record.status)

            self.repo.write(ctx, row_reference, record)
            snapshot = record.model_dump(mode="json", exclude={"row_reference", "background"})
            self.audit.record(ctx, row_reference, snapshot)
            record.row_reference = self._reorder(ctx).get(row_reference, row_reference)
        logger.info("Updated asset %s (row %s -> %s)", record.id, row_reference, record.row_reference)

        outcome = UpdateOutcome(record=record)
        if entered_attention(existing.status, record.status):
            comment = (submission.comment or "").strip()
            if not comment:
                outcome.needs_comment = True
                return outcome
            try:
                outcome.notification = self._send_attention(ctx, record, comment)
            except ExternalDeliveryError as exc:
                outcome.delivery_error = exc.message
        return outcome

    def notify_attention(self, ctx: RequestContext, row_reference: int, comment: str) -> DeliveryResult:
        record = self.get(ctx, row_reference)
        if record.status != AssetStatus.REQUIRES_ATTENTION.value:
            raise ValidationError(
                f"Asset {record.id} is not in {AssetStatus.REQUIRES_ATTENTION.value} status",
                code="asset.not_requires_attention",
            )
        return self._send_attention(ctx, record, comment)

    # --- helpers ---
    def _send_attention(self, ctx: RequestContext, record: AssetRecord, comment: str) -> DeliveryResult:
        payload = self.notifications.compose_attention_notice(
            ctx,
            record.model_dump(),
            record.row_reference or 0,
            comment,
        )
        return self.notifications.send(payload)

    def _reorder(self, ctx: RequestContext) -> Dict[int, int]:
        moves = self.ordering.apply(ctx)
        if moves:
            self.audit.rebind(ctx, moves)
        return moves


_default_service: Optional[AssetRecordService] = None


def get_asset_record_service() -> AssetRecordService:
    global _default_service
    if _default_service is None:
        _default_service = AssetRecordService()
    return _default_service


def set_asset_record_service(service: AssetRecordService) -> None:
    global _default_service
    _default_service = service
