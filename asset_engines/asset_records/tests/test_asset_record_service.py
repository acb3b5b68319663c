"""
Tests for Asset Record Service.
"""

import pytest

from asset_engines.asset_records.models import AssetSubmission
from asset_engines.asset_records.service import AssetRecordService
from asset_engines.audit_log.service import AuditLogService
from asset_engines.common.errors import NotFoundError, ValidationError
from asset_engines.common.identity import RequestContext
from asset_engines.material_ids.service import MaterialIDRegistry
from asset_engines.notifications.gateway import InMemoryMessagingGateway
from asset_engines.notifications.service import NotificationService
from asset_engines.status_flow.machine import COLOR_ATTENTION, COLOR_NEW


class TestAssetRecordService:

    @pytest.fixture
    def ctx(self):
        return RequestContext(tenant_id="t_demo", env="dev")

    @pytest.fixture
    def gateway(self):
        return InMemoryMessagingGateway(recipients=["pm@example.com"])

    @pytest.fixture
    def service(self, gateway):
        return AssetRecordService(
            registry=MaterialIDRegistry(),
            audit=AuditLogService(),
            notifications=NotificationService(gateway),
        )

    def submit(self, name, material="Vinyl", **extra):
        return AssetSubmission(asset_name=name, material=material, quantity=extra.pop("quantity", 1), **extra)

    def test_identifiers_per_material(self, service, ctx):
        """Vinyl gets A, Foamcore gets B, numbering per prefix."""
        first = service.create(ctx, self.submit("Sign"))
        second = service.create(ctx, self.submit("Banner"))
        third = service.create(ctx, self.submit("Easel card", material="Foamcore"))
        assert [first.id, second.id, third.id] == ["A01", "A02", "B01"]
        assert first.status == "New"
        assert first.background == COLOR_NEW
        assert [r.row_reference for r in (first, second, third)] == [2, 3, 4]

    def test_create_derives_dimensions_and_defaults_status(self, service, ctx):
        record = service.create(ctx, self.submit("Sign", width="24", height="36", status="Approved"))
        assert record.dimensions == '24" x 36"'
        assert record.status == "New"
        stored = service.read(ctx, record.row_reference)
        assert stored.dimensions == '24" x 36"'
        assert stored.id == "A01"

    @pytest.mark.parametrize("missing", ["material", "asset_name", "quantity"])
    def test_missing_required_field_rejected_without_mutation(self, service, ctx, missing):
        fields = {"asset_name": "Sign", "material": "Vinyl", "quantity": 2}
        fields.pop(missing)
        with pytest.raises(ValidationError) as exc:
            service.create(ctx, AssetSubmission(**fields))
        assert exc.value.details["field"] == missing
        assert service.list_records(ctx) == []
        assert service.registry.list(ctx) == []
        assert service.audit.list_entries(ctx) == []

    def test_non_positive_quantity_rejected(self, service, ctx):
        with pytest.raises(ValidationError):
            service.create(ctx, self.submit("Sign", quantity=0))

    def test_update_preserves_id_and_single_audit_entry(self, service, ctx):
        record = service.create(ctx, self.submit("Sign"))
        for qty in (2, 3, 4):
            outcome = service.update(ctx, record.row_reference, AssetSubmission(quantity=qty, material="Foamcore"))
        assert outcome.record.id == "A01"
        assert outcome.record.quantity == 4
        entries = service.audit.list_entries(ctx)
        assert len(entries) == 1
        assert entries[0].row_reference == outcome.record.row_reference
        assert entries[0].snapshot["quantity"] == 4

    def test_update_missing_row_is_not_found(self, service, ctx):
        with pytest.raises(NotFoundError):
            service.update(ctx, 2, AssetSubmission(quantity=1))
        assert service.list_records(ctx) == []

    def test_update_cannot_blank_required_field(self, service, ctx):
        record = service.create(ctx, self.submit("Sign"))
        with pytest.raises(ValidationError):
            service.update(ctx, record.row_reference, AssetSubmission(asset_name="  "))
        assert service.read(ctx, record.row_reference).asset_name == "Sign"

    def test_status_change_reorders_and_audit_follows(self, service, ctx):
        service.create(ctx, self.submit("Sign"))
        service.create(ctx, self.submit("Banner"))
        service.create(ctx, self.submit("Easel card", material="Foamcore"))

        outcome = service.update(ctx, 2, AssetSubmission(status="In Progress"))

        assert outcome.record.row_reference == 4
        assert [r.id for r in service.list_records(ctx)] == ["A02", "B01", "A01"]
        assert [r.status for r in service.list_records(ctx)][:2] == ["New", "New"]
        by_row = {e.row_reference: e.snapshot["id"] for e in service.audit.list_entries(ctx)}
        assert by_row == {2: "A02", 3: "B01", 4: "A01"}

        service.update(ctx, 4, AssetSubmission(quantity=9))
        assert len(service.audit.list_entries(ctx)) == 3

    def test_requires_attention_sends_comment(self, service, ctx, gateway):
        service.create(ctx, self.submit("Sign"))
        service.create(ctx, self.submit("Banner"))

        outcome = service.update(
            ctx, 3, AssetSubmission(status="Requires Attention", comment="check alignment")
        )

        assert outcome.notification is not None and outcome.notification.success
        assert outcome.record.background == COLOR_ATTENTION
        payload = gateway.outbox[-1]
        assert payload.asset_id == "A02"
        assert payload.comment == "check alignment"
        assert payload.recipients == ["pm@example.com"]

    def test_failed_delivery_keeps_status(self, service, ctx, gateway):
        service.create(ctx, self.submit("Sign"))
        service.create(ctx, self.submit("Banner"))
        gateway.fail_with = "smtp down"

        outcome = service.update(
            ctx, 3, AssetSubmission(status="Requires Attention", comment="check alignment")
        )

        assert outcome.delivery_error and "smtp down" in outcome.delivery_error
        assert service.read(ctx, outcome.record.row_reference).status == "Requires Attention"

    def test_attention_without_comment_waits_for_comment(self, service, ctx, gateway):
        record = service.create(ctx, self.submit("Sign"))
        outcome = service.update(ctx, record.row_reference, AssetSubmission(status="Requires Attention"))
        assert outcome.needs_comment
        assert gateway.outbox == []

        with pytest.raises(ValidationError):
            service.notify_attention(ctx, outcome.record.row_reference, "")
        result = service.notify_attention(ctx, outcome.record.row_reference, "wrong colour")
        assert result.success
        assert gateway.outbox[-1].comment == "wrong colour"

    def test_notify_attention_requires_status(self, service, ctx):
        record = service.create(ctx, self.submit("Sign"))
        with pytest.raises(ValidationError):
            service.notify_attention(ctx, record.row_reference, "hello")

    def test_status_token_without_spaces_triggers_attention(self, service, ctx, gateway):
        service.create(ctx, self.submit("Sign"))
        service.create(ctx, self.submit("Banner"))

        outcome = service.update(
            ctx, 3, AssetSubmission(status="RequiresAttention", comment="check alignment")
        )

        assert outcome.record.status == "Requires Attention"
        assert outcome.record.background == COLOR_ATTENTION
        assert len(gateway.outbox) == 1
        assert gateway.outbox[0].asset_id == "A02"

    def test_edit_to_new_material_registers_prefix_but_keeps_id(self, service, ctx):
        record = service.create(ctx, self.submit("Sign"))
        outcome = service.update(ctx, record.row_reference, AssetSubmission(material="Foamcore"))
        assert outcome.record.id == "A01"
        assert service.registry.prefix_of(ctx, "Foamcore") == "B"
