import re

import pytest

from asset_engines.audit_log.service import AuditLogService
from asset_engines.common.identity import RequestContext


@pytest.fixture
def ctx():
    return RequestContext(tenant_id="t_demo", env="dev")


def test_first_record_appends_entry(ctx):
    audit = AuditLogService()
    log_id = audit.record(ctx, 2, {"id": "A01", "quantity": 1})
    assert re.match(r"^LOG-\d+-2$", log_id)
    entry = audit.get(ctx, 2)
    assert entry is not None
    assert entry.snapshot == {"id": "A01", "quantity": 1}


def test_repeat_record_overwrites_in_place(ctx):
    audit = AuditLogService()
    audit.record(ctx, 2, {"id": "A01", "quantity": 1})
    audit.record(ctx, 3, {"id": "A02", "quantity": 1})
    audit.record(ctx, 2, {"id": "A01", "quantity": 5})
    entries = audit.list_entries(ctx)
    assert [e.row_reference for e in entries] == [2, 3]
    assert audit.get(ctx, 2).snapshot["quantity"] == 5


def test_rebind_applies_moves_together(ctx):
    audit = AuditLogService()
    audit.record(ctx, 2, {"id": "A01"})
    audit.record(ctx, 3, {"id": "A02"})
    audit.record(ctx, 4, {"id": "B01"})
    assert audit.rebind(ctx, {2: 4, 4: 2}) == 2
    assert audit.get(ctx, 4).snapshot["id"] == "A01"
    assert audit.get(ctx, 2).snapshot["id"] == "B01"
    assert audit.get(ctx, 3).snapshot["id"] == "A02"
    assert audit.rebind(ctx, {}) == 0
