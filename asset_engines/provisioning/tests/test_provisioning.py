from asset_engines.asset_records.models import ROW_SCHEMA
from asset_engines.common.identity import RequestContext
from asset_engines.provisioning.bootstrap import provision_workbook
from asset_engines.storage.sheet_store import open_workbook


def test_provision_creates_layout_once():
    ctx = RequestContext(tenant_id="t_demo", env="dev", project_id="p_expo")
    first = provision_workbook(ctx)
    assert first.created == ["Assets", "AuditLog", "MaterialIDs", "Dropdowns"]
    assert first.existing == []

    workbook = open_workbook(ctx)
    assets = workbook.get_table("Assets")
    assert assets.header == ROW_SCHEMA
    assert len(ROW_SCHEMA) == 18
    assert workbook.get_table("Dropdowns").header == [
        "Item", "Material", "Status", "Venue", "Area", "ProductionStatus",
    ]
    assert workbook.get_table("Dropdowns").row_count() == 0

    assets.append_row(["A01"])
    second = provision_workbook(ctx)
    assert second.created == []
    assert workbook.get_table("Assets").row_count() == 1
