import pytest

from asset_engines.common.identity import RequestContext
from asset_engines.storage.sheet_store import (
    FIRST_DATA_ROW,
    FileSystemWorkbookStore,
    InMemoryWorkbookStore,
)


@pytest.fixture
def ctx():
    return RequestContext(tenant_id="t_sheet", env="dev", project_id="p_show")


def test_rows_are_addressed_from_row_two(ctx):
    table = InMemoryWorkbookStore().open(ctx).create_table("T", ["A", "B"])
    first = table.append_row(["a1", "b1"])
    second = table.append_row(["a2"])
    assert first == FIRST_DATA_ROW == 2
    assert second == 3
    assert table.read_row(3) == ["a2", ""]
    assert table.read_record(2) == {"A": "a1", "B": "b1"}
    assert table.read_row(1) is None
    assert table.read_row(4) is None


def test_write_missing_row_raises(ctx):
    table = InMemoryWorkbookStore().open(ctx).create_table("T", ["A"])
    with pytest.raises(IndexError):
        table.write_row(2, ["x"])


def test_create_table_is_idempotent(ctx):
    workbook = InMemoryWorkbookStore().open(ctx)
    table = workbook.create_table("T", ["A"])
    table.append_row(["kept"])
    again = workbook.create_table("T", ["A", "B"])
    assert again is table
    assert again.column_values("A") == ["kept"]


def test_workbooks_are_scoped_per_context():
    store = InMemoryWorkbookStore()
    a = store.open(RequestContext(tenant_id="t_one", env="dev"))
    b = store.open(RequestContext(tenant_id="t_two", env="dev"))
    a.create_table("T", ["A"]).append_row(["x"])
    assert b.get_table("T") is None


def test_filesystem_store_persists_rows_and_formats(tmp_path, ctx):
    store = FileSystemWorkbookStore(base_dir=tmp_path)
    table = store.open(ctx).create_table("Assets", ["ID", "Status"])
    table.append_row(["A01", "New"], background="#fff2cc")
    table.append_row(["A02", "Delivered"])
    table.set_row_format(3, "#d9ead3")

    reopened = FileSystemWorkbookStore(base_dir=tmp_path).open(ctx).get_table("Assets")
    assert reopened is not None
    assert reopened.rows() == [["A01", "New"], ["A02", "Delivered"]]
    assert reopened.row_format(2) == "#fff2cc"
    assert reopened.row_format(3) == "#d9ead3"
    assert (tmp_path / "t_sheet" / "dev" / "p_show.json").exists()
