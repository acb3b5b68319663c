import pytest

from asset_engines.common.errors import DuplicateError, NotFoundError, ValidationError
from asset_engines.common.identity import RequestContext
from asset_engines.dropdowns.service import DropdownService
from asset_engines.material_ids.service import MaterialIDRegistry


@pytest.fixture
def ctx():
    return RequestContext(tenant_id="t_demo", env="dev")


@pytest.fixture
def service():
    return DropdownService(registry=MaterialIDRegistry())


def test_add_list_and_columns_are_independent(ctx, service):
    service.add_value(ctx, "venue", "Hall 1")
    service.add_value(ctx, "venue", "Hall 2")
    service.add_value(ctx, "area", "Lobby")
    assert service.list_values(ctx, "venue").values == ["Hall 1", "Hall 2"]
    assert service.list_values(ctx, "area").values == ["Lobby"]
    assert service.list_values(ctx, "item").values == []


def test_duplicate_and_missing_values(ctx, service):
    service.add_value(ctx, "item", "Banner")
    with pytest.raises(DuplicateError):
        service.add_value(ctx, "item", " Banner ")
    with pytest.raises(NotFoundError):
        service.update_value(ctx, "item", "Poster", "Flyer")
    with pytest.raises(NotFoundError):
        service.delete_value(ctx, "item", "Poster")
    with pytest.raises(ValidationError):
        service.add_value(ctx, "item", "")
    with pytest.raises(ValidationError):
        service.list_values(ctx, "colour")


def test_update_and_delete(ctx, service):
    for value in ("Banner", "Poster"):
        service.add_value(ctx, "item", value)
    with pytest.raises(DuplicateError):
        service.update_value(ctx, "item", "Banner", "Poster")
    assert service.update_value(ctx, "item", "Banner", "Flag").values == ["Flag", "Poster"]
    assert service.delete_value(ctx, "item", "Flag").values == ["Poster"]


def test_production_status_alias(ctx, service):
    service.add_value(ctx, "productionStatus", "Printed")
    assert service.list_values(ctx, "production_status").values == ["Printed"]


def test_material_values_drive_prefix_registry(ctx, service):
    service.add_value(ctx, "material", "Vinyl")
    service.add_value(ctx, "material", "Foamcore")
    assert service.registry.prefix_of(ctx, "Foamcore") == "B"

    service.update_value(ctx, "material", "Vinyl", "Adhesive Vinyl")
    assert service.registry.prefix_of(ctx, "Adhesive Vinyl") == "A"

    service.delete_value(ctx, "material", "Foamcore")
    assert service.registry.prefix_of(ctx, "Foamcore") == "Z"
    # next letter follows the highest one still in use
    service.add_value(ctx, "material", "Mesh")
    assert service.registry.prefix_of(ctx, "Mesh") == "B"
