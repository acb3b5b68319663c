import pytest

from asset_engines.common.errors import DuplicateError, NotFoundError, ValidationError
from asset_engines.common.identity import RequestContext
from asset_engines.material_ids.models import MaterialPrefix
from asset_engines.material_ids.service import MaterialIDRegistry


@pytest.fixture
def ctx():
    return RequestContext(tenant_id="t_demo", env="dev")


@pytest.fixture
def registry():
    return MaterialIDRegistry()


def test_letters_assigned_in_first_use_order(ctx, registry):
    vinyl = registry.assign(ctx, "Vinyl")
    foamcore = registry.assign(ctx, "Foamcore")
    assert (vinyl, foamcore) == ("A", "B")
    assert vinyl < foamcore
    assert registry.assign(ctx, " Vinyl ") == "A"


def test_unmapped_material_falls_back_to_z(ctx, registry):
    assert registry.prefix_of(ctx, "Mesh") == "Z"
    registry.assign(ctx, "Mesh")
    assert registry.prefix_of(ctx, "Mesh") == "A"


def test_deleted_gap_is_not_reused(ctx, registry):
    for name in ("Vinyl", "Foamcore", "Mesh"):
        registry.assign(ctx, name)
    registry.delete(ctx, "Foamcore")
    assert registry.assign(ctx, "Coroplast") == "D"


def test_rename_keeps_prefix(ctx, registry):
    registry.assign(ctx, "Vinyl")
    registry.rename(ctx, "Vinyl", "Adhesive Vinyl")
    assert registry.prefix_of(ctx, "Adhesive Vinyl") == "A"
    assert registry.prefix_of(ctx, "Vinyl") == "Z"


def test_rename_and_delete_errors(ctx, registry):
    registry.assign(ctx, "Vinyl")
    registry.assign(ctx, "Foamcore")
    with pytest.raises(DuplicateError):
        registry.rename(ctx, "Vinyl", "Foamcore")
    with pytest.raises(NotFoundError):
        registry.rename(ctx, "Paper", "Card")
    with pytest.raises(NotFoundError):
        registry.delete(ctx, "Paper")
    with pytest.raises(ValidationError):
        registry.assign(ctx, "  ")


def test_prefixes_exhausted_after_z(ctx, registry):
    registry.repo.add(ctx, MaterialPrefix(material="Last", prefix="Z"))
    with pytest.raises(ValidationError):
        registry.assign(ctx, "One more")
