from __future__ import annotations

import logging
from typing import Optional

from asset_engines.common.errors import DuplicateError, NotFoundError, ValidationError
from asset_engines.common.identity import RequestContext
from asset_engines.dropdowns.models import DROPDOWN_FIELDS, FIELD_ALIASES, DropdownValues
from asset_engines.dropdowns.repository import DropdownRepository, SheetDropdownRepository
from asset_engines.material_ids.service import MaterialIDRegistry, get_material_registry
from asset_engines.storage.sheet_store import open_workbook

logger = logging.getLogger(__name__)

MATERIAL_FIELD = "material"


def resolve_field(field: str) -> str:
    key = FIELD_ALIASES.get(field, field)
    if key not in DROPDOWN_FIELDS:
        raise ValidationError(
            f"Unknown dropdown field '{field}'. Use one of {sorted(DROPDOWN_FIELDS)}",
            code="dropdown.unknown_field",
            details={"field": field},
        )
    return key


def _clean(value: Optional[str], name: str = "value") -> str:
    text = str(value or "").strip()
    if not text:
        raise ValidationError(f"Dropdown {name} is required", details={"field": name})
    return text


class DropdownService:
    """Dropdown lists for the forms. Material changes keep the prefix registry in step."""

    def __init__(self, repo: Optional[DropdownRepository] = None, registry: Optional[MaterialIDRegistry] = None) -> None:
        self.repo = repo or SheetDropdownRepository()
        self.registry = registry or get_material_registry()

    def list_values(self, ctx: RequestContext, field: str) -> DropdownValues:
        key = resolve_field(field)
        return DropdownValues(field=key, values=self.repo.values(ctx, DROPDOWN_FIELDS[key]))

    def add_value(self, ctx: RequestContext, field: str, value: str) -> DropdownValues:
        key = resolve_field(field)
        text = _clean(value)
        with open_workbook(ctx).lock:
            values = self.repo.values(ctx, DROPDOWN_FIELDS[key])
            if text in values:
                raise DuplicateError(f"'{text}' already exists in {key}", code="dropdown.duplicate")
            if key == MATERIAL_FIELD:
                self.registry.assign(ctx, text)
            values.append(text)
            self.repo.save(ctx, DROPDOWN_FIELDS[key], values)
        logger.info("Added %s to dropdown %s", text, key)
        return DropdownValues(field=key, values=values)

    def update_value(self, ctx: RequestContext, field: str, old: str, new: str) -> DropdownValues:
        key = resolve_field(field)
        old_text, new_text = _clean(old, "old"), _clean(new, "new")
        with open_workbook(ctx).lock:
            values = self.repo.values(ctx, DROPDOWN_FIELDS[key])
            if old_text not in values:
                raise NotFoundError(f"'{old_text}' not found in {key}", code="dropdown.not_found")
            if new_text != old_text and new_text in values:
                raise DuplicateError(f"'{new_text}' already exists in {key}", code="dropdown.duplicate")
            if key == MATERIAL_FIELD and new_text != old_text:
                self._rename_material(ctx, old_text, new_text)
            values[values.index(old_text)] = new_text
            self.repo.save(ctx, DROPDOWN_FIELDS[key], values)
        logger.info("Renamed %s to %s in dropdown %s", old_text, new_text, key)
        return DropdownValues(field=key, values=values)

    def delete_value(self, ctx: RequestContext, field: str, value: str) -> DropdownValues:
        key = resolve_field(field)
        text = _clean(value)
        with open_workbook(ctx).lock:
            values = self.repo.values(ctx, DROPDOWN_FIELDS[key])
            if text not in values:
                raise NotFoundError(f"'{text}' not found in {key}", code="dropdown.not_found")
            if key == MATERIAL_FIELD and self.registry.repo.get(ctx, text):
                self.registry.delete(ctx, text)
            values.remove(text)
            self.repo.save(ctx, DROPDOWN_FIELDS[key], values)
        logger.info("Deleted %s from dropdown %s", text, key)
        return DropdownValues(field=key, values=values)

    def _rename_material(self, ctx: RequestContext, old: str, new: str) -> None:
        if self.registry.repo.get(ctx, old):
            self.registry.rename(ctx, old, new)
        else:
            self.registry.assign(ctx, new)

