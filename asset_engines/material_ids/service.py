from __future__ import annotations

import logging
from typing import List, Optional

from asset_engines.common.errors import DuplicateError, NotFoundError, ValidationError
from asset_engines.common.identity import RequestContext
from asset_engines.material_ids.models import FALLBACK_PREFIX, FIRST_PREFIX, MaterialPrefix
from asset_engines.material_ids.repository import MaterialIDRepository, SheetMaterialIDRepository
from asset_engines.storage.sheet_store import open_workbook

logger = logging.getLogger(__name__)


def _clean(material: Optional[str]) -> str:
    return str(material or "").strip()


def _is_prefix(value: str) -> bool:
    return len(value) == 1 and "A" <= value <= "Z"


class MaterialIDRegistry:
    """Assigns single-letter identifier prefixes to materials.

    The next letter is always one past the highest letter in use, so a letter
    freed by ``delete`` is never handed out again unless it was the highest.
    """

    def __init__(self, repo: Optional[MaterialIDRepository] = None) -> None:
        self.repo = repo or SheetMaterialIDRepository()

    def list(self, ctx: RequestContext) -> List[MaterialPrefix]:
        return self.repo.list(ctx)

    def next_letter(self, ctx: RequestContext) -> str:
        used = [e.prefix for e in self.repo.list(ctx) if _is_prefix(e.prefix)]
        if not used:
            return FIRST_PREFIX
        highest = max(used)
        if highest == "Z":
            raise ValidationError("No prefix letters left for new materials", code="material.prefixes_exhausted")
        return chr(ord(highest) + 1)

    def assign(self, ctx: RequestContext, material: str) -> str:
        name = _clean(material)
        if not name:
            raise ValidationError("Material is required", details={"field": "material"})
        with open_workbook(ctx).lock:
            existing = self.repo.get(ctx, name)
            if existing:
                return existing.prefix
            letter = self.next_letter(ctx)
            self.repo.add(ctx, MaterialPrefix(material=name, prefix=letter))
        logger.info("Assigned prefix %s to material %s", letter, name)
        return letter

    def prefix_of(self, ctx: RequestContext, material: str) -> str:
        existing = self.repo.get(ctx, _clean(material))
        return existing.prefix if existing else FALLBACK_PREFIX

    def rename(self, ctx: RequestContext, old: str, new: str) -> None:
        old_name, new_name = _clean(old), _clean(new)
        if not new_name:
            raise ValidationError("New material name is required", details={"field": "material"})
        with open_workbook(ctx).lock:
            if old_name != new_name and self.repo.get(ctx, new_name):
                raise DuplicateError(f"Material '{new_name}' already has a prefix", code="material.duplicate")
            if not self.repo.rename(ctx, old_name, new_name):
                raise NotFoundError(f"Material '{old_name}' not found", code="material.not_found")
        logger.info("Renamed material %s to %s", old_name, new_name)

    def delete(self, ctx: RequestContext, material: str) -> None:
        name = _clean(material)
        with open_workbook(ctx).lock:
            if not self.repo.delete(ctx, name):
                raise NotFoundError(f"Material '{name}' not found", code="material.not_found")
        logger.info("Deleted material %s", name)


_default_registry: Optional[MaterialIDRegistry] = None


def get_material_registry() -> MaterialIDRegistry:
    global _default_registry
    if _default_registry is None:
        _default_registry = MaterialIDRegistry()
    return _default_registry


def set_material_registry(registry: MaterialIDRegistry) -> None:
    global _default_registry
    _default_registry = registry
