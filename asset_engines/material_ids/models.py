from __future__ import annotations

from pydantic import BaseModel

TABLE_NAME = "MaterialIDs"
HEADER = ["Material", "Prefix"]

FALLBACK_PREFIX = "Z"
FIRST_PREFIX = "A"


class MaterialPrefix(BaseModel):
    material: str
    prefix: str
