from __future__ import annotations

from typing import List

from pydantic import BaseModel, Field

TABLE_NAME = "Dropdowns"

# field key -> column in the Dropdowns table
DROPDOWN_FIELDS = {
    "item": "Item",
    "material": "Material",
    "status": "Status",
    "venue": "Venue",
    "area": "Area",
    "production_status": "ProductionStatus",
}
FIELD_ALIASES = {"productionStatus": "production_status", "productionstatus": "production_status"}
HEADER = list(DROPDOWN_FIELDS.values())


class DropdownValues(BaseModel):
    field: str
    values: List[str] = Field(default_factory=list)


class DropdownValueRequest(BaseModel):
    value: str


class DropdownRenameRequest(BaseModel):
    old: str
    new: str
