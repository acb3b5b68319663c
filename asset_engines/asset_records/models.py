"""
Asset Records Models.

One asset occupies one row of the ``Assets`` table; the column order below is
the sheet layout shared with the edit/add forms.
"""

from __future__ import annotations

from datetime import date
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from asset_engines.status_flow.models import NEW_STATUS

TABLE_NAME = "Assets"
ROW_SCHEMA = [
    "ID",
    "Area",
    "Asset",
    "Status",
    "Dimensions",
    "Quantity",
    "Item",
    "Material",
    "DueDate",
    "StrikeDate",
    "Venue",
    "Location",
    "Artwork",
    "ImageLink",
    "DoubleSided",
    "Diecut",
    "ProductionStatus",
    "EditMarker",
]
EDIT_MARKER = "Edit"

# record attribute -> sheet column (EditMarker is written, never read back)
_COLUMNS = {
    "id": "ID",
    "area": "Area",
    "asset_name": "Asset",
    "status": "Status",
    "dimensions": "Dimensions",
    "quantity": "Quantity",
    "item": "Item",
    "material": "Material",
    "due_date": "DueDate",
    "strike_date": "StrikeDate",
    "venue": "Venue",
    "location": "Location",
    "artwork_ref": "Artwork",
    "image_ref": "ImageLink",
    "double_sided": "DoubleSided",
    "die_cut": "Diecut",
    "production_status": "ProductionStatus",
}

_TRUE_STRINGS = {"true", "yes", "y", "1", "x"}


def format_dimensions(width: Any, height: Any) -> str:
    return f'{width}" x {height}"'


def _parse_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    return str(value or "").strip().lower() in _TRUE_STRINGS


def _parse_date(value: Any) -> Optional[date]:
    if isinstance(value, date):
        return value
    text = str(value or "").strip()
    if not text:
        return None
    return date.fromisoformat(text[:10])


def _parse_int(value: Any) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return 0


class AssetRecord(BaseModel):
    """A single asset row, materialized with its row reference and treatment."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str
    area: str = ""
    asset_name: str = ""
    status: str = NEW_STATUS
    dimensions: str = ""
    quantity: int = 1
    item: str = ""
    material: str = ""
    due_date: Optional[date] = None
    strike_date: Optional[date] = None
    venue: str = ""
    location: str = ""
    artwork_ref: str = ""
    image_ref: str = ""
    double_sided: bool = False
    die_cut: bool = False
    production_status: str = ""

    row_reference: Optional[int] = None
    background: Optional[str] = None

    def to_row(self) -> List[Any]:
        values: Dict[str, Any] = {}
        for attr, column in _COLUMNS.items():
            value = getattr(self, attr)
            if isinstance(value, date):
                value = value.isoformat()
            values[column] = "" if value is None else value
        values["EditMarker"] = EDIT_MARKER
        return [values[c] for c in ROW_SCHEMA]

    @classmethod
    def from_row(cls, values: List[Any], row_reference: Optional[int] = None) -> "AssetRecord":
        cells = dict(zip(ROW_SCHEMA, values))
        return cls(
            id=str(cells.get("ID") or ""),
            area=str(cells.get("Area") or ""),
            asset_name=str(cells.get("Asset") or ""),
            status=str(cells.get("Status") or ""),
            dimensions=str(cells.get("Dimensions") or ""),
            quantity=_parse_int(cells.get("Quantity")),
            item=str(cells.get("Item") or ""),
            material=str(cells.get("Material") or ""),
            due_date=_parse_date(cells.get("DueDate")),
            strike_date=_parse_date(cells.get("StrikeDate")),
            venue=str(cells.get("Venue") or ""),
            location=str(cells.get("Location") or ""),
            artwork_ref=str(cells.get("Artwork") or ""),
            image_ref=str(cells.get("ImageLink") or ""),
            double_sided=_parse_bool(cells.get("DoubleSided")),
            die_cut=_parse_bool(cells.get("Diecut")),
            production_status=str(cells.get("ProductionStatus") or ""),
            row_reference=row_reference,
        )


class AssetSubmission(BaseModel):
    """Fields posted by the add/edit forms. Everything is optional here; the
    service decides which fields are required for each path."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    area: Optional[str] = None
    asset_name: Optional[str] = None
    status: Optional[str] = None
    width: Optional[str] = None
    height: Optional[str] = None
    dimensions: Optional[str] = None
    quantity: Optional[int] = None
    item: Optional[str] = None
    material: Optional[str] = None
    due_date: Optional[date] = None
    strike_date: Optional[date] = None
    venue: Optional[str] = None
    location: Optional[str] = None
    artwork_ref: Optional[str] = None
    image_ref: Optional[str] = None
    double_sided: Optional[bool] = None
    die_cut: Optional[bool] = None
    production_status: Optional[str] = None
    comment: Optional[str] = None

    @field_validator("due_date", "strike_date", mode="before")
    @classmethod
    def _blank_date(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("width", "height", mode="before")
    @classmethod
    def _measure_text(cls, value: Any) -> Any:
        if isinstance(value, (int, float)):
            return str(value)
        return value

    def record_fields(self) -> Dict[str, Any]:
        """Supplied record attributes, with dimensions derived from width/height."""
        data = self.model_dump(exclude_unset=True, exclude={"width", "height", "comment"})
        if self.width and self.height:
            data["dimensions"] = format_dimensions(self.width, self.height)
        for key, value in list(data.items()):
            if isinstance(value, str):
                data[key] = value.strip()
        return data


class ReorderRequest(BaseModel):
    quantity: int = Field(...)


class AttentionRequest(BaseModel):
    comment: str = ""


class AssetListing(BaseModel):
    records: List[AssetRecord] = Field(default_factory=list)
