"""Status -> display treatment mapping.

Transitions are unrestricted; any status may follow any other. The machine only
decides the row colour and whether entering a status triggers the attention
notice flow.
"""
from __future__ import annotations

from typing import Any, Dict, Optional

from asset_engines.status_flow.models import AssetStatus, SideEffect, Treatment

COLOR_NEW = "#fff2cc"
COLOR_ATTENTION = "#f4cccc"
COLOR_DELIVERED = "#d9ead3"
COLOR_ON_HOLD = "#d9d9d9"

_TREATMENTS: Dict[str, Treatment] = {
    AssetStatus.NEW.value: Treatment(background=COLOR_NEW),
    AssetStatus.REQUIRES_ATTENTION.value: Treatment(background=COLOR_ATTENTION, side_effect=SideEffect.ATTENTION_NOTICE),
    AssetStatus.DELIVERED.value: Treatment(background=COLOR_DELIVERED),
    AssetStatus.ON_HOLD.value: Treatment(background=COLOR_ON_HOLD),
}
_DEFAULT = Treatment()


def _compact(value: str) -> str:
    return "".join(ch for ch in value if ch not in " _-").lower()


# "RequiresAttention", "requires_attention" and "Requires Attention" are one status
_KNOWN_STATUSES: Dict[str, str] = {_compact(s.value): s.value for s in AssetStatus}


def normalize_status(value: Any) -> str:
    """Known statuses map to their display string; custom text is kept as typed."""
    if isinstance(value, AssetStatus):
        return value.value
    text = str(value or "").strip()
    return _KNOWN_STATUSES.get(_compact(text), text)


def treatment_for(status: Any) -> Treatment:
    return _TREATMENTS.get(normalize_status(status), _DEFAULT)


def background_for(status: Any) -> Optional[str]:
    return treatment_for(status).background


def entered_attention(previous: Any, current: Any) -> bool:
    """True when a change moves a record into Requires Attention."""
    if treatment_for(current).side_effect != SideEffect.ATTENTION_NOTICE:
        return False
    return normalize_status(previous) != normalize_status(current)
