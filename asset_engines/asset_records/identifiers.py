from __future__ import annotations

from typing import Iterable, Optional

from asset_engines.asset_records.repository import AssetRepository, SheetAssetRepository
from asset_engines.common.identity import RequestContext


def highest_sequence(prefix: str, identifiers: Iterable[str]) -> int:
    highest = 0
    for identifier in identifiers:
        if not identifier.startswith(prefix):
            continue
        suffix = identifier[len(prefix):]
        if suffix.isascii() and suffix.isdigit():
            highest = max(highest, int(suffix))
    return highest


def next_identifier(prefix: str, identifiers: Iterable[str]) -> str:
    """``prefix`` + (highest existing number + 1), zero-padded to two digits."""
    return f"{prefix}{highest_sequence(prefix, identifiers) + 1:02d}"


class IdentifierGenerator:
    def __init__(self, repo: Optional[AssetRepository] = None) -> None:
        self.repo = repo or SheetAssetRepository()

    def next(self, ctx: RequestContext, prefix: str) -> str:
        return next_identifier(prefix, self.repo.identifiers(ctx))
