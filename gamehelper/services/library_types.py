from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Optional


@dataclass(frozen=True)
class RawOwnershipEntry:
    """One row of a single account's ownership scan, as fetched."""

    title_id: Any
    name: str = ""
    installed: bool = False
    playtime_minutes: Optional[int] = None


@dataclass(frozen=True)
class CatalogEntry:
    title_id: int
    name: str
    installed: bool
    playtime_minutes: Optional[int]
    primary_owner: str
    shared_from: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class ScoredEntry(CatalogEntry):
    score: float = 0.0
    labels: tuple[str, ...] = field(default_factory=tuple)

    def to_dict(self) -> dict[str, Any]:
        payload = asdict(self)
        payload["labels"] = list(self.labels)
        return payload
