from __future__ import annotations

import math
from typing import Iterable

from .library_types import CatalogEntry, ScoredEntry

LABEL_INSTALLED = "installed"
LABEL_UNPLAYED = "unplayed"
LABEL_BARELY_TRIED = "barely tried"

_INSTALLED_BONUS = 2.0
_UNPLAYED_BONUS = 1.5
_BARELY_BONUS = 1.0
_BARELY_TRIED_MINUTES = 10


def _score_value(entry: CatalogEntry) -> float:
    minutes = max(0, entry.playtime_minutes or 0)
    installed_bonus = _INSTALLED_BONUS if entry.installed else 0.0
    unplayed_bonus = _UNPLAYED_BONUS if minutes == 0 else 0.0
    barely_bonus = _BARELY_BONUS if 0 < minutes < _BARELY_TRIED_MINUTES else 0.0
    recency_penalty = math.log(1 + minutes) / 10
    return installed_bonus + unplayed_bonus + barely_bonus - recency_penalty


def _labels(entry: CatalogEntry) -> tuple[str, ...]:
    # One label at most; installed shadows the playtime labels.
    minutes = max(0, entry.playtime_minutes or 0)
    if entry.installed:
        return (LABEL_INSTALLED,)
    if minutes == 0:
        return (LABEL_UNPLAYED,)
    if 0 < minutes < _BARELY_TRIED_MINUTES:
        return (LABEL_BARELY_TRIED,)
    return ()


def score_entry(entry: CatalogEntry) -> ScoredEntry:
    return ScoredEntry(
        title_id=entry.title_id,
        name=entry.name,
        installed=entry.installed,
        playtime_minutes=entry.playtime_minutes,
        primary_owner=entry.primary_owner,
        shared_from=entry.shared_from,
        score=_score_value(entry),
        labels=_labels(entry),
    )


def score(catalog: Iterable[CatalogEntry]) -> list[ScoredEntry]:
    """Score every catalog entry and rank by score, highest first.

    The sort is stable: entries with equal scores keep catalog order.
    """
    scored = [score_entry(entry) for entry in catalog]
    scored.sort(key=lambda row: -row.score)
    return scored


def suggest(catalog: Iterable[CatalogEntry], limit: int = 12) -> list[ScoredEntry]:
    return score(catalog)[: max(0, int(limit))]
