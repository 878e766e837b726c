from __future__ import annotations

import logging
from typing import Any, Iterable, Optional

from .library_types import RawOwnershipEntry

logger = logging.getLogger(__name__)

_PLACEHOLDER_PREFIX = "App "


def placeholder_name(title_id: int) -> str:
    return f"{_PLACEHOLDER_PREFIX}{title_id}"


def is_placeholder_name(name: str, title_id: int) -> bool:
    cleaned = str(name or "").strip()
    return not cleaned or cleaned == placeholder_name(title_id)


def _safe_title_id(value: Any) -> Optional[int]:
    # bool is an int subclass; a True appid is a broken row, not title 1.
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value if value > 0 else None
    if isinstance(value, str):
        cleaned = value.strip()
        if cleaned.isascii() and cleaned.isdigit():
            parsed = int(cleaned)
            return parsed if parsed > 0 else None
    return None


def normalize_entry(entry: RawOwnershipEntry) -> Optional[RawOwnershipEntry]:
    title_id = _safe_title_id(entry.title_id)
    if title_id is None:
        return None
    name = str(entry.name or "").strip()
    return RawOwnershipEntry(
        title_id=title_id,
        name=name or placeholder_name(title_id),
        installed=bool(entry.installed),
        playtime_minutes=entry.playtime_minutes,
    )


def normalize_entries(entries: Iterable[RawOwnershipEntry]) -> list[RawOwnershipEntry]:
    """Canonicalize one account's scan rows.

    Rows whose ``title_id`` is not a positive integer are dropped. Empty names
    become ``"App <title_id>"``; ``playtime_minutes`` is passed through as is,
    so an unknown playtime stays ``None``.
    """
    normalized: list[RawOwnershipEntry] = []
    dropped = 0
    for entry in entries:
        result = normalize_entry(entry)
        if result is None:
            dropped += 1
            continue
        normalized.append(result)
    if dropped:
        logger.debug("normalizer dropped=%s kept=%s", dropped, len(normalized))
    return normalized
