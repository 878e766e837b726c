from __future__ import annotations

import locale
import unicodedata
from enum import Enum
from typing import Iterable, Optional, TypeVar

from .library_types import CatalogEntry

EntryT = TypeVar("EntryT", bound=CatalogEntry)


class SortKey(str, Enum):
    name = "name"
    playtime = "playtime"
    installed = "installed"


def _fold_accents(value: str) -> str:
    decomposed = unicodedata.normalize("NFKD", value)
    return "".join(ch for ch in decomposed if unicodedata.category(ch) != "Mn")


def _name_key(entry: CatalogEntry) -> tuple[str, str]:
    # Accents only break ties, so "Éclair" sorts with the E titles.
    folded = entry.name.casefold()
    return locale.strxfrm(_fold_accents(folded)), locale.strxfrm(folded)


def _playtime_key(entry: CatalogEntry) -> int:
    return -(entry.playtime_minutes or 0)


def _installed_key(entry: CatalogEntry) -> bool:
    return not entry.installed


_SORT_KEYS = {
    SortKey.name: _name_key,
    SortKey.playtime: _playtime_key,
    SortKey.installed: _installed_key,
}


def matches_search(entry: CatalogEntry, search_text: Optional[str]) -> bool:
    needle = str(search_text or "").strip().casefold()
    if not needle:
        return True
    return needle in entry.name.casefold() or needle in str(entry.title_id)


def query(
    catalog: Iterable[EntryT],
    search_text: Optional[str] = "",
    sort_key: str = SortKey.name.value,
) -> list[EntryT]:
    """Filter a catalog by search text and order it for display.

    Works on plain and scored entries alike. All orderings are stable, so
    entries that compare equal keep their catalog order.
    """
    key = _SORT_KEYS[SortKey(sort_key)]
    filtered = [entry for entry in catalog if matches_search(entry, search_text)]
    filtered.sort(key=key)
    return filtered
