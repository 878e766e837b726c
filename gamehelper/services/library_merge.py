from __future__ import annotations

import logging
from dataclasses import replace
from typing import Iterable, Mapping, Optional

from .accounts import dedup_account_ids
from .library_normalizer import is_placeholder_name, normalize_entries
from .library_types import CatalogEntry, RawOwnershipEntry

logger = logging.getLogger(__name__)


def _dedupe_account_entries(entries: Iterable[RawOwnershipEntry]) -> dict[int, RawOwnershipEntry]:
    # Same title listed twice for one account: keep the higher playtime, first on ties.
    by_title: dict[int, RawOwnershipEntry] = {}
    for entry in entries:
        current = by_title.get(entry.title_id)
        if current is None or (entry.playtime_minutes or 0) > (current.playtime_minutes or 0):
            by_title[entry.title_id] = entry
    return by_title


def _account_entries(
    entries_by_account: Mapping[str, Iterable[RawOwnershipEntry]],
    account_id: str,
) -> dict[int, RawOwnershipEntry]:
    return _dedupe_account_entries(normalize_entries(entries_by_account.get(account_id) or []))


def merge(
    main_id: str,
    family_ids: Optional[Iterable[str]],
    entries_by_account: Mapping[str, Iterable[RawOwnershipEntry]],
) -> list[CatalogEntry]:
    """Merge per-account ownership lists into one attributed catalog.

    The main account's entries are the baseline and always win. Family accounts
    are visited in the order given; a title missing from the catalog is credited
    to the first family account that owns it, with no local install state and no
    playtime. Family ids equal to ``main_id`` are ignored.
    """
    main_id = str(main_id or "").strip()
    accounts = {str(key or "").strip(): rows for key, rows in entries_by_account.items()}
    working: dict[int, CatalogEntry] = {}

    for title_id, entry in _account_entries(accounts, main_id).items():
        working[title_id] = CatalogEntry(
            title_id=title_id,
            name=entry.name,
            installed=entry.installed,
            playtime_minutes=entry.playtime_minutes,
            primary_owner=main_id,
            shared_from=None,
        )
    main_count = len(working)

    for family_id in dedup_account_ids(family_ids):
        if family_id == main_id:
            logger.debug("merge ignoring main account %s in family list", family_id)
            continue
        for title_id, entry in _account_entries(accounts, family_id).items():
            existing = working.get(title_id)
            if existing is None:
                working[title_id] = CatalogEntry(
                    title_id=title_id,
                    name=entry.name,
                    installed=False,
                    playtime_minutes=None,
                    primary_owner=main_id,
                    shared_from=family_id,
                )
                continue
            if is_placeholder_name(existing.name, title_id) and not is_placeholder_name(entry.name, title_id):
                working[title_id] = replace(existing, name=entry.name)

    logger.debug(
        "merge main=%s owned=%s shared=%s total=%s",
        main_id,
        main_count,
        len(working) - main_count,
        len(working),
    )
    return list(working.values())
