from __future__ import annotations

from typing import Iterable, Optional

from sqlalchemy.orm import Session

from ..models import SETTINGS_ROW_ID, AccountSettings, LibraryCacheEntry
from .accounts import dedup_account_ids
from .library_types import CatalogEntry


def load_settings(db: Session) -> AccountSettings:
    row = db.get(AccountSettings, SETTINGS_ROW_ID)
    if row is None:
        return AccountSettings(id=SETTINGS_ROW_ID, api_key="", main_steam_id64="", family_ids=[])
    return row


def save_settings(
    db: Session,
    *,
    api_key: Optional[str] = None,
    main_steam_id64: Optional[str] = None,
    family_ids: Optional[Iterable[str]] = None,
) -> AccountSettings:
    """Apply a partial settings update; fields left as ``None`` are kept."""
    row = db.get(AccountSettings, SETTINGS_ROW_ID)
    if row is None:
        row = AccountSettings(id=SETTINGS_ROW_ID, api_key="", main_steam_id64="", family_ids=[])
        db.add(row)
    if api_key is not None:
        row.api_key = api_key.strip()
    if main_steam_id64 is not None:
        row.main_steam_id64 = main_steam_id64.strip()
    if family_ids is not None:
        row.family_ids = dedup_account_ids(family_ids)
    db.commit()
    db.refresh(row)
    return row


def load_catalog(db: Session) -> list[CatalogEntry]:
    rows = db.query(LibraryCacheEntry).order_by(LibraryCacheEntry.position.asc()).all()
    return [
        CatalogEntry(
            title_id=row.title_id,
            name=row.name,
            installed=bool(row.installed),
            playtime_minutes=row.playtime_minutes,
            primary_owner=row.primary_owner,
            shared_from=row.shared_from,
        )
        for row in rows
    ]


def save_catalog(db: Session, catalog: Iterable[CatalogEntry]) -> int:
    db.query(LibraryCacheEntry).delete()
    count = 0
    for position, entry in enumerate(catalog):
        db.add(
            LibraryCacheEntry(
                title_id=entry.title_id,
                position=position,
                name=entry.name,
                installed=entry.installed,
                playtime_minutes=entry.playtime_minutes,
                primary_owner=entry.primary_owner,
                shared_from=entry.shared_from,
            )
        )
        count += 1
    db.commit()
    return count
