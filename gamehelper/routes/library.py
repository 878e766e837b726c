import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from ..core.config import STEAM_LOCAL_SCAN
from ..db import get_db
from ..schemas import (
    CatalogEntryIn,
    CatalogEntryOut,
    LibrarySummaryOut,
    LocalTitleOut,
    MergeRequest,
    QueryRequest,
    RawOwnershipEntryIn,
    ScanRequest,
    SteamRootsOut,
)
from ..services.accounts import dedup_account_ids
from ..services.library_cache import load_catalog, load_settings, save_catalog
from ..services.library_merge import merge
from ..services.library_query import SortKey, query
from ..services.library_types import CatalogEntry, RawOwnershipEntry
from ..services.player_profile import summarize_library
from ..services.steam_local import detect_roots, scan_local_library
from ..services.steam_owned_games import SteamApiError, fetch_library_lists

logger = logging.getLogger(__name__)

router = APIRouter()


def _raw_entries(rows: List[RawOwnershipEntryIn]) -> List[RawOwnershipEntry]:
    return [
        RawOwnershipEntry(
            title_id=row.title_id,
            name=row.name or "",
            installed=row.installed,
            playtime_minutes=row.playtime_minutes,
        )
        for row in rows
    ]


def to_catalog(rows: List[CatalogEntryIn]) -> List[CatalogEntry]:
    return [
        CatalogEntry(
            title_id=row.title_id,
            name=row.name,
            installed=row.installed,
            playtime_minutes=row.playtime_minutes,
            primary_owner=row.primary_owner,
            shared_from=row.shared_from,
        )
        for row in rows
    ]


def _mark_installed(entries: List[RawOwnershipEntry], installed_ids: set[int]) -> List[RawOwnershipEntry]:
    if not installed_ids:
        return entries
    return [
        RawOwnershipEntry(
            title_id=entry.title_id,
            name=entry.name,
            installed=entry.installed or entry.title_id in installed_ids,
            playtime_minutes=entry.playtime_minutes,
        )
        for entry in entries
    ]


@router.post("/merge", response_model=List[CatalogEntryOut])
def merge_library(payload: MergeRequest):
    entries_by_account = {
        account_id.strip(): _raw_entries(rows)
        for account_id, rows in payload.entries_by_account.items()
    }
    catalog = merge(payload.main_id, payload.family_ids, entries_by_account)
    return [entry.to_dict() for entry in catalog]


@router.post("/query", response_model=List[CatalogEntryOut])
def query_library(payload: QueryRequest):
    view = query(to_catalog(payload.catalog), payload.search_text, payload.sort_key.value)
    return [entry.to_dict() for entry in view]


@router.post("/scan", response_model=List[CatalogEntryOut])
def scan_library(payload: ScanRequest, db: Session = Depends(get_db)):
    settings = load_settings(db)
    api_key = (payload.api_key or settings.api_key or "").strip()
    main_id = (payload.main_id or settings.main_steam_id64 or "").strip()
    family_ids = dedup_account_ids(
        payload.family_ids if payload.family_ids is not None else settings.family_ids
    )
    if not api_key:
        raise HTTPException(status_code=400, detail="Steam Web API key is required")
    if not main_id:
        raise HTTPException(status_code=400, detail="Main SteamID64 is required")

    try:
        entries_by_account = fetch_library_lists(api_key, main_id, family_ids)
    except SteamApiError as exc:
        raise HTTPException(status_code=502, detail=f"Scan failed: {exc}") from exc

    installed_ids = set(payload.installed_title_ids)
    if payload.scan_local and STEAM_LOCAL_SCAN:
        installed_ids.update(title.title_id for title in scan_local_library(detect_roots(), main_id))
    entries_by_account[main_id] = _mark_installed(entries_by_account[main_id], installed_ids)
    catalog = merge(main_id, family_ids, entries_by_account)
    save_catalog(db, catalog)
    logger.info(
        "library scan main=%s family=%s titles=%s shared=%s",
        main_id,
        len(family_ids),
        len(catalog),
        sum(1 for entry in catalog if entry.shared_from),
    )
    return [entry.to_dict() for entry in catalog]


@router.get("/", response_model=List[CatalogEntryOut])
def list_library(
    search: Optional[str] = Query(None),
    sort: SortKey = Query(SortKey.name),
    db: Session = Depends(get_db),
):
    view = query(load_catalog(db), search or "", sort.value)
    return [entry.to_dict() for entry in view]


@router.get("/summary", response_model=LibrarySummaryOut)
def library_summary(db: Session = Depends(get_db)):
    return summarize_library(load_catalog(db)).to_dict()


@router.get("/local", response_model=List[LocalTitleOut])
def list_local_titles(steam_id64: Optional[str] = Query(None)):
    titles = scan_local_library(detect_roots(), steam_id64)
    return [title.to_dict() for title in sorted(titles, key=lambda title: title.title_id)]


@router.get("/roots", response_model=SteamRootsOut)
def list_steam_roots():
    return {"roots": [str(root) for root in detect_roots()]}
