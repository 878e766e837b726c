from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ..db import get_db
from ..schemas import AccountSettingsIn, AccountSettingsOut, FamilyIdsParseIn, FamilyIdsParseOut
from ..services.accounts import dedup_account_ids, extract_steamid64s, parse_account_ids
from ..services.library_cache import load_settings, save_settings

router = APIRouter()


@router.get("/", response_model=AccountSettingsOut)
def get_settings(db: Session = Depends(get_db)):
    row = load_settings(db)
    return {
        "api_key": row.api_key or "",
        "main_steam_id64": row.main_steam_id64 or "",
        "family_ids": list(row.family_ids or []),
        "updated_at": row.updated_at,
    }


@router.post("/", response_model=AccountSettingsOut)
def update_settings(payload: AccountSettingsIn, db: Session = Depends(get_db)):
    family_ids = payload.family_ids
    if payload.family_ids_text is not None:
        family_ids = parse_account_ids(payload.family_ids_text)
    row = save_settings(
        db,
        api_key=payload.api_key,
        main_steam_id64=payload.main_steam_id64,
        family_ids=family_ids,
    )
    return row


@router.post("/family-ids/parse", response_model=FamilyIdsParseOut)
def parse_family_ids(payload: FamilyIdsParseIn):
    steam_ids = dedup_account_ids(extract_steamid64s(payload.text))
    return {"steam_ids": steam_ids, "count": len(steam_ids)}
