from typing import List

from fastapi import APIRouter

from ..schemas import AccountHintOut
from ..services.steam_local import detect_accounts, detect_roots

router = APIRouter()


@router.get("/detect", response_model=List[AccountHintOut])
def detect_local_accounts():
    """Accounts that have signed in to a Steam client on this machine."""
    return [hint.to_dict() for hint in detect_accounts(detect_roots())]
