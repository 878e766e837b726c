from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, List, Optional

import requests

from ..core.config import STEAM_REQUEST_TIMEOUT_SECONDS, STEAM_WEB_API_URL
from .accounts import dedup_account_ids
from .library_types import RawOwnershipEntry

logger = logging.getLogger(__name__)


class SteamApiError(Exception):
    def __init__(self, message: str, steam_id64: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.steam_id64 = steam_id64
        self.status_code = status_code


def _request(url: str, params: Dict[str, Any], steam_id64: str) -> Dict[str, Any]:
    try:
        response = requests.get(
            url,
            params=params,
            timeout=STEAM_REQUEST_TIMEOUT_SECONDS,
            headers={"User-Agent": "steam-game-helper/1.0"},
        )
    except requests.RequestException as exc:
        logger.warning("owned games request failed steamid=%s error=%s", steam_id64, exc)
        raise SteamApiError(f"Steam API request failed: {exc}", steam_id64) from exc
    if response.status_code != 200:
        logger.warning("owned games HTTP %s steamid=%s", response.status_code, steam_id64)
        raise SteamApiError(
            f"Steam API HTTP {response.status_code}",
            steam_id64,
            status_code=response.status_code,
        )
    try:
        payload = response.json()
    except ValueError as exc:
        raise SteamApiError("Steam API returned invalid JSON", steam_id64) from exc
    return payload if isinstance(payload, dict) else {}


def fetch_owned_games(api_key: str, steam_id64: str) -> List[RawOwnershipEntry]:
    url = f"{STEAM_WEB_API_URL.rstrip('/')}/IPlayerService/GetOwnedGames/v1/"
    payload = _request(
        url,
        {
            "key": api_key,
            "steamid": steam_id64,
            "include_appinfo": 1,
            "include_played_free_games": 1,
        },
        steam_id64,
    )
    response = payload.get("response") or {}
    games = response.get("games") if isinstance(response, dict) else None
    if not isinstance(games, list):
        return []
    out: List[RawOwnershipEntry] = []
    for game in games:
        if not isinstance(game, dict):
            continue
        out.append(
            RawOwnershipEntry(
                title_id=game.get("appid"),
                name=str(game.get("name") or ""),
                installed=False,
                playtime_minutes=game.get("playtime_forever"),
            )
        )
    return out


def fetch_library_lists(
    api_key: str,
    main_id: str,
    family_ids: Optional[Iterable[str]] = None,
) -> Dict[str, List[RawOwnershipEntry]]:
    """Fetch the main account and every family account, main first.

    The first failing account aborts the whole scan with ``SteamApiError``.
    """
    entries_by_account: Dict[str, List[RawOwnershipEntry]] = {
        main_id: fetch_owned_games(api_key, main_id),
    }
    for family_id in dedup_account_ids(family_ids):
        if family_id in entries_by_account:
            continue
        entries_by_account[family_id] = fetch_owned_games(api_key, family_id)
    return entries_by_account
