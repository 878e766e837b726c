from __future__ import annotations

import re
from typing import Iterable, Optional

_STEAMID64_RE = re.compile(r"(76\d{15})")
_ID_SEPARATORS_RE = re.compile(r"[\s,;]+")


def dedup_account_ids(ids: Optional[Iterable[str]]) -> list[str]:
    out: list[str] = []
    seen: set[str] = set()
    for raw in ids or []:
        cleaned = str(raw or "").strip()
        if not cleaned or cleaned in seen:
            continue
        seen.add(cleaned)
        out.append(cleaned)
    return out


def parse_account_ids(text: Optional[str]) -> list[str]:
    return dedup_account_ids(_ID_SEPARATORS_RE.split(str(text or "")))


def extract_steamid64s(text: Optional[str]) -> list[str]:
    return [match.group(1) for match in _STEAMID64_RE.finditer(str(text or ""))]
