from typing import Any, Dict, List, Optional
from datetime import datetime
from pydantic import BaseModel, Field, field_validator

from .services.library_query import SortKey


class RawOwnershipEntryIn(BaseModel):
    # Malformed ids reach the normalizer, which drops them.
    title_id: Any = None
    name: Optional[str] = ""
    installed: bool = False
    playtime_minutes: Optional[int] = Field(None, ge=0)


class CatalogEntryIn(BaseModel):
    title_id: int = Field(..., gt=0)
    name: str
    installed: bool = False
    playtime_minutes: Optional[int] = Field(None, ge=0)
    primary_owner: str
    shared_from: Optional[str] = None


class CatalogEntryOut(BaseModel):
    title_id: int
    name: str
    installed: bool
    playtime_minutes: Optional[int] = None
    primary_owner: str
    shared_from: Optional[str] = None

    class Config:
        from_attributes = True


class ScoredEntryOut(CatalogEntryOut):
    score: float
    labels: List[str]


class MergeRequest(BaseModel):
    main_id: str
    family_ids: List[str] = Field(default_factory=list)
    entries_by_account: Dict[str, List[RawOwnershipEntryIn]] = Field(default_factory=dict)

    @field_validator("main_id")
    @classmethod
    def main_id_not_blank(cls, value: str) -> str:
        cleaned = value.strip()
        if not cleaned:
            raise ValueError("must not be blank")
        return cleaned


class QueryRequest(BaseModel):
    catalog: List[CatalogEntryIn] = Field(default_factory=list)
    search_text: str = ""
    sort_key: SortKey = SortKey.name


class ScoreRequest(BaseModel):
    catalog: List[CatalogEntryIn] = Field(default_factory=list)
    limit: Optional[int] = Field(None, ge=0)


class ScanRequest(BaseModel):
    api_key: Optional[str] = None
    main_id: Optional[str] = None
    family_ids: Optional[List[str]] = None
    installed_title_ids: List[int] = Field(default_factory=list)
    scan_local: bool = True


class AccountSettingsIn(BaseModel):
    api_key: Optional[str] = None
    main_steam_id64: Optional[str] = None
    family_ids: Optional[List[str]] = None
    family_ids_text: Optional[str] = None


class AccountSettingsOut(BaseModel):
    api_key: str
    main_steam_id64: str
    family_ids: List[str]
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class FamilyIdsParseIn(BaseModel):
    text: str


class FamilyIdsParseOut(BaseModel):
    steam_ids: List[str]
    count: int


class LibrarySummaryOut(BaseModel):
    total: int
    installed_count: int
    unplayed_count: int
    shared_count: int
    total_minutes: int
    avg_minutes: int
    top_genre: Optional[str] = None
    longest_title: Optional[CatalogEntryOut] = None


class GenreStatsOut(BaseModel):
    minutes: int
    count: int


class PlayerProfileOut(BaseModel):
    by_genre: Dict[str, GenreStatsOut]
    top_genres: List[str]
    rare_genres: List[str]
    total_unplayed: int
    total_barely_tried: int
    avg_play_minutes: int
    max_play_minutes: int
    short_threshold: int
    long_threshold: int


class CandidateOut(BaseModel):
    title_id: int
    name: str
    installed: bool
    playtime_minutes: int
    genres: List[str]
    score: float


class ProfileResponse(BaseModel):
    profile: PlayerProfileOut
    candidates: List[CandidateOut]
    candidates_tsv: str


class LocalTitleOut(BaseModel):
    title_id: int
    name: str
    installed: bool = True
    playtime_minutes: Optional[int] = None
    last_played_unix: Optional[int] = None


class SteamRootsOut(BaseModel):
    roots: List[str]


class AccountHintOut(BaseModel):
    steamid64: str
    persona: str
    most_recent: bool = False
