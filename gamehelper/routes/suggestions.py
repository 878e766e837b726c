from typing import List

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ..core.config import (
    CANDIDATE_LIMIT,
    CANDIDATE_PER_GENRE_CAP,
    SUGGESTION_DEFAULT_LIMIT,
    SUGGESTION_MAX_LIMIT,
)
from ..db import get_db
from ..schemas import ProfileResponse, ScoreRequest, ScoredEntryOut
from ..services.library_cache import load_catalog
from ..services.player_profile import build_profile, candidates_tsv, prefilter_candidates
from ..services.recommendations import score, suggest
from .library import to_catalog

router = APIRouter()


@router.post("/score", response_model=List[ScoredEntryOut])
def score_catalog(payload: ScoreRequest):
    ranked = score(to_catalog(payload.catalog))
    if payload.limit is not None:
        ranked = ranked[: payload.limit]
    return [entry.to_dict() for entry in ranked]


@router.get("/", response_model=List[ScoredEntryOut])
def list_suggestions(
    limit: int = Query(SUGGESTION_DEFAULT_LIMIT, ge=1, le=SUGGESTION_MAX_LIMIT),
    db: Session = Depends(get_db),
):
    return [entry.to_dict() for entry in suggest(load_catalog(db), limit)]


@router.get("/profile", response_model=ProfileResponse)
def player_profile(db: Session = Depends(get_db)):
    catalog = load_catalog(db)
    profile = build_profile(catalog)
    candidates = prefilter_candidates(
        catalog,
        profile,
        limit=CANDIDATE_LIMIT,
        per_genre_cap=CANDIDATE_PER_GENRE_CAP,
    )
    return {
        "profile": profile.to_dict(),
        "candidates": [row.to_dict() for row in candidates],
        "candidates_tsv": candidates_tsv(candidates),
    }
