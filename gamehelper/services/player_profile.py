from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, Iterable, Optional

from .library_types import CatalogEntry

MISC_GENRE = "misc"

_GENRE_KEYWORDS: tuple[tuple[tuple[str, ...], str], ...] = (
    (("rpg", "souls", "witcher", "elder scrolls", "divinity"), "rpg"),
    (("shoot", "doom", "counter-strike", "cs ", "call of duty", "l4d", "left 4 dead"), "shooter"),
    (("puzzle", "portal", "witness", "talos"), "puzzle"),
    (("strategy", "civilization", "total war", "stellaris"), "strategy"),
    (("action", "devil may cry", "bayonetta"), "action"),
    (("platform", "ori ", "hollow knight", "celeste"), "platformer"),
    (("racing", "forza", "dirt", "need for speed"), "racing"),
    (("survival", "raft", "forest", "don't starve", "don’t starve", "7 days"), "survival"),
    (("horror", "resident evil", "amnesia", "outlast"), "horror"),
    (("co-op", "coop", "overcooked", "it takes two", "payday", "borderlands"), "co-op"),
)

_TOP_GENRE_COUNT = 5
_DEFAULT_AVG_MINUTES = 120
_DEFAULT_MAX_MINUTES = 600


@dataclass(frozen=True)
class GenreStats:
    minutes: int = 0
    count: int = 0


@dataclass(frozen=True)
class PlayerProfile:
    by_genre: dict[str, GenreStats] = field(default_factory=dict)
    top_genres: list[str] = field(default_factory=list)
    rare_genres: list[str] = field(default_factory=list)
    total_unplayed: int = 0
    total_barely_tried: int = 0
    avg_play_minutes: int = _DEFAULT_AVG_MINUTES
    max_play_minutes: int = _DEFAULT_MAX_MINUTES
    short_threshold: int = 20
    long_threshold: int = _DEFAULT_MAX_MINUTES

    def to_dict(self) -> dict[str, Any]:
        return {
            "by_genre": {
                genre: {"minutes": stats.minutes, "count": stats.count}
                for genre, stats in self.by_genre.items()
            },
            "top_genres": list(self.top_genres),
            "rare_genres": list(self.rare_genres),
            "total_unplayed": self.total_unplayed,
            "total_barely_tried": self.total_barely_tried,
            "avg_play_minutes": self.avg_play_minutes,
            "max_play_minutes": self.max_play_minutes,
            "short_threshold": self.short_threshold,
            "long_threshold": self.long_threshold,
        }


@dataclass(frozen=True)
class Candidate:
    title_id: int
    name: str
    installed: bool
    playtime_minutes: int
    genres: list[str]
    score: float

    def to_dict(self) -> dict[str, Any]:
        return {
            "title_id": self.title_id,
            "name": self.name,
            "installed": self.installed,
            "playtime_minutes": self.playtime_minutes,
            "genres": list(self.genres),
            "score": round(self.score, 4),
        }


@dataclass(frozen=True)
class LibrarySummary:
    total: int
    installed_count: int
    unplayed_count: int
    shared_count: int
    total_minutes: int
    avg_minutes: int
    top_genre: Optional[str]
    longest_title: Optional[CatalogEntry]

    def to_dict(self) -> dict[str, Any]:
        return {
            "total": self.total,
            "installed_count": self.installed_count,
            "unplayed_count": self.unplayed_count,
            "shared_count": self.shared_count,
            "total_minutes": self.total_minutes,
            "avg_minutes": self.avg_minutes,
            "top_genre": self.top_genre,
            "longest_title": self.longest_title.to_dict() if self.longest_title else None,
        }


def guess_genres(name: str) -> list[str]:
    lowered = f"{str(name or '').lower()} "
    genres = [tag for keys, tag in _GENRE_KEYWORDS if any(key in lowered for key in keys)]
    return genres or [MISC_GENRE]


def _genre_minutes(catalog: list[CatalogEntry]) -> dict[str, GenreStats]:
    minutes: dict[str, int] = {}
    counts: dict[str, int] = {}
    for entry in catalog:
        for genre in guess_genres(entry.name):
            minutes[genre] = minutes.get(genre, 0) + max(0, entry.playtime_minutes or 0)
            counts[genre] = counts.get(genre, 0) + 1
    return {genre: GenreStats(minutes=minutes[genre], count=counts[genre]) for genre in minutes}


def build_profile(catalog: Iterable[CatalogEntry]) -> PlayerProfile:
    """Summarize how the player spends time across guessed genres.

    Thresholds describe what a "short" and a "long" session look like for this
    player, derived from the average and maximum playtime of played titles.
    """
    entries = list(catalog)
    by_genre = _genre_minutes(entries)

    total_unplayed = 0
    total_barely = 0
    played: list[int] = []
    for entry in entries:
        minutes = max(0, entry.playtime_minutes or 0)
        if minutes == 0:
            total_unplayed += 1
            continue
        if minutes < 10:
            total_barely += 1
        played.append(minutes)

    avg_minutes = sum(played) // len(played) if played else _DEFAULT_AVG_MINUTES
    max_minutes = max(played) if played else _DEFAULT_MAX_MINUTES

    short_threshold = min(120, max(20, round(avg_minutes * 0.6)))
    long_threshold = max(600, round(avg_minutes * 2.2))
    cap = round(max_minutes * 0.85)
    if long_threshold > cap:
        long_threshold = max(cap, 300)

    ranked = sorted(by_genre.items(), key=lambda item: (-item[1].minutes, item[0]))
    top_genres = [genre for genre, _ in ranked[:_TOP_GENRE_COUNT]]
    rare_genres = [genre for genre, _ in list(reversed(ranked))[:_TOP_GENRE_COUNT]]

    return PlayerProfile(
        by_genre=by_genre,
        top_genres=top_genres,
        rare_genres=rare_genres,
        total_unplayed=total_unplayed,
        total_barely_tried=total_barely,
        avg_play_minutes=avg_minutes,
        max_play_minutes=max_minutes,
        short_threshold=short_threshold,
        long_threshold=long_threshold,
    )


def _candidate_score(entry: CatalogEntry, genres: list[str], profile: PlayerProfile) -> float:
    minutes = max(0, entry.playtime_minutes or 0)
    installed_bonus = 0.5 if entry.installed else 0.0
    never_bonus = 0.4 if minutes == 0 else 0.0
    barely_bonus = 0.25 if 0 < minutes < 10 else 0.0

    preference = 0.0
    novelty = 0.0
    rare = set(profile.rare_genres)
    for genre in genres:
        stats = profile.by_genre.get(genre)
        if stats is not None:
            preference += min(8.0, math.log(max(0, stats.minutes) + 1.0))
        if genre in rare:
            novelty += 0.6
    preference /= len(genres)
    novelty /= len(genres)

    return 0.8 * preference + 0.4 * novelty + installed_bonus + never_bonus + barely_bonus


def prefilter_candidates(
    catalog: Iterable[CatalogEntry],
    profile: PlayerProfile,
    limit: int = 20,
    per_genre_cap: int = 6,
) -> list[Candidate]:
    """Shortlist titles worth pitching, spread across lead genres."""
    rows: list[Candidate] = []
    for entry in catalog:
        if not entry.name.strip():
            continue
        genres = guess_genres(entry.name)
        rows.append(
            Candidate(
                title_id=entry.title_id,
                name=entry.name,
                installed=entry.installed,
                playtime_minutes=max(0, entry.playtime_minutes or 0),
                genres=genres,
                score=_candidate_score(entry, genres, profile),
            )
        )
    rows.sort(key=lambda row: -row.score)

    kept: list[Candidate] = []
    per_genre: dict[str, int] = {}
    for row in rows:
        if len(kept) >= limit:
            break
        lead = row.genres[0]
        if per_genre.get(lead, 0) >= per_genre_cap:
            continue
        per_genre[lead] = per_genre.get(lead, 0) + 1
        kept.append(row)
    return kept


def candidates_tsv(candidates: Iterable[Candidate]) -> str:
    lines = ["title_id\tname\tinstalled"]
    for row in candidates:
        name = row.name.replace("\t", " ").replace("\n", " ")
        lines.append(f"{row.title_id}\t{name}\t{1 if row.installed else 0}")
    return "\n".join(lines) + "\n"


def summarize_library(catalog: Iterable[CatalogEntry]) -> LibrarySummary:
    entries = list(catalog)
    played = [entry.playtime_minutes for entry in entries if (entry.playtime_minutes or 0) > 0]
    total_minutes = sum(played)

    top_genre: Optional[str] = None
    top_minutes = 0
    for genre, stats in _genre_minutes(entries).items():
        if stats.minutes > top_minutes:
            top_minutes = stats.minutes
            top_genre = genre

    longest: Optional[CatalogEntry] = None
    for entry in entries:
        if longest is None or (entry.playtime_minutes or 0) > (longest.playtime_minutes or 0):
            longest = entry

    return LibrarySummary(
        total=len(entries),
        installed_count=sum(1 for entry in entries if entry.installed),
        unplayed_count=sum(1 for entry in entries if (entry.playtime_minutes or 0) <= 0),
        shared_count=sum(1 for entry in entries if entry.shared_from),
        total_minutes=total_minutes,
        avg_minutes=round(total_minutes / len(played)) if played else 0,
        top_genre=top_genre,
        longest_title=longest,
    )
