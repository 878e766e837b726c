import pytest

from gamehelper.services.player_profile import (
    Candidate,
    build_profile,
    candidates_tsv,
    guess_genres,
    prefilter_candidates,
    summarize_library,
)

from factories import F1, entry


@pytest.fixture()
def catalog():
    return [
        entry(1, "Dark Souls III", playtime=3000),
        entry(2, "DOOM Eternal", playtime=600),
        entry(3, "Portal 2", installed=True, playtime=0),
        entry(4, "Untitled Goose Game", playtime=5),
        entry(5, "Stellaris", playtime=None, shared_from=F1),
    ]


def test_guess_genres():
    assert guess_genres("Dark Souls III") == ["rpg"]
    assert guess_genres("Borderlands 2") == ["co-op"]
    assert guess_genres("Ori and the Blind Forest") == ["platformer", "survival"]
    assert guess_genres("Untitled Goose Game") == ["misc"]
    assert guess_genres("") == ["misc"]


def test_build_profile(catalog):
    profile = build_profile(catalog)
    assert profile.by_genre["rpg"].minutes == 3000
    assert profile.by_genre["misc"].count == 1
    assert profile.total_unplayed == 2
    assert profile.total_barely_tried == 1
    assert profile.avg_play_minutes == 1201
    assert profile.max_play_minutes == 3000
    assert profile.short_threshold == 120
    assert profile.long_threshold == 2550
    assert profile.top_genres == ["rpg", "shooter", "misc", "puzzle", "strategy"]
    assert profile.rare_genres == ["strategy", "puzzle", "misc", "shooter", "rpg"]


def test_build_profile_defaults_for_empty_library():
    profile = build_profile([])
    assert profile.avg_play_minutes == 120
    assert profile.max_play_minutes == 600
    assert profile.short_threshold == 72
    assert profile.long_threshold == 510
    assert profile.top_genres == []
    assert profile.to_dict()["by_genre"] == {}


def test_prefilter_candidates_ranks_by_preference(catalog):
    profile = build_profile(catalog)
    picks = prefilter_candidates(catalog, profile, limit=3)
    assert [row.title_id for row in picks] == [1, 2, 4]
    assert picks[0].genres == ["rpg"]


def test_prefilter_candidates_caps_lead_genre():
    catalog = [entry(i, f"Quiet Game {i}", playtime=0) for i in range(1, 6)]
    catalog.append(entry(99, "Portal", playtime=0))
    profile = build_profile(catalog)
    picks = prefilter_candidates(catalog, profile, limit=20, per_genre_cap=2)
    assert [row.title_id for row in picks] == [1, 2, 99]


def test_prefilter_candidates_skips_blank_names():
    catalog = [entry(1, "  ", playtime=0), entry(2, "Celeste", playtime=0)]
    picks = prefilter_candidates(catalog, build_profile(catalog))
    assert [row.title_id for row in picks] == [2]


def test_candidates_tsv():
    rows = [
        Candidate(title_id=10, name="Tab\tName", installed=True, playtime_minutes=0, genres=["misc"], score=1.0),
        Candidate(title_id=20, name="Line\nBreak", installed=False, playtime_minutes=3, genres=["misc"], score=0.5),
    ]
    assert candidates_tsv(rows) == "title_id\tname\tinstalled\n10\tTab Name\t1\n20\tLine Break\t0\n"


def test_summarize_library(catalog):
    summary = summarize_library(catalog)
    assert summary.total == 5
    assert summary.installed_count == 1
    assert summary.unplayed_count == 2
    assert summary.shared_count == 1
    assert summary.total_minutes == 3605
    assert summary.avg_minutes == 1202
    assert summary.top_genre == "rpg"
    assert summary.longest_title.title_id == 1


def test_summarize_empty_library():
    payload = summarize_library([]).to_dict()
    assert payload["total"] == 0
    assert payload["top_genre"] is None
    assert payload["longest_title"] is None


def test_negative_playtime_does_not_break_profile():
    catalog = [entry(1, "Dark Souls", playtime=-50), entry(2, "Celeste", playtime=0)]
    profile = build_profile(catalog)
    assert profile.by_genre["rpg"].minutes == 0
    assert profile.total_unplayed == 2
    candidates = prefilter_candidates(catalog, profile)
    assert {c.title_id for c in candidates} == {1, 2}
    assert all(c.playtime_minutes == 0 for c in candidates)
    assert summarize_library(catalog).unplayed_count == 2
