from gamehelper.services.accounts import dedup_account_ids, extract_steamid64s, parse_account_ids


def test_dedup_trims_and_keeps_order():
    ids = [" 76561198000000002", "76561198000000001", "", "76561198000000002 ", None]
    assert dedup_account_ids(ids) == ["76561198000000002", "76561198000000001"]


def test_dedup_none():
    assert dedup_account_ids(None) == []


def test_parse_account_ids_from_pasted_text():
    text = "76561198000000002, 76561198000000003;76561198000000002\n 76561198000000004"
    assert parse_account_ids(text) == [
        "76561198000000002",
        "76561198000000003",
        "76561198000000004",
    ]
    assert parse_account_ids("") == []


def test_extract_steamid64s():
    text = "see steamcommunity.com/profiles/76561198012345678 and 76561198087654321; short 7656119 ignored"
    assert extract_steamid64s(text) == ["76561198012345678", "76561198087654321"]
    assert extract_steamid64s(None) == []
