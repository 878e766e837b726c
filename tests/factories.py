from gamehelper.services.library_types import CatalogEntry, RawOwnershipEntry

MAIN = "76561198000000001"
F1 = "76561198000000002"
F2 = "76561198000000003"


def raw(title_id, name="", installed=False, playtime=None):
    return RawOwnershipEntry(title_id=title_id, name=name, installed=installed, playtime_minutes=playtime)


def entry(title_id, name, installed=False, playtime=None, shared_from=None):
    return CatalogEntry(
        title_id=title_id,
        name=name,
        installed=installed,
        playtime_minutes=playtime,
        primary_owner=MAIN,
        shared_from=shared_from,
    )


def _vdf_path(path):
    return str(path).replace("\\", "\\\\")


def make_steam_root(base):
    """Lay out a small Steam install with a second library folder under ``base``."""
    root = base / "Steam"
    library = base / "SteamLibrary"
    (root / "steamapps").mkdir(parents=True)
    (library / "steamapps").mkdir(parents=True)

    (root / "steamapps" / "libraryfolders.vdf").write_text(
        '"libraryfolders"\n{\n'
        f'\t"0"\n\t{{\n\t\t"path"\t\t"{_vdf_path(root)}"\n\t}}\n'
        f'\t"1"\n\t{{\n\t\t"path"\t\t"{_vdf_path(library)}"\n\t}}\n'
        "}\n",
        encoding="utf-8",
    )
    (root / "steamapps" / "appmanifest_440.acf").write_text(
        '"AppState"\n{\n\t"appid"\t\t"440"\n\t"name"\t\t"Team Fortress 2"\n}\n',
        encoding="utf-8",
    )
    (root / "steamapps" / "appmanifest_999.acf").write_text(
        '"AppState"\n{\n\t"appid"\t\t"999"\n}\n',
        encoding="utf-8",
    )
    (root / "steamapps" / "notes.txt").write_text('"appid" "1"\n"name" "Not a manifest"\n', encoding="utf-8")
    (library / "steamapps" / "appmanifest_620.acf").write_text(
        '"AppState"\n{\n\t"appid"\t\t"620"\n\t"name"\t\t"Portal 2"\n}\n',
        encoding="utf-8",
    )

    (root / "config").mkdir()
    (root / "config" / "loginusers.vdf").write_text(
        '"users"\n{\n'
        f'\t"{MAIN}"\n\t{{\n\t\t"AccountName"\t\t"main"\n\t\t"PersonaName"\t\t"Main Player"\n\t\t"MostRecent"\t\t"1"\n\t}}\n'
        f'\t"{F1}"\n\t{{\n\t\t"AccountName"\t\t"kid"\n\t\t"PersonaName"\t\t""\n\t\t"MostRecent"\t\t"0"\n\t}}\n'
        "}\n",
        encoding="utf-8",
    )

    main_config = root / "userdata" / "39734273" / "config"
    main_config.mkdir(parents=True)
    (main_config / "localconfig.vdf").write_text(
        '"UserLocalConfigStore"\n{\n\t"Software"\n\t{\n\t\t"Valve"\n\t\t{\n\t\t\t"Steam"\n\t\t\t{\n'
        '\t\t\t\t"apps"\n\t\t\t\t{\n'
        '\t\t\t\t\t"440"\n\t\t\t\t\t{\n\t\t\t\t\t\t"LastPlayed"\t\t"1700000000"\n'
        '\t\t\t\t\t\t"cloud"\n\t\t\t\t\t\t{\n\t\t\t\t\t\t\t"last_sync_state"\t\t"synchronized"\n\t\t\t\t\t\t}\n'
        '\t\t\t\t\t\t"Playtime"\t\t"125"\n\t\t\t\t\t}\n'
        '\t\t\t\t\t"620"\n\t\t\t\t\t{\n\t\t\t\t\t\t"playtime_forever"\t\t"30"\n\t\t\t\t\t}\n'
        '\t\t\t\t}\n\t\t\t}\n\t\t}\n\t}\n}\n',
        encoding="utf-8",
    )
    other_config = root / "userdata" / "39734274" / "config"
    other_config.mkdir(parents=True)
    (other_config / "localconfig.vdf").write_text(
        '"UserLocalConfigStore"\n{\n\t"apps"\n\t{\n\t\t"440"\n\t\t{\n\t\t\t"MinutesPlayed2"\t\t"999"\n\t\t}\n\t}\n}\n',
        encoding="utf-8",
    )
    return root, library
