from __future__ import annotations

import logging
import os
import re
import sys
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any, Iterable, Optional

from ..core.config import STEAM_ROOTS

logger = logging.getLogger(__name__)

STEAMID64_BASE = 76561197960265728

_LIBRARY_PATH = re.compile(r'"path"\s*"([^"]+)"')
_MANIFEST_APPID = re.compile(r'"appid"\s*"(\d+)"')
_MANIFEST_NAME = re.compile(r'"name"\s*"([^"]+)"')
_APPS_OPEN = re.compile(r'"apps"\s*\{', re.IGNORECASE)
_BLOCK_OPEN = re.compile(r'"([^"]*)"\s*\{')
_LAST_PLAYED = re.compile(r'"LastPlayed"\s*"(\d+)"')
_PLAYTIME_PATTERNS = (
    re.compile(r'"playtime_forever"\s*"(\d+)"'),
    re.compile(r'"Playtime"\s*"(\d+)"'),
    re.compile(r'"MinutesPlayed\d*"\s*"(\d+)"'),
)
_USER_BLOCK = re.compile(r'(?s)"(\d{17})"\s*\{(.*?)\}')
_PERSONA = re.compile(r'"PersonaName"\s*"([^"]*)"')
_MOST_RECENT = re.compile(r'"MostRecent"\s*"1"')


@dataclass(frozen=True)
class LocalAppStat:
    playtime_minutes: Optional[int] = None
    last_played_unix: Optional[int] = None


@dataclass(frozen=True)
class LocalTitle:
    title_id: int
    name: str
    playtime_minutes: Optional[int] = None
    last_played_unix: Optional[int] = None

    def to_dict(self) -> dict[str, Any]:
        payload = asdict(self)
        payload["installed"] = True
        return payload


@dataclass(frozen=True)
class AccountHint:
    steamid64: str
    persona: str
    most_recent: bool = False

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def _read_text(path: Path) -> Optional[str]:
    try:
        return path.read_text(encoding="utf-8", errors="ignore")
    except OSError:
        return None


def _registry_steam_path() -> Optional[Path]:
    if sys.platform != "win32":
        return None
    import winreg

    try:
        with winreg.OpenKey(winreg.HKEY_CURRENT_USER, r"Software\Valve\Steam") as key:
            value, _ = winreg.QueryValueEx(key, "SteamPath")
    except OSError:
        return None
    return Path(value) if value else None


def steam_paths() -> list[Path]:
    """Default Steam install locations for the current platform."""
    if sys.platform == "win32":
        paths = [Path(os.environ.get("ProgramFiles(x86)", "C:\\Program Files (x86)")) / "Steam"]
        appdata = os.getenv("APPDATA", "").strip()
        if appdata:
            paths.append(Path(appdata) / "Steam")
        registry = _registry_steam_path()
        if registry is not None:
            paths.append(registry)
        return paths
    home = Path.home()
    if sys.platform == "darwin":
        return [home / "Library" / "Application Support" / "Steam"]
    return [home / ".local" / "share" / "Steam", home / ".steam" / "steam"]


def parse_libraryfolders(path: Path) -> list[Path]:
    """Return the ``steamapps`` directory of every library listed in the file."""
    content = _read_text(path)
    if content is None:
        return []
    folders: list[Path] = []
    for match in _LIBRARY_PATH.finditer(content):
        raw = match.group(1).replace("\\\\", "\\")
        folders.append(Path(raw) / "steamapps")
    return folders


def _add_unique(roots: list[Path], seen: set[Path], candidate: Path) -> None:
    if not candidate.is_dir():
        return
    resolved = candidate.resolve()
    if resolved in seen:
        return
    seen.add(resolved)
    roots.append(candidate)


def detect_roots(extra: Optional[Iterable[Any]] = None, include_defaults: bool = True) -> list[Path]:
    """Find existing Steam roots, including secondary library folders.

    ``extra`` paths come first, then ``STEAM_ROOTS`` and the platform defaults
    when ``include_defaults`` is set. Symlinked duplicates are collapsed.
    """
    candidates = [Path(str(item)) for item in extra or []]
    if include_defaults:
        candidates.extend(Path(item) for item in STEAM_ROOTS)
        candidates.extend(steam_paths())

    roots: list[Path] = []
    seen: set[Path] = set()
    for candidate in candidates:
        _add_unique(roots, seen, candidate)
    for root in list(roots):
        for steamapps in parse_libraryfolders(root / "steamapps" / "libraryfolders.vdf"):
            _add_unique(roots, seen, steamapps.parent)
    logger.debug("steam roots detected=%s", len(roots))
    return roots


def is_manifest(path: Path) -> bool:
    return path.name.startswith("appmanifest_") and path.name.endswith(".acf")


def parse_manifest(text: str) -> Optional[tuple[int, str]]:
    appid = _MANIFEST_APPID.search(text)
    name = _MANIFEST_NAME.search(text)
    if appid is None or name is None:
        return None
    title_id = int(appid.group(1))
    if title_id <= 0:
        return None
    return title_id, name.group(1)


def _steamapps_dirs(roots: Iterable[Path]) -> list[Path]:
    dirs: list[Path] = []
    for root in roots:
        steamapps = root / "steamapps"
        if not steamapps.is_dir():
            continue
        for candidate in [steamapps, *parse_libraryfolders(steamapps / "libraryfolders.vdf")]:
            if candidate.is_dir() and candidate not in dirs:
                dirs.append(candidate)
    return dirs


def scan_installed(roots: Iterable[Path]) -> dict[int, str]:
    """Map installed title ids to names using the ``appmanifest_*.acf`` files."""
    installed: dict[int, str] = {}
    for directory in _steamapps_dirs(roots):
        try:
            children = sorted(directory.iterdir())
        except OSError:
            continue
        for path in children:
            if not is_manifest(path):
                continue
            content = _read_text(path)
            parsed = parse_manifest(content) if content else None
            if parsed is None:
                continue
            title_id, name = parsed
            installed.setdefault(title_id, name)
    return installed


def account_id_from_steamid64(steam_id64: str) -> Optional[int]:
    cleaned = str(steam_id64 or "").strip()
    if not (cleaned.isascii() and cleaned.isdigit()):
        return None
    account_id = int(cleaned) - STEAMID64_BASE
    return account_id if account_id > 0 else None


def _block_end(text: str, start: int) -> int:
    # ``start`` is just past an opening brace; quoted strings may hold braces.
    depth = 1
    index = start
    length = len(text)
    while index < length:
        char = text[index]
        if char == '"':
            index += 1
            while index < length and text[index] != '"':
                index += 2 if text[index] == "\\" else 1
        elif char == "{":
            depth += 1
        elif char == "}":
            depth -= 1
            if depth == 0:
                return index
        index += 1
    return length


def _child_blocks(body: str) -> Iterable[tuple[str, str]]:
    position = 0
    while True:
        match = _BLOCK_OPEN.search(body, position)
        if match is None:
            return
        end = _block_end(body, match.end())
        yield match.group(1), body[match.end():end]
        position = end + 1


def _first_int(pattern: re.Pattern[str], text: str) -> Optional[int]:
    match = pattern.search(text)
    return int(match.group(1)) if match else None


def parse_localconfig(text: str) -> dict[int, LocalAppStat]:
    """Read per-title playtime and last-played time from a ``localconfig.vdf``."""
    stats: dict[int, LocalAppStat] = {}
    for opening in _APPS_OPEN.finditer(text):
        body = text[opening.end():_block_end(text, opening.end())]
        for key, app_body in _child_blocks(body):
            if not (key.isascii() and key.isdigit()) or int(key) == 0:
                continue
            playtime = None
            for pattern in _PLAYTIME_PATTERNS:
                playtime = _first_int(pattern, app_body)
                if playtime is not None:
                    break
            last_played = _first_int(_LAST_PLAYED, app_body)
            current = stats.get(int(key), LocalAppStat())
            stats[int(key)] = LocalAppStat(
                playtime_minutes=playtime if playtime is not None else current.playtime_minutes,
                last_played_unix=last_played if last_played is not None else current.last_played_unix,
            )
    return stats


def _localconfig_files(roots: Iterable[Path], steam_id64: Optional[str]) -> list[Path]:
    account_id = account_id_from_steamid64(steam_id64) if steam_id64 else None
    files: list[Path] = []
    for root in roots:
        userdata = root / "userdata"
        if not userdata.is_dir():
            continue
        if account_id is not None:
            user_dirs = [userdata / str(account_id)]
        else:
            user_dirs = sorted(path for path in userdata.iterdir() if path.is_dir())
        for user_dir in user_dirs:
            path = user_dir / "config" / "localconfig.vdf"
            if path.is_file():
                files.append(path)
    return files


def collect_user_stats(roots: Iterable[Path], steam_id64: Optional[str] = None) -> dict[int, LocalAppStat]:
    """Merge local stats from every user profile, or only ``steam_id64``'s.

    A later file only overrides the fields it actually carries.
    """
    stats: dict[int, LocalAppStat] = {}
    for path in _localconfig_files(roots, steam_id64):
        content = _read_text(path)
        if content is None:
            continue
        for title_id, stat in parse_localconfig(content).items():
            current = stats.get(title_id, LocalAppStat())
            stats[title_id] = LocalAppStat(
                playtime_minutes=stat.playtime_minutes if stat.playtime_minutes is not None else current.playtime_minutes,
                last_played_unix=stat.last_played_unix if stat.last_played_unix is not None else current.last_played_unix,
            )
    return stats


def scan_local_library(roots: Iterable[Path], steam_id64: Optional[str] = None) -> list[LocalTitle]:
    roots = list(roots)
    installed = scan_installed(roots)
    stats = collect_user_stats(roots, steam_id64) if installed else {}
    titles = []
    for title_id, name in installed.items():
        stat = stats.get(title_id, LocalAppStat())
        titles.append(
            LocalTitle(
                title_id=title_id,
                name=name,
                playtime_minutes=stat.playtime_minutes,
                last_played_unix=stat.last_played_unix,
            )
        )
    logger.info("local steam scan roots=%s installed=%s", len(roots), len(titles))
    return titles


def detect_accounts(roots: Iterable[Path]) -> list[AccountHint]:
    """List the accounts remembered in each root's ``config/loginusers.vdf``."""
    accounts: list[AccountHint] = []
    seen: set[str] = set()
    for root in roots:
        content = _read_text(root / "config" / "loginusers.vdf")
        if content is None:
            continue
        for match in _USER_BLOCK.finditer(content):
            steam_id64, body = match.group(1), match.group(2)
            if steam_id64 in seen:
                continue
            seen.add(steam_id64)
            persona = _PERSONA.search(body)
            accounts.append(
                AccountHint(
                    steamid64=steam_id64,
                    persona=persona.group(1) if persona else "",
                    most_recent=bool(_MOST_RECENT.search(body)),
                )
            )
    return accounts
