import os
from pathlib import Path


def _load_env_file(path: Path) -> None:
    if not path.exists():
        return
    try:
        for line in path.read_text(encoding="utf-8").splitlines():
            stripped = line.strip()
            if not stripped or stripped.startswith("#") or "=" not in stripped:
                continue
            key, value = stripped.split("=", 1)
            key = key.strip()
            if not key or key in os.environ:
                continue
            cleaned = value.strip().strip('"').strip("'")
            os.environ[key] = cleaned
    except OSError:
        return


def _load_env() -> None:
    current = Path(__file__).resolve()
    for candidate in (current.parents[2] / ".env", Path.cwd() / ".env"):
        _load_env_file(candidate)


_load_env()


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _default_database_url() -> str:
    explicit_path = os.getenv("GAMEHELPER_DB_PATH", "").strip()
    if explicit_path:
        return f"sqlite:///{Path(explicit_path).as_posix()}"
    project_root = Path(__file__).resolve().parents[2]
    return f"sqlite:///{(project_root / 'gamehelper.db').as_posix()}"


DATABASE_URL = os.getenv("DATABASE_URL", _default_database_url())
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").strip().upper() or "INFO"

_DEFAULT_CORS_ORIGINS = (
    "tauri://localhost,http://tauri.localhost,https://tauri.localhost,"
    "http://localhost:1420,http://127.0.0.1:1420,http://localhost:5173,http://127.0.0.1:5173"
)


def _normalize_cors(origins: str) -> list[str]:
    items: list[str] = []
    for raw in origins.split(","):
        value = raw.strip()
        if value and value not in items:
            items.append(value)
    return items


CORS_ORIGINS = _normalize_cors(os.getenv("CORS_ORIGINS", _DEFAULT_CORS_ORIGINS))

STEAM_WEB_API_URL = os.getenv("STEAM_WEB_API_URL", "https://api.steampowered.com")
STEAM_REQUEST_TIMEOUT_SECONDS = _env_int("STEAM_REQUEST_TIMEOUT_SECONDS", 12)

SUGGESTION_DEFAULT_LIMIT = _env_int("SUGGESTION_DEFAULT_LIMIT", 12)
SUGGESTION_MAX_LIMIT = max(1, _env_int("SUGGESTION_MAX_LIMIT", 20))
CANDIDATE_LIMIT = _env_int("CANDIDATE_LIMIT", 20)
CANDIDATE_PER_GENRE_CAP = _env_int("CANDIDATE_PER_GENRE_CAP", 6)


def _split_paths(raw: str) -> list[str]:
    items: list[str] = []
    for value in raw.split(os.pathsep):
        cleaned = value.strip()
        if cleaned and cleaned not in items:
            items.append(cleaned)
    return items


STEAM_ROOTS = _split_paths(os.getenv("STEAM_ROOTS", ""))
STEAM_LOCAL_SCAN = os.getenv("STEAM_LOCAL_SCAN", "true").lower() in (
    "1",
    "true",
    "yes",
    "on",
)
