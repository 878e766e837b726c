import locale
import logging
import re
import threading

from fastapi import FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import OperationalError

from .core.config import CORS_ORIGINS, LOG_LEVEL
from .db import Base, engine
from .routes import accounts, library, settings, suggestions

logging.basicConfig(
    level=getattr(logging, LOG_LEVEL, logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(title="Steam Game Helper API", version="0.1.0")

_LOCAL_ORIGIN_REGEX = re.compile(r"^https?://(localhost|127\.0\.0\.1)(:\d+)?$", re.IGNORECASE)
_TAURI_ORIGIN_REGEX = re.compile(r"^(tauri://localhost|https?://tauri\.localhost)$", re.IGNORECASE)
_BASE_SCHEMA_LOCK = threading.Lock()
_BASE_SCHEMA_READY = False


def _ensure_base_schema() -> None:
    global _BASE_SCHEMA_READY
    if _BASE_SCHEMA_READY:
        return
    with _BASE_SCHEMA_LOCK:
        if _BASE_SCHEMA_READY:
            return
        try:
            Base.metadata.create_all(bind=engine)
        except OperationalError as exc:
            # Two sidecar instances may race on a fresh SQLite file.
            if "already exists" not in str(exc).lower():
                raise
        _BASE_SCHEMA_READY = True


def _is_origin_allowed(origin: str) -> bool:
    if not origin:
        return False
    if "*" in CORS_ORIGINS or origin in CORS_ORIGINS:
        return True
    return bool(_LOCAL_ORIGIN_REGEX.match(origin) or _TAURI_ORIGIN_REGEX.match(origin))


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException):
    """Return the error detail as JSON, with CORS headers for allowed origins."""
    origin = request.headers.get("origin", "")
    response = JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail},
    )
    if _is_origin_allowed(origin):
        response.headers["Access-Control-Allow-Origin"] = origin
        response.headers["Access-Control-Allow-Credentials"] = "true"
        response.headers["Access-Control-Allow-Methods"] = "*"
        response.headers["Access-Control-Allow-Headers"] = "*"
    return response


app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_origin_regex=r"^https?://(localhost|127\.0\.0\.1)(:\d+)?$|^tauri://localhost$|^https?://tauri\.localhost$",
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(GZipMiddleware, minimum_size=1000)


@app.on_event("startup")
def on_startup() -> None:
    _ensure_base_schema()
    try:
        locale.setlocale(locale.LC_COLLATE, "")
    except locale.Error as exc:
        logger.warning("collation locale unavailable, using codepoint order: %s", exc)


@app.get("/health")
def health_check():
    return {"status": "ok"}


app.include_router(library.router, prefix="/library", tags=["library"])
app.include_router(suggestions.router, prefix="/suggestions", tags=["suggestions"])
app.include_router(settings.router, prefix="/settings", tags=["settings"])
app.include_router(accounts.router, prefix="/accounts", tags=["accounts"])
