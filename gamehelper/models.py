from datetime import datetime
from sqlalchemy import (
    Column,
    String,
    DateTime,
    Integer,
    Boolean,
    JSON,
)

from .db import Base

SETTINGS_ROW_ID = 1


class AccountSettings(Base):
    __tablename__ = "account_settings"

    id = Column(Integer, primary_key=True, default=SETTINGS_ROW_ID)
    api_key = Column(String(64), nullable=False, default="")
    main_steam_id64 = Column(String(20), nullable=False, default="")
    family_ids = Column(JSON, nullable=False, default=list)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)


class LibraryCacheEntry(Base):
    __tablename__ = "library_cache_entries"

    title_id = Column(Integer, primary_key=True, autoincrement=False)
    position = Column(Integer, nullable=False, index=True)
    name = Column(String(300), nullable=False)
    installed = Column(Boolean, default=False)
    playtime_minutes = Column(Integer, nullable=True)
    primary_owner = Column(String(20), nullable=False)
    shared_from = Column(String(20), nullable=True)
    cached_at = Column(DateTime, default=datetime.utcnow)
