import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from gamehelper.db import Base, get_db
from gamehelper.main import app
from gamehelper.routes import accounts as accounts_routes
from gamehelper.routes import library as library_routes


@pytest.fixture()
def db_session():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestingSession()
    try:
        yield session
    finally:
        session.close()
        engine.dispose()


@pytest.fixture()
def client(db_session):
    def _override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = _override_get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture(autouse=True)
def no_local_steam(monkeypatch):
    # Keep route tests away from any Steam install on the host.
    monkeypatch.setattr(library_routes, "detect_roots", lambda: [])
    monkeypatch.setattr(accounts_routes, "detect_roots", lambda: [])
