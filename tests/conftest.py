"""Shared fixtures: in-memory database, app client and user helpers."""

import os
import tempfile

# Settings are read at import time, so the environment has to be ready first
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("NOTIFICATION_SWEEP_INTERVAL_SECONDS", "0")
os.environ.setdefault("MEDIA_ROOT", tempfile.mkdtemp(prefix="vibeshare-media-"))
os.environ["YOUTUBE_API_KEY"] = ""

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from vibeshare.config import settings
from vibeshare.core.cache import MemoryCache, get_search_cache
from vibeshare.core.storage import ImageStorage, get_image_storage
from vibeshare.db.base import Base
from vibeshare.db.session import get_db
from vibeshare.main import app
import vibeshare.db.models  # noqa: F401

API = settings.API_PREFIX


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autocommit=False, autoflush=False)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def search_cache():
    return MemoryCache()


@pytest.fixture
def storage(tmp_path):
    return ImageStorage(root=str(tmp_path), base_url=settings.MEDIA_URL)


@pytest.fixture
def client(session_factory, search_cache, storage):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_search_cache] = lambda: search_cache
    app.dependency_overrides[get_image_storage] = lambda: storage
    yield TestClient(app)
    app.dependency_overrides.clear()


def auth_headers(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def register(client):
    """Register a user and return {"id", "username", "token", "refresh", "headers"}"""

    def _register(username: str, email: str = None, password: str = "secret123") -> dict:
        response = client.post(
            f"{API}/auth/register",
            json={"email": email or f"{username}@example.com", "username": username, "password": password},
        )
        assert response.status_code == 201, response.text
        data = response.json()["data"]
        return {
            "id": data["user"]["id"],
            "username": username,
            "token": data["accessToken"],
            "refresh": data["refreshToken"],
            "headers": auth_headers(data["accessToken"]),
        }

    return _register


@pytest.fixture
def create_playlist(client):
    def _create(user: dict, title: str = "My Mix", **fields) -> dict:
        response = client.post(f"{API}/playlists", json={"title": title, **fields}, headers=user["headers"])
        assert response.status_code == 201, response.text
        return response.json()["data"]["playlist"]

    return _create


@pytest.fixture
def add_song(client):
    def _add(user: dict, playlist_id: int, title: str = "Song", url: str = None, **fields) -> dict:
        body = {
            "title": title,
            "artist": fields.pop("artist", "Artist"),
            "url": url or f"https://youtu.be/{title.replace(' ', '')}",
            **fields,
        }
        response = client.post(f"{API}/playlists/{playlist_id}/songs", json=body, headers=user["headers"])
        assert response.status_code == 201, response.text
        return response.json()["data"]["song"]

    return _add
