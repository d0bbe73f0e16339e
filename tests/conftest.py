"""
Shared pytest fixtures for the StreamHub test suite.

Provides reusable fixtures for:
- An isolated SQLite entity store per test
- A filesystem blob store under tmp_path
- A FastAPI TestClient wired to both
- Factories for registered users, videos and playlists
"""

import os

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["DB_AUTO_CREATE"] = "false"
os.environ["ACCESS_TOKEN_SECRET"] = "test-access-secret-0123456789abcdef0123"
os.environ["REFRESH_TOKEN_SECRET"] = "test-refresh-secret-0123456789abcdef012"
os.environ["STORAGE_BACKEND"] = "local"

from dataclasses import dataclass  # noqa: E402
from typing import Optional  # noqa: E402

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from api.dependencies import get_blob_store, reset_cached_dependencies  # noqa: E402
from auth.session_manager import SessionManager  # noqa: E402
from config import config  # noqa: E402
from db.base import Base  # noqa: E402
from db.session import SessionLocal, build_engine, engine as default_engine  # noqa: E402
from server import app  # noqa: E402
from storage.blob_store import LocalBlobStore  # noqa: E402

API = config.server.api_prefix
PASSWORD = "s3cret-pass"


# =============================================================================
# Entity Store Fixtures
# =============================================================================

@pytest.fixture(autouse=True)
def engine(tmp_path):
    """Fresh file-backed SQLite database bound to SessionLocal for one test."""
    test_engine = build_engine(f"sqlite:///{tmp_path / 'streamhub.db'}")
    Base.metadata.create_all(bind=test_engine)
    SessionLocal.configure(bind=test_engine)
    yield test_engine
    SessionLocal.configure(bind=default_engine)
    test_engine.dispose()


@pytest.fixture
def db(engine):
    """Database session for direct store access in tests."""
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def sessions():
    """SessionManager built from the test configuration."""
    return SessionManager.from_config(config.auth)


# =============================================================================
# Blob Store & Client Fixtures
# =============================================================================

@pytest.fixture
def blob_store(tmp_path):
    """Filesystem blob store rooted in the test's tmp_path."""
    return LocalBlobStore(tmp_path / "media", "http://testserver/media")


@pytest.fixture
def client(blob_store):
    """TestClient with the blob store dependency overridden."""
    reset_cached_dependencies()
    app.dependency_overrides[get_blob_store] = lambda: blob_store
    yield TestClient(app)
    app.dependency_overrides.clear()


# =============================================================================
# Factories
# =============================================================================

@dataclass
class RegisteredUser:
    """A registered, logged-in user as seen by a test."""

    id: str
    username: str
    access_token: str
    refresh_token: str

    @property
    def headers(self) -> dict[str, str]:
        return {"Authorization": f"Bearer {self.access_token}"}


def video_files(name: str = "clip") -> dict:
    return {
        "videoFile": (f"{name}.mp4", b"\x00\x00\x00\x18ftypmp42", "video/mp4"),
        "thumbnail": (f"{name}.png", b"\x89PNG\r\n\x1a\n", "image/png"),
    }


@pytest.fixture
def make_user(client):
    """Register and log in a user, returning a RegisteredUser."""

    def _make(username: str, email: Optional[str] = None, full_name: Optional[str] = None) -> RegisteredUser:
        response = client.post(
            f"{API}/users/register",
            data={
                "username": username,
                "email": email or f"{username}@example.com",
                "fullName": full_name or username.title(),
                "password": PASSWORD,
            },
        )
        assert response.status_code == 201, response.text

        response = client.post(
            f"{API}/users/login", json={"username": username, "password": PASSWORD}
        )
        assert response.status_code == 200, response.text
        data = response.json()["data"]
        return RegisteredUser(
            id=data["user"]["id"],
            username=data["user"]["username"],
            access_token=data["accessToken"],
            refresh_token=data["refreshToken"],
        )

    return _make


@pytest.fixture
def make_video(client):
    """Publish a video as `user`; pass published=False to unpublish it after upload."""

    def _make(user: RegisteredUser, title: str = "Sample video",
              description: str = "A sample upload", published: bool = True) -> dict:
        response = client.post(
            f"{API}/videos",
            data={"title": title, "description": description},
            files=video_files(),
            headers=user.headers,
        )
        assert response.status_code == 200, response.text
        video = response.json()["data"]["video"]
        if not published:
            toggled = client.patch(
                f"{API}/videos/toggle-publish/{video['id']}", headers=user.headers
            )
            assert toggled.status_code == 200, toggled.text
            video = toggled.json()["data"]["video"]
        return video

    return _make


@pytest.fixture
def make_playlist(client):
    """Create a playlist owned by `user`."""

    def _make(user: RegisteredUser, name: str = "Favourites",
              description: str = "Videos worth rewatching") -> dict:
        response = client.post(
            f"{API}/playlists",
            json={"name": name, "description": description},
            headers=user.headers,
        )
        assert response.status_code == 200, response.text
        return response.json()["data"]["playlist"]

    return _make
