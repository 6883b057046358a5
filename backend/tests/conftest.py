"""
VideoTube Backend - Test Configuration (conftest.py)
======================================================

Shared pytest fixtures for the entire test suite.

Fixture Hierarchy (all function-scoped):
    ├── mock_db_session: AsyncMock session; flush() fills id/timestamps on
    │                    objects passed to add(), like a real INSERT would
    ├── compile_sql: renders an executed statement as PostgreSQL text
    ├── user / other_user: authenticated caller and a second account
    ├── make_video / make_comment / make_tweet: ORM-shaped fake rows
    ├── sample_jpeg_bytes / sample_mp4_bytes: header bytes for upload tests
    ├── access_token: HS256 token for `user`
    └── test_client: HTTPX AsyncClient with auth and DB dependencies overridden
"""

import os
import tempfile

# Override settings BEFORE any app import: app.config reads the environment
# once, when the settings singleton is created
os.environ["JWT_SECRET"] = "test-secret-not-real"
os.environ["S3_BUCKET"] = "videotube-test"
os.environ["STORAGE_ROOT"] = tempfile.mkdtemp(prefix="videotube_test_")
os.environ["LOG_LEVEL"] = "WARNING"
os.environ["RETRY_MAX_ATTEMPTS"] = "2"
os.environ["RETRY_MIN_WAIT"] = "0"
os.environ["RETRY_MAX_WAIT"] = "0"
os.environ["RETRY_JITTER"] = "0"
os.environ["RATE_LIMIT_REQUESTS"] = "5000"

from datetime import datetime, timedelta, timezone  # noqa: E402
from types import SimpleNamespace  # noqa: E402
from unittest.mock import AsyncMock, MagicMock  # noqa: E402
from uuid import uuid4  # noqa: E402

import jwt  # noqa: E402
import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.dialects import postgresql  # noqa: E402

from app.config import settings  # noqa: E402


def fill_insert_defaults(obj) -> None:
    """What the database round trip would have set on a freshly inserted row."""
    now = datetime.now(timezone.utc)
    if getattr(obj, "id", None) is None:
        obj.id = uuid4()
    for attr in ("created_at", "updated_at"):
        if getattr(obj, attr, None) is None:
            setattr(obj, attr, now)


@pytest.fixture
def mock_db_session():
    """
    Mock AsyncSession.

    Usage:
        mock_db_session.get.return_value = video
        mock_db_session.execute.return_value.scalar_one_or_none.return_value = video
    """
    added = []

    async def flush():
        for obj in added:
            fill_insert_defaults(obj)

    session = AsyncMock()
    session.execute = AsyncMock(return_value=MagicMock())
    session.get = AsyncMock(return_value=None)
    session.delete = AsyncMock()
    session.flush = AsyncMock(side_effect=flush)
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.close = AsyncMock()
    session.add = MagicMock(side_effect=added.append)
    session.added = added
    return session


@pytest.fixture
def compile_sql():
    """
    Render a statement the service executed as PostgreSQL SQL.

    Returns (sql, params). Pass literal_binds=True to inline numeric and
    boolean values such as LIMIT/OFFSET.

    Usage:
        sql, params = compile_sql(mock_db_session.execute.await_args.args[0])
    """

    def _compile(stmt, literal_binds: bool = False):
        compiled = stmt.compile(
            dialect=postgresql.dialect(),
            compile_kwargs={"literal_binds": literal_binds},
        )
        return str(compiled), compiled.params

    return _compile


def make_user(**overrides):
    data = {
        "id": uuid4(),
        "username": "alice",
        "email": "alice@example.com",
        "full_name": "Alice Liddell",
        "avatar": "https://cdn.example.com/avatars/alice.png",
        "cover_image": None,
    }
    data.update(overrides)
    return SimpleNamespace(**data)


@pytest.fixture
def user():
    return make_user()


@pytest.fixture
def other_user():
    return make_user(
        username="bob",
        email="bob@example.com",
        full_name="Bob Builder",
        avatar="https://cdn.example.com/avatars/bob.png",
    )


@pytest.fixture
def make_video(user):
    """Factory for video rows shaped like the ORM object (owner loaded)."""

    def _make(**overrides):
        now = datetime.now(timezone.utc)
        owner = overrides.pop("owner", user)
        data = {
            "id": uuid4(),
            "video_file": "https://cdn.example.com/videos/2024/01/15/v.mp4",
            "video_file_key": "videos/2024/01/15/v.mp4",
            "thumbnail": "https://cdn.example.com/thumbnails/2024/01/15/t.jpg",
            "thumbnail_key": "thumbnails/2024/01/15/t.jpg",
            "title": "Intro to FastAPI",
            "description": "Building APIs quickly",
            "duration": 312.5,
            "views": 0,
            "is_published": True,
            "owner_id": owner.id,
            "owner": owner,
            "created_at": now,
            "updated_at": now,
        }
        data.update(overrides)
        return SimpleNamespace(**data)

    return _make


@pytest.fixture
def make_comment(user):
    def _make(**overrides):
        now = datetime.now(timezone.utc)
        owner = overrides.pop("owner", user)
        data = {
            "id": uuid4(),
            "content": "Great video!",
            "video_id": uuid4(),
            "owner_id": owner.id,
            "owner": owner,
            "created_at": now,
            "updated_at": now,
        }
        data.update(overrides)
        return SimpleNamespace(**data)

    return _make


@pytest.fixture
def make_tweet(user):
    def _make(**overrides):
        now = datetime.now(timezone.utc)
        owner = overrides.pop("owner", user)
        data = {
            "id": uuid4(),
            "content": "Uploading a new series tomorrow",
            "owner_id": owner.id,
            "owner": owner,
            "created_at": now,
            "updated_at": now,
        }
        data.update(overrides)
        return SimpleNamespace(**data)

    return _make


@pytest.fixture
def sample_jpeg_bytes():
    """Smallest JPEG header python-magic recognises as image/jpeg."""
    return (
        b"\xff\xd8\xff\xe0\x00\x10JFIF\x00\x01\x01\x00\x00\x01\x00\x01\x00\x00"
        b"\xff\xd9"
    )


@pytest.fixture
def sample_mp4_bytes():
    """An ISO base media `ftyp` box; enough for MIME sniffing."""
    return b"\x00\x00\x00\x18ftypmp42\x00\x00\x00\x00mp42isom" + b"\x00" * 64


@pytest.fixture
def access_token(user):
    payload = {
        "sub": str(user.id),
        "exp": datetime.now(timezone.utc) + timedelta(minutes=15),
    }
    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)


@pytest_asyncio.fixture
async def test_client(user, mock_db_session):
    """
    HTTPX AsyncClient talking to the app in-process.

    get_current_user returns `user` and get_db_session yields
    `mock_db_session`, so no token or database is needed. Patch the service
    singletons in the route modules to control what handlers return.
    """
    from app.auth import get_current_user
    from app.database import get_db_session
    from app.main import app

    async def override_db():
        yield mock_db_session

    app.dependency_overrides[get_current_user] = lambda: user
    app.dependency_overrides[get_db_session] = override_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def anonymous_client(mock_db_session):
    """Client without the auth override; the database is still mocked."""
    from app.database import get_db_session
    from app.main import app

    async def override_db():
        yield mock_db_session

    app.dependency_overrides[get_db_session] = override_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()
