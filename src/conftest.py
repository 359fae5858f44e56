from contextlib import asynccontextmanager
from uuid import uuid4

import pytest
from httpx import ASGITransport, AsyncClient

from src.auth.orm_models import UserSession  # noqa: F401
from src.config.database import async_session_maker, engine
from src.config.settings import settings
from src.guests.dtos import AccountStatus, GuestDTO
from src.guests.repository.orm_models import RSVP, User  # noqa: F401
from src.main import app
from src.models.base import BaseModel
from src.photos.repository.orm_models import Photo, PhotoCategory, PhotoComment, PhotoLike  # noqa: F401


@pytest.fixture(autouse=True)
async def database():
    """Fresh schema for every test on the sqlite test database."""
    async with engine.begin() as conn:
        await conn.run_sync(BaseModel.metadata.drop_all)
        await conn.run_sync(BaseModel.metadata.create_all)
    yield
    async with engine.begin() as conn:
        await conn.run_sync(BaseModel.metadata.drop_all)


@pytest.fixture
async def db_session():
    async with async_session_maker() as session:
        yield session
        await session.rollback()


@pytest.fixture(autouse=True)
def upload_dir(tmp_path, monkeypatch):
    path = tmp_path / "uploads"
    monkeypatch.setattr(settings, "upload_dir", str(path))
    return path


@pytest.fixture
def client_factory():
    """Build a client with the given dependency overrides, cleared on exit."""

    @asynccontextmanager
    async def _factory(overrides: dict | None = None):
        app.dependency_overrides.update(overrides or {})
        transport = ASGITransport(app=app)
        try:
            async with AsyncClient(transport=transport, base_url="http://test") as ac:
                yield ac
        finally:
            app.dependency_overrides.clear()

    return _factory


@pytest.fixture
async def client(client_factory):
    async with client_factory() as ac:
        yield ac


@pytest.fixture
def make_guest():
    """Build GuestDTOs for tests that override the current-user dependencies."""

    def _make_guest(**kwargs) -> GuestDTO:
        values = {
            "id": uuid4(),
            "first_name": "Alex",
            "last_name": "Guest",
            "account_status": AccountStatus.REGISTERED,
            "email": "alex@example.com",
        }
        values.update(kwargs)
        return GuestDTO(**values)

    return _make_guest
