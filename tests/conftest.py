"""
Pytest fixtures - test DB, client, users, items, bookings.
Isolated tests: fresh in-memory SQLite per test; Redis cache and Elasticsearch disabled.
"""

import os

os.environ.setdefault("CACHE_ENABLED", "false")
os.environ.setdefault("SEARCH_ENABLED", "false")
os.environ.setdefault("LOG_LEVEL", "WARNING")

from datetime import datetime
from typing import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from shareit.core.security import create_access_token, hash_password
from shareit.db.base import Base
from shareit.db.models import Booking, Item, User
from shareit.db.session import get_db
from shareit.domain.booking_state import BookingStatus
from shareit.main import app

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"
_PASSWORD_HASH = hash_password("password123")


@pytest_asyncio.fixture
async def engine():
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def session(engine) -> AsyncGenerator[AsyncSession, None]:
    async_session = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with async_session() as s:
        yield s


@pytest_asyncio.fixture
async def client(session: AsyncSession):
    async def override_get_db():
        yield session

    app.dependency_overrides[get_db] = override_get_db
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac
    app.dependency_overrides.clear()


async def _make_user(session: AsyncSession, email: str, name: str) -> User:
    user = User(email=email, hashed_password=_PASSWORD_HASH, name=name)
    session.add(user)
    await session.flush()
    await session.refresh(user)
    return user


@pytest_asyncio.fixture
async def owner(session: AsyncSession) -> User:
    return await _make_user(session, "owner@example.com", "Owner")


@pytest_asyncio.fixture
async def booker(session: AsyncSession) -> User:
    return await _make_user(session, "booker@example.com", "Booker")


@pytest_asyncio.fixture
async def stranger(session: AsyncSession) -> User:
    return await _make_user(session, "stranger@example.com", "Stranger")


@pytest_asyncio.fixture
async def item(session: AsyncSession, owner: User) -> Item:
    item = Item(name="Cordless drill", description="18V with two batteries", available=True, owner_id=owner.id)
    session.add(item)
    await session.flush()
    await session.refresh(item)
    return item


@pytest_asyncio.fixture
async def unavailable_item(session: AsyncSession, owner: User) -> Item:
    item = Item(name="Broken ladder", description="Waiting for repair", available=False, owner_id=owner.id)
    session.add(item)
    await session.flush()
    await session.refresh(item)
    return item


@pytest.fixture
def add_booking(session: AsyncSession):
    """Insert a booking directly, bypassing creation rules (e.g. to place it in the past)."""

    async def _add(item: Item, booker: User, start: datetime, end: datetime, status=BookingStatus.WAITING) -> Booking:
        booking = Booking(item_id=item.id, booker_id=booker.id, start=start, end=end, status=status)
        session.add(booking)
        await session.flush()
        await session.refresh(booking)
        return booking

    return _add


def _headers_for(user: User) -> dict:
    return {"Authorization": f"Bearer {create_access_token(user.id)}"}


@pytest.fixture
def owner_headers(owner: User) -> dict:
    return _headers_for(owner)


@pytest.fixture
def booker_headers(booker: User) -> dict:
    return _headers_for(booker)


@pytest.fixture
def stranger_headers(stranger: User) -> dict:
    return _headers_for(stranger)
