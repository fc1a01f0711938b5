"""
Pytest fixtures for test database, client, and authentication.

Each test gets a fresh in-memory SQLite database; the app's `get_db`
dependency is overridden to hand out the same session the fixtures use.
"""

import os

# Must be set before the settings cache is first populated
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("ENVIRONMENT", "test")

from datetime import datetime, timezone, timedelta
from typing import AsyncGenerator

import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.pool import StaticPool

from ticket_accounts.main import app
from ticket_accounts.db.base import Base
from ticket_accounts.db.session import get_db
from ticket_accounts.core.tokens import create_access_token
from ticket_accounts.models import User, Event, Reservation

TEST_DATABASE_URL = "sqlite+aiosqlite://"
TEST_PASSWORD = "testpassword123"


@pytest_asyncio.fixture(scope="function")
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    """Create tables in a private in-memory database and yield a session on it."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    session_factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with session_factory() as session:
        yield session

    await engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client that overrides the DB dependency with the test session."""

    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


async def make_user(db_session: AsyncSession, email: str, name: str = "Test User") -> User:
    user = User(name=name, email=email, tel="0812345678", role="member")
    user.set_password(TEST_PASSWORD)
    db_session.add(user)
    await db_session.commit()
    await db_session.refresh(user)
    return user


@pytest_asyncio.fixture
async def test_user(db_session: AsyncSession) -> User:
    return await make_user(db_session, "test@example.com")


@pytest_asyncio.fixture
async def other_user(db_session: AsyncSession) -> User:
    return await make_user(db_session, "other@example.com", name="Other User")


@pytest_asyncio.fixture
async def auth_token(test_user: User) -> str:
    return create_access_token(test_user.id)


@pytest_asyncio.fixture
async def auth_headers(auth_token: str) -> dict:
    """Authorization headers with Bearer token."""
    return {"Authorization": f"Bearer {auth_token}"}


async def make_event(db_session: AsyncSession, name: str, available: int, total: int = 100) -> Event:
    event = Event(
        name=name,
        description="A test event",
        date=datetime.now(timezone.utc) + timedelta(days=30),
        venue="Test Venue",
        total_tickets=total,
        available_tickets=available,
    )
    db_session.add(event)
    await db_session.commit()
    await db_session.refresh(event)
    return event


@pytest_asyncio.fixture
async def test_event(db_session: AsyncSession) -> Event:
    """Event with 90 of 100 tickets still on sale."""
    return await make_event(db_session, "Test Concert", available=90)


@pytest_asyncio.fixture
async def second_event(db_session: AsyncSession) -> Event:
    return await make_event(db_session, "Second Show", available=40, total=50)


async def make_reservation(
    db_session: AsyncSession, user: User, event_id, ticket_amount: int
) -> Reservation:
    reservation = Reservation(user_id=user.id, event_id=event_id, ticket_amount=ticket_amount)
    db_session.add(reservation)
    await db_session.commit()
    await db_session.refresh(reservation)
    return reservation


@pytest_asyncio.fixture
async def reserve(db_session: AsyncSession):
    """Factory fixture: reserve(user, event_id, ticket_amount) -> Reservation."""

    async def _reserve(user: User, event_id, ticket_amount: int) -> Reservation:
        return await make_reservation(db_session, user, event_id, ticket_amount)

    return _reserve
