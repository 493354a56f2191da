"""Pytest configuration and shared fixtures for all tests."""

import os
import sys
from pathlib import Path

# Minimal environment for settings validation
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("LOG_FILE", "logs/test.log")

# Add project root to PYTHONPATH
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

import pytest
import pytest_asyncio
from datetime import date
from unittest.mock import AsyncMock, MagicMock

from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.pool import StaticPool

from taskminer.database import create_session_maker, init_models
from taskminer.models.enums import AppRole
from taskminer.models.profile import Profile
from taskminer.models.user_role import UserRole
from taskminer.services.ledger_gateway import LedgerGateway
from taskminer.services.task import completion_service
from taskminer.services.user.authorization import AuthContext


@pytest.fixture
def mock_session():
    """Mock AsyncSession for tests without a database."""
    session = AsyncMock()
    session.execute = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.close = AsyncMock()
    session.add = MagicMock()
    session.delete = MagicMock()
    session.refresh = AsyncMock()
    return session


@pytest_asyncio.fixture
async def engine():
    """In-memory SQLite engine shared by every session of a test."""
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    await init_models(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_maker(engine):
    """Session maker bound to the test engine."""
    return create_session_maker(engine)


@pytest_asyncio.fixture
async def session(session_maker):
    """Database session for service-level tests."""
    async with session_maker() as session:
        yield session


@pytest.fixture
def gateway(session_maker):
    """Ledger gateway without backoff delays."""
    return LedgerGateway(
        session_maker, timeout=5, max_retries=3, retry_delay_base=0
    )


@pytest.fixture
def make_profile(session):
    """
    Factory creating committed profiles.

    Usage:
        inviter = await make_profile("alice", level=1)
        invitee = await make_profile("bob", inviter=inviter)
    """
    counter = {"n": 0}

    async def _create(
        user_id: str, inviter: Profile | None = None, **fields
    ) -> Profile:
        counter["n"] += 1
        profile = Profile(
            user_id=user_id,
            email=f"{user_id}@example.com",
            invite_code=f"CODE{counter['n']:04d}",
            invited_by=inviter.id if inviter else None,
            **fields,
        )
        session.add(profile)
        await session.commit()
        return profile

    return _create


@pytest.fixture
def make_admin(session):
    """Factory granting the admin role and returning the caller context."""

    async def _create(user_id: str = "admin") -> AuthContext:
        session.add(UserRole(user_id=user_id, role=AppRole.ADMIN.value))
        await session.commit()
        return AuthContext(user_id=user_id)

    return _create


@pytest.fixture
def sample_wallet_address():
    """Sample TRC20 wallet address for testing."""
    return "TXyz1234567890AbCdEfGhIjKlMnOpQrS"


@pytest.fixture
def task_day(monkeypatch):
    """
    Pin the current task day used by task completion.

    Defaults to Monday 2026-10-19. Call the fixture to move the clock:
        task_day(date(2026, 10, 24))
    """
    current = {"day": date(2026, 10, 19)}
    monkeypatch.setattr(
        completion_service, "task_today", lambda: current["day"]
    )

    def _set(day: date) -> None:
        current["day"] = day

    return _set
