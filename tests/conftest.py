"""
Root Pytest Fixtures.

Shared fixtures available to all test types.

Test Database Configuration:
    By default, tests use an in-memory SQLite database for speed.
    To test against another database, set TEST_DATABASE_URL:

        export TEST_DATABASE_URL="sqlite+aiosqlite:////tmp/notes-test.db"
"""

import os
from collections.abc import AsyncGenerator

import pytest
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from notekeeper.backend.models import note as _note_model  # noqa: F401
from notekeeper.backend.models.base import Base
from notekeeper.backend.schemas.note import BABY_BLUE, LIGHT_GREEN, RED_ORANGE, Note


# =============================================================================
# Database Configuration
# =============================================================================


def get_test_database_url() -> str:
    """Return TEST_DATABASE_URL if set, otherwise in-memory SQLite."""
    return os.environ.get(
        "TEST_DATABASE_URL",
        "sqlite+aiosqlite:///:memory:",
    )


def is_sqlite() -> bool:
    """Check if using SQLite database."""
    return "sqlite" in get_test_database_url()


# =============================================================================
# Database Engine Fixtures
# =============================================================================


@pytest.fixture
async def db_engine() -> AsyncGenerator[AsyncEngine, None]:
    """
    Create a test database engine with the notes table.

    For SQLite in-memory, StaticPool keeps one connection so every session
    sees the same database.
    """
    url = get_test_database_url()

    if is_sqlite():
        engine = create_async_engine(
            url,
            echo=False,
            poolclass=StaticPool,
            connect_args={"check_same_thread": False},
        )
    else:
        engine = create_async_engine(url, echo=False)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest.fixture
def db_session_factory(db_engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Create a session factory bound to the test engine."""
    return async_sessionmaker(
        db_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


# =============================================================================
# Note Fixtures
# =============================================================================


@pytest.fixture
def sample_notes() -> list[Note]:
    """Three persisted notes with distinct titles, timestamps and colors."""
    return [
        Note(id=1, title="Banana", content="Buy bananas", timestamp=300, color=LIGHT_GREEN),
        Note(id=2, title="Apple", content="Buy apples", timestamp=100, color=BABY_BLUE),
        Note(id=3, title="Cherry", content="Buy cherries", timestamp=200, color=RED_ORANGE),
    ]
