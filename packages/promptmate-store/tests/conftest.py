"""Pytest configuration and fixtures for store tests"""
import os

# In-memory SQLite; must be set before promptmate_store is imported
os.environ["DATABASE_URL"] = "sqlite+aiosqlite://"

import pytest

from promptmate_store.database import Base, build_engine, build_session_factory
from promptmate_store import models  # noqa: F401


@pytest.fixture
async def db_engine():
    """Fresh in-memory database with the schema created"""
    engine = build_engine("sqlite+aiosqlite://")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
async def db_session(db_engine):
    """Create a test database session"""
    session_factory = build_session_factory(db_engine)
    async with session_factory() as session:
        yield session
        await session.rollback()
