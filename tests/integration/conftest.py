"""Pytest fixtures for integration tests.

Provides async database fixtures backed by an in-memory SQLite database
and an HTTP client wired to the FastAPI app. Production runs on
PostgreSQL; the upsert and conditional updates used here are supported
by both dialects.
"""

from __future__ import annotations

import random
from typing import AsyncGenerator

import pytest
import pytest_asyncio
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from assigner.database.models import Base
from assigner.database.stores import PullRequestStore, TeamStore, UserStore
from assigner.review.selector import CandidateSelector
from assigner.web.app import create_app


@pytest_asyncio.fixture
async def engine() -> AsyncGenerator[AsyncEngine, None]:
    """Create an in-memory SQLite async engine with all tables."""
    test_engine = create_async_engine("sqlite+aiosqlite:///:memory:", echo=False)

    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield test_engine

    await test_engine.dispose()


@pytest_asyncio.fixture
async def session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db_session(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncSession, None]:
    """A session for calling query functions directly."""
    async with session_factory() as session:
        yield session
        await session.rollback()


@pytest.fixture
def team_store(session_factory: async_sessionmaker[AsyncSession]) -> TeamStore:
    return TeamStore(session_factory)


@pytest.fixture
def user_store(session_factory: async_sessionmaker[AsyncSession]) -> UserStore:
    return UserStore(session_factory)


@pytest.fixture
def pr_store(session_factory: async_sessionmaker[AsyncSession]) -> PullRequestStore:
    return PullRequestStore(session_factory)


@pytest.fixture
def app(session_factory: async_sessionmaker[AsyncSession]) -> FastAPI:
    """App wired to the test database with a seeded selector.

    ASGITransport does not run the lifespan, so the session factory is
    placed in app.state directly.
    """
    application = create_app(selector=CandidateSelector(random.Random(42)))
    application.state.session_factory = session_factory
    return application


@pytest_asyncio.fixture
async def async_client(app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client
