"""
Soft Delete Test Configuration

Provides pytest fixtures for in-memory SQLite databases (sync and async) and
session factories with soft delete enabled.
"""

import os
import pytest
import pytest_asyncio
from sqlalchemy import create_engine
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from entities import Base
from soft_delete import enable_soft_delete

TEST_DATABASE_URL = os.getenv("TEST_DATABASE_URL", "sqlite:///:memory:")
TEST_ASYNC_DATABASE_URL = os.getenv("TEST_ASYNC_DATABASE_URL", "sqlite+aiosqlite:///:memory:")


@pytest.fixture(scope="session")
def db_engine():
    """Create an in-memory SQLite database for testing"""
    engine = create_engine(TEST_DATABASE_URL)
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def db_connection(db_engine):
    """
    Open a connection inside an outer transaction.
    Rolls back all changes after the test completes.
    """
    connection = db_engine.connect()
    transaction = connection.begin()

    yield connection

    transaction.rollback()
    connection.close()


@pytest.fixture(scope="function")
def session_factory(db_connection):
    """Session factory with the soft delete filter and rewriter installed"""
    SessionLocal = sessionmaker(bind=db_connection)
    enable_soft_delete(Base, SessionLocal)
    return SessionLocal


@pytest.fixture(scope="function")
def db_session(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture(scope="function")
def plain_session(db_connection):
    """Session without any soft delete hooks"""
    session = Session(bind=db_connection)
    yield session
    session.close()


@pytest_asyncio.fixture
async def async_engine():
    engine = create_async_engine(TEST_ASYNC_DATABASE_URL, poolclass=StaticPool)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def async_session_factory(async_engine):
    AsyncSessionLocal = async_sessionmaker(
        async_engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )
    enable_soft_delete(Base, AsyncSessionLocal)
    return AsyncSessionLocal


@pytest.fixture(scope="function")
def standalone_session_factory():
    """
    Soft delete session factory on its own in-memory database.
    For tests that need real commits and rollbacks.
    """
    engine = create_engine(TEST_DATABASE_URL, poolclass=StaticPool)
    Base.metadata.create_all(bind=engine)
    SessionLocal = sessionmaker(bind=engine)
    enable_soft_delete(Base, SessionLocal)

    yield SessionLocal

    engine.dispose()
