"""Shared fixtures: a throwaway SQLite store, a backend on the same file, and an API client."""

import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from query_manager.adapters.relational import SQLAlchemyBackend
from query_manager.database import Base, get_db
from query_manager.deps import get_backend
from query_manager.main import app

USERS = [
    (1, "a@b.com", "Alice"),
    (2, "c@d.com", "Carol"),
    (3, "e@f.com", "Erin"),
]


@pytest_asyncio.fixture
async def db_url(tmp_path):
    return f"sqlite+aiosqlite:///{tmp_path / 'test.db'}"


@pytest_asyncio.fixture
async def engine(db_url):
    engine = create_async_engine(db_url)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
        await conn.exec_driver_sql(
            "CREATE TABLE users (id INTEGER PRIMARY KEY, email TEXT NOT NULL, name TEXT)"
        )
        for user in USERS:
            await conn.exec_driver_sql("INSERT INTO users (id, email, name) VALUES (?, ?, ?)", user)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def session_factory(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def backend(engine, db_url):
    backend = SQLAlchemyBackend.from_url(db_url, timeout=5)
    yield backend
    await backend.dispose()


@pytest_asyncio.fixture
async def client(session_factory, backend):
    async def _get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = _get_db
    app.dependency_overrides[get_backend] = lambda: backend
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as c:
        yield c
    app.dependency_overrides.clear()
