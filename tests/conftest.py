"""Shared fixtures for stylecraft tests."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest
from sqlalchemy.ext.asyncio import create_async_engine
from sqlmodel import SQLModel

import stylecraft.models  # noqa: F401  (registers the embeddings table)
from stylecraft.config import StylecraftConfig
from stylecraft.search.stores.database import DatabaseEmbeddingStore
from stylecraft.search.stores.local import LocalEmbeddingStore

if TYPE_CHECKING:
    from collections.abc import AsyncIterator
    from pathlib import Path

    from sqlalchemy.ext.asyncio import AsyncEngine


@pytest.fixture
async def async_engine() -> AsyncIterator[AsyncEngine]:
    """Async in-memory SQLite engine with all tables created."""
    eng = create_async_engine("sqlite+aiosqlite://", echo=False)
    async with eng.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    yield eng
    await eng.dispose()


@pytest.fixture
async def db_store(async_engine: AsyncEngine) -> DatabaseEmbeddingStore:
    """Database store sharing the in-memory engine."""
    store = DatabaseEmbeddingStore(engine=async_engine)
    await store.connect()
    return store


@pytest.fixture
def local_store() -> LocalEmbeddingStore:
    return LocalEmbeddingStore()


@pytest.fixture
def config(tmp_path: Path) -> StylecraftConfig:
    """Offline-friendly config rooted in a temporary directory."""
    return StylecraftConfig(
        db_url=f"sqlite+aiosqlite:///{tmp_path / 'embeddings.db'}",
        cache_dir=tmp_path / "cache",
        provider="hash",
    )
