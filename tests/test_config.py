"""Tests for StylecraftConfig and the component factories."""

from __future__ import annotations

from pathlib import Path

import pytest

from stylecraft.config import (
    DEFAULT_DB_URL,
    StylecraftConfig,
    build_provider,
    build_store,
)
from stylecraft.exceptions import ConfigError
from stylecraft.search.providers.hashing import HashEmbedding
from stylecraft.search.stores.database import DatabaseEmbeddingStore


class TestDefaults:
    def test_values(self):
        config = StylecraftConfig()
        assert config.db_url == DEFAULT_DB_URL
        assert config.provider == "sentence-transformers"
        assert config.max_tokens == 500
        assert config.batch_size == 10
        assert config.search_limit == 10
        assert config.min_similarity == 0.3
        assert config.heuristic_confidence == 0.4
        assert config.confidence_bonus == 0.1
        assert config.confidence_cap == 0.9
        assert config.matched_token_limit == 5

    def test_frozen(self):
        config = StylecraftConfig()
        with pytest.raises(AttributeError):
            config.provider = "hash"  # type: ignore[misc]

    def test_unknown_provider(self):
        with pytest.raises(ConfigError, match="Unknown provider"):
            StylecraftConfig(provider="cohere")

    def test_non_positive_batch(self):
        with pytest.raises(ConfigError):
            StylecraftConfig(batch_size=0)


class TestFromEnv:
    def test_empty_env_gives_defaults(self):
        assert StylecraftConfig.from_env({}) == StylecraftConfig()

    def test_reads_variables(self):
        config = StylecraftConfig.from_env(
            {
                "STYLECRAFT_DB_URL": "sqlite+aiosqlite:///tmp/x.db",
                "STYLECRAFT_CACHE_DIR": "/tmp/cache",
                "STYLECRAFT_PROVIDER": "hash",
                "STYLECRAFT_MODEL": "custom",
                "STYLECRAFT_LOG_LEVEL": "debug",
                "STYLECRAFT_JSON_LOGS": "true",
                "STYLECRAFT_MAX_TOKENS": "50",
                "STYLECRAFT_BATCH_SIZE": "4",
                "STYLECRAFT_AXE_DIR": "/src/axe-core",
            }
        )
        assert config.db_url == "sqlite+aiosqlite:///tmp/x.db"
        assert config.cache_dir == Path("/tmp/cache")
        assert config.provider == "hash"
        assert config.model == "custom"
        assert config.log_level == "DEBUG"
        assert config.json_logs is True
        assert config.max_tokens == 50
        assert config.batch_size == 4
        assert config.axe_dir == Path("/src/axe-core")

    def test_invalid_integer(self):
        with pytest.raises(ConfigError, match="STYLECRAFT_BATCH_SIZE"):
            StylecraftConfig.from_env({"STYLECRAFT_BATCH_SIZE": "ten"})

    def test_json_logs_false_values(self):
        assert StylecraftConfig.from_env({"STYLECRAFT_JSON_LOGS": "0"}).json_logs is False


class TestFactories:
    def test_hash_provider(self):
        provider = build_provider(StylecraftConfig(provider="hash"))
        assert isinstance(provider, HashEmbedding)

    def test_openai_provider(self, monkeypatch):
        monkeypatch.setenv("OPENAI_API_KEY", "sk-test")
        provider = build_provider(
            StylecraftConfig(provider="openai", model="text-embedding-3-large", batch_size=4)
        )
        assert provider.model_name == "text-embedding-3-large"
        assert provider._batch_size == 4

    async def test_store_creates_parent_directory(self, tmp_path):
        db_path = tmp_path / "nested" / "dir" / "embeddings.db"
        store = build_store(StylecraftConfig(db_url=f"sqlite+aiosqlite:///{db_path}"))
        assert isinstance(store, DatabaseEmbeddingStore)
        assert db_path.parent.is_dir()
        await store.close()

    async def test_memory_store(self):
        store = build_store(StylecraftConfig(db_url="sqlite+aiosqlite://"))
        await store.connect()
        assert await store.get_embedding_count("token") == 0
        await store.close()
