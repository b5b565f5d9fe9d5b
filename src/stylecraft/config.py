"""StylecraftConfig — explicit, immutable configuration passed into components."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

from stylecraft.exceptions import ConfigError

if TYPE_CHECKING:
    from collections.abc import Mapping

    from stylecraft.search.protocols import EmbeddingProvider
    from stylecraft.search.stores.database import DatabaseEmbeddingStore

DEFAULT_DB_URL = "sqlite+aiosqlite:///.stylecraft/embeddings.db"
DEFAULT_CACHE_DIR = ".stylecraft/ingest-cache"

PROVIDERS = ("hash", "sentence-transformers", "openai")

_TRUE = {"1", "true", "yes", "on"}


@dataclass(frozen=True, slots=True)
class StylecraftConfig:
    """Settings for the store, providers, ingestion, and recommender.

    Build once at process start (usually via :meth:`from_env`) and hand the
    same instance to every component that needs it.

    Attributes:
        db_url: SQLAlchemy async URL of the embedding database.
        cache_dir: Where ingestion clones source repositories.
        provider: Embedding provider name, one of :data:`PROVIDERS`.
        model: Model name for the provider; ``None`` uses its default.
        log_level: Root log level name.
        json_logs: Emit one JSON object per log line instead of console text.
        max_tokens: Cap on design tokens embedded per ingestion run.
        batch_size: Texts per ``embed_batch`` call during ingestion.
        axe_dir: Local axe-core checkout to read rules from, if any.
        search_limit: Results requested from the store per recommendation.
        min_similarity: Similarity floor for recommendation retrieval.
        heuristic_confidence: Confidence reported by the heuristic path.
        confidence_bonus: Added to the top similarity on the RAG path.
        confidence_cap: Upper bound on RAG confidence.
        matched_token_limit: Results echoed back as provenance.
    """

    db_url: str = DEFAULT_DB_URL
    cache_dir: Path = Path(DEFAULT_CACHE_DIR)
    provider: str = "sentence-transformers"
    model: str | None = None
    log_level: str = "INFO"
    json_logs: bool = False
    max_tokens: int = 500
    batch_size: int = 10
    axe_dir: Path | None = None
    search_limit: int = 10
    min_similarity: float = 0.3
    heuristic_confidence: float = 0.4
    confidence_bonus: float = 0.1
    confidence_cap: float = 0.9
    matched_token_limit: int = 5

    def __post_init__(self) -> None:
        if self.provider not in PROVIDERS:
            msg = f"Unknown provider {self.provider!r}; expected one of {', '.join(PROVIDERS)}"
            raise ConfigError(msg)
        if self.max_tokens <= 0 or self.batch_size <= 0:
            raise ConfigError("max_tokens and batch_size must be positive")

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> StylecraftConfig:
        """Read ``STYLECRAFT_*`` variables, falling back to defaults."""
        env = os.environ if environ is None else environ
        axe_dir = env.get("STYLECRAFT_AXE_DIR")
        return cls(
            db_url=env.get("STYLECRAFT_DB_URL", DEFAULT_DB_URL),
            cache_dir=Path(env.get("STYLECRAFT_CACHE_DIR", DEFAULT_CACHE_DIR)),
            provider=env.get("STYLECRAFT_PROVIDER", "sentence-transformers"),
            model=env.get("STYLECRAFT_MODEL") or None,
            log_level=env.get("STYLECRAFT_LOG_LEVEL", "INFO").upper(),
            json_logs=env.get("STYLECRAFT_JSON_LOGS", "false").lower() in _TRUE,
            max_tokens=_int(env, "STYLECRAFT_MAX_TOKENS", 500),
            batch_size=_int(env, "STYLECRAFT_BATCH_SIZE", 10),
            axe_dir=Path(axe_dir) if axe_dir else None,
        )


def _int(env: Mapping[str, str], key: str, default: int) -> int:
    raw = env.get(key)
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError as exc:
        msg = f"{key} must be an integer, got {raw!r}"
        raise ConfigError(msg) from exc


# ------------------------------------------------------------------
# Factories
# ------------------------------------------------------------------


def build_provider(config: StylecraftConfig) -> EmbeddingProvider:
    """Construct the embedding provider named by *config*."""
    if config.provider == "hash":
        from stylecraft.search.providers.hashing import HashEmbedding

        return HashEmbedding()
    if config.provider == "openai":
        from stylecraft.search.providers.openai import DEFAULT_MODEL as OPENAI_MODEL
        from stylecraft.search.providers.openai import OpenAIEmbedding

        return OpenAIEmbedding(
            model=config.model or OPENAI_MODEL, batch_size=config.batch_size
        )

    from stylecraft.search.providers.sentence_transformers import (
        DEFAULT_MODEL,
        SentenceTransformerEmbedding,
    )

    return SentenceTransformerEmbedding(
        config.model or DEFAULT_MODEL, batch_size=config.batch_size
    )


def build_store(config: StylecraftConfig) -> DatabaseEmbeddingStore:
    """Construct the durable embedding store at ``config.db_url``.

    For file-backed SQLite URLs the parent directory is created.
    """
    from stylecraft.search.stores.database import DatabaseEmbeddingStore

    prefix = "sqlite+aiosqlite:///"
    if config.db_url.startswith(prefix):
        db_path = config.db_url[len(prefix):]
        if db_path and db_path != ":memory:":
            Path(db_path).parent.mkdir(parents=True, exist_ok=True)
    return DatabaseEmbeddingStore(url=config.db_url)
