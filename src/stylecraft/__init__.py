"""Stylecraft: style recommendation over embedded design knowledge.

Heuristic industry/mood tables backed by semantic search over design tokens,
accessibility rules, ARIA patterns, and UI components.
"""

__version__ = "0.1.0"

from stylecraft.config import StylecraftConfig, build_provider, build_store
from stylecraft.exceptions import (
    ConfigError,
    DimensionMismatchError,
    IngestionError,
    ProviderError,
    SourceUnavailableError,
    StoreError,
    StylecraftError,
    TableError,
    UnknownSourceError,
)
from stylecraft.ingest import DesignToken, IngestionPipeline, flatten_tokens
from stylecraft.recommend import (
    RecommendationSource,
    StyleContext,
    StyleRecommendation,
    StyleRecommender,
    StyleTables,
    recommend_style,
)
from stylecraft.search import (
    DatabaseEmbeddingStore,
    EmbeddingEntry,
    EmbeddingProvider,
    EmbeddingStore,
    LocalEmbeddingStore,
    SimilarityResult,
    SourceType,
    cosine_similarity,
)
from stylecraft.search.providers import HashEmbedding

__all__ = [
    "ConfigError",
    "DatabaseEmbeddingStore",
    "DesignToken",
    "DimensionMismatchError",
    "EmbeddingEntry",
    "EmbeddingProvider",
    "EmbeddingStore",
    "HashEmbedding",
    "IngestionError",
    "IngestionPipeline",
    "LocalEmbeddingStore",
    "ProviderError",
    "RecommendationSource",
    "SimilarityResult",
    "SourceType",
    "SourceUnavailableError",
    "StoreError",
    "StyleContext",
    "StyleRecommendation",
    "StyleRecommender",
    "StyleTables",
    "StylecraftConfig",
    "StylecraftError",
    "TableError",
    "UnknownSourceError",
    "__version__",
    "build_provider",
    "build_store",
    "cosine_similarity",
    "flatten_tokens",
    "recommend_style",
]
