"""Vector search layer — providers, stores, and similarity helpers."""

from stylecraft.search.protocols import EmbeddingProvider, EmbeddingStore
from stylecraft.search.stores.database import DatabaseEmbeddingStore
from stylecraft.search.stores.local import LocalEmbeddingStore
from stylecraft.search.types import EmbeddingEntry, SimilarityResult, SourceType
from stylecraft.search.vectors import cosine_similarity

__all__ = [
    "DatabaseEmbeddingStore",
    "EmbeddingEntry",
    "EmbeddingProvider",
    "EmbeddingStore",
    "LocalEmbeddingStore",
    "SimilarityResult",
    "SourceType",
    "cosine_similarity",
]
