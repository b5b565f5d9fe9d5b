"""Embedding stores — EmbeddingStore protocol implementations."""

from stylecraft.search.stores.database import DatabaseEmbeddingStore
from stylecraft.search.stores.local import LocalEmbeddingStore

__all__ = [
    "DatabaseEmbeddingStore",
    "LocalEmbeddingStore",
]
