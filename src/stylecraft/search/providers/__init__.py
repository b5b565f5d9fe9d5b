"""Embedding providers — protocol and implementations."""

from stylecraft.search.protocols import EmbeddingProvider
from stylecraft.search.providers.hashing import HashEmbedding
from stylecraft.search.providers.sentence_transformers import SentenceTransformerEmbedding

__all__ = [
    "EmbeddingProvider",
    "HashEmbedding",
    "SentenceTransformerEmbedding",
]

# Optional providers — import-guarded, available only when deps are installed.
try:
    from stylecraft.search.providers.openai import OpenAIEmbedding

    __all__.append("OpenAIEmbedding")
except ImportError:  # pragma: no cover
    pass
