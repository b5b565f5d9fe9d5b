"""SQLModel database models for stylecraft."""

from stylecraft.models.embeddings import EmbeddingRecord, EmbeddingRecordBase

__all__ = [
    "EmbeddingRecord",
    "EmbeddingRecordBase",
]
