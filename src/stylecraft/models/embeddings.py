"""EmbeddingRecord model — one row per stored embedding."""

from __future__ import annotations

from sqlalchemy import BigInteger, LargeBinary
from sqlmodel import Field, SQLModel

from stylecraft.search.types import now_ms


class EmbeddingRecordBase(SQLModel):
    """Base fields for a stored embedding. Subclass with ``table=True`` for a concrete table.

    ``vector`` holds packed little-endian float32 bytes; ``dimensions`` is
    kept next to it so rows decode without re-deriving the length.
    """

    id: int | None = Field(default=None, primary_key=True)
    source_id: str = Field(index=True)
    source_type: str = Field(index=True)
    text: str = Field(default="")
    vector: bytes = Field(sa_type=LargeBinary)  # type: ignore[invalid-argument-type]
    dimensions: int = Field(default=0)
    created_at: int = Field(default_factory=now_ms, sa_type=BigInteger)  # type: ignore[invalid-argument-type]
    metadata_json: str = Field(default="{}")


class EmbeddingRecord(EmbeddingRecordBase, table=True):
    """Default embedding table — ``stylecraft_embeddings``."""

    __tablename__ = "stylecraft_embeddings"
