"""DatabaseEmbeddingStore — SQLModel-backed durable embedding store."""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING, Any

import numpy as np
from sqlalchemy import func
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlmodel import select

from stylecraft.exceptions import DimensionMismatchError, StoreError
from stylecraft.models.embeddings import EmbeddingRecord
from stylecraft.search.types import EmbeddingEntry, SimilarityResult, SourceType
from stylecraft.search.vectors import cosine_similarities, pack_vector, rank, unpack_vector

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncEngine

logger = logging.getLogger(__name__)


class DatabaseEmbeddingStore:
    """Embedding store persisted in a SQL database through an async engine.

    Implements the ``EmbeddingStore`` protocol.  Vectors are stored as
    packed float32 blobs; similarity search loads every row of the requested
    source type and scores it exactly, so ordering is deterministic and ties
    fall back to insertion order (the autoincrement ``id``).

    Pass either a database *url* or an existing *engine*::

        store = DatabaseEmbeddingStore(url="sqlite+aiosqlite:///embeddings.db")
        await store.connect()
    """

    def __init__(
        self,
        *,
        url: str | None = None,
        engine: AsyncEngine | None = None,
        record_model: type[EmbeddingRecord] = EmbeddingRecord,
    ) -> None:
        if (url is None) == (engine is None):
            raise ValueError("Provide exactly one of url or engine")
        self._owns_engine = engine is None
        self._engine: AsyncEngine = engine or create_async_engine(url, echo=False)  # type: ignore[arg-type]
        self._model = record_model
        self._session_factory = async_sessionmaker(
            self._engine, class_=AsyncSession, expire_on_commit=False
        )

    @property
    def engine(self) -> AsyncEngine:
        return self._engine

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def connect(self) -> None:
        """Create the embeddings table if it does not exist."""
        model = self._model
        async with self._engine.begin() as conn:
            await conn.run_sync(
                lambda c: model.__table__.create(c, checkfirst=True)  # type: ignore[attr-defined]
            )

    async def close(self) -> None:
        """Dispose the engine if this store created it."""
        if self._owns_engine:
            await self._engine.dispose()

    # ------------------------------------------------------------------
    # EmbeddingStore protocol
    # ------------------------------------------------------------------

    async def store_embeddings(self, entries: list[EmbeddingEntry]) -> int:
        """Insert *entries* in a single transaction.

        Raises :class:`DimensionMismatchError`, writing nothing, when a source
        type would end up holding vectors of more than one dimensionality.
        """
        if not entries:
            return 0

        batch_dims: dict[SourceType, set[int]] = {}
        for e in entries:
            batch_dims.setdefault(e.source_type, set()).add(e.dimensions)

        rows = [
            self._model(
                source_id=e.source_id,
                source_type=e.source_type.value,
                text=e.text,
                vector=pack_vector(e.vector),
                dimensions=e.dimensions,
                created_at=e.created_at,
                metadata_json=json.dumps(e.metadata),
            )
            for e in entries
        ]
        model = self._model
        async with self._session_factory() as session:
            for source_type, dims in batch_dims.items():
                result = await session.execute(
                    select(model.dimensions)
                    .where(model.source_type == source_type.value)  # type: ignore[arg-type]
                    .distinct()
                )
                stored = set(result.scalars().all())
                if len(dims | stored) != 1:
                    msg = (
                        f"Mixed dimensions {sorted(dims | stored)} for source type "
                        f"{source_type.value!r}"
                    )
                    raise DimensionMismatchError(msg)
            session.add_all(rows)
            await session.commit()

        logger.debug("Stored %d embeddings", len(rows))
        return len(rows)

    async def get_embedding_count(self, source_type: SourceType | str) -> int:
        """Number of stored rows of *source_type*."""
        model = self._model
        st = SourceType(source_type)
        async with self._session_factory() as session:
            result = await session.execute(
                select(func.count()).select_from(model).where(
                    model.source_type == st.value,  # type: ignore[arg-type]
                )
            )
            return int(result.scalar_one())

    async def semantic_search(
        self,
        query_vector: list[float],
        source_type: SourceType | str,
        *,
        limit: int = 10,
        min_similarity: float = 0.0,
    ) -> list[SimilarityResult]:
        """Exact cosine search over every stored row of *source_type*."""
        if limit <= 0:
            return []

        model = self._model
        st = SourceType(source_type)
        async with self._session_factory() as session:
            result = await session.execute(
                select(model)
                .where(model.source_type == st.value)  # type: ignore[arg-type]
                .order_by(model.id)  # type: ignore[arg-type]
            )
            records = list(result.scalars().all())

        if not records:
            return []

        matrix = self._decode_matrix(records, len(query_vector))
        scores = cosine_similarities(query_vector, matrix)

        return [
            SimilarityResult(
                source_id=records[i].source_id,
                source_type=st,
                text=records[i].text,
                similarity=float(scores[i]),
                metadata=self._decode_metadata(records[i]),
                created_at=records[i].created_at,
            )
            for i in rank(scores, limit=limit, min_similarity=min_similarity)
        ]

    # ------------------------------------------------------------------
    # Reporting
    # ------------------------------------------------------------------

    async def stats(self) -> dict[SourceType, int]:
        """Per-type row counts for every non-empty source type."""
        model = self._model
        async with self._session_factory() as session:
            result = await session.execute(
                select(model.source_type, func.count()).group_by(model.source_type)  # type: ignore[arg-type]
            )
            counts = {SourceType(name): int(n) for name, n in result.all()}
        return {st: counts[st] for st in SourceType if counts.get(st)}

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    @staticmethod
    def _decode_matrix(records: list[EmbeddingRecord], query_dims: int) -> np.ndarray:
        """Stack packed vectors into a float matrix, rejecting dimension mismatches."""
        matrix = np.empty((len(records), query_dims), dtype=np.float64)
        for i, record in enumerate(records):
            if record.dimensions != query_dims:
                msg = (
                    f"Stored embedding {record.source_id!r} has {record.dimensions} "
                    f"dimensions, query has {query_dims}"
                )
                raise DimensionMismatchError(msg)
            if len(record.vector) != record.dimensions * 4:
                msg = f"Stored embedding {record.source_id!r} is corrupt"
                raise StoreError(msg)
            matrix[i] = unpack_vector(record.vector, record.dimensions)
        return matrix

    @staticmethod
    def _decode_metadata(record: EmbeddingRecord) -> dict[str, Any]:
        try:
            return json.loads(record.metadata_json or "{}")
        except json.JSONDecodeError as exc:
            msg = f"Stored embedding {record.source_id!r} has invalid metadata"
            raise StoreError(msg) from exc
