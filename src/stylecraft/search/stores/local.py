"""LocalEmbeddingStore — in-process numpy store with exact cosine search."""

from __future__ import annotations

import json
import threading
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import numpy as np

from stylecraft.exceptions import DimensionMismatchError
from stylecraft.search.types import EmbeddingEntry, SimilarityResult, SourceType
from stylecraft.search.vectors import cosine_similarities, rank

_MATRIX_FILE = "embeddings.npz"
_META_FILE = "embeddings_meta.json"


@dataclass(slots=True)
class _Partition:
    """Rows of a single source type, in insertion order."""

    dimensions: int
    rows: list[dict[str, Any]] = field(default_factory=list)
    matrix: np.ndarray | None = None

    def append(self, entries: list[EmbeddingEntry]) -> None:
        block = np.asarray([e.vector for e in entries], dtype=np.float64)
        self.matrix = block if self.matrix is None else np.vstack([self.matrix, block])
        for e in entries:
            self.rows.append(
                {
                    "source_id": e.source_id,
                    "text": e.text,
                    "created_at": e.created_at,
                    "metadata": dict(e.metadata),
                }
            )


class LocalEmbeddingStore:
    """In-process embedding store backed by one numpy matrix per source type.

    Implements the ``EmbeddingStore`` protocol.  Search is exact (brute
    force), which keeps ordering deterministic: ties are resolved by
    insertion order.  Every vector within a source type must share one
    dimensionality.

    Thread-safe via :class:`threading.Lock`.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._partitions: dict[SourceType, _Partition] = {}

    # ------------------------------------------------------------------
    # EmbeddingStore protocol
    # ------------------------------------------------------------------

    async def store_embeddings(self, entries: list[EmbeddingEntry]) -> int:
        """Append *entries*; duplicates by ``source_id`` are kept."""
        if not entries:
            return 0

        grouped: dict[SourceType, list[EmbeddingEntry]] = {}
        for entry in entries:
            grouped.setdefault(entry.source_type, []).append(entry)

        with self._lock:
            # Check every group before appending any, so a rejected batch writes nothing
            for source_type, group in grouped.items():
                dims = {e.dimensions for e in group}
                partition = self._partitions.get(source_type)
                if partition is not None:
                    dims.add(partition.dimensions)
                if len(dims) != 1:
                    msg = (
                        f"Mixed dimensions {sorted(dims)} for source type "
                        f"{source_type.value!r}"
                    )
                    raise DimensionMismatchError(msg)

            for source_type, group in grouped.items():
                partition = self._partitions.get(source_type)
                if partition is None:
                    partition = _Partition(dimensions=group[0].dimensions)
                    self._partitions[source_type] = partition
                partition.append(group)

        return len(entries)

    async def get_embedding_count(self, source_type: SourceType | str) -> int:
        """Number of stored entries of *source_type*."""
        partition = self._partitions.get(SourceType(source_type))
        return 0 if partition is None else len(partition.rows)

    async def semantic_search(
        self,
        query_vector: list[float],
        source_type: SourceType | str,
        *,
        limit: int = 10,
        min_similarity: float = 0.0,
    ) -> list[SimilarityResult]:
        """Exact cosine search over one source type."""
        st = SourceType(source_type)
        with self._lock:
            partition = self._partitions.get(st)
            if partition is None or partition.matrix is None:
                return []
            # Snapshot so concurrent appends do not shift rows under us
            matrix = partition.matrix
            rows = list(partition.rows)

        scores = cosine_similarities(query_vector, matrix)
        return [
            SimilarityResult(
                source_id=rows[i]["source_id"],
                source_type=st,
                text=rows[i]["text"],
                similarity=float(scores[i]),
                metadata=dict(rows[i]["metadata"]),
                created_at=rows[i]["created_at"],
            )
            for i in rank(scores, limit=limit, min_similarity=min_similarity)
        ]

    async def connect(self) -> None:
        """No-op for local store."""

    async def close(self) -> None:
        """No-op for local store."""

    # ------------------------------------------------------------------
    # Local-specific methods
    # ------------------------------------------------------------------

    def counts(self) -> dict[SourceType, int]:
        """Per-type entry counts for every non-empty partition."""
        return {st: len(p.rows) for st, p in self._partitions.items() if p.rows}

    def __len__(self) -> int:
        """Return the total number of stored entries."""
        return sum(len(p.rows) for p in self._partitions.values())

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def save(self, directory: str | Path) -> None:
        """Persist all partitions to *directory*."""
        dir_path = Path(directory)
        dir_path.mkdir(parents=True, exist_ok=True)

        with self._lock:
            arrays = {
                st.value: p.matrix for st, p in self._partitions.items() if p.matrix is not None
            }
            sidecar: dict[str, Any] = {
                st.value: {"dimensions": p.dimensions, "rows": p.rows}
                for st, p in self._partitions.items()
            }

        np.savez(dir_path / _MATRIX_FILE, **arrays)
        with (dir_path / _META_FILE).open("w") as f:
            json.dump(sidecar, f)

    def load(self, directory: str | Path) -> None:
        """Replace the store contents with a snapshot saved by :meth:`save`."""
        dir_path = Path(directory)
        with (dir_path / _META_FILE).open() as f:
            sidecar: dict[str, Any] = json.load(f)

        partitions: dict[SourceType, _Partition] = {}
        with np.load(dir_path / _MATRIX_FILE) as arrays:
            for type_name, meta in sidecar.items():
                st = SourceType(type_name)
                matrix = arrays[type_name] if type_name in arrays.files else None
                if matrix is not None and matrix.shape[1] != meta["dimensions"]:
                    msg = f"Saved matrix for {type_name!r} does not match its declared dimensions"
                    raise DimensionMismatchError(msg)
                partitions[st] = _Partition(
                    dimensions=meta["dimensions"],
                    rows=list(meta["rows"]),
                    matrix=matrix,
                )

        with self._lock:
            self._partitions = partitions
