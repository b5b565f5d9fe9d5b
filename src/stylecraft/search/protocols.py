"""Search layer protocols — async-first interfaces for embedding and vector storage."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from stylecraft.search.types import EmbeddingEntry, SimilarityResult, SourceType


@runtime_checkable
class EmbeddingProvider(Protocol):
    """Async-first protocol for text-to-vector embedding.

    Implementations convert text into fixed-dimension float vectors
    suitable for similarity search.  They must be deterministic for a given
    model, and ``embed_batch(xs)[i]`` must equal ``embed(xs[i])``.  Errors
    propagate to the caller; retry policy is the provider's own business.
    """

    async def embed(self, text: str) -> list[float]:
        """Embed a single text string into a vector."""
        ...

    async def embed_batch(self, texts: list[str]) -> list[list[float]]:
        """Embed multiple texts into vectors, preserving order."""
        ...

    @property
    def dimensions(self) -> int:
        """Number of dimensions in the embedding vectors."""
        ...

    @property
    def model_name(self) -> str:
        """Name of the embedding model."""
        ...


@runtime_checkable
class EmbeddingStore(Protocol):
    """Async-first protocol for embedding persistence and similarity search.

    Stores are append-only: there is no update or delete path, and duplicate
    ``source_id`` values are kept side by side.
    """

    async def store_embeddings(self, entries: list[EmbeddingEntry]) -> int:
        """Persist a batch of entries.  Returns the number written."""
        ...

    async def get_embedding_count(self, source_type: SourceType | str) -> int:
        """Number of stored entries of *source_type*."""
        ...

    async def semantic_search(
        self,
        query_vector: list[float],
        source_type: SourceType | str,
        *,
        limit: int = 10,
        min_similarity: float = 0.0,
    ) -> list[SimilarityResult]:
        """Return up to *limit* entries of *source_type* ordered by descending similarity.

        Entries scoring below *min_similarity* are dropped; ties keep
        insertion order.  Returns an empty list when nothing qualifies.
        """
        ...

    async def connect(self) -> None:
        """Open connection / initialize resources."""
        ...

    async def close(self) -> None:
        """Release connection / clean up resources."""
        ...
