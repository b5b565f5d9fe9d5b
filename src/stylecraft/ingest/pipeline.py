"""IngestionPipeline — embed source documents and write them to a store."""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

from stylecraft.config import StylecraftConfig
from stylecraft.exceptions import UnknownSourceError
from stylecraft.ingest import sources
from stylecraft.search.types import EmbeddingEntry

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from stylecraft.ingest.sources import SourceDocument
    from stylecraft.search.protocols import EmbeddingProvider, EmbeddingStore

SOURCES = ("shadcn", "axe", "tokens", "aria")


class IngestionPipeline:
    """Populate an embedding store from the configured sources.

    The pipeline is the only writer of the store.  Documents are embedded in
    chunks of ``config.batch_size`` and each chunk is written as soon as it
    is embedded, so a failure part way through leaves the earlier chunks in
    place.

    Args:
        store: Destination :class:`EmbeddingStore`.
        provider: :class:`EmbeddingProvider` used for every document.
        config: Cache directory, batch size, token cap, axe checkout.
        offline: Never clone; use whatever is cached plus built-in data.
        logger: Override for the module logger.
    """

    def __init__(
        self,
        store: EmbeddingStore,
        provider: EmbeddingProvider,
        *,
        config: StylecraftConfig | None = None,
        offline: bool = False,
        logger: logging.Logger | None = None,
    ) -> None:
        self.store = store
        self.provider = provider
        self.config = config or StylecraftConfig()
        self.offline = offline
        self.logger = logger or logging.getLogger(__name__)
        self._handlers: dict[str, Callable[[], Awaitable[int]]] = {
            "shadcn": self.ingest_shadcn,
            "axe": self.ingest_axe,
            "tokens": self.ingest_tokens,
            "aria": self.ingest_aria,
        }

    async def run(self, source: str) -> dict[str, int]:
        """Ingest *source* (or every source for ``"all"``) and return counts.

        With ``"all"`` a failing source is logged and reported as ``0``; a
        single named source propagates its error.
        """
        if source == "all":
            counts: dict[str, int] = {}
            for name in SOURCES:
                try:
                    counts[name] = await self._handlers[name]()
                except Exception:
                    self.logger.exception("Ingestion of %s failed", name)
                    counts[name] = 0
            total = sum(counts.values())
            self.logger.info("Ingestion complete: %d embeddings", total, extra={"counts": counts})
            return counts

        handler = self._handlers.get(source)
        if handler is None:
            msg = f"Unknown source {source!r}; expected one of {', '.join((*SOURCES, 'all'))}"
            raise UnknownSourceError(msg)
        return {source: await handler()}

    # ------------------------------------------------------------------
    # Sources
    # ------------------------------------------------------------------

    async def ingest_tokens(self) -> int:
        tokens = await asyncio.to_thread(
            sources.collect_design_tokens, self.config.cache_dir, offline=self.offline
        )
        if len(tokens) > self.config.max_tokens:
            self.logger.info(
                "Capping %d design tokens at %d", len(tokens), self.config.max_tokens
            )
            tokens = tokens[: self.config.max_tokens]
        return await self._embed_and_store("tokens", sources.token_documents(tokens))

    async def ingest_axe(self) -> int:
        documents = await asyncio.to_thread(sources.axe_documents, self.config.axe_dir)
        return await self._embed_and_store("axe", documents)

    async def ingest_aria(self) -> int:
        documents = await asyncio.to_thread(sources.aria_documents)
        return await self._embed_and_store("aria", documents)

    async def ingest_shadcn(self) -> int:
        documents = await asyncio.to_thread(
            sources.shadcn_documents, self.config.cache_dir, offline=self.offline
        )
        return await self._embed_and_store("shadcn", documents)

    # ------------------------------------------------------------------
    # Embedding
    # ------------------------------------------------------------------

    async def _embed_and_store(self, name: str, documents: list[SourceDocument]) -> int:
        if not documents:
            self.logger.warning("No documents to ingest for %s", name)
            return 0

        batch_size = self.config.batch_size
        written = 0
        for start in range(0, len(documents), batch_size):
            chunk = documents[start : start + batch_size]
            vectors = await self.provider.embed_batch([d.text for d in chunk])
            entries = [
                EmbeddingEntry(
                    source_id=doc.source_id,
                    source_type=doc.source_type,
                    text=doc.text,
                    vector=vector,
                    metadata=doc.metadata,
                )
                for doc, vector in zip(chunk, vectors, strict=True)
            ]
            written += await self.store.store_embeddings(entries)
            self.logger.debug("Embedded %d/%d %s documents", written, len(documents), name)

        self.logger.info("Stored %d %s embeddings", written, name)
        return written
