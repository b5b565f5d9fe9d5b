"""OpenAIEmbedding — remote embedding provider for token and prompt text."""

from __future__ import annotations

import logging
import os
from typing import TYPE_CHECKING, Any

from stylecraft.exceptions import ProviderError

try:
    from openai import AsyncOpenAI, OpenAIError

    _HAS_OPENAI = True
except ImportError:  # pragma: no cover
    _HAS_OPENAI = False

if TYPE_CHECKING:
    from openai import AsyncOpenAI as AsyncOpenAIType

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "text-embedding-3-small"

# Native output size of each model when no ``dimensions`` is requested
_MODEL_DIMENSIONS: dict[str, int] = {
    "text-embedding-3-small": 1536,
    "text-embedding-3-large": 3072,
    "text-embedding-ada-002": 1536,
}


class OpenAIEmbedding:
    """Embedding provider backed by the OpenAI Embeddings API.

    Texts are sent *batch_size* at a time.  The API rejects empty input, so
    a blank prompt is sent as a single space and comes back as an ordinary
    vector.  Every returned vector is checked against :attr:`dimensions`
    before it is handed on, so a misconfigured model never reaches a store.

    Client failures are re-raised as :class:`ProviderError`; the recommender
    treats those like any other retrieval failure and answers from its
    tables instead.

    Requires the ``openai`` package::

        pip install stylecraft[openai]
    """

    def __init__(
        self,
        *,
        model: str = DEFAULT_MODEL,
        dimensions: int | None = None,
        api_key: str | None = None,
        batch_size: int = 100,
        timeout: float = 60.0,
        client: AsyncOpenAIType | None = None,
    ) -> None:
        if not _HAS_OPENAI:
            msg = (
                "openai is required for OpenAIEmbedding. "
                "Install it with: pip install stylecraft[openai]"
            )
            raise ImportError(msg)
        if batch_size <= 0:
            msg = f"batch_size must be positive, got {batch_size}"
            raise ValueError(msg)

        if client is None:
            resolved_key = api_key or os.environ.get("OPENAI_API_KEY")
            if not resolved_key:
                msg = (
                    "No OpenAI API key provided. Pass api_key= or set the "
                    "OPENAI_API_KEY environment variable."
                )
                raise ValueError(msg)
            client = AsyncOpenAI(api_key=resolved_key, timeout=timeout)

        self._model = model
        self._dimensions = dimensions
        self._batch_size = batch_size
        self._client = client

    async def embed(self, text: str) -> list[float]:
        """Embed one text; used for recommendation queries."""
        return (await self.embed_batch([text]))[0]

    async def embed_batch(self, texts: list[str]) -> list[list[float]]:
        """Embed *texts* in request-sized chunks, preserving input order."""
        vectors: list[list[float]] = []
        for start in range(0, len(texts), self._batch_size):
            chunk = [t if t.strip() else " " for t in texts[start : start + self._batch_size]]
            vectors.extend(await self._request(chunk))
        return vectors

    @property
    def dimensions(self) -> int:
        if self._dimensions is not None:
            return self._dimensions
        try:
            return _MODEL_DIMENSIONS[self._model]
        except KeyError:
            msg = (
                f"Unknown default dimensions for model {self._model!r}. "
                "Pass dimensions= explicitly."
            )
            raise ValueError(msg) from None

    @property
    def model_name(self) -> str:
        return self._model

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        await self._client.close()

    async def _request(self, texts: list[str]) -> list[list[float]]:
        kwargs: dict[str, Any] = {"input": texts, "model": self._model}
        if self._dimensions is not None:
            kwargs["dimensions"] = self._dimensions

        try:
            response = await self._client.embeddings.create(**kwargs)
        except OpenAIError as exc:
            msg = f"OpenAI embedding request failed ({self._model}): {exc}"
            raise ProviderError(msg) from exc

        if len(response.data) != len(texts):
            msg = f"OpenAI returned {len(response.data)} embeddings for {len(texts)} inputs"
            raise ProviderError(msg)

        expected = self._dimensions or _MODEL_DIMENSIONS.get(self._model)
        vectors = [item.embedding for item in sorted(response.data, key=lambda e: e.index)]
        for vector in vectors:
            if expected is not None and len(vector) != expected:
                msg = f"{self._model} returned {len(vector)}-d vectors, expected {expected}"
                raise ProviderError(msg)

        logger.debug("Embedded %d texts with %s", len(texts), self._model)
        return vectors
