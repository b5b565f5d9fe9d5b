"""SentenceTransformerEmbedding — local embedding provider (all-MiniLM-L6-v2)."""

from __future__ import annotations

import asyncio
import logging

import numpy as np

from stylecraft.exceptions import ProviderError

try:
    from sentence_transformers import SentenceTransformer

    _HAS_SENTENCE_TRANSFORMERS = True
except ImportError:  # pragma: no cover
    _HAS_SENTENCE_TRANSFORMERS = False

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "all-MiniLM-L6-v2"


class SentenceTransformerEmbedding:
    """Embedding provider backed by a local ``sentence-transformers`` model.

    The model is downloaded or loaded on first use, in a worker thread like
    every encode call.  With *normalize* each vector is scaled to unit
    length, so stored token vectors and query vectors compare on direction
    alone; an all-zero row stays zero and scores 0 against everything.
    """

    def __init__(
        self,
        model_name: str = DEFAULT_MODEL,
        *,
        normalize: bool = True,
        batch_size: int = 32,
        device: str | None = None,
    ) -> None:
        if not _HAS_SENTENCE_TRANSFORMERS:
            msg = (
                "sentence-transformers is required for SentenceTransformerEmbedding. "
                "Install it with: pip install stylecraft[search]"
            )
            raise ImportError(msg)
        self._model_name = model_name
        self._normalize = normalize
        self._batch_size = batch_size
        self._device = device
        self._model: SentenceTransformer | None = None

    def _load_model(self) -> SentenceTransformer:
        if self._model is None:
            logger.info("Loading sentence-transformers model %s", self._model_name)
            try:
                self._model = SentenceTransformer(self._model_name, device=self._device)
            except (OSError, ValueError) as exc:
                msg = f"Could not load embedding model {self._model_name!r}: {exc}"
                raise ProviderError(msg) from exc
        return self._model

    def encode(self, texts: list[str]) -> np.ndarray:
        """Encode *texts* into a ``(len(texts), dimensions)`` float32 matrix."""
        model = self._load_model()
        matrix = np.asarray(
            model.encode(texts, batch_size=self._batch_size, show_progress_bar=False),
            dtype=np.float32,
        )
        if self._normalize:
            norms = np.linalg.norm(matrix, axis=1, keepdims=True)
            matrix = np.divide(matrix, norms, out=np.zeros_like(matrix), where=norms > 0)
        return matrix

    async def embed(self, text: str) -> list[float]:
        return (await self.embed_batch([text]))[0]

    async def embed_batch(self, texts: list[str]) -> list[list[float]]:
        if not texts:
            return []
        matrix = await asyncio.to_thread(self.encode, texts)
        return matrix.tolist()

    @property
    def dimensions(self) -> int:
        dim = self._load_model().get_sentence_embedding_dimension()
        if dim is None:
            msg = f"Model {self._model_name!r} did not report embedding dimensions"
            raise ProviderError(msg)
        return int(dim)

    @property
    def model_name(self) -> str:
        return self._model_name
