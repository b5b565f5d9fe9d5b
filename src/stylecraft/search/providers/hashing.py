"""HashEmbedding — deterministic, model-free embedding provider.

Text is split into lowercase word tokens and each token is hashed into a
fixed number of buckets (the "hashing trick").  Texts that share words
share buckets, so related strings score higher than unrelated ones, and the
output never depends on a downloaded model.  Components are non-negative
and the vector is L2-normalized, so cosine scores fall in ``[0, 1]``.
"""

from __future__ import annotations

import hashlib
import re

import numpy as np

_WORD_RE = re.compile(r"[a-z0-9#]+(?:[-_.][a-z0-9]+)*")


class HashEmbedding:
    """Bag-of-hashed-words embedding provider.

    Useful offline and in tests; quality is lexical, not semantic.
    """

    def __init__(self, dimensions: int = 256) -> None:
        if dimensions <= 0:
            raise ValueError("dimensions must be positive")
        self._dimensions = dimensions

    def embed_sync(self, text: str) -> list[float]:
        vec = np.zeros(self._dimensions, dtype=np.float64)
        for word in _WORD_RE.findall(text.lower()):
            digest = hashlib.sha256(word.encode()).digest()
            bucket = int.from_bytes(digest[:4], "little") % self._dimensions
            vec[bucket] += 1.0
        norm = float(np.linalg.norm(vec))
        if norm > 0.0:
            vec /= norm
        return vec.tolist()

    async def embed(self, text: str) -> list[float]:
        """Embed a single text string."""
        return self.embed_sync(text)

    async def embed_batch(self, texts: list[str]) -> list[list[float]]:
        """Embed multiple texts, one vector per input."""
        return [self.embed_sync(t) for t in texts]

    @property
    def dimensions(self) -> int:
        return self._dimensions

    @property
    def model_name(self) -> str:
        return f"hash-{self._dimensions}"
