"""Search layer data types — value objects for embeddings and similarity results."""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any


def now_ms() -> int:
    """Current time as integer epoch milliseconds."""
    return int(time.time() * 1000)


class SourceType(str, Enum):
    """Partition tag for stored embeddings.

    Every search is scoped to exactly one source type.
    """

    COMPONENT = "component"
    PROMPT = "prompt"
    DESCRIPTION = "description"
    RULE = "rule"
    TOKEN = "token"
    PATTERN = "pattern"
    EXAMPLE = "example"


# ------------------------------------------------------------------
# Embedding data
# ------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class EmbeddingEntry:
    """An embedded text with its provenance, ready for storage.

    Attributes:
        source_id: Identifier tying the vector back to its origin document.
        source_type: Partition the entry is searched under.
        text: The exact string that was embedded.
        vector: Embedding vector.
        dimensions: Length of ``vector``; derived when left as ``0``.
        created_at: Epoch milliseconds.
        metadata: Structured fields stored alongside the text
            (token entries carry ``system``, ``category``, ``name``,
            ``value`` and ``description``).
    """

    source_id: str
    source_type: SourceType
    text: str
    vector: list[float]
    dimensions: int = 0
    created_at: int = field(default_factory=now_ms)
    metadata: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "source_type", SourceType(self.source_type))
        if self.dimensions == 0:
            object.__setattr__(self, "dimensions", len(self.vector))
        elif self.dimensions != len(self.vector):
            msg = (
                f"Entry {self.source_id!r} declares {self.dimensions} dimensions "
                f"but carries a vector of length {len(self.vector)}"
            )
            raise ValueError(msg)


# ------------------------------------------------------------------
# Results
# ------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class SimilarityResult:
    """A single hit from :meth:`EmbeddingStore.semantic_search`.

    Attributes:
        source_id: Identifier of the matched entry.
        source_type: Partition it was found in.
        text: The embedded text that matched.
        similarity: Cosine similarity (higher is more similar).
        metadata: Structured fields stored with the entry.
        created_at: Epoch milliseconds of the stored entry.
    """

    source_id: str
    source_type: SourceType
    text: str
    similarity: float
    metadata: dict[str, Any] = field(default_factory=dict)
    created_at: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "sourceId": self.source_id,
            "sourceType": self.source_type.value,
            "text": self.text,
            "similarity": self.similarity,
            "metadata": dict(self.metadata),
            "createdAt": self.created_at,
        }
