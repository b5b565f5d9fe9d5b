"""Vector codec and similarity helpers.

Vectors are persisted as packed little-endian float32 arrays.  The stored
``dimensions`` value is what makes decoding possible without guessing.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np

from stylecraft.exceptions import DimensionMismatchError

if TYPE_CHECKING:
    from collections.abc import Sequence

_DTYPE = np.dtype("<f4")


def pack_vector(vector: Sequence[float]) -> bytes:
    """Serialize *vector* to packed float32 bytes."""
    return np.asarray(vector, dtype=_DTYPE).tobytes()


def unpack_vector(blob: bytes, dimensions: int) -> list[float]:
    """Decode packed float32 bytes written by :func:`pack_vector`."""
    expected = dimensions * _DTYPE.itemsize
    if len(blob) != expected:
        msg = f"Packed vector is {len(blob)} bytes, expected {expected} for {dimensions} dimensions"
        raise DimensionMismatchError(msg)
    return np.frombuffer(blob, dtype=_DTYPE).astype(float).tolist()


def cosine_similarity(a: Sequence[float], b: Sequence[float]) -> float:
    """Cosine similarity between two vectors.

    Returns ``0.0`` when either vector has zero magnitude.
    """
    va = np.asarray(a, dtype=np.float64)
    vb = np.asarray(b, dtype=np.float64)
    if va.shape != vb.shape:
        msg = f"Cannot compare vectors of {va.shape[0]} and {vb.shape[0]} dimensions"
        raise DimensionMismatchError(msg)
    denom = float(np.linalg.norm(va) * np.linalg.norm(vb))
    if denom == 0.0:
        return 0.0
    return float(np.dot(va, vb) / denom)


def cosine_similarities(query: Sequence[float], matrix: np.ndarray) -> np.ndarray:
    """Cosine similarity of *query* against every row of *matrix*.

    Rows with zero magnitude score ``0.0``.
    """
    q = np.asarray(query, dtype=np.float64)
    if matrix.size == 0:
        return np.zeros(matrix.shape[0], dtype=np.float64)
    if matrix.ndim != 2 or matrix.shape[1] != q.shape[0]:
        msg = f"Query has {q.shape[0]} dimensions but stored vectors have {matrix.shape[-1]}"
        raise DimensionMismatchError(msg)
    m = matrix.astype(np.float64, copy=False)
    norms = np.linalg.norm(m, axis=1) * np.linalg.norm(q)
    dots = m @ q
    with np.errstate(divide="ignore", invalid="ignore"):
        scores = np.where(norms > 0.0, dots / np.where(norms > 0.0, norms, 1.0), 0.0)
    return scores


def rank(
    scores: np.ndarray,
    *,
    limit: int,
    min_similarity: float,
) -> list[int]:
    """Row indices ordered by descending score, earliest row first on ties.

    Rows scoring below *min_similarity* are dropped and at most *limit*
    indices are returned.
    """
    if limit <= 0 or scores.size == 0:
        return []
    # lexsort uses the last key as primary: -score first, then row index
    order = np.lexsort((np.arange(scores.size), -scores))
    kept = [int(i) for i in order if scores[i] >= min_similarity]
    return kept[:limit]
