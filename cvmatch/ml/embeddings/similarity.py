"""
Vector similarity helpers.

Cosine similarity is computed in float64 and clamped into [-1, 1].
A zero-norm input has no direction, so its similarity is NaN.
"""

from typing import Optional, Sequence

import numpy as np

from cvmatch.data.models import ProfileItem
from cvmatch.utils.exceptions import DimensionMismatchError


def cosine_similarity(a: Sequence[float] | np.ndarray, b: Sequence[float] | np.ndarray) -> float:
    """
    Calculate cosine similarity between two vectors.

    Args:
        a: First vector.
        b: Second vector.

    Returns:
        ``dot(a, b) / (|a| * |b|)`` in [-1, 1]; exactly 1.0 for identical
        non-zero vectors; NaN when either vector has zero norm.

    Raises:
        DimensionMismatchError: If the vectors differ in length.
    """
    left = np.asarray(a, dtype=np.float64).ravel()
    right = np.asarray(b, dtype=np.float64).ravel()

    if left.shape[0] != right.shape[0]:
        raise DimensionMismatchError(left.shape[0], right.shape[0])

    norm = float(np.linalg.norm(left) * np.linalg.norm(right))
    if norm == 0.0 or not np.isfinite(norm):
        return float("nan")

    if np.array_equal(left, right):
        return 1.0

    sim = float(np.dot(left, right) / norm)
    return float(np.clip(sim, -1.0, 1.0))


def rank_by_similarity(
    query: Sequence[float] | np.ndarray,
    items: Sequence[ProfileItem],
    threshold: Optional[float] = None,
    limit: Optional[int] = None,
) -> list[tuple[ProfileItem, float]]:
    """
    Rank items by cosine similarity of their embedding to ``query``.

    Items without an embedding, or with one of a different length, are
    skipped. Equal similarities keep input order.

    Args:
        query: Query vector.
        items: Items to rank.
        threshold: Keep only similarities strictly above this value.
        limit: Maximum number of results.

    Returns:
        ``(item, similarity)`` pairs sorted by similarity descending.
    """
    dimension = len(query)
    scored: list[tuple[ProfileItem, float]] = []

    for item in items:
        if not item.has_embedding_of(dimension):
            continue
        sim = cosine_similarity(query, item.embedding)
        if np.isnan(sim):
            continue
        if threshold is not None and sim <= threshold:
            continue
        scored.append((item, sim))

    scored.sort(key=lambda pair: pair[1], reverse=True)

    if limit is not None:
        scored = scored[:limit]
    return scored
