"""
Cosine similarity ranking over variable-length vectors.
"""

import math
from collections.abc import Hashable, Sequence
from typing import Any, TypeVar

import numpy as np
from loguru import logger

from hyde_rag.exceptions import ContractViolationError

T = TypeVar("T")

Candidate = tuple[Hashable, Sequence[float], T]


def reconcile(
    first: Sequence[float], second: Sequence[float]
) -> tuple[np.ndarray, np.ndarray]:
    """Right-pad the shorter vector with zeros so both have the same length."""
    a = np.asarray(first, dtype=float)
    b = np.asarray(second, dtype=float)
    size = max(a.size, b.size)
    return np.pad(a, (0, size - a.size)), np.pad(b, (0, size - b.size))


def cosine_similarity(first: Sequence[float], second: Sequence[float]) -> float:
    """
    Cosine similarity of two vectors after zero-padding.

    Returns 0.0 when either vector has zero magnitude (including empty
    vectors). The result is clamped to [-1, 1].
    """
    a, b = reconcile(first, second)

    # fsum is exactly rounded, so trailing zeros never change the sums
    norm_a = math.sqrt(math.fsum(np.multiply(a, a)))
    norm_b = math.sqrt(math.fsum(np.multiply(b, b)))
    if norm_a == 0.0 or norm_b == 0.0:
        return 0.0

    dot = math.fsum(np.multiply(a, b))
    return max(-1.0, min(1.0, dot / (norm_a * norm_b)))


class SimilarityRanker:
    """
    Orders candidates by cosine similarity to a probe vector.

    Ties keep the original candidate order, so results are deterministic for
    a store that preserves insertion order.
    """

    def rank(
        self,
        probe: Sequence[float],
        candidates: Sequence[Candidate[T]],
        k: int,
    ) -> list[tuple[T, float]]:
        """
        Rank candidates against the probe and keep the best ``k``.

        Args:
            probe: The probe vector.
            candidates: Sequence of (id, vector, payload) triples.
            k: Maximum number of results. Must not be negative.

        Returns:
            Up to ``k`` (payload, similarity) pairs, best first.

        Raises:
            ContractViolationError: If ``k`` is negative.
        """
        if k < 0:
            raise ContractViolationError(f"top_k must be >= 0, got {k}")
        if k == 0 or not candidates:
            return []

        scored: list[tuple[Any, float]] = [
            (payload, cosine_similarity(probe, vector))
            for _, vector, payload in candidates
        ]

        # sorted() is stable
        scored = sorted(scored, key=lambda item: item[1], reverse=True)

        logger.debug(
            f"Ranked {len(candidates)} candidates, keeping {min(k, len(scored))}"
        )
        return scored[:k]
