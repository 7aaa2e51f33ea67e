"""
Cosine similarity between embedding vectors.
"""

from typing import Sequence

import numpy as np

from ideapress.exceptions import DimensionMismatchError


def cosine_similarity(vec_a: Sequence[float], vec_b: Sequence[float]) -> float:
    """
    Calculate cosine similarity between two vectors.

    Args:
        vec_a: First vector
        vec_b: Second vector

    Returns:
        Similarity in [-1, 1]; 0.0 if either vector has zero magnitude

    Raises:
        DimensionMismatchError: If the vectors differ in length
    """
    a = np.asarray(vec_a, dtype=np.float64)
    b = np.asarray(vec_b, dtype=np.float64)
    if a.shape != b.shape:
        raise DimensionMismatchError(a.size, b.size)

    magnitude_a = np.linalg.norm(a)
    magnitude_b = np.linalg.norm(b)
    if magnitude_a == 0 or magnitude_b == 0:
        return 0.0

    score = float(np.dot(a, b) / (magnitude_a * magnitude_b))
    # Rounding can push identical vectors a hair past 1
    return max(-1.0, min(1.0, score))


def max_similarity(vector: Sequence[float], others: Sequence[Sequence[float]]) -> float:
    """Highest cosine similarity between ``vector`` and any of ``others``."""
    if not others:
        raise ValueError("max_similarity needs at least one vector to compare against")
    return max(cosine_similarity(vector, other) for other in others)
