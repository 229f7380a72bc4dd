"""Vector similarity and score statistics."""

import math
from collections.abc import Sequence

import numpy as np

from ..domain.exceptions import DimensionMismatchError, InvalidSimilarityValueError, ZeroVectorError

Vector = Sequence[float]


def cosine_similarity(a: Vector, b: Vector) -> float:
    """Cosine similarity between two vectors.

    Args:
        a: First vector.
        b: Second vector.

    Returns:
        Similarity in [-1.0, 1.0].

    Raises:
        DimensionMismatchError: If the vectors differ in length or are empty.
        ZeroVectorError: If either vector has zero magnitude.
        InvalidSimilarityValueError: If the result is NaN or infinite.
    """
    va = np.asarray(a, dtype=np.float64)
    vb = np.asarray(b, dtype=np.float64)
    if va.shape != vb.shape or va.ndim != 1:
        raise DimensionMismatchError(expected=len(va), actual=len(vb))
    if va.size == 0:
        raise DimensionMismatchError(
            expected=0, actual=0, message="Cannot compare empty vectors"
        )

    dot = float(np.dot(va, vb))
    magnitude_a = float(np.dot(va, va))
    magnitude_b = float(np.dot(vb, vb))
    if magnitude_a == 0.0 or magnitude_b == 0.0:
        raise ZeroVectorError("Cannot calculate similarity for zero vector")

    similarity = dot / math.sqrt(magnitude_a * magnitude_b)
    if not math.isfinite(similarity):
        raise InvalidSimilarityValueError(
            "Similarity is not a finite number", context={"value": str(similarity)}
        )
    # Rounding can push |similarity| a hair past 1
    return max(-1.0, min(1.0, similarity))


def pairwise_similarities(embeddings: Sequence[Vector]) -> list[float]:
    """Similarity of each embedding with its successor.

    Returns:
        ``len(embeddings) - 1`` scores; empty for fewer than two embeddings.
    """
    if len(embeddings) < 2:
        return []
    return [cosine_similarity(embeddings[i], embeddings[i + 1]) for i in range(len(embeddings) - 1)]


def percentile(values: Sequence[float], p: float) -> float:
    """Linearly interpolated percentile of a score distribution.

    The values are sorted ascending (on a copy), the rank
    ``p / 100 * (n - 1)`` is computed and the result interpolates between the
    order statistics at the floor and ceiling of that rank.

    Args:
        values: Scores; not modified.
        p: Percentile in [0, 100].

    Raises:
        ValueError: If ``values`` is empty or ``p`` is out of range.
    """
    if len(values) == 0:
        raise ValueError("Cannot calculate percentile of an empty sequence")
    if not 0.0 <= p <= 100.0:
        raise ValueError("Percentile must be between 0 and 100")
    return float(np.percentile(np.asarray(values, dtype=np.float64), p, method="linear"))


def mean_similarity(similarities: Sequence[float]) -> float:
    """Arithmetic mean of a run of similarities; 1.0 for an empty run."""
    if len(similarities) == 0:
        return 1.0
    return float(np.mean(np.asarray(similarities, dtype=np.float64)))
