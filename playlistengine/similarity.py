from typing import List, NamedTuple, Sequence

import numpy as np
from sklearn.metrics.pairwise import cosine_similarity as pairwise_cosine

from .exceptions import VectorLengthError
from .tracks import Track, extract_features, feature_matrix


class SimilarityResult(NamedTuple):
    track: Track
    similarity: float


def _as_pair(u, v):
    a = np.asarray(u, dtype=float).ravel()
    b = np.asarray(v, dtype=float).ravel()
    if a.shape != b.shape:
        raise VectorLengthError(f"Vector lengths differ: {a.size} != {b.size}")
    return a, b


def euclidean_distance(u: Sequence[float], v: Sequence[float]) -> float:
    a, b = _as_pair(u, v)
    return float(np.sqrt(np.sum((a - b) ** 2)))


def cosine_similarity(u: Sequence[float], v: Sequence[float]) -> float:
    """
    Cosine similarity of two equal-length vectors.

    Returns 0.0 if either vector has zero norm instead of dividing by zero.
    """
    a, b = _as_pair(u, v)
    norm_a = np.sqrt(np.dot(a, a))
    norm_b = np.sqrt(np.dot(b, b))
    if norm_a == 0 or norm_b == 0:
        return 0.0
    return float(np.dot(a, b) / (norm_a * norm_b))


def vector_mean(vectors: Sequence[Sequence[float]]) -> np.ndarray:
    if len(vectors) == 0:
        raise ValueError("Cannot take the mean of zero vectors")
    lengths = {len(v) for v in vectors}
    if len(lengths) > 1:
        raise VectorLengthError(f"Vector lengths differ: {sorted(lengths)}")
    return np.mean(np.asarray(vectors, dtype=float), axis=0)


def find_similar_tracks(
    target: Track,
    candidates: Sequence[Track],
    limit: int = 10,
) -> List[SimilarityResult]:
    """Rank ``candidates`` by cosine similarity to ``target``, best first.

    The target itself (matched by id) is never returned. Ties keep their
    input order.
    """
    pool = [t for t in candidates if t.id != target.id]
    if not pool or limit <= 0:
        return []
    X = extract_features(target).reshape(1, -1)
    Y = feature_matrix(pool)
    sims = pairwise_cosine(X, Y).ravel()
    order = np.argsort(-sims, kind="stable")[:limit]
    return [SimilarityResult(pool[i], float(sims[i])) for i in order]


def find_cluster_tracks(target: Track, clusters, limit: int = 10) -> List[Track]:
    """Return up to ``limit`` other members of the cluster holding ``target``."""
    for cluster in clusters:
        if any(t.id == target.id for t in cluster.tracks):
            others = [t for t in cluster.tracks if t.id != target.id]
            return others[:max(limit, 0)]
    return []
