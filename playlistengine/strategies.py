"""
Traversal strategies
====================

Each strategy picks the next track of a playlist from the remaining pool.
Selection functions are pure: they never mutate the pool and return ``None``
when there is no candidate, which the orchestrator resolves with a random pick.

Scans keep the first candidate seen on ties (strict ``>`` / ``<``).
"""

from dataclasses import dataclass, field
from operator import attrgetter
from typing import Callable, Dict, Optional, Sequence, Tuple

from .exceptions import UnknownStrategyError
from .similarity import find_cluster_tracks, find_similar_tracks
from .tracks import Track

SEARCH_KEYS = ("energy", "valence", "danceability")

# Weight on the distance from the current track in nearest-to-target search.
CURRENT_DISTANCE_WEIGHT = 0.25


def _others(current: Track, pool: Sequence[Track]):
    return [t for t in pool if t.id != current.id]


def greedy_next(
    current: Track,
    pool: Sequence[Track],
    weight: Callable[[Track], float] = attrgetter("danceability"),
) -> Optional[Track]:
    """Return the candidate with the greatest ``weight``."""
    candidates = _others(current, pool)
    if not candidates:
        return None
    best = candidates[0]
    for track in candidates[1:]:
        if weight(track) > weight(best):
            best = track
    return best


def _key_distance(track: Track, other, keys: Sequence[str]) -> float:
    total = 0.0
    for key in keys:
        a = getattr(track, key, None) or 0.0
        if isinstance(other, dict):
            b = other.get(key) or 0.0
        else:
            b = getattr(other, key, None) or 0.0
        total += (a - b) ** 2
    return total ** 0.5


def nearest_by_vector(
    current: Track,
    pool: Sequence[Track],
    target: Optional[Dict[str, float]] = None,
    keys: Sequence[str] = ("energy", "valence"),
) -> Optional[Track]:
    """
    Return the candidate closest to ``target`` on ``keys``, with a small
    penalty for straying from ``current``.

    score = dist(candidate, target) + 0.25 * dist(candidate, current)
    """
    if target is None:
        target = {"energy": 0.7, "valence": 0.7}
    candidates = _others(current, pool)
    if not candidates:
        return None
    best, best_score = candidates[0], float("inf")
    for track in candidates:
        score = (
            _key_distance(track, target, keys)
            + CURRENT_DISTANCE_WEIGHT * _key_distance(track, current, keys)
        )
        if score < best_score:
            best, best_score = track, score
    return best


def closest_feature_next(current: Track, pool: Sequence[Track], feature: str) -> Optional[Track]:
    """Return the candidate whose ``feature`` value is nearest to ``current``'s."""
    best, best_diff = None, float("inf")
    anchor = getattr(current, feature)
    for track in _others(current, pool):
        diff = abs(getattr(track, feature) - anchor)
        if diff < best_diff:
            best, best_diff = track, diff
    return best


def similarity_next(current: Track, pool: Sequence[Track], limit: int = 5) -> Optional[Track]:
    results = find_similar_tracks(current, pool, limit)
    return results[0].track if results else None


def cluster_next(current: Track, pool: Sequence[Track], clusters, limit: int = 5) -> Optional[Track]:
    """Pick the most similar still-available track from ``current``'s cluster."""
    available = {t.id for t in pool}
    everyone = sum(len(c.tracks) for c in clusters)
    # Narrow to unplayed mates before applying the limit
    mates = [t for t in find_cluster_tracks(current, clusters, everyone) if t.id in available]
    return similarity_next(current, mates, limit)


@dataclass(frozen=True)
class GreedyStrategy:
    weight: Callable[[Track], float] = attrgetter("danceability")


@dataclass(frozen=True)
class SearchStrategy:
    target: Dict[str, float] = field(default_factory=lambda: {"energy": 0.7, "valence": 0.7})
    keys: Tuple[str, ...] = ("energy", "valence")

    def __post_init__(self):
        bad = [k for k in self.keys if k not in SEARCH_KEYS]
        if bad:
            raise ValueError(f"Search keys must be among {SEARCH_KEYS}, got {bad}")


@dataclass(frozen=True)
class ClosestFeatureStrategy:
    feature: str = "danceability"


@dataclass(frozen=True)
class SimilarityStrategy:
    limit: int = 5


@dataclass(frozen=True)
class ClusterStrategy:
    k: int = 5
    limit: int = 5
    max_iterations: int = 100


@dataclass(frozen=True)
class HybridStrategy:
    similar_limit: int = 3
    target_valence: float = 0.6


def hybrid_next(
    current: Track,
    pool: Sequence[Track],
    position: int,
    strategy: HybridStrategy = HybridStrategy(),
) -> Optional[Track]:
    """
    Rotate through three strategies by playlist position (the seed is 0):
    1 -> similarity, 2 -> greedy on energy, 0 -> nearest on valence.
    """
    step = position % 3
    if step == 1:
        return similarity_next(current, pool, strategy.similar_limit)
    if step == 2:
        return greedy_next(current, pool, attrgetter("energy"))
    return nearest_by_vector(
        current, pool, {"valence": strategy.target_valence}, ("valence",)
    )


def select_next(strategy, current: Track, pool: Sequence[Track], position: int, clusters=None) -> Optional[Track]:
    """Dispatch one selection step to ``strategy``."""
    if isinstance(strategy, GreedyStrategy):
        return greedy_next(current, pool, strategy.weight)
    if isinstance(strategy, SearchStrategy):
        return nearest_by_vector(current, pool, strategy.target, strategy.keys)
    if isinstance(strategy, ClosestFeatureStrategy):
        return closest_feature_next(current, pool, strategy.feature)
    if isinstance(strategy, SimilarityStrategy):
        return similarity_next(current, pool, strategy.limit)
    if isinstance(strategy, ClusterStrategy):
        return cluster_next(current, pool, clusters or [], strategy.limit)
    if isinstance(strategy, HybridStrategy):
        return hybrid_next(current, pool, position, strategy)
    raise UnknownStrategyError(f"Unsupported strategy: {strategy!r}")


ALGORITHM_PRESETS = {
    "greedyDanceability": GreedyStrategy(attrgetter("danceability")),
    "greedyEnergy": GreedyStrategy(attrgetter("energy")),
    "greedyValence": GreedyStrategy(attrgetter("valence")),
    "searchHappy": SearchStrategy({"energy": 0.8, "valence": 0.8}, ("energy", "valence")),
    "searchSad": SearchStrategy({"energy": 0.3, "valence": 0.2}, ("energy", "valence")),
    "searchChill": SearchStrategy({"energy": 0.4, "valence": 0.6}, ("energy", "valence")),
    "closestDanceability": ClosestFeatureStrategy("danceability"),
    "similar": SimilarityStrategy(limit=5),
    "cluster": ClusterStrategy(),
    "hybrid": HybridStrategy(),
}


def get_strategy(name: str):
    try:
        return ALGORITHM_PRESETS[name]
    except KeyError:
        raise UnknownStrategyError(
            f"Unknown strategy {name!r}; choose from {sorted(ALGORITHM_PRESETS)}"
        ) from None
