import logging
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

import numpy as np
import pandas as pd

from .tracks import FEATURE_KEYS, Track, feature_matrix

CONVERGENCE_THRESHOLD = 0.001

ENERGY_ADJECTIVES = [
    (0.7, "Energetic"),
    (0.4, "Steady"),
    (0.0, "Mellow"),
]

VALENCE_MOODS = [
    (0.6, "Happy"),
    (0.4, "Neutral"),
    (0.0, "Sad"),
]


@dataclass
class Cluster:
    id: int
    center: np.ndarray
    tracks: List[Track] = field(default_factory=list)

    def __len__(self):
        return len(self.tracks)


def _initial_centroids(features: np.ndarray, k: int, rng: np.random.Generator) -> np.ndarray:
    # Each coordinate is drawn uniformly between that dimension's observed min and max.
    mins = features.min(axis=0)
    maxs = features.max(axis=0)
    return mins + rng.random((k, features.shape[1])) * (maxs - mins)


def _assign(tracks: Sequence[Track], features: np.ndarray, centroids: np.ndarray) -> List[Cluster]:
    clusters = [Cluster(id=i, center=centroids[i].copy()) for i in range(len(centroids))]
    distances = np.sqrt(((features[:, None, :] - centroids[None, :, :]) ** 2).sum(axis=2))
    # argmin returns the first minimum, so the lowest centroid index wins ties
    labels = np.argmin(distances, axis=1)
    for idx, label in enumerate(labels):
        clusters[int(label)].tracks.append(tracks[idx])
    return clusters


def _update(clusters: List[Cluster], features: np.ndarray, index_of: dict) -> np.ndarray:
    new_centroids = []
    for cluster in clusters:
        if not cluster.tracks:
            # Empty clusters keep their centroid; they are never reseeded.
            new_centroids.append(cluster.center)
            continue
        rows = [index_of[id(t)] for t in cluster.tracks]
        new_centroids.append(features[rows].mean(axis=0))
    return np.vstack(new_centroids)


def has_converged(old: np.ndarray, new: np.ndarray, threshold: float = CONVERGENCE_THRESHOLD) -> bool:
    return bool(np.all(np.abs(old - new) <= threshold))


def kmeans_clustering(
    tracks: Sequence[Track],
    k: int = 5,
    max_iterations: int = 100,
    rng: Optional[np.random.Generator] = None,
    threshold: float = CONVERGENCE_THRESHOLD,
) -> List[Cluster]:
    """
    Partition tracks into ``k`` clusters by iterative centroid refinement.

    Centroids start at random points inside the per-dimension range of the
    pool (not k-means++), so results depend on ``rng``. Exactly ``k``
    clusters are returned for a non-empty pool, some possibly empty.
    """
    if not tracks:
        return []
    if k < 1:
        raise ValueError(f"Cluster count must be at least 1, got {k}")
    if rng is None:
        rng = np.random.default_rng()

    features = feature_matrix(tracks)
    index_of = {id(t): i for i, t in enumerate(tracks)}
    centroids = _initial_centroids(features, k, rng)

    # A non-positive iteration cap still yields one assignment pass.
    clusters = _assign(tracks, features, centroids)
    iterations = 0
    while iterations < max_iterations:
        if iterations:
            clusters = _assign(tracks, features, centroids)
        new_centroids = _update(clusters, features, index_of)
        if has_converged(centroids, new_centroids, threshold):
            logging.debug(f"k-means converged after {iterations + 1} iterations")
            break
        centroids = new_centroids
        iterations += 1
    else:
        logging.debug(f"k-means stopped at the iteration cap ({max_iterations})")

    logging.info(f"Created {len(clusters)} clusters: {cluster_sizes(clusters)}")
    return clusters


def cluster_sizes(clusters: Sequence[Cluster]) -> List[int]:
    return [len(c.tracks) for c in clusters]


def _bucket(value: float, table) -> str:
    for lower, label in table:
        if value > lower:
            return label
    return table[-1][1]


def name_cluster(cluster: Cluster) -> str:
    """
    Generate a descriptive name for a cluster from its centroid's energy and valence.
    """
    if not cluster.tracks:
        return f"Cluster {cluster.id + 1}"
    energy = float(cluster.center[FEATURE_KEYS.index("energy")])
    valence = float(cluster.center[FEATURE_KEYS.index("valence")])
    return f"{_bucket(energy, ENERGY_ADJECTIVES)} {_bucket(valence, VALENCE_MOODS)} Mix"


def clusters_to_frame(clusters: Sequence[Cluster]) -> pd.DataFrame:
    """One row per cluster: id, name, size and the centroid's coordinates."""
    rows = []
    for c in clusters:
        row = {"cluster": c.id, "name": name_cluster(c), "size": len(c.tracks)}
        row.update({key: float(val) for key, val in zip(FEATURE_KEYS, c.center)})
        rows.append(row)
    return pd.DataFrame(rows, columns=["cluster", "name", "size"] + FEATURE_KEYS)
