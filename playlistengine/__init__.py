"""playlistengine package."""

from .tracks import Track, FEATURE_KEYS, extract_features, load_tracks
from .similarity import (
    euclidean_distance,
    cosine_similarity,
    vector_mean,
    find_similar_tracks,
    find_cluster_tracks,
)
from .clustering import Cluster, kmeans_clustering
from .strategies import (
    GreedyStrategy,
    SearchStrategy,
    ClosestFeatureStrategy,
    SimilarityStrategy,
    ClusterStrategy,
    HybridStrategy,
    ALGORITHM_PRESETS,
    get_strategy,
    greedy_next,
    nearest_by_vector,
)
from .playlist_generator import generate_playlist
from .exceptions import PlaylistEngineError, VectorLengthError, UnknownStrategyError

__all__ = [
    "Track",
    "FEATURE_KEYS",
    "extract_features",
    "load_tracks",
    "euclidean_distance",
    "cosine_similarity",
    "vector_mean",
    "find_similar_tracks",
    "find_cluster_tracks",
    "Cluster",
    "kmeans_clustering",
    "GreedyStrategy",
    "SearchStrategy",
    "ClosestFeatureStrategy",
    "SimilarityStrategy",
    "ClusterStrategy",
    "HybridStrategy",
    "ALGORITHM_PRESETS",
    "get_strategy",
    "greedy_next",
    "nearest_by_vector",
    "generate_playlist",
    "PlaylistEngineError",
    "VectorLengthError",
    "UnknownStrategyError",
]
