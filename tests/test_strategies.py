from operator import attrgetter

import numpy as np
import pytest

from playlistengine.clustering import Cluster
from playlistengine.exceptions import UnknownStrategyError
from playlistengine.similarity import find_similar_tracks
from playlistengine.strategies import (
    ALGORITHM_PRESETS,
    ClosestFeatureStrategy,
    ClusterStrategy,
    GreedyStrategy,
    HybridStrategy,
    SearchStrategy,
    SimilarityStrategy,
    closest_feature_next,
    cluster_next,
    get_strategy,
    greedy_next,
    hybrid_next,
    nearest_by_vector,
    select_next,
    similarity_next,
)


def test_greedy_only_candidate_excluding_current(make_track):
    a = make_track("A", danceability=0.9)
    b = make_track("B", danceability=0.1)
    assert greedy_next(a, [b]) is b
    assert greedy_next(a, [a, b]) is b


def test_greedy_picks_max_weight_first_on_ties(make_track):
    cur = make_track("cur")
    x = make_track("x", energy=0.8)
    y = make_track("y", energy=0.9)
    z = make_track("z", energy=0.9)
    assert greedy_next(cur, [x, y, z], attrgetter("energy")) is y


def test_greedy_no_candidate(make_track):
    cur = make_track("cur")
    assert greedy_next(cur, []) is None
    assert greedy_next(cur, [cur]) is None


def test_nearest_by_vector_score(make_track):
    cur = make_track("cur", energy=0.0)
    x = make_track("x", energy=0.9)  # 0.1 + 0.25 * 0.9 = 0.325
    y = make_track("y", energy=0.8)  # 0.2 + 0.25 * 0.8 = 0.4
    assert nearest_by_vector(cur, [y, x], {"energy": 1.0}, ("energy",)) is x


def test_nearest_by_vector_penalizes_distance_from_current(make_track):
    cur = make_track("cur", energy=0.5, valence=0.0)
    # equally close to the target, but y sits nearer to the current track
    x = make_track("x", energy=0.7, valence=0.8)
    y = make_track("y", energy=0.7, valence=0.6)
    assert nearest_by_vector(cur, [x, y], {"energy": 0.7, "valence": 0.7}) is y


def test_nearest_by_vector_ties_keep_first(make_track):
    cur = make_track("cur", valence=0.5)
    x = make_track("x", valence=0.5)
    y = make_track("y", valence=0.5)
    assert nearest_by_vector(cur, [x, y], {"valence": 0.6}, ("valence",)) is x


def test_nearest_by_vector_missing_target_key_counts_as_zero(make_track):
    cur = make_track("cur", energy=0.5, valence=0.5)
    x = make_track("x", energy=0.0, valence=0.9)
    y = make_track("y", energy=0.9, valence=0.9)
    assert nearest_by_vector(cur, [y, x], {"valence": 0.9}, ("energy", "valence")) is x


def test_closest_feature_next(make_track):
    cur = make_track("cur", tempo=120)
    x = make_track("x", tempo=150)
    y = make_track("y", tempo=118)
    z = make_track("z", tempo=122)
    assert closest_feature_next(cur, [cur, x, y, z], "tempo") is y
    assert closest_feature_next(cur, [cur], "tempo") is None


def test_similarity_next_picks_most_similar(pool):
    cur = pool[0]
    best = similarity_next(cur, pool[1:], limit=3)
    assert best is find_similar_tracks(cur, pool[1:], 1)[0].track
    assert similarity_next(cur, [], limit=3) is None


def test_cluster_next_only_uses_available_mates(pool):
    clusters = [Cluster(0, np.zeros(10), pool[:4]), Cluster(1, np.zeros(10), pool[4:])]
    choice = cluster_next(pool[0], pool[1:3], clusters, limit=5)
    assert choice is find_similar_tracks(pool[0], pool[1:3], 1)[0].track
    assert cluster_next(pool[0], pool[4:], clusters) is None


def test_hybrid_rotation(make_track):
    cur = make_track("cur", energy=0.5, valence=0.5)
    loud = make_track("loud", energy=0.99, valence=0.1)
    mellow = make_track("mellow", energy=0.1, valence=0.6)
    twin = make_track("twin", energy=0.5, valence=0.5)
    pool = [loud, mellow, twin]
    assert hybrid_next(cur, pool, 1) is twin
    assert hybrid_next(cur, pool, 2) is loud
    assert hybrid_next(cur, pool, 3) is mellow
    assert hybrid_next(cur, pool, 4) is twin


def test_select_next_dispatch(make_track):
    cur = make_track("cur")
    x = make_track("x", danceability=0.9, energy=0.1)
    y = make_track("y", danceability=0.2, energy=0.95)
    assert select_next(GreedyStrategy(), cur, [x, y], 1) is x
    assert select_next(GreedyStrategy(attrgetter("energy")), cur, [x, y], 1) is y
    assert select_next(SearchStrategy({"energy": 1.0}, ("energy",)), cur, [x, y], 1) is y
    assert select_next(ClosestFeatureStrategy("danceability"), cur, [x, y], 1) is y
    assert select_next(SimilarityStrategy(limit=0), cur, [x, y], 1) is None
    assert select_next(ClusterStrategy(), cur, [x, y], 1, clusters=[]) is None
    assert select_next(HybridStrategy(), cur, [x, y], 2) is y


def test_select_next_unknown_strategy(make_track):
    with pytest.raises(UnknownStrategyError):
        select_next(object(), make_track("cur"), [], 1)


def test_presets():
    assert get_strategy("searchHappy").target == {"energy": 0.8, "valence": 0.8}
    assert isinstance(get_strategy("hybrid"), HybridStrategy)
    assert {"greedyDanceability", "greedyEnergy", "greedyValence",
            "searchHappy", "searchSad", "searchChill"} <= set(ALGORITHM_PRESETS)
    with pytest.raises(UnknownStrategyError):
        get_strategy("nope")


def test_search_keys_are_restricted():
    with pytest.raises(ValueError):
        SearchStrategy({"tempo": 120}, ("tempo",))


def test_cluster_next_reaches_past_played_mates(make_track):
    cur = make_track("t0", energy=0.5, valence=0.5)
    played = [make_track(f"t{i}", energy=0.95, valence=0.05, acousticness=0.0) for i in (1, 2, 3)]
    far = make_track("t4", energy=0.05, valence=0.95, acousticness=1.0)
    twin = make_track("t5", energy=0.5, valence=0.5)
    other = make_track("t6", energy=0.9, valence=0.2)
    clusters = [Cluster(0, np.zeros(10), [cur] + played + [far, twin, other])]
    # the first three mates in stored order are already in the playlist
    assert cluster_next(cur, [far, twin, other], clusters, limit=3) is twin


def test_unknown_strategy_message_is_unquoted():
    with pytest.raises(ValueError) as exc:
        get_strategy("nope")
    assert isinstance(exc.value, UnknownStrategyError)
    assert str(exc.value).startswith("Unknown strategy 'nope'")
