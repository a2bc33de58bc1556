import logging
from typing import List, Optional, Sequence

import numpy as np

from .clustering import kmeans_clustering
from .strategies import ClusterStrategy, select_next
from .tracks import Track


def _pop_index(pool: List[Track], track: Track) -> int:
    for i, t in enumerate(pool):
        if t.id == track.id:
            return i
    return -1


def generate_playlist(
    tracks: Sequence[Track],
    strategy,
    length: int = 10,
    rng: Optional[np.random.Generator] = None,
) -> List[Track]:
    """
    Build a playlist of up to ``length`` tracks drawn from ``tracks``.

    A random seed track opens the playlist; every following track is chosen
    by ``strategy`` from what is still available, or at random when the
    strategy has no candidate. ``tracks`` itself is never modified.
    A non-positive ``length`` gives an empty playlist.
    """
    if not tracks or length <= 0:
        return []
    if rng is None:
        rng = np.random.default_rng()

    pool = list(tracks)
    clusters = None
    if isinstance(strategy, ClusterStrategy):
        clusters = kmeans_clustering(
            pool, k=strategy.k, max_iterations=strategy.max_iterations, rng=rng
        )

    current = pool.pop(int(rng.integers(len(pool))))
    logging.debug(f"Seed track: {current.id}")
    playlist = [current]

    while len(playlist) < length and pool:
        nxt = select_next(strategy, current, pool, len(playlist), clusters=clusters)
        idx = _pop_index(pool, nxt) if nxt is not None else -1
        if idx == -1:
            idx = int(rng.integers(len(pool)))
            logging.debug(f"No candidate at position {len(playlist)}; picking at random")
        current = pool.pop(idx)
        playlist.append(current)

    logging.info(f"Generated playlist with {len(playlist)} tracks from a pool of {len(tracks)}")
    return playlist
