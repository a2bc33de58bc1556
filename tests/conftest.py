import numpy as np
import pytest

from playlistengine.tracks import Track


def _make_track(track_id, **features):
    base = dict(
        name=f"Song {track_id}",
        artist="Artist",
        popularity=50,
        danceability=0.5,
        energy=0.5,
        valence=0.5,
        tempo=120,
        acousticness=0.5,
        instrumentalness=0.0,
        liveness=0.1,
        speechiness=0.05,
        loudness=-10.0,
    )
    base.update(features)
    return Track(id=track_id, **base)


@pytest.fixture
def make_track():
    return _make_track


@pytest.fixture
def pool():
    return [
        _make_track("a", danceability=0.9, energy=0.2, valence=0.1, tempo=90),
        _make_track("b", danceability=0.1, energy=0.8, valence=0.9, tempo=140),
        _make_track("c", danceability=0.5, energy=0.5, valence=0.55, tempo=110),
        _make_track("d", danceability=0.7, energy=0.95, valence=0.7, tempo=128),
        _make_track("e", danceability=0.3, energy=0.1, valence=0.3, tempo=70),
        _make_track("f", danceability=0.6, energy=0.6, valence=0.62, tempo=100),
        _make_track("g", danceability=0.2, energy=0.4, valence=0.8, tempo=160),
    ]


class FixedRng:
    """Stand-in for numpy's Generator returning preset values."""

    def __init__(self, index=0, unit=None):
        self.index = index
        self.unit = unit
        self.calls = []

    def integers(self, n):
        self.calls.append(n)
        return min(self.index, n - 1)

    def random(self, shape):
        return np.asarray(self.unit, dtype=float).reshape(shape)


@pytest.fixture
def fixed_rng():
    return FixedRng
