"""Track records and their fixed-order feature vectors."""

import json
from dataclasses import dataclass, asdict, fields
from pathlib import Path
from typing import Iterable, List, Optional, Sequence

import numpy as np
import pandas as pd

from .exceptions import PoolFormatError

# Order matters: every vector compared by the engine uses exactly this layout.
FEATURE_KEYS = [
    "danceability",
    "energy",
    "valence",
    "acousticness",
    "instrumentalness",
    "liveness",
    "speechiness",
    "tempo",
    "loudness",
    "popularity",
]

# Fixed divisors; the first seven features are already in [0, 1].
TEMPO_SCALE = 200.0
LOUDNESS_SCALE = 60.0
POPULARITY_SCALE = 100.0

NUMERIC_COLUMNS = FEATURE_KEYS
REQUIRED_COLUMNS = ["id"] + NUMERIC_COLUMNS


@dataclass(frozen=True)
class Track:
    id: str
    name: str = ""
    artist: str = "Unknown Artist"
    popularity: float = 0.0
    danceability: float = 0.0
    energy: float = 0.0
    valence: float = 0.0
    tempo: float = 0.0
    acousticness: float = 0.0
    instrumentalness: float = 0.0
    liveness: float = 0.0
    speechiness: float = 0.0
    loudness: float = 0.0
    preview: Optional[str] = None
    mode: Optional[int] = None
    key: Optional[int] = None
    time_signature: Optional[int] = None

    def to_dict(self) -> dict:
        return asdict(self)


_TRACK_FIELDS = {f.name for f in fields(Track)}


def extract_features(track: Track) -> np.ndarray:
    """Return the 10-dimensional feature vector for ``track``."""
    return np.array(
        [
            track.danceability,
            track.energy,
            track.valence,
            track.acousticness,
            track.instrumentalness,
            track.liveness,
            track.speechiness,
            track.tempo / TEMPO_SCALE,
            track.loudness / LOUDNESS_SCALE,
            track.popularity / POPULARITY_SCALE,
        ],
        dtype=float,
    )


def feature_matrix(tracks: Sequence[Track]) -> np.ndarray:
    if not tracks:
        return np.zeros((0, len(FEATURE_KEYS)))
    return np.vstack([extract_features(t) for t in tracks])


def tracks_from_frame(df: pd.DataFrame) -> List[Track]:
    """
    Build Track records from a DataFrame with one row per track.
    Extra columns are ignored; missing feature columns or ids are an error.
    """
    missing = [c for c in REQUIRED_COLUMNS if c not in df.columns]
    if missing:
        raise PoolFormatError(f"Track pool is missing columns: {missing}")
    if df["id"].isnull().any():
        raise PoolFormatError("Track pool contains rows without an id")
    if df[NUMERIC_COLUMNS].isnull().any().any():
        bad = df.loc[df[NUMERIC_COLUMNS].isnull().any(axis=1), "id"].tolist()
        raise PoolFormatError(f"Tracks with missing feature values: {bad}")

    df = df[[c for c in df.columns if c in _TRACK_FIELDS]].copy()
    df["id"] = df["id"].astype(str)
    for col in NUMERIC_COLUMNS:
        df[col] = pd.to_numeric(df[col], errors="raise").astype(float)

    records = df.to_dict(orient="records")
    tracks = []
    for rec in records:
        # NaN in optional metadata columns becomes None
        clean = {k: (None if isinstance(v, float) and np.isnan(v) else v) for k, v in rec.items()}
        tracks.append(Track(**clean))
    return tracks


def tracks_to_frame(tracks: Iterable[Track]) -> pd.DataFrame:
    rows = [t.to_dict() for t in tracks]
    if not rows:
        return pd.DataFrame(columns=[f.name for f in fields(Track)])
    return pd.DataFrame(rows)


def load_tracks(path: str) -> List[Track]:
    """
    Load a track pool from JSON: either a list of records or
    an object with a "tracks" list.
    """
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)
    arr = data.get("tracks", []) if isinstance(data, dict) else data
    if not arr:
        return []
    return tracks_from_frame(pd.DataFrame(arr))


def save_tracks(tracks: Iterable[Track], path: str) -> None:
    data = {"tracks": [t.to_dict() for t in tracks]}
    Path(path).parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(data, f, ensure_ascii=False, indent=2)


SAMPLE_TRACKS = [
    Track("sample-1", "Sample Track 1", "Sample Artist", popularity=80, danceability=0.7,
          energy=0.8, valence=0.6, tempo=120, acousticness=0.3, instrumentalness=0.1,
          liveness=0.2, speechiness=0.1, loudness=-5.0, mode=1, key=0, time_signature=4),
    Track("sample-2", "Sample Track 2", "Sample Artist", popularity=75, danceability=0.5,
          energy=0.6, valence=0.4, tempo=100, acousticness=0.8, instrumentalness=0.2,
          liveness=0.1, speechiness=0.05, loudness=-8.0, mode=0, key=5, time_signature=4),
    Track("sample-3", "Sample Track 3", "Another Artist", popularity=62, danceability=0.85,
          energy=0.9, valence=0.85, tempo=128, acousticness=0.05, instrumentalness=0.0,
          liveness=0.3, speechiness=0.08, loudness=-4.0, mode=1, key=7, time_signature=4),
    Track("sample-4", "Sample Track 4", "Another Artist", popularity=40, danceability=0.3,
          energy=0.25, valence=0.15, tempo=72, acousticness=0.9, instrumentalness=0.6,
          liveness=0.1, speechiness=0.03, loudness=-14.0, mode=0, key=2, time_signature=3),
    Track("sample-5", "Sample Track 5", "Third Artist", popularity=55, danceability=0.6,
          energy=0.45, valence=0.55, tempo=95, acousticness=0.5, instrumentalness=0.05,
          liveness=0.15, speechiness=0.2, loudness=-9.5, mode=1, key=9, time_signature=4),
    Track("sample-6", "Sample Track 6", "Third Artist", popularity=90, danceability=0.75,
          energy=0.7, valence=0.7, tempo=110, acousticness=0.2, instrumentalness=0.0,
          liveness=0.4, speechiness=0.3, loudness=-6.0, mode=1, key=4, time_signature=4),
]
