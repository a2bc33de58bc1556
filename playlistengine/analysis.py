from typing import Dict, List, Sequence

import pandas as pd

from .tracks import Track, tracks_to_frame

MOOD_RANGES = [
    ("Very Sad", 0.0, 0.2),
    ("Sad", 0.2, 0.4),
    ("Neutral", 0.4, 0.6),
    ("Happy", 0.6, 0.8),
    ("Very Happy", 0.8, 1.0),
]

TEMPO_RANGES = [
    ("Slow (< 80 BPM)", 0, 80),
    ("Moderate (80-120 BPM)", 80, 120),
    ("Fast (> 120 BPM)", 120, 300),
]


def playlist_stats(playlist: Sequence[Track]) -> Dict[str, float]:
    """Average energy, valence, danceability and tempo of a playlist."""
    if not playlist:
        return {"avg_energy": 0.0, "avg_valence": 0.0, "avg_danceability": 0.0, "avg_tempo": 0.0}
    df = tracks_to_frame(playlist)
    return {
        "avg_energy": float(df["energy"].mean()),
        "avg_valence": float(df["valence"].mean()),
        "avg_danceability": float(df["danceability"].mean()),
        "avg_tempo": float(df["tempo"].mean()),
    }


def mood_label(avg_valence: float) -> str:
    if avg_valence > 0.6:
        return "Happy"
    if avg_valence > 0.4:
        return "Neutral"
    return "Sad"


def _distribution(values: pd.Series, ranges: List[tuple]) -> pd.DataFrame:
    total = len(values)
    rows = []
    for label, lo, hi in ranges:
        # Half-open buckets: a value equal to the upper bound falls outside.
        count = int(((values >= lo) & (values < hi)).sum())
        rows.append({
            "label": label,
            "min": lo,
            "max": hi,
            "count": count,
            "percentage": (count / total) * 100 if total else 0.0,
        })
    return pd.DataFrame(rows)


def mood_distribution(playlist: Sequence[Track]) -> pd.DataFrame:
    return _distribution(pd.Series([t.valence for t in playlist], dtype=float), MOOD_RANGES)


def tempo_distribution(playlist: Sequence[Track]) -> pd.DataFrame:
    return _distribution(pd.Series([t.tempo for t in playlist], dtype=float), TEMPO_RANGES)
