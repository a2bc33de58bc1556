import logging
from pathlib import Path
from typing import Sequence

import pandas as pd

from .config import load_config
from .tracks import Track, tracks_to_frame
from .utils import sanitize_label

FORMATS = ("json", "csv", "m3u")


def _write_m3u(df: pd.DataFrame, path: Path) -> None:
    with open(path, "w", encoding="utf-8") as f:
        f.write("#EXTM3U\n")
        for _, r in df.iterrows():
            f.write(f"#EXTINF:-1,{r['artist']} - {r['name']}\n")
            # Tracks without a preview URL are listed by id
            f.write(f"{r['preview'] or r['id']}\n")


def save_playlist(
    playlist: Sequence[Track],
    label: str,
    out_dir: str = None,
    fmt: str = "json",
) -> Path:
    """Write a playlist to ``<out_dir>/<label>.<fmt>`` and return the path."""
    if fmt not in FORMATS:
        raise ValueError(f"Unsupported playlist format {fmt!r}; choose from {FORMATS}")
    logging.info(f"Writing playlist: {label} with {len(playlist)} tracks")

    df = tracks_to_frame(playlist)
    if not df.empty:
        top_artists = df["artist"].value_counts().head(3)
        logging.info(f"Top artists: {list(top_artists.index)}")

    if out_dir is None:
        out_dir = load_config().get("OUTPUT_DIR", "./playlists")
    out_dir = Path(out_dir)
    out_dir.mkdir(parents=True, exist_ok=True)
    path = out_dir / f"{sanitize_label(label)}.{fmt}"

    if fmt == "json":
        df.to_json(path, orient="records", indent=2)
    elif fmt == "csv":
        df.to_csv(path, index=False)
    else:
        _write_m3u(df, path)
    logging.info(f"Saved {path}")
    return path
