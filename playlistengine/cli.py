"""CLI"""

import argparse
import logging
import sys
from pathlib import Path

import numpy as np

from .analysis import mood_label, playlist_stats
from .clustering import clusters_to_frame, kmeans_clustering
from .config import load_config
from .exceptions import PlaylistEngineError
from .playlist_builder import FORMATS, save_playlist
from .playlist_generator import generate_playlist
from .similarity import find_similar_tracks
from .strategies import ALGORITHM_PRESETS, get_strategy
from .tracks import SAMPLE_TRACKS, load_tracks
from .utils import format_track


def load_pool(cfg, pool_path=None):
    """Load the track pool from ``pool_path`` or the configured POOL_JSON."""
    path = Path(pool_path or cfg.get("POOL_JSON", "./tracks.json"))
    if not path.exists():
        logging.warning(f"Track pool {path} not found; using built-in sample tracks")
        return list(SAMPLE_TRACKS)
    tracks = load_tracks(str(path))
    logging.info(f"Loaded {len(tracks)} tracks from {path}")
    return tracks


def _rng(seed):
    return np.random.default_rng(seed)


def cmd_generate(args, cfg, pool):
    name = args.strategy or cfg.get("STRATEGY", "greedyDanceability")
    strategy = get_strategy(name)
    length = args.length if args.length is not None else int(cfg.get("PLAYLIST_LENGTH", 10))
    seed = args.seed if args.seed is not None else cfg.get("RANDOM_SEED")

    playlist = generate_playlist(pool, strategy, length=length, rng=_rng(seed))
    for i, track in enumerate(playlist, 1):
        print(format_track(track, i))

    stats = playlist_stats(playlist)
    print(
        f"\nAvg energy {stats['avg_energy']:.2f} | "
        f"mood {mood_label(stats['avg_valence'])} | "
        f"avg danceability {stats['avg_danceability']:.2f} | "
        f"avg tempo {stats['avg_tempo']:.0f} BPM"
    )
    if args.save and playlist:
        save_playlist(playlist, f"{name} Mix", fmt=args.format)
    return playlist


def cmd_cluster(args, cfg, pool):
    k = args.k if args.k is not None else int(cfg.get("CLUSTER_COUNT", 5))
    max_iter = (
        args.max_iterations
        if args.max_iterations is not None
        else int(cfg.get("MAX_ITERATIONS", 100))
    )
    seed = args.seed if args.seed is not None else cfg.get("RANDOM_SEED")
    clusters = kmeans_clustering(pool, k=k, max_iterations=max_iter, rng=_rng(seed))
    frame = clusters_to_frame(clusters)
    print(frame[["cluster", "name", "size", "energy", "valence", "danceability"]].to_string(index=False))
    return clusters


def cmd_similar(args, cfg, pool):
    target = next((t for t in pool if t.id == args.track_id), None)
    if target is None:
        raise PlaylistEngineError(f"Track {args.track_id!r} is not in the pool")
    limit = args.limit if args.limit is not None else int(cfg.get("SIMILAR_LIMIT", 10))
    results = find_similar_tracks(target, pool, limit)
    for i, res in enumerate(results, 1):
        print(f"{format_track(res.track, i)}  similarity={res.similarity:.3f}")
    return results


def build_parser():
    parser = argparse.ArgumentParser(prog="playlistengine", description="Playlist engine CLI")
    parser.add_argument(
        "--log-level", help="Override log level (DEBUG, INFO, WARNING, ERROR)"
    )
    parser.add_argument("--config", help="Path to a config.yml")
    parser.add_argument("--pool", help="Path to a JSON track pool")
    subparsers = parser.add_subparsers(dest="command")

    gen = subparsers.add_parser("generate", help="Generate a playlist")
    gen.add_argument("--strategy", choices=sorted(ALGORITHM_PRESETS), help="Strategy preset")
    gen.add_argument("--length", type=int, help="Number of tracks in the playlist")
    gen.add_argument("--seed", type=int, help="Random seed for reproducible output")
    gen.add_argument("--save", action="store_true", help="Save the playlist to OUTPUT_DIR")
    gen.add_argument("--format", choices=FORMATS, default="json", help="Output file format")

    clu = subparsers.add_parser("cluster", help="Cluster the pool with k-means")
    clu.add_argument("--k", type=int, help="Number of clusters")
    clu.add_argument("--max-iterations", type=int, help="Iteration cap")
    clu.add_argument("--seed", type=int, help="Random seed for centroid initialization")

    sim = subparsers.add_parser("similar", help="List tracks similar to one track")
    sim.add_argument("--track-id", required=True, help="Id of the reference track")
    sim.add_argument("--limit", type=int, help="Number of results")

    subparsers.add_parser("presets", help="List strategy presets")
    return parser


def main(argv=None):
    argv = sys.argv[1:] if argv is None else list(argv)
    parser = build_parser()
    args = parser.parse_args(argv)
    cfg = load_config(args.config)

    lvl = args.log_level or cfg.get("LOG_LEVEL") or "INFO"
    logging.basicConfig(level=getattr(logging, lvl.upper(), logging.INFO))

    if args.command == "presets":
        for name in sorted(ALGORITHM_PRESETS):
            print(name)
        return

    try:
        pool = load_pool(cfg, args.pool)
        if args.command == "cluster":
            cmd_cluster(args, cfg, pool)
        elif args.command == "similar":
            cmd_similar(args, cfg, pool)
        else:
            if args.command is None:
                # Bare invocation behaves like `generate` with config defaults
                args = parser.parse_args(argv + ["generate"])
            cmd_generate(args, cfg, pool)
    except PlaylistEngineError as exc:
        logging.error("Playlist engine failed: %s", exc)
        raise SystemExit(1)


if __name__ == "__main__":
    main()
