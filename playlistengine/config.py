from pathlib import Path
import os

import yaml

_config_cache = None

CONFIG_HOME = Path.home() / ".playlistengine"

DEFAULTS = {
    "POOL_JSON": "./tracks.json",
    "OUTPUT_DIR": "./playlists",
    "PLAYLIST_LENGTH": 10,
    "STRATEGY": "greedyDanceability",
    "CLUSTER_COUNT": 5,
    "MAX_ITERATIONS": 100,
    "SIMILAR_LIMIT": 10,
    # None means a fresh seed on every run
    "RANDOM_SEED": None,
    "LOG_LEVEL": "INFO",
}

# Keys whose default is None but which hold integers when set
_OPTIONAL_INTS = {"RANDOM_SEED"}


def _user_config_path(path: str = None) -> Path:
    if path:
        return Path(path)
    cwd_cfg = Path("config.yml")
    if cwd_cfg.exists():
        return cwd_cfg
    return CONFIG_HOME / "config.yml"


def _coerce_env(key: str, default_val, env_val: str):
    if isinstance(default_val, bool):
        return env_val.lower() in ("1", "true", "yes")
    if isinstance(default_val, int) or key in _OPTIONAL_INTS:
        if key in _OPTIONAL_INTS and env_val.strip().lower() in ("", "none"):
            return None
        return int(env_val)
    return env_val


def load_config(path: str = None) -> dict:
    """Load settings from defaults, the YAML config file and the environment.

    Later sources win: a value in ``config.yml`` overrides the default and an
    environment variable with the same name overrides both.
    """
    global _config_cache
    if _config_cache is not None and path is None:
        return _config_cache

    config_path = _user_config_path(path)
    user_cfg = {}
    if config_path.exists():
        with open(config_path, "r", encoding="utf-8") as f:
            user_cfg = yaml.safe_load(f) or {}

    merged = {**DEFAULTS, **user_cfg}

    for key, default_val in DEFAULTS.items():
        env_val = os.getenv(key)
        if env_val is not None:
            merged[key] = _coerce_env(key, default_val, env_val)

    if path is None:
        _config_cache = merged
    return merged


def save_config(cfg: dict, path: str = None) -> Path:
    """Write ``cfg`` as YAML and refresh the cached config."""
    global _config_cache
    config_path = Path(path) if path else CONFIG_HOME / "config.yml"
    config_path.parent.mkdir(parents=True, exist_ok=True)
    with open(config_path, "w", encoding="utf-8") as f:
        yaml.safe_dump(dict(cfg), f, default_flow_style=False, sort_keys=True)
    _config_cache = None
    return config_path


def reset_config_cache() -> None:
    global _config_cache
    _config_cache = None
