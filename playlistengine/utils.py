import re

_ILLEGAL_CHARS = re.compile(r'[<>:"|?*]')
_PATH_SEPARATORS = re.compile(r"\s*[/\\]\s*")


def sanitize_label(label: str) -> str:
    """Turn a playlist label into a safe file stem."""
    lbl = _PATH_SEPARATORS.sub(" - ", label)
    lbl = _ILLEGAL_CHARS.sub("", lbl)
    lbl = " ".join(lbl.split()).rstrip("& -").strip()
    return lbl or "Playlist"


def format_track(track, position: int = None) -> str:
    prefix = f"{position:>3}. " if position is not None else ""
    return (
        f"{prefix}{track.artist} - {track.name} "
        f"[dance {track.danceability:.2f} | energy {track.energy:.2f} | "
        f"valence {track.valence:.2f} | {track.tempo:.0f} BPM]"
    )
