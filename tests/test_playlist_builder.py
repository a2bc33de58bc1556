import json

import pandas as pd
import pytest

from playlistengine.playlist_builder import save_playlist
from playlistengine.tracks import SAMPLE_TRACKS
from playlistengine.utils import sanitize_label


def test_save_json(tmp_path):
    path = save_playlist(SAMPLE_TRACKS[:3], "Happy/Mix", out_dir=str(tmp_path))
    assert path.name == "Happy - Mix.json"
    data = json.loads(path.read_text(encoding="utf-8"))
    assert [r["id"] for r in data] == ["sample-1", "sample-2", "sample-3"]


def test_save_csv(tmp_path):
    path = save_playlist(SAMPLE_TRACKS[:2], "mix", out_dir=str(tmp_path), fmt="csv")
    df = pd.read_csv(path)
    assert list(df["id"]) == ["sample-1", "sample-2"]


def test_save_m3u(tmp_path):
    path = save_playlist(SAMPLE_TRACKS[:1], "mix", out_dir=str(tmp_path), fmt="m3u")
    lines = path.read_text(encoding="utf-8").splitlines()
    assert lines == ["#EXTM3U", "#EXTINF:-1,Sample Artist - Sample Track 1", "sample-1"]


def test_unknown_format(tmp_path):
    with pytest.raises(ValueError):
        save_playlist(SAMPLE_TRACKS[:1], "mix", out_dir=str(tmp_path), fmt="xml")


def test_sanitize_label():
    assert sanitize_label('  a:b*c  & ') == "abc"


def test_sanitize_label_never_empty():
    assert sanitize_label(' / <?> ') == "Playlist"
    assert sanitize_label("Chill \\ Focus") == "Chill - Focus"
