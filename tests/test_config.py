"""Tests for config module."""

import json
import logging

from nativespeak.config import load_settings
from nativespeak.models import Settings


def _write(tmp_path, content):
    path = tmp_path / "settings.json"
    path.write_text(content if isinstance(content, str) else json.dumps(content), encoding="utf-8")
    return str(path)


def test_no_path_gives_defaults():
    assert load_settings(None) == (Settings(), None)


def test_missing_file_gives_defaults(tmp_path):
    assert load_settings(str(tmp_path / "nope.json")) == (Settings(), None)


def test_valid_file(tmp_path):
    path = _write(tmp_path, {"rate": 1.5, "pitch": 0.8, "volume": 0.5, "voice": "zh-HK-HiuGaaiNeural"})
    settings, voice_id = load_settings(path)
    assert settings == Settings(rate=1.5, pitch=0.8, volume=0.5)
    assert voice_id == "zh-HK-HiuGaaiNeural"


def test_partial_file_keeps_defaults(tmp_path):
    settings, voice_id = load_settings(_write(tmp_path, {"rate": 2}))
    assert settings == Settings(rate=2.0)
    assert voice_id is None


def test_out_of_range_values_clamped(tmp_path, caplog):
    path = _write(tmp_path, {"rate": 9, "pitch": 0.1, "volume": -1})
    with caplog.at_level(logging.WARNING):
        settings, _ = load_settings(path)
    assert settings == Settings(rate=3.0, pitch=0.5, volume=0.0)
    assert "rate" in caplog.text


def test_malformed_json_warns(tmp_path, caplog):
    with caplog.at_level(logging.WARNING):
        assert load_settings(_write(tmp_path, "{not json")) == (Settings(), None)
    assert "Malformed" in caplog.text


def test_non_object_warns(tmp_path, caplog):
    with caplog.at_level(logging.WARNING):
        assert load_settings(_write(tmp_path, [1, 2, 3])) == (Settings(), None)
    assert "not a JSON object" in caplog.text


def test_non_numeric_values_fall_back(tmp_path):
    """Bad numbers reset settings but a valid voice is still honoured."""
    settings, voice_id = load_settings(_write(tmp_path, {"rate": "fast", "voice": "ja-JP-NanamiNeural"}))
    assert settings == Settings()
    assert voice_id == "ja-JP-NanamiNeural"


def test_blank_voice_ignored(tmp_path):
    assert load_settings(_write(tmp_path, {"voice": ""}))[1] is None
    assert load_settings(_write(tmp_path, {"voice": 42}))[1] is None
