"""Tests for constants and models."""

import logging

from nativespeak import constants
from nativespeak.models import (
    LanguageClass,
    PlaybackState,
    PlaybackStatus,
    Segment,
    Settings,
)


def test_segment_defaults_to_neutral():
    """Segment language is a Neutral placeholder until classified."""
    seg = Segment(text="Hello.", offset=3)
    assert seg.language is LanguageClass.NEUTRAL
    assert seg.end == 9


def test_segment_is_immutable():
    """Segments cannot be mutated after creation."""
    seg = Segment(text="Hi", offset=0)
    try:
        seg.offset = 5
    except AttributeError:
        pass
    else:
        raise AssertionError("Segment should be frozen")


def test_settings_defaults():
    settings = Settings()
    assert (settings.rate, settings.pitch, settings.volume) == (1.0, 1.0, 1.0)


def test_settings_clamped_within_range():
    settings = Settings.clamped(rate=1.5, pitch=0.8, volume=0.3)
    assert settings == Settings(rate=1.5, pitch=0.8, volume=0.3)


def test_settings_clamped_out_of_range(caplog):
    """Out-of-range values are clamped with a warning."""
    with caplog.at_level(logging.WARNING):
        settings = Settings.clamped(rate=10, pitch=0.1, volume=-1)
    assert settings == Settings(rate=3.0, pitch=0.5, volume=0.0)
    assert "rate" in caplog.text


def test_playback_state_idle_event():
    state = PlaybackState()
    assert state.as_event() == {"is_speaking": False, "is_paused": False, "char_index": -1}


def test_playback_state_paused_is_still_speaking():
    """A paused session still reports is_speaking, as the highlight overlay expects."""
    state = PlaybackState(status=PlaybackStatus.PAUSED, char_index=12)
    assert state.is_speaking
    assert state.is_paused


def test_constants_exist():
    """All module-level constants are defined."""
    expected = [
        "SENTENCE_TERMINATORS",
        "CANTONESE_MARKERS",
        "CANTONESE_TAGS",
        "DEFAULT_VOICE_MARKER",
        "RATE_RANGE",
        "PITCH_RANGE",
        "VOLUME_RANGE",
        "FALLBACK_VOICE",
        "TTS_RETRY_COUNT",
        "TTS_RETRY_BASE_DELAY",
        "CHUNK_PAUSE_MS",
        "OUTPUT_FORMAT",
        "OUTPUT_DIR",
        "VERSION",
    ]
    for name in expected:
        assert hasattr(constants, name), f"Missing constant: {name}"
