"""Load speech settings from a JSON settings file."""

import json
import logging
import os

from nativespeak.constants import DEFAULT_PITCH, DEFAULT_RATE, DEFAULT_VOLUME
from nativespeak.models import Settings

logger = logging.getLogger(__name__)


def load_settings(path: str | None) -> tuple[Settings, str | None]:
    """Load {"rate", "pitch", "volume", "voice"} from a JSON file.

    Returns (settings, voice_id). A missing file gives defaults; malformed
    JSON or non-numeric values log a warning and fall back to defaults.
    Values are clamped into their supported ranges.
    """
    if not path or not os.path.exists(path):
        return Settings(), None
    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError:
        logger.warning("Malformed settings file: %s, using defaults", path)
        return Settings(), None
    if not isinstance(data, dict):
        logger.warning("Settings file %s is not a JSON object, using defaults", path)
        return Settings(), None

    try:
        settings = Settings.clamped(
            rate=float(data.get("rate", DEFAULT_RATE)),
            pitch=float(data.get("pitch", DEFAULT_PITCH)),
            volume=float(data.get("volume", DEFAULT_VOLUME)),
        )
    except (TypeError, ValueError):
        logger.warning("Non-numeric value in settings file: %s, using defaults", path)
        settings = Settings()

    voice = data.get("voice")
    return settings, voice if isinstance(voice, str) and voice else None
