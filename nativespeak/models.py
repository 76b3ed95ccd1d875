"""Data models for segmentation, voice routing and playback."""

import logging
from dataclasses import dataclass
from enum import Enum

from nativespeak.constants import (
    DEFAULT_PITCH,
    DEFAULT_RATE,
    DEFAULT_VOLUME,
    PITCH_RANGE,
    RATE_RANGE,
    VOLUME_RANGE,
)

logger = logging.getLogger(__name__)


class LanguageClass(Enum):
    JAPANESE = "ja"
    MANDARIN = "zh"
    CANTONESE = "yue"
    ENGLISH = "en"
    NEUTRAL = "neutral"


class GenderHint(Enum):
    FEMALE = "female"
    MALE = "male"
    UNKNOWN = "unknown"


class PlaybackStatus(Enum):
    IDLE = "idle"
    SPEAKING = "speaking"
    PAUSED = "paused"


@dataclass(frozen=True)
class Segment:
    text: str
    offset: int        # index into the original, unsanitized text
    language: LanguageClass = LanguageClass.NEUTRAL

    @property
    def end(self) -> int:
        return self.offset + len(self.text)


@dataclass(frozen=True)
class VoiceDescriptor:
    id: str
    language_tag: str
    display_name: str
    is_platform_default: bool = False
    is_local_service: bool = False


def _clamp(name: str, value: float, bounds: tuple[float, float]) -> float:
    low, high = bounds
    clamped = min(max(value, low), high)
    if clamped != value:
        logger.warning("%s %.2f out of range [%.1f, %.1f], using %.2f", name, value, low, high, clamped)
    return clamped


@dataclass(frozen=True)
class Settings:
    rate: float = DEFAULT_RATE
    pitch: float = DEFAULT_PITCH
    volume: float = DEFAULT_VOLUME

    @classmethod
    def clamped(
        cls,
        rate: float = DEFAULT_RATE,
        pitch: float = DEFAULT_PITCH,
        volume: float = DEFAULT_VOLUME,
    ) -> "Settings":
        """Build Settings with every value clamped into its supported range."""
        return cls(
            rate=_clamp("rate", float(rate), RATE_RANGE),
            pitch=_clamp("pitch", float(pitch), PITCH_RANGE),
            volume=_clamp("volume", float(volume), VOLUME_RANGE),
        )


@dataclass(frozen=True)
class PlaybackState:
    status: PlaybackStatus = PlaybackStatus.IDLE
    char_index: int = -1

    @property
    def is_speaking(self) -> bool:
        return self.status is not PlaybackStatus.IDLE

    @property
    def is_paused(self) -> bool:
        return self.status is PlaybackStatus.PAUSED

    def as_event(self) -> dict:
        """The tuple handed to the presentation layer for highlighting."""
        return {
            "is_speaking": self.is_speaking,
            "is_paused": self.is_paused,
            "char_index": self.char_index,
        }


@dataclass(frozen=True)
class SpeechRequest:
    text: str                  # sanitized, spoken copy of the chunk
    voice_id: str | None
    rate: float
    pitch: float
    volume: float
