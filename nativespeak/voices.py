"""Voice routing: gender lookup, language matching and default-voice selection."""

import logging
from typing import Callable

import regex

from nativespeak.constants import (
    CANTONESE_TAGS,
    DEFAULT_VOICE_MARKER,
    ENGLISH_TAG_PREFIX,
    JAPANESE_TAG_PREFIX,
    MANDARIN_TAG_PREFIXES,
)
from nativespeak.models import GenderHint, LanguageClass, VoiceDescriptor

logger = logging.getLogger(__name__)

GENDER_TABLE_VERSION = 3

# Explicit words used by Windows/Android/Chrome/Edge voice names.
# Matched as whole words so "Samantha" or "Germany" never read as male.
# CamelCase joins count as word breaks: "GoogleMale" -> "google", "male".
GENDER_WORDS = {
    "female": GenderHint.FEMALE,
    "woman": GenderHint.FEMALE,
    "girl": GenderHint.FEMALE,
    "male": GenderHint.MALE,
    "man": GenderHint.MALE,
    "boy": GenderHint.MALE,
}

# Known voice names that carry no gender word. Matched as substrings of the
# lowercased display name; female entries are checked first.
FEMALE_VOICE_NAMES = (
    # Apple, English
    "samantha", "karen", "tessa", "moira", "veena", "fiona",
    # Apple, Chinese and Cantonese
    "ting-ting", "meijia", "sin-ji", "shu-han",
    # Apple, Japanese
    "kyoko",
    # Apple, other languages
    "amelie", "anna", "carmit", "lekha", "mariska", "melina",
    "monica", "nora", "paulina", "satu", "yuna", "zosia", "zuzana", "sara",
    "alice", "aurora", "joana", "alva", "kanya", "yuri",
    # Microsoft
    "xiaoxiao", "xiaoyi", "hiugaai", "hiumaan", "hsiaochen", "nanami", "jenny", "sonia",
)

MALE_VOICE_NAMES = (
    # Apple, English
    "daniel", "fred", "gordon", "rishi", "xander",
    # Apple, Chinese
    "kangkang",
    # Apple, Japanese
    "hattori", "otoya",
    # Apple, other languages
    "aaron", "arthur", "jorge", "juan", "maged", "martin", "thomas",
    # Microsoft
    "yunxi", "yunjian", "yunyang", "wanlung", "keita", "davis", "ryan", "roger",
)

_WORD_RE = regex.compile(r"\p{Lu}+(?!\p{Ll})|\p{Lu}?\p{Ll}+|\p{L}+")


def normalize_tag(tag: str) -> str:
    """"zh_HK" -> "zh-hk"."""
    return tag.replace("_", "-").lower()


def is_cantonese_tag(tag: str) -> bool:
    tag = normalize_tag(tag)
    return tag in CANTONESE_TAGS or tag.startswith("yue-")


def is_mandarin_tag(tag: str) -> bool:
    tag = normalize_tag(tag)
    return tag.startswith(MANDARIN_TAG_PREFIXES) and not is_cantonese_tag(tag)


def gender_of(voice: VoiceDescriptor | None) -> GenderHint:
    """Look up a voice's gender from its display name. Pure table lookup."""
    if voice is None:
        return GenderHint.UNKNOWN
    name = voice.display_name.lower()

    words = {word.lower() for word in _WORD_RE.findall(voice.display_name)}
    for word in ("female", "woman", "girl", "male", "man", "boy"):
        if word in words:
            return GENDER_WORDS[word]

    if any(entry in name for entry in FEMALE_VOICE_NAMES):
        return GenderHint.FEMALE
    if any(entry in name for entry in MALE_VOICE_NAMES):
        return GenderHint.MALE
    return GenderHint.UNKNOWN


def _language_matcher(language: LanguageClass) -> Callable[[VoiceDescriptor], bool] | None:
    if language is LanguageClass.JAPANESE:
        return lambda v: normalize_tag(v.language_tag).startswith(JAPANESE_TAG_PREFIX)
    if language is LanguageClass.CANTONESE:
        return lambda v: is_cantonese_tag(v.language_tag)
    if language is LanguageClass.MANDARIN:
        return lambda v: is_mandarin_tag(v.language_tag)
    if language is LanguageClass.ENGLISH:
        return lambda v: normalize_tag(v.language_tag).startswith(ENGLISH_TAG_PREFIX)
    return None


def _find_voice(
    voices: list[VoiceDescriptor],
    matcher: Callable[[VoiceDescriptor], bool],
    gender: GenderHint,
) -> VoiceDescriptor | None:
    """First voice matching language and gender, else first matching language."""
    if gender is not GenderHint.UNKNOWN:
        for voice in voices:
            if matcher(voice) and gender_of(voice) is gender:
                return voice
    for voice in voices:
        if matcher(voice):
            return voice
    return None


def route_voice(
    language: LanguageClass,
    voices: list[VoiceDescriptor],
    user_voice: VoiceDescriptor | None,
) -> VoiceDescriptor | None:
    """Pick the voice for a chunk of the given language class.

    Priority: same language and same gender as the user's voice → same
    language → (Cantonese only) any zh voice → the user's voice.
    """
    if language is LanguageClass.NEUTRAL:
        return user_voice
    if (
        language is LanguageClass.MANDARIN
        and user_voice is not None
        and is_cantonese_tag(user_voice.language_tag)
    ):
        return user_voice

    gender = gender_of(user_voice)
    target = _find_voice(voices, _language_matcher(language), gender)

    if target is None and language is LanguageClass.CANTONESE:
        target = _find_voice(voices, lambda v: normalize_tag(v.language_tag).startswith("zh"), gender)
        if target is not None:
            logger.debug("No Cantonese voice installed, degrading to %s", target.id)

    return target or user_voice


def select_default_voice(voices: list[VoiceDescriptor]) -> VoiceDescriptor | None:
    """Initial voice: known high-quality voice → platform default → local → first."""
    if not voices:
        return None
    for rule in (
        lambda v: DEFAULT_VOICE_MARKER in v.display_name.lower(),
        lambda v: v.is_platform_default,
        lambda v: v.is_local_service,
    ):
        for voice in voices:
            if rule(voice):
                return voice
    return voices[0]


class VoiceCatalog:
    """Read-only view of the backend's voices plus the user's chosen voice."""

    def __init__(self, voices: list[VoiceDescriptor] | None = None):
        self._voices: list[VoiceDescriptor] = []
        self.user_voice: VoiceDescriptor | None = None
        self.refresh(voices or [])

    @classmethod
    def bind(cls, backend) -> "VoiceCatalog":
        """Create a catalog that follows the backend's voice refresh signal."""
        catalog = cls(backend.list_voices())
        backend.subscribe_voices_changed(lambda: catalog.refresh(backend.list_voices()))
        return catalog

    @property
    def voices(self) -> list[VoiceDescriptor]:
        return list(self._voices)

    def refresh(self, voices: list[VoiceDescriptor]) -> None:
        """Replace the voice list; derive a default only if nothing is chosen yet."""
        self._voices = list(voices)
        if self.user_voice is None and self._voices:
            self.user_voice = select_default_voice(self._voices)
            logger.info("Default voice: %s (%s)", self.user_voice.id, self.user_voice.language_tag)

    def find(self, voice_id: str) -> VoiceDescriptor | None:
        for voice in self._voices:
            if voice.id == voice_id:
                return voice
        return None

    def select(self, voice_id: str) -> VoiceDescriptor:
        """Make voice_id the user's preferred voice."""
        voice = self.find(voice_id)
        if voice is None:
            raise ValueError(f"Unknown voice: {voice_id}")
        self.user_voice = voice
        return voice
