"""Silence bracket, symbol and emoji clutter in the spoken copy of a chunk.

Highlighting works on offsets into the untouched source text, so everything
here except the CJK date rewrite keeps the string length unchanged.
"""

import regex

from nativespeak.models import LanguageClass

# Sentence punctuation (.,!?;:) is kept because it produces natural pauses.
NOISY_SYMBOLS = frozenset("()[]{}<>\"'_*@#$%^&+=`~|\\/-")

CJK_DATE_CLASSES = frozenset({
    LanguageClass.MANDARIN,
    LanguageClass.CANTONESE,
    LanguageClass.JAPANESE,
})

_ISO_DATE_RE = regex.compile(r"(?<!\d)(\d{4})-(\d{1,2})-(\d{1,2})(?!\d)")
_GRAPHEME_RE = regex.compile(r"\X")
# Keycaps ("1\uFE0F\u20E3") have a plain base character, so the enclosing mark is matched too
_PICTOGRAPH_RE = regex.compile(r"\p{Extended_Pictographic}|[\U0001F1E6-\U0001F1FF]|\u20E3")


def _keeps_hyphen(text: str, i: int) -> bool:
    """Hyphens inside numeric ranges and in front of negative numbers are spoken."""
    nxt = text[i + 1] if i + 1 < len(text) else ""
    if not nxt.isdigit():
        return False
    if i == 0 or text[i - 1].isspace():
        return True
    return text[i - 1].isdigit()


def silence_symbols(text: str) -> str:
    """Replace noisy symbols with spaces, one space per character."""
    chars = list(text)
    for i, ch in enumerate(chars):
        if ch not in NOISY_SYMBOLS:
            continue
        if ch == "-" and _keeps_hyphen(text, i):
            continue
        chars[i] = " "
    return "".join(chars)


def silence_pictographs(text: str) -> str:
    """Blank whole emoji sequences (ZWJ joins, skin tones, flags) with equal-length spaces."""
    return _GRAPHEME_RE.sub(
        lambda m: " " * len(m.group()) if _PICTOGRAPH_RE.search(m.group()) else m.group(),
        text,
    )


def _spoken_date(match) -> str:
    year, month, day = (int(g) for g in match.groups())
    if not (1 <= month <= 12 and 1 <= day <= 31):
        return match.group()
    return f"{year}年{month}月{day}日"


def localize_dates(text: str) -> str:
    """Rewrite ISO dates as 2026年1月30日. Changes length; spoken copy only."""
    return _ISO_DATE_RE.sub(_spoken_date, text)


def sanitize(text: str, language: LanguageClass) -> str:
    """Produce the copy of a chunk that is sent to the speech backend."""
    if language in CJK_DATE_CLASSES:
        text = localize_dates(text)
    return silence_pictographs(silence_symbols(text))


def to_source_index(text: str, language: LanguageClass, spoken_index: int) -> int:
    """Map an index into sanitize(text, language) back to an index into text.

    Only date rewrites change length. An index inside a rewritten date maps
    into the source date, clamped to its last character.
    """
    if language not in CJK_DATE_CLASSES:
        return spoken_index
    shift = 0
    for match in _ISO_DATE_RE.finditer(text):
        spoken = _spoken_date(match)
        spoken_start = match.start() + shift
        if spoken_index < spoken_start:
            break
        if spoken_index < spoken_start + len(spoken):
            return match.start() + min(spoken_index - spoken_start, len(match.group()) - 1)
        shift += len(spoken) - len(match.group())
    return spoken_index - shift
