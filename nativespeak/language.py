"""Language classification of chunks and neighbour-based disambiguation."""

from dataclasses import replace

import regex

from nativespeak.constants import CANTONESE_MARKERS
from nativespeak.models import LanguageClass, Segment

_KANA_RE = regex.compile(r"[\p{Hiragana}\p{Katakana}]")
_HAN_RE = regex.compile(r"\p{Han}")
_LATIN_RE = regex.compile(r"\p{Latin}")

# Neighbours consulted when a chunk's own script is inconclusive, in priority order
CONTEXT_WINDOW = (1, 2, -1, -2)


def classify(text: str) -> LanguageClass:
    """Assign a language class from script content.

    Order matters: kana and Cantonese markers must be checked before
    generic Han, since Japanese and Cantonese both use Han ideographs.
    """
    if _KANA_RE.search(text):
        return LanguageClass.JAPANESE
    if any(ch in CANTONESE_MARKERS for ch in text):
        return LanguageClass.CANTONESE
    if _HAN_RE.search(text):
        return LanguageClass.MANDARIN
    if _LATIN_RE.search(text):
        return LanguageClass.ENGLISH
    return LanguageClass.NEUTRAL


def scan_context(index: int, classes: list[LanguageClass]) -> LanguageClass:
    """First non-neutral class among the neighbours of classes[index]."""
    for step in CONTEXT_WINDOW:
        j = index + step
        if 0 <= j < len(classes) and classes[j] is not LanguageClass.NEUTRAL:
            return classes[j]
    return LanguageClass.NEUTRAL


def resolve_context(segments: list[Segment]) -> list[Segment]:
    """Rewrite neutral and Mandarin chunks using their neighbours.

    Neutral chunks take the first non-neutral neighbour's class. Mandarin
    chunks sitting next to Cantonese are promoted to Cantonese so a passage
    does not flip accents mid-paragraph. Neighbours are always read from
    the classifier's output, never from already-resolved chunks.
    """
    original = [seg.language for seg in segments]
    resolved = []
    for i, seg in enumerate(segments):
        language = seg.language
        if language is LanguageClass.NEUTRAL:
            language = scan_context(i, original)
        elif language is LanguageClass.MANDARIN:
            if scan_context(i, original) is LanguageClass.CANTONESE:
                language = LanguageClass.CANTONESE
        resolved.append(seg if language is seg.language else replace(seg, language=language))
    return resolved


def label_segments(segments: list[Segment]) -> list[Segment]:
    """Classify every segment, then resolve ambiguous ones from context."""
    classified = [replace(seg, language=classify(seg.text)) for seg in segments]
    return resolve_context(classified)
