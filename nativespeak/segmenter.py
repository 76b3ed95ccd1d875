"""Split raw text into offset-tagged chunks along sentence and script boundaries."""

import regex

from nativespeak.constants import ASCII_TERMINATORS, SENTENCE_TERMINATORS
from nativespeak.models import Segment

_CJK_LETTER_RE = regex.compile(r"[\p{Han}\p{Hiragana}\p{Katakana}]")
_LATIN_RE = regex.compile(r"\p{Latin}")
# Maximal CJK runs, including CJK punctuation and fullwidth forms
_CJK_RUN_RE = regex.compile(r"[\p{Han}\p{Hiragana}\p{Katakana}\u3000-\u303F\uFF00-\uFFEF]+")


def _is_boundary(text: str, i: int) -> bool:
    """Decide whether the terminator at text[i] ends a sentence.

    ASCII terminators only split when followed by whitespace or the end of
    the text, and never between two digits ("1.3.6", "3.14", "google.com").
    Fullwidth terminators and line breaks always split.
    """
    if text[i] not in ASCII_TERMINATORS:
        return True
    prev = text[i - 1] if i > 0 else ""
    nxt = text[i + 1] if i + 1 < len(text) else ""
    if prev.isdigit() and nxt.isdigit():
        return False
    return nxt == "" or nxt.isspace()


def split_sentences(text: str) -> list[tuple[int, int]]:
    """Return (start, end) spans of sentence-level chunks in reading order.

    A run of terminators ("?!", "...", "。\\n\\n") stays with the sentence it
    closes; whitespace after it begins the next chunk.
    """
    spans = []
    start = 0
    i = 0
    n = len(text)
    while i < n:
        if text[i] in SENTENCE_TERMINATORS and _is_boundary(text, i):
            end = i + 1
            while end < n and text[end] in SENTENCE_TERMINATORS:
                end += 1
            spans.append((start, end))
            start = i = end
            continue
        i += 1
    if start < n:
        spans.append((start, n))
    return spans


def split_scripts(text: str, offset: int) -> list[Segment]:
    """Split a mixed CJK/Latin sentence into alternating script runs."""
    if not (_CJK_LETTER_RE.search(text) and _LATIN_RE.search(text)):
        return [Segment(text=text, offset=offset)]

    pieces = []
    pos = 0
    for match in _CJK_RUN_RE.finditer(text):
        if match.start() > pos:
            pieces.append(Segment(text=text[pos:match.start()], offset=offset + pos))
        pieces.append(Segment(text=match.group(), offset=offset + match.start()))
        pos = match.end()
    if pos < len(text):
        pieces.append(Segment(text=text[pos:], offset=offset + pos))
    return pieces


def has_content(text: str) -> bool:
    """True if text carries a letter, digit or CJK character (anything speakable)."""
    return any(ch.isalnum() for ch in text)


def segment_text(text: str) -> list[Segment]:
    """Split text into Segments with offsets into the original string.

    Chunks holding only whitespace or punctuation are dropped, since speech
    engines often never signal completion for them. Non-blank input always
    yields at least one Segment.
    """
    segments = []
    for start, end in split_sentences(text):
        for piece in split_scripts(text[start:end], start):
            if has_content(piece.text):
                segments.append(piece)

    if not segments and text.strip():
        segments.append(Segment(text=text, offset=0))
    return segments
