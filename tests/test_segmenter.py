"""Tests for segmenter module."""

import pytest

from nativespeak.segmenter import segment_text, split_sentences


def _texts(segments):
    return [(s.text, s.offset) for s in segments]


def test_version_string_not_split():
    """Dots between digits never end a sentence."""
    assert _texts(segment_text("Update to v1.3.6 now.")) == [("Update to v1.3.6 now.", 0)]


def test_decimal_not_split():
    assert _texts(segment_text("Pi is 3.14 exactly.")) == [("Pi is 3.14 exactly.", 0)]


def test_domain_not_split():
    """A dot not followed by whitespace (google.com) is not a boundary."""
    assert _texts(segment_text("Visit google.com today")) == [("Visit google.com today", 0)]


def test_sentences_split_with_offsets():
    assert _texts(segment_text("Hello world. This is a test.")) == [
        ("Hello world.", 0),
        (" This is a test.", 12),
    ]


def test_number_at_sentence_end_splits():
    assert _texts(segment_text("Chapter 1. Begin")) == [("Chapter 1.", 0), (" Begin", 10)]


def test_terminator_run_stays_together():
    assert _texts(segment_text("Really?! Yes.")) == [("Really?!", 0), (" Yes.", 8)]


def test_newline_is_boundary():
    assert _texts(segment_text("Line one\nLine two")) == [("Line one\n", 0), ("Line two", 9)]


def test_fullwidth_terminators_always_split():
    """CJK sentences split at 。 even without following whitespace."""
    text = "這是中文。係呀，呢句係廣東話。呢句都係。"
    assert _texts(segment_text(text)) == [
        ("這是中文。", 0),
        ("係呀，呢句係廣東話。", 5),
        ("呢句都係。", 15),
    ]


def test_japanese_sentences():
    assert _texts(segment_text("こんにちは。元気ですか？")) == [("こんにちは。", 0), ("元気ですか？", 6)]


def test_mixed_script_sentence_split_into_runs():
    assert _texts(segment_text("我喜歡Python編程")) == [
        ("我喜歡", 0),
        ("Python", 3),
        ("編程", 9),
    ]


def test_mixed_script_drops_punctuation_only_runs():
    """The trailing ")" run carries nothing speakable and is dropped."""
    assert _texts(segment_text("3. Privacy First (隱私優先)")) == [
        ("3.", 0),
        (" Privacy First (", 2),
        ("隱私優先", 18),
    ]


def test_punctuation_only_sentence_dropped():
    assert _texts(segment_text("Yes. -- . No.")) == [("Yes.", 0), (" No.", 9)]


def test_fallback_for_unspeakable_text():
    """Non-blank input always yields at least one segment."""
    assert _texts(segment_text("!!!")) == [("!!!", 0)]
    assert _texts(segment_text("... ---")) == [("... ---", 0)]


@pytest.mark.parametrize("text", ["", "   ", "\n\n"])
def test_blank_text_yields_nothing(text):
    assert segment_text(text) == []


def test_split_sentences_covers_text():
    text = "One. Two!\nThree? 四。"
    spans = split_sentences(text)
    assert spans[0][0] == 0
    assert spans[-1][1] == len(text)
    for (_, end), (start, _) in zip(spans, spans[1:]):
        assert end == start


@pytest.mark.parametrize("text", [
    "Welcome to NativeSpeak.\n\nThis application runs 100% offline.\n\n歡迎使用 NativeSpeak。\n這是一個完全離線的語音朗讀程式。",
    "NativeSpeakへようこそ。\nこのアプリは、v2.0.1で動作します。",
    "Mixed 中文 and English, then 日本語です! Done.",
    "3. Privacy First (隱私優先) -- ok... 「引用」 end",
])
def test_offset_fidelity(text):
    """Every segment is the exact source substring at its offset, in order, without overlap."""
    segments = segment_text(text)
    assert segments
    previous_end = 0
    for seg in segments:
        assert text[seg.offset:seg.end] == seg.text
        assert seg.offset >= previous_end
        assert 0 <= seg.offset <= seg.end <= len(text)
        previous_end = seg.end
