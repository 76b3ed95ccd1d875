"""CLI interface: inspect segmentation, list voices, render text to speech."""

import argparse
import logging
import os
import re
import sys

from nativespeak.config import load_settings
from nativespeak.constants import FALLBACK_VOICE, OUTPUT_DIR, VERSION
from nativespeak.exporter import export
from nativespeak.language import label_segments
from nativespeak.models import Settings
from nativespeak.segmenter import segment_text
from nativespeak.sequencer import PlaybackSequencer
from nativespeak.tts import EdgeTTSBackend
from nativespeak.voices import gender_of


def slug_from_path(path: str) -> str:
    """Convert a text filename to an output directory slug.

    "My Notes.txt" → "my_notes"
    """
    basename = os.path.splitext(os.path.basename(path))[0]
    slug = re.sub(r"[^a-zA-Z0-9]+", "_", basename).strip("_").lower()
    return slug or "speech"


def _read_text(file_path: str) -> str:
    if not os.path.exists(file_path):
        print(f"Error: File not found: {file_path}", file=sys.stderr)
        raise SystemExit(1)
    with open(file_path, encoding="utf-8") as f:
        text = f.read()
    if not text.strip():
        print(f"Error: File is empty: {file_path}", file=sys.stderr)
        raise SystemExit(1)
    return text


def cmd_segments(args):
    """Print how a file would be chunked and classified."""
    text = _read_text(args.file)
    segments = label_segments(segment_text(text))
    print(f"{len(segments)} segments:")
    for seg in segments:
        print(f"  {seg.offset:>6}  {seg.language.value:<8} {seg.text!r}")


def cmd_voices(args):
    """List available edge-tts voices."""
    backend = EdgeTTSBackend(output_dir=".")
    voices = backend.load_voices()
    filter_str = args.filter.lower() if args.filter else None
    if filter_str:
        voices = [v for v in voices if filter_str in v.id.lower() or filter_str in v.language_tag.lower()]
    if not voices:
        print("No matching voices found.")
        return
    print("Available voices:")
    for v in voices:
        print(f"  {v.id:<40} {v.language_tag:<8} {gender_of(v).value}")


def _resolve_settings(args) -> tuple[Settings, str | None]:
    """Settings file values, overridden by command-line flags."""
    settings, voice_id = load_settings(args.settings)
    settings = Settings.clamped(
        rate=args.rate if args.rate is not None else settings.rate,
        pitch=args.pitch if args.pitch is not None else settings.pitch,
        volume=args.volume if args.volume is not None else settings.volume,
    )
    return settings, args.voice or voice_id


def cmd_speak(args):
    """Speak a text file through edge-tts and export audio plus timeline."""
    text = _read_text(args.file)
    settings, voice_id = _resolve_settings(args)

    slug = slug_from_path(args.file)
    output_dir = os.path.join(args.out, slug)
    chunk_dir = os.path.join(output_dir, "chunks")
    os.makedirs(chunk_dir, exist_ok=True)

    backend = EdgeTTSBackend(chunk_dir)
    sequencer = PlaybackSequencer(backend)
    try:
        backend.load_voices()
    except Exception as e:
        print(f"Warning: could not load voices ({e}); falling back to {FALLBACK_VOICE}", file=sys.stderr)

    if voice_id:
        try:
            sequencer.catalog.select(voice_id)
        except ValueError:
            print(f"Error: Unknown voice: {voice_id}", file=sys.stderr)
            print("Run 'nativespeak voices' to see available voices.", file=sys.stderr)
            raise SystemExit(1)

    segments = sequencer.speak(text, settings)
    user_voice = sequencer.catalog.user_voice
    print(f"Speaking {len(segments)} segments (voice: {user_voice.id if user_voice else 'default'})")
    backend.run()

    audio_path = export(
        segments, backend.rendered, output_dir, slug, settings, source=os.path.abspath(args.file),
    )
    failed = sum(1 for chunk in backend.rendered if chunk.error is not None)
    if audio_path is None:
        print("Error: No audio could be rendered.", file=sys.stderr)
        raise SystemExit(1)
    if failed:
        print(f"Warning: {failed} segment(s) failed and were skipped.", file=sys.stderr)
    print(f"Done: {audio_path}")


def main(argv=None):
    """CLI entry point."""
    parser = argparse.ArgumentParser(
        prog="nativespeak",
        description="NativeSpeak — speak mixed Chinese, Cantonese, Japanese and English text",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {VERSION}")
    parser.add_argument("-v", "--verbose", action="store_true", help="Verbose logging")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # segments
    segments_parser = subparsers.add_parser("segments", help="Show segmentation and language classes")
    segments_parser.add_argument("file", help="Path to a UTF-8 text file")
    segments_parser.set_defaults(func=cmd_segments)

    # voices
    voices_parser = subparsers.add_parser("voices", help="List available voices")
    voices_parser.add_argument("--filter", help="Filter voices by id or language tag substring")
    voices_parser.set_defaults(func=cmd_voices)

    # speak
    speak_parser = subparsers.add_parser("speak", help="Render a text file to speech")
    speak_parser.add_argument("file", help="Path to a UTF-8 text file")
    speak_parser.add_argument("--out", default=OUTPUT_DIR, help="Output base directory")
    speak_parser.add_argument("--voice", help="Preferred voice id (sets the gender preference)")
    speak_parser.add_argument("--settings", help="JSON settings file")
    speak_parser.add_argument("--rate", type=float, help="Speech rate, 0.5–3.0")
    speak_parser.add_argument("--pitch", type=float, help="Pitch, 0.5–2.0")
    speak_parser.add_argument("--volume", type=float, help="Volume, 0.0–1.0")
    speak_parser.set_defaults(func=cmd_speak)

    args = parser.parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)

    if not args.command:
        parser.print_help()
        return

    args.func(args)
