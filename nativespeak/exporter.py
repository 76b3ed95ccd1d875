"""Assemble rendered chunks into one audio file plus a highlight timeline."""

import json
import os
from datetime import datetime, timezone

from pydub import AudioSegment

from nativespeak.constants import (
    CHUNK_PAUSE_MS,
    OUTPUT_BITRATE,
    OUTPUT_FORMAT,
    TIMELINE_FILENAME,
    VERSION,
)
from nativespeak.models import Segment, Settings
from nativespeak.sanitizer import to_source_index
from nativespeak.tts import RenderedChunk


def export(
    segments: list[Segment],
    rendered: list[RenderedChunk],
    output_dir: str,
    slug: str,
    settings: Settings,
    source: str = "",
    audio_format: str = OUTPUT_FORMAT,
) -> str | None:
    """Concatenate chunk audio and write the timeline manifest.

    Creates:
      - <output_dir>/<slug>.<audio_format> (the spoken text)
      - <output_dir>/timeline.json (segment spans and word times, with
        char_index values as offsets into the original text)

    segments and rendered are paired in submission order. Chunks that failed
    contribute no audio. Returns the audio path, or None if nothing rendered.
    """
    os.makedirs(output_dir, exist_ok=True)

    assembled = AudioSegment.silent(duration=0)
    has_audio = False
    segment_entries = []
    word_entries = []

    for seg, chunk in zip(segments, rendered):
        entry = {
            "offset": seg.offset,
            "length": len(seg.text),
            "language": seg.language.value,
            "voice": chunk.request.voice_id,
        }
        if chunk.path is None:
            entry["error"] = str(chunk.error)
            segment_entries.append(entry)
            continue

        if has_audio:
            assembled += AudioSegment.silent(duration=CHUNK_PAUSE_MS)
        start_ms = len(assembled)
        assembled += AudioSegment.from_file(chunk.path)
        has_audio = True

        entry["start_ms"] = start_ms
        entry["end_ms"] = len(assembled)
        segment_entries.append(entry)

        last = max(len(seg.text) - 1, 0)
        for ms, local_index in chunk.boundaries:
            local_index = to_source_index(seg.text, seg.language, local_index)
            word_entries.append({
                "time_ms": start_ms + ms,
                "char_index": seg.offset + min(local_index, last),
            })

    output_path = None
    if has_audio:
        output_path = os.path.join(output_dir, f"{slug}.{audio_format}")
        if audio_format == "mp3":
            assembled.export(output_path, format=audio_format, bitrate=OUTPUT_BITRATE)
        else:
            assembled.export(output_path, format=audio_format)

    manifest = {
        "source": source,
        "generated_at": datetime.now(timezone.utc).isoformat(),
        "version": VERSION,
        "audio": os.path.basename(output_path) if output_path else None,
        "settings": {"rate": settings.rate, "pitch": settings.pitch, "volume": settings.volume},
        "stats": {
            "segments": len(segment_entries),
            "failed": sum(1 for e in segment_entries if "error" in e),
            "duration_seconds": round(len(assembled) / 1000, 1),
        },
        "segments": segment_entries,
        "words": word_entries,
    }
    with open(os.path.join(output_dir, TIMELINE_FILENAME), "w", encoding="utf-8") as f:
        json.dump(manifest, f, indent=2, ensure_ascii=False)

    return output_path
