"""Speech backend that renders each request to an audio file via edge-tts."""

import asyncio
import logging
import os
import time
from collections import deque
from dataclasses import dataclass, field
from typing import Callable

import edge_tts

from nativespeak.constants import (
    EDGE_PITCH_HZ_PER_UNIT,
    EDGE_TICKS_PER_MS,
    FALLBACK_VOICE,
    TTS_RETRY_BASE_DELAY,
    TTS_RETRY_COUNT,
)
from nativespeak.models import SpeechRequest, VoiceDescriptor

logger = logging.getLogger(__name__)


def prosody(request: SpeechRequest) -> dict:
    """Map multiplier settings onto edge-tts relative prosody strings.

    rate 1.25 → "+25%", volume 0.5 → "-50%", pitch 1.2 → "+20Hz".
    """
    return {
        "rate": f"{round((request.rate - 1.0) * 100):+d}%",
        "volume": f"{round((request.volume - 1.0) * 100):+d}%",
        "pitch": f"{round((request.pitch - 1.0) * EDGE_PITCH_HZ_PER_UNIT):+d}Hz",
    }


def voice_from_edge(entry: dict) -> VoiceDescriptor:
    """Convert one edge_tts.list_voices() entry to a VoiceDescriptor."""
    short_name = entry["ShortName"]
    return VoiceDescriptor(
        id=short_name,
        language_tag=entry.get("Locale", ""),
        display_name=f"{short_name} - {entry.get('Gender', 'Unknown')}",
        is_platform_default=short_name == FALLBACK_VOICE,
        is_local_service=False,
    )


def locate_words(text: str, words: list[tuple[int, str]]) -> list[tuple[int, int]]:
    """Map (ms, word) boundary events to (ms, char index in text).

    Words are searched left to right; a word that cannot be found is skipped.
    """
    located = []
    cursor = 0
    for ms, word in words:
        pos = text.find(word, cursor)
        if pos < 0:
            continue
        located.append((ms, pos))
        cursor = pos + len(word)
    return located


async def _stream_to_file(text: str, voice: str, output_path: str, options: dict) -> list[tuple[int, str]]:
    communicate = edge_tts.Communicate(text, voice, boundary="WordBoundary", **options)
    words = []
    with open(output_path, "wb") as f:
        async for chunk in communicate.stream():
            if chunk["type"] == "audio":
                f.write(chunk["data"])
            elif chunk["type"] == "WordBoundary":
                words.append((chunk["offset"] // EDGE_TICKS_PER_MS, chunk["text"]))
    return words


def synthesize(text: str, voice: str, output_path: str, options: dict | None = None) -> list[tuple[int, str]]:
    """Render one utterance with retry logic.

    Sync wrapper around edge_tts.Communicate(). Retries on network errors,
    HTTP errors, or 0-byte output files. Returns the (ms, word) boundaries.
    """
    options = options or {}
    last_error = None
    for attempt in range(TTS_RETRY_COUNT):
        try:
            words = asyncio.run(_stream_to_file(text, voice, output_path, options))

            if os.path.exists(output_path) and os.path.getsize(output_path) > 0:
                return words

            last_error = Exception(f"TTS produced 0-byte file for: {text[:50]}...")
        except Exception as e:
            last_error = e

        if attempt < TTS_RETRY_COUNT - 1:
            delay = TTS_RETRY_BASE_DELAY * (2 ** attempt)
            logger.debug("Retrying %s in %.1fs: %s", voice, delay, last_error)
            time.sleep(delay)

    raise last_error


@dataclass
class RenderedChunk:
    request: SpeechRequest
    path: str | None = None
    boundaries: list[tuple[int, int]] = field(default_factory=list)   # (ms, local char index)
    error: Exception | None = None


@dataclass
class _Job:
    request: SpeechRequest
    on_start: Callable[[], None]
    on_word_boundary: Callable[[int], None]
    on_end: Callable[[], None]
    on_error: Callable[[Exception], None]


class EdgeTTSBackend:
    """Offline renderer: submissions queue up and run() drains them in order.

    Each job fires on_start, renders to <index>_<voice>.mp3 in output_dir,
    replays its word boundaries, then fires on_end (or on_error once
    retries are exhausted).
    """

    def __init__(self, output_dir: str):
        self.output_dir = output_dir
        self.rendered: list[RenderedChunk] = []
        self._queue: deque[_Job] = deque()
        self._paused = False
        self._voices: list[VoiceDescriptor] = []
        self._subscribers: list[Callable[[], None]] = []

    def list_voices(self) -> list[VoiceDescriptor]:
        return list(self._voices)

    def subscribe_voices_changed(self, callback: Callable[[], None]) -> None:
        self._subscribers.append(callback)

    def load_voices(self) -> list[VoiceDescriptor]:
        """Fetch the edge-tts voice list and signal subscribers."""
        entries = asyncio.run(edge_tts.list_voices())
        self._voices = [voice_from_edge(e) for e in entries]
        logger.info("Loaded %d edge-tts voices", len(self._voices))
        for callback in self._subscribers:
            callback()
        return list(self._voices)

    def submit(self, request, on_start, on_word_boundary, on_end, on_error) -> None:
        self._queue.append(_Job(request, on_start, on_word_boundary, on_end, on_error))

    def pause(self) -> None:
        self._paused = True

    def resume(self) -> None:
        self._paused = False

    def cancel_all(self) -> None:
        self._queue.clear()

    @property
    def pending(self) -> int:
        return len(self._queue)

    def run(self) -> None:
        """Render queued jobs until the queue is empty or playback is paused."""
        while self._queue and not self._paused:
            self._render(self._queue.popleft())

    def _render(self, job: _Job) -> None:
        index = len(self.rendered)
        voice = job.request.voice_id or FALLBACK_VOICE
        output_path = os.path.join(self.output_dir, f"{index:03d}_{voice}.mp3")
        chunk = RenderedChunk(request=job.request)
        self.rendered.append(chunk)

        print(f"  Rendering chunk {index + 1}: {voice}")
        job.on_start()
        try:
            words = synthesize(job.request.text, voice, output_path, prosody(job.request))
        except Exception as e:
            chunk.error = e
            job.on_error(e)
            return

        chunk.path = output_path
        chunk.boundaries = locate_words(job.request.text, words)
        for _, local_index in chunk.boundaries:
            job.on_word_boundary(local_index)
        job.on_end()
