"""Sequential playback of chunks through an external speech backend."""

import logging
from dataclasses import dataclass
from functools import partial
from typing import Callable, Protocol

from nativespeak.language import label_segments
from nativespeak.models import (
    PlaybackState,
    PlaybackStatus,
    Segment,
    Settings,
    SpeechRequest,
)
from nativespeak.sanitizer import sanitize, to_source_index
from nativespeak.segmenter import segment_text
from nativespeak.voices import VoiceCatalog, route_voice

logger = logging.getLogger(__name__)


class SpeechBackend(Protocol):
    """What the sequencer needs from a speech engine.

    submit() is fire-and-forget and must deliver exactly one terminal
    notification (on_end or on_error) per request.
    """

    def list_voices(self) -> list: ...

    def subscribe_voices_changed(self, callback: Callable[[], None]) -> None: ...

    def submit(
        self,
        request: SpeechRequest,
        on_start: Callable[[], None],
        on_word_boundary: Callable[[int], None],
        on_end: Callable[[], None],
        on_error: Callable[[Exception], None],
    ) -> None: ...

    def pause(self) -> None: ...

    def resume(self) -> None: ...

    def cancel_all(self) -> None: ...


@dataclass(frozen=True, eq=False)
class _ChunkToken:
    """Identity of one submission; compared with `is`."""
    generation: int
    index: int


class PlaybackSequencer:
    """Drive one speaking session at a time, chunk by chunk.

    Listeners receive a fresh PlaybackState on every transition and every
    word boundary. Notifications carrying a token other than the active
    one are stale (superseded by cancel or a new speak) and are dropped.
    """

    def __init__(self, backend: SpeechBackend, catalog: VoiceCatalog | None = None):
        self._backend = backend
        self.catalog = catalog if catalog is not None else VoiceCatalog.bind(backend)
        self._listeners: list[Callable[[PlaybackState], None]] = []
        self._segments: list[Segment] = []
        self._settings = Settings()
        self._generation = 0
        self._active: _ChunkToken | None = None
        self._pending: int | None = None
        self._draining = False
        self.state = PlaybackState()

    def add_listener(self, listener: Callable[[PlaybackState], None]) -> None:
        self._listeners.append(listener)

    @property
    def segments(self) -> list[Segment]:
        return list(self._segments)

    def _set_state(self, status: PlaybackStatus, char_index: int) -> None:
        self.state = PlaybackState(status=status, char_index=char_index)
        for listener in self._listeners:
            listener(self.state)

    # --- Commands ---

    def speak(self, text: str, settings: Settings | None = None) -> list[Segment]:
        """Cancel any current session and start speaking text.

        Returns the labelled segments of the new session (empty for blank text).
        """
        self.cancel()
        segments = label_segments(segment_text(text))
        if not segments:
            return []
        self._segments = segments
        self._settings = settings or Settings()
        self._advance_to(0)
        return list(segments)

    def pause(self) -> None:
        if self.state.status is not PlaybackStatus.SPEAKING:
            return
        self._backend.pause()
        self._set_state(PlaybackStatus.PAUSED, self.state.char_index)

    def resume(self) -> None:
        if self.state.status is not PlaybackStatus.PAUSED:
            return
        self._backend.resume()
        self._set_state(PlaybackStatus.SPEAKING, self.state.char_index)

    def cancel(self) -> None:
        """Stop everything. Safe from any state."""
        self._backend.cancel_all()
        self._segments = []
        self._active = None
        self._pending = None
        self.state = PlaybackState()
        for listener in self._listeners:
            listener(self.state)

    # --- Chunk submission ---

    def _advance_to(self, index: int) -> None:
        """Queue index for playback, unwinding synchronous callbacks in a loop."""
        self._pending = index
        if self._draining:
            return
        self._draining = True
        try:
            while self._pending is not None:
                next_index, self._pending = self._pending, None
                self._play(next_index)
        finally:
            self._draining = False

    def _play(self, index: int) -> None:
        if index >= len(self._segments):
            self._segments = []
            self._active = None
            self._set_state(PlaybackStatus.IDLE, -1)
            return

        segment = self._segments[index]
        # Routed per chunk: the catalog may have been refreshed since the last one.
        voice = route_voice(segment.language, self.catalog.voices, self.catalog.user_voice)
        request = SpeechRequest(
            text=sanitize(segment.text, segment.language),
            voice_id=voice.id if voice else None,
            rate=self._settings.rate,
            pitch=self._settings.pitch,
            volume=self._settings.volume,
        )

        self._generation += 1
        token = _ChunkToken(generation=self._generation, index=index)
        self._active = token
        logger.debug(
            "Chunk %d @%d [%s] → %s", index, segment.offset, segment.language.value, request.voice_id,
        )
        try:
            self._backend.submit(
                request,
                on_start=partial(self._on_start, token),
                on_word_boundary=partial(self._on_word_boundary, token),
                on_end=partial(self._on_end, token),
                on_error=partial(self._on_error, token),
            )
        except Exception as e:
            self._on_error(token, e)

    # --- Backend notifications ---

    def _is_current(self, token: _ChunkToken) -> bool:
        if token is not self._active:
            logger.debug("Dropping stale notification for chunk %d (generation %d)", token.index, token.generation)
            return False
        return True

    def _on_start(self, token: _ChunkToken) -> None:
        if not self._is_current(token):
            return
        status = PlaybackStatus.PAUSED if self.state.is_paused else PlaybackStatus.SPEAKING
        self._set_state(status, self._segments[token.index].offset)

    def _on_word_boundary(self, token: _ChunkToken, local_index: int) -> None:
        if not self._is_current(token):
            return
        segment = self._segments[token.index]
        local_index = to_source_index(segment.text, segment.language, local_index)
        local_index = min(max(local_index, 0), max(len(segment.text) - 1, 0))
        status = self.state.status
        if status is PlaybackStatus.IDLE:
            status = PlaybackStatus.SPEAKING
        self._set_state(status, segment.offset + local_index)

    def _on_end(self, token: _ChunkToken) -> None:
        if not self._is_current(token):
            return
        self._advance_to(token.index + 1)

    def _on_error(self, token: _ChunkToken, error: Exception) -> None:
        if not self._is_current(token):
            return
        segment = self._segments[token.index]
        logger.warning("Chunk %d at offset %d failed, skipping: %s", token.index, segment.offset, error)
        self._advance_to(token.index + 1)
