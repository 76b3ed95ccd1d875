"""In-memory test doubles and voice descriptors shared by the test modules."""

from dataclasses import dataclass
from typing import Callable

from nativespeak.models import SpeechRequest, VoiceDescriptor


def voice(voice_id: str, tag: str, gender: str = "", **kwargs) -> VoiceDescriptor:
    """Edge-style descriptor: display name carries the gender word when given."""
    name = f"{voice_id} - {gender}" if gender else voice_id
    return VoiceDescriptor(id=voice_id, language_tag=tag, display_name=name, **kwargs)


XIAOXIAO = voice("zh-CN-XiaoxiaoNeural", "zh-CN", "Female")
YUNXI = voice("zh-CN-YunxiNeural", "zh-CN", "Male")
HIUGAAI = voice("zh-HK-HiuGaaiNeural", "zh-HK", "Female")
WANLUNG = voice("zh-HK-WanLungNeural", "zh-HK", "Male")
NANAMI = voice("ja-JP-NanamiNeural", "ja-JP", "Female")
KEITA = voice("ja-JP-KeitaNeural", "ja-JP", "Male")
ARIA = voice("en-US-AriaNeural", "en-US", "Female", is_platform_default=True)
GUY = voice("en-US-GuyNeural", "en-US", "Male")


@dataclass
class Submission:
    request: SpeechRequest
    on_start: Callable[[], None]
    on_word_boundary: Callable[[int], None]
    on_end: Callable[[], None]
    on_error: Callable[[Exception], None]


class FakeBackend:
    """In-memory speech backend; tests fire the callbacks by hand."""

    def __init__(self, voices=None):
        self.voices = list(voices or [])
        self.submissions: list[Submission] = []
        self.calls: list[str] = []
        self._subscribers = []

    def list_voices(self):
        return list(self.voices)

    def subscribe_voices_changed(self, callback):
        self._subscribers.append(callback)

    def set_voices(self, voices):
        self.voices = list(voices)
        for callback in self._subscribers:
            callback()

    def submit(self, request, on_start, on_word_boundary, on_end, on_error):
        self.submissions.append(Submission(request, on_start, on_word_boundary, on_end, on_error))

    def pause(self):
        self.calls.append("pause")

    def resume(self):
        self.calls.append("resume")

    def cancel_all(self):
        self.calls.append("cancel_all")
