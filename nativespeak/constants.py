"""All magic numbers and configuration constants."""

ASCII_TERMINATORS = ".!?"                    # boundary only when followed by whitespace or end of text
FULLWIDTH_TERMINATORS = "。！？"              # always a boundary
LINE_BREAKS = "\n\r"
SENTENCE_TERMINATORS = ASCII_TERMINATORS + FULLWIDTH_TERMINATORS + LINE_BREAKS

# Colloquial Cantonese characters that never appear in standard written Mandarin
CANTONESE_MARKERS = frozenset("係唔佢嘅冇睇咗嚟喺哋俾諗乜嘢咁喎")

CANTONESE_TAGS = frozenset({"zh-hk", "zh-yue", "yue"})
MANDARIN_TAG_PREFIXES = ("zh", "cmn")
JAPANESE_TAG_PREFIX = "ja"
ENGLISH_TAG_PREFIX = "en"

DEFAULT_VOICE_MARKER = "meijia"              # high-quality zh-TW voice preferred as the initial default

RATE_RANGE = (0.5, 3.0)
PITCH_RANGE = (0.5, 2.0)
VOLUME_RANGE = (0.0, 1.0)
DEFAULT_RATE = 1.0
DEFAULT_PITCH = 1.0
DEFAULT_VOLUME = 1.0

FALLBACK_VOICE = "en-US-AriaNeural"          # edge-tts voice used when a request carries none
EDGE_PITCH_HZ_PER_UNIT = 100                 # pitch 1.2 -> "+20Hz"
EDGE_TICKS_PER_MS = 10_000                   # WordBoundary offsets are in 100 ns ticks
TTS_RETRY_COUNT = 3                          # max retries per chunk
TTS_RETRY_BASE_DELAY = 1.0                   # seconds — base delay for exponential backoff

CHUNK_PAUSE_MS = 150                         # silence inserted between exported chunks
OUTPUT_FORMAT = "mp3"
OUTPUT_BITRATE = "192k"
OUTPUT_DIR = "output"
TIMELINE_FILENAME = "timeline.json"
VERSION = "0.1.0"
