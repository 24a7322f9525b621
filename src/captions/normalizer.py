"""Normalization of transcription provider responses.

Every provider shape is mapped onto a single TranscriptionSource here, so the
timing algorithms never look at provider field names.
"""

import logging
import math
import re
import unicodedata
from typing import Any, Iterable, List, Optional, Union

from .errors import MalformedSegment
from .models import TimedSegment, TranscriptionSource, WordTiming

logger = logging.getLogger(__name__)

SRT_TIMECODE_RE = re.compile(r"\d{1,2}:\d{2}:\d{2}[,.]\d{3}\s*-->")

# Edge TTS reports offsets in 100-nanosecond ticks
TICKS_PER_SECOND = 10_000_000


class TextNormalizer:
    """Cleans transcript text before it is split into words."""

    def __init__(self, strip_control_chars: bool = True, collapse_whitespace: bool = True):
        self.strip_control_chars = strip_control_chars
        self.collapse_whitespace = collapse_whitespace

    def normalize(self, text: str) -> str:
        """Normalize transcript text.

        Args:
            text: Raw transcript text

        Returns:
            Cleaned text
        """
        result = text

        if self.strip_control_chars:
            result = "".join(
                ch for ch in result if unicodedata.category(ch)[0] != "C" or ch in "\n\t"
            )

        if self.collapse_whitespace:
            result = re.sub(r"\s+", " ", result).strip()

        return result

    def split_words(self, text: str) -> List[str]:
        """Split text on whitespace into non-empty words."""
        return self.normalize(text).split()


def _is_number(value: Any) -> bool:
    return (
        isinstance(value, (int, float))
        and not isinstance(value, bool)
        and math.isfinite(value)
    )


def _word_text(entry: dict) -> Optional[str]:
    for key in ("word", "text"):
        value = entry.get(key)
        if isinstance(value, str) and value.strip():
            return value.strip()
    return None


def _parse_word(entry: Any) -> Optional[WordTiming]:
    """Map one provider word object onto a WordTiming, or None if unusable."""
    if not isinstance(entry, dict):
        return None

    # ElevenLabs interleaves "spacing" and "audio_event" entries with words
    entry_type = entry.get("type")
    if entry_type == "WordBoundary":
        offset, duration = entry.get("offset"), entry.get("duration")
        if not (_is_number(offset) and _is_number(duration)):
            return None
        start = offset / TICKS_PER_SECOND
        end = (offset + duration) / TICKS_PER_SECOND
    elif entry_type not in (None, "word"):
        return None
    else:
        start, end = entry.get("start"), entry.get("end")
        if not (_is_number(start) and _is_number(end)):
            return None

    text = _word_text(entry)
    if text is None:
        return None

    try:
        return WordTiming(word=text, start=float(start), end=float(end))
    except MalformedSegment as e:
        logger.debug(f"Skipping word entry: {e}")
        return None


def extract_words(entries: Iterable[Any]) -> List[WordTiming]:
    """Extract valid word timings from a list of provider word objects."""
    words = []
    for entry in entries:
        word = _parse_word(entry)
        if word is not None:
            words.append(word)
    return words


def extract_segments(entries: Iterable[Any]) -> List[TimedSegment]:
    """Extract phrase segments, keeping only entries with text and numeric bounds."""
    segments = []
    for entry in entries:
        if not isinstance(entry, dict):
            continue
        start, end, text = entry.get("start"), entry.get("end"), entry.get("text")
        if not (_is_number(start) and _is_number(end) and isinstance(text, str)):
            continue
        segments.append(TimedSegment(start=float(start), end=float(end), text=text))
    return segments


def _extract_nested_words(segments: Iterable[Any]) -> List[WordTiming]:
    words = []
    for segment in segments:
        if isinstance(segment, dict) and isinstance(segment.get("words"), list):
            words.extend(extract_words(segment["words"]))
    return words


def _unwrap(payload: dict) -> dict:
    """Strip job envelopes such as {"data": {"outputs": [...]}}."""
    data = payload.get("data")
    if isinstance(data, dict):
        payload = data
    outputs = payload.get("outputs")
    if isinstance(outputs, list) and outputs and isinstance(outputs[0], dict):
        payload = outputs[0]
    return payload


def _from_list(entries: list) -> TranscriptionSource:
    if any(isinstance(e, dict) and isinstance(e.get("words"), list) for e in entries):
        return TranscriptionSource(
            words=_extract_nested_words(entries),
            segments=extract_segments(entries),
        )

    is_phrase_list = any(
        isinstance(e, dict)
        and isinstance(e.get("text"), str)
        and len(e["text"].split()) > 1
        for e in entries
    )
    if is_phrase_list:
        return TranscriptionSource(segments=extract_segments(entries))
    return TranscriptionSource(words=extract_words(entries))


def _from_dict(payload: dict) -> TranscriptionSource:
    output = _unwrap(payload)

    words = []
    if isinstance(output.get("words"), list):
        words = extract_words(output["words"])
    if not words and isinstance(output.get("segments"), list):
        words = _extract_nested_words(output["segments"])

    segments = []
    for key in ("text_details", "segments"):
        if isinstance(output.get(key), list):
            segments = extract_segments(output[key])
            if segments:
                break

    srt = output.get("srt") if isinstance(output.get("srt"), str) else None
    text = output.get("text") if isinstance(output.get("text"), str) else ""
    duration = output.get("duration")

    return TranscriptionSource(
        words=words,
        segments=segments,
        srt=srt,
        text=text,
        duration=float(duration) if _is_number(duration) and duration > 0 else None,
    )


def normalize_transcription(
    payload: Union[TranscriptionSource, dict, list, str],
) -> TranscriptionSource:
    """Convert a provider response into a TranscriptionSource.

    Accepted shapes: OpenAI verbose JSON, WaveSpeed Whisper responses (with
    or without the job envelope), ElevenLabs word lists, Edge TTS
    WordBoundary events, bare word or segment lists, SRT text and plain text.

    Args:
        payload: Decoded provider response

    Returns:
        Canonical transcription source
    """
    if isinstance(payload, TranscriptionSource):
        return payload
    if isinstance(payload, str):
        if SRT_TIMECODE_RE.search(payload):
            return TranscriptionSource(srt=payload)
        return TranscriptionSource(text=payload)
    if isinstance(payload, list):
        return _from_list(payload)
    if isinstance(payload, dict):
        return _from_dict(payload)
    raise TypeError(f"Unsupported transcription payload: {type(payload).__name__}")
