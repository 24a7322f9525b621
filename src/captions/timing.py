"""Word timing estimation from coarse transcription data."""

import logging
import re
from typing import Iterable, List, Optional

from . import config
from .errors import MalformedSegment
from .models import TimedSegment, WordTiming
from .normalizer import TextNormalizer

logger = logging.getLogger(__name__)

TIMECODE_RE = re.compile(r"(\d{1,2}):(\d{2}):(\d{2})[,.](\d{3})")
CUE_TIMING_RE = re.compile(
    r"(\d{1,2}:\d{2}:\d{2}[,.]\d{3})\s*-->\s*(\d{1,2}:\d{2}:\d{2}[,.]\d{3})"
)
BLOCK_SEPARATOR_RE = re.compile(r"\n\s*\n")

_normalizer = TextNormalizer()


def _round(seconds: float) -> float:
    return round(seconds, config.TIME_PRECISION)


def distribute_words(words: List[str], start: float, end: float) -> List[WordTiming]:
    """Spread a span across words in proportion to (length + 1).

    The +1 keeps one-character tokens from getting a near-zero slot. The
    cursor is kept unrounded and only the emitted values are rounded, so
    consecutive words share a boundary and the last word ends exactly at
    ``end``.

    Args:
        words: Words spoken within the span, in order
        start: Span start in seconds
        end: Span end in seconds

    Returns:
        One WordTiming per word

    Raises:
        MalformedSegment: If the span is empty or reversed
    """
    if not words:
        return []
    if end <= start:
        raise MalformedSegment(f"Span has no duration: {start} -> {end}")

    duration = end - start
    weights = [len(word) + 1 for word in words]
    total_weight = sum(weights)

    timings = []
    cursor = start
    for i, word in enumerate(words):
        word_end = end if i == len(words) - 1 else cursor + duration * weights[i] / total_weight
        word_start_r, word_end_r = _round(cursor), _round(word_end)
        if word_end_r > word_start_r:
            timings.append(WordTiming(word=word, start=word_start_r, end=word_end_r))
        else:
            logger.debug(f"Word {word!r} collapsed to zero length after rounding")
        cursor = word_end

    return timings


def estimate_from_segments(segments: Iterable[TimedSegment]) -> List[WordTiming]:
    """Estimate word timings from phrase-level segments, skipping malformed ones."""
    timings = []
    for segment in segments:
        words = _normalizer.split_words(segment.text or "")
        if not words:
            continue
        try:
            timings.extend(distribute_words(words, segment.start, segment.end))
        except MalformedSegment as e:
            logger.debug(f"Skipping segment {segment.text!r}: {e}")
    return timings


def parse_timecode(value: str) -> float:
    """Convert an SRT timecode (HH:MM:SS,mmm or HH:MM:SS.mmm) to seconds."""
    match = TIMECODE_RE.fullmatch(value.strip())
    if not match:
        raise MalformedSegment(f"Invalid timecode: {value!r}")
    hours, minutes, seconds, millis = (int(group) for group in match.groups())
    if minutes > 59 or seconds > 59:
        raise MalformedSegment(f"Timecode field out of range: {value!r}")
    return hours * 3600 + minutes * 60 + seconds + millis / 1000


def parse_srt(srt: str) -> List[TimedSegment]:
    """Parse SRT text into segments.

    Blocks without a valid timing line are skipped; the remaining blocks
    are still returned.

    Args:
        srt: SRT document text

    Returns:
        Segments in document order
    """
    segments = []
    blocks = BLOCK_SEPARATOR_RE.split(srt.replace("\r\n", "\n").strip())

    for block in blocks:
        lines = [line.strip() for line in block.strip().split("\n")]
        # The index line is optional in some providers' output
        if lines and CUE_TIMING_RE.search(lines[0]):
            timing_line, text_lines = lines[0], lines[1:]
        elif len(lines) >= 3:
            timing_line, text_lines = lines[1], lines[2:]
        else:
            logger.debug(f"Skipping incomplete SRT block: {block!r}")
            continue

        match = CUE_TIMING_RE.search(timing_line)
        try:
            if not match:
                raise MalformedSegment(f"Invalid timing line: {timing_line!r}")
            start = parse_timecode(match.group(1))
            end = parse_timecode(match.group(2))
        except MalformedSegment as e:
            logger.debug(f"Skipping SRT block: {e}")
            continue

        segments.append(TimedSegment(start=start, end=end, text=" ".join(text_lines).strip()))

    return segments


def estimate_from_srt(srt: str) -> List[WordTiming]:
    """Estimate word timings from an SRT document."""
    return estimate_from_segments(parse_srt(srt))


def estimate_from_text(text: str, words_per_minute: float = None) -> List[WordTiming]:
    """Estimate word timings for untimed text at a fixed speaking rate.

    Args:
        text: Transcript text
        words_per_minute: Assumed speaking rate (defaults to config)

    Returns:
        Word timings spanning [0, word_count / rate * 60]
    """
    rate = config.WORDS_PER_MINUTE if words_per_minute is None else words_per_minute
    if rate <= 0:
        raise ValueError(f"Speaking rate must be positive: {rate}")

    words = _normalizer.split_words(text or "")
    if not words:
        return []

    estimated_duration = len(words) / rate * 60
    return distribute_words(words, 0.0, estimated_duration)


def sanitize(words: List[WordTiming], duration: Optional[float] = None) -> List[WordTiming]:
    """Enforce non-overlapping order and clamp to the audio duration.

    Overlapping starts are pulled forward to the previous word's end. Words
    left with no duration are dropped. Both cases are logged as warnings.

    Args:
        words: Word timings in display order
        duration: Known audio duration in seconds, if any

    Returns:
        Cleaned word timings
    """
    cleaned: List[WordTiming] = []

    for word in words:
        start, end = word.start, word.end

        if duration is not None:
            if start >= duration:
                logger.warning(f"Dropping {word.word!r}: starts after audio end ({duration}s)")
                continue
            end = min(end, duration)

        if cleaned and start < cleaned[-1].end:
            logger.warning(
                f"Overlapping timing for {word.word!r}: start {start} < previous end "
                f"{cleaned[-1].end}, clamping"
            )
            start = cleaned[-1].end

        if end <= start:
            logger.warning(f"Dropping {word.word!r}: no duration left after clamping")
            continue

        if (start, end) != (word.start, word.end):
            word = WordTiming(word=word.word, start=start, end=end)
        cleaned.append(word)

    return cleaned
