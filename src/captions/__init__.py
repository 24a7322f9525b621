"""Karaoke Captions Module

Derives word timings from transcriptions and compiles them into ASS
subtitles with word-by-word highlighting.
"""

from .ass_generator import CaptionCompiler, compile_captions
from .errors import CaptionError, MalformedSegment, NoTimingDataAvailable, NoTranscriptAvailable
from .models import (
    CaptionResult,
    CaptionStyle,
    Page,
    RGBColor,
    SubtitleEvent,
    TimedSegment,
    TimingStrategy,
    TranscriptionSource,
    WordTiming,
)
from .pipeline import CaptionPipeline
from .resolver import WordTimingResolver
from .styles import CAPTION_PRESETS, get_preset, percent_to_position, position_to_percent

__all__ = [
    "CaptionCompiler",
    "compile_captions",
    "CaptionError",
    "MalformedSegment",
    "NoTimingDataAvailable",
    "NoTranscriptAvailable",
    "CaptionResult",
    "CaptionStyle",
    "Page",
    "RGBColor",
    "SubtitleEvent",
    "TimedSegment",
    "TimingStrategy",
    "TranscriptionSource",
    "WordTiming",
    "CaptionPipeline",
    "WordTimingResolver",
    "CAPTION_PRESETS",
    "get_preset",
    "percent_to_position",
    "position_to_percent",
]
