"""Data models for karaoke captions module."""

import math
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import List, NamedTuple, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .errors import MalformedSegment

HEX_COLOR_RE = re.compile(r"^#?([0-9a-fA-F]{6})$")


@dataclass(frozen=True)
class WordTiming:
    """One spoken word with its start/end offsets in seconds."""

    word: str
    start: float
    end: float

    def __post_init__(self):
        if not self.word or any(ch.isspace() for ch in self.word):
            raise MalformedSegment(f"Invalid word text: {self.word!r}")
        if not (math.isfinite(self.start) and math.isfinite(self.end)):
            raise MalformedSegment(
                f"Non-finite timing for {self.word!r}: {self.start} -> {self.end}"
            )
        if self.start < 0:
            raise MalformedSegment(f"Negative start for {self.word!r}: {self.start}")
        if self.end <= self.start:
            raise MalformedSegment(
                f"Word {self.word!r} ends before it starts ({self.start} -> {self.end})"
            )

    @property
    def duration(self) -> float:
        return self.end - self.start


@dataclass(frozen=True)
class TimedSegment:
    """A phrase-level span of transcribed text."""

    start: float
    end: float
    text: str


@dataclass
class TranscriptionSource:
    """Provider-agnostic transcription data, in order of timing precision."""

    words: List[WordTiming] = field(default_factory=list)  # Exact word timestamps
    segments: List[TimedSegment] = field(default_factory=list)
    srt: Optional[str] = None
    text: str = ""
    duration: Optional[float] = None  # Audio duration in seconds, if known


class TimingStrategy(str, Enum):
    """How word timings were obtained."""

    EXACT = "exact"
    SEGMENTS = "segments"
    SRT = "srt"
    TEXT = "text"


@dataclass(frozen=True)
class Page:
    """Words shown on screen together."""

    index: int
    words: Tuple[WordTiming, ...]

    @property
    def start(self) -> float:
        return self.words[0].start

    @property
    def end(self) -> float:
        return self.words[-1].end


@dataclass(frozen=True)
class SubtitleEvent:
    """A single timed line with one highlighted word."""

    start: float
    end: float
    rendered_text: str
    page_index: int
    highlight_index: int


@dataclass
class CaptionResult:
    """Result from caption generation."""

    success: bool
    document: str
    word_count: int
    event_count: int
    strategy: Optional[TimingStrategy] = None
    warning: Optional[str] = None


class RGBColor(NamedTuple):
    """24-bit color."""

    r: int
    g: int
    b: int

    @classmethod
    def from_hex(cls, value: str) -> "RGBColor":
        match = HEX_COLOR_RE.match(value.strip())
        if not match:
            raise ValueError(f"Invalid hex color: {value!r}")
        digits = match.group(1)
        return cls(int(digits[0:2], 16), int(digits[2:4], 16), int(digits[4:6], 16))

    def to_hex(self) -> str:
        return f"#{self.r:02X}{self.g:02X}{self.b:02X}"


def _coerce_color(value):
    if isinstance(value, str):
        return RGBColor.from_hex(value)
    return value


class CaptionStyle(BaseModel):
    """Resolved visual configuration for one compile call."""

    model_config = ConfigDict(frozen=True)

    font_family: str = Field(default="Arial", min_length=1)
    font_size_pt: int = Field(default=48, ge=24, le=80)
    text_color: RGBColor = RGBColor(255, 255, 255)
    highlight_color: RGBColor = RGBColor(255, 255, 0)
    outline_color: RGBColor = RGBColor(0, 0, 0)
    background_color: Optional[RGBColor] = None  # None = transparent
    background_opacity_percent: int = Field(default=60, ge=0, le=100)
    outline_width_px: int = Field(default=3, ge=0)
    bold: bool = True
    italic: bool = False
    words_per_page: int = Field(default=4, ge=1)
    vertical_position_percent: float = Field(default=70.0, ge=0, le=100)

    @field_validator("text_color", "highlight_color", "outline_color", mode="before")
    @classmethod
    def _parse_color(cls, value):
        return _coerce_color(value)

    @field_validator("background_color", mode="before")
    @classmethod
    def _parse_background(cls, value):
        if value is None or value == "":
            return None
        return _coerce_color(value)

    @field_validator("text_color", "highlight_color", "outline_color", "background_color")
    @classmethod
    def _check_channels(cls, value):
        if value is not None and not all(0 <= channel <= 255 for channel in value):
            raise ValueError(f"Color channels must be 0-255: {value}")
        return value

    @property
    def position(self) -> str:
        """Named position derived from the vertical percent."""
        from .styles import percent_to_position

        return percent_to_position(self.vertical_position_percent)

    def with_position(self, position: str) -> "CaptionStyle":
        """Return a copy anchored at a named position."""
        from .styles import position_to_percent

        return self.with_vertical_position(position_to_percent(position))

    def with_vertical_position(self, percent: float) -> "CaptionStyle":
        """Return a copy at an explicit vertical percent (0 = top, 100 = bottom)."""
        data = self.model_dump()
        data["vertical_position_percent"] = percent
        return CaptionStyle(**data)
