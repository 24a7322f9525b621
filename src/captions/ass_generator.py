"""ASS subtitle generation with word-by-word karaoke highlighting."""

import logging
from pathlib import Path
from typing import List, Sequence, Tuple

from . import config
from .models import CaptionStyle, Page, RGBColor, SubtitleEvent, WordTiming
from .segmenter import paginate

logger = logging.getLogger(__name__)

# ASS numpad alignment codes, horizontally centered
ALIGNMENT = {"top": 8, "center": 5, "bottom": 2}

BORDER_STYLE_OUTLINE = 1
BORDER_STYLE_BOX = 3

# Drop shadow used when no background box is drawn
SHADOW_COLOR = RGBColor(0, 0, 0)
SHADOW_TRANSPARENCY_PERCENT = 80
SHADOW_DEPTH = 2


def ass_color(color: RGBColor, transparency_percent: float = 0) -> str:
    """Encode a color as &HAABBGGRR (AA = 00 is opaque)."""
    alpha = round(transparency_percent / 100 * 255)
    return f"&H{alpha:02X}{color.b:02X}{color.g:02X}{color.r:02X}"


def ass_inline_color(color: RGBColor) -> str:
    """Encode a color for a \\c override tag (&HBBGGRR&)."""
    return f"&H{color.b:02X}{color.g:02X}{color.r:02X}&"


def format_timestamp(seconds: float) -> str:
    """Format seconds as an ASS timestamp (H:MM:SS.cc)."""
    centiseconds = int(round(max(seconds, 0.0) * 100))
    hours = centiseconds // 360000
    minutes = (centiseconds // 6000) % 60
    secs = (centiseconds // 100) % 60
    return f"{hours}:{minutes:02d}:{secs:02d}.{centiseconds % 100:02d}"


def escape_text(text: str) -> str:
    """Escape ASS control characters in plain text."""
    return text.replace("\\", "\\\\").replace("{", "\\{").replace("}", "\\}")


class CaptionCompiler:
    """Compiles word timings into an ASS document with karaoke highlighting."""

    def __init__(
        self,
        style: CaptionStyle = None,
        play_res_x: int = None,
        play_res_y: int = None,
    ):
        """Initialize compiler.

        Args:
            style: Resolved caption style
            play_res_x: Script width in pixels
            play_res_y: Script height in pixels
        """
        self.style = style or CaptionStyle()
        self.play_res_x = play_res_x or config.PLAY_RES_X
        self.play_res_y = play_res_y or config.PLAY_RES_Y

    def compile(self, words: Sequence[WordTiming]) -> str:
        """Compile words into a complete ASS document.

        Args:
            words: Word timings in display order

        Returns:
            ASS document, or an empty string when there are no words
        """
        if not words:
            return ""
        return self.render(self.build_events(words))

    def render(self, events: Sequence[SubtitleEvent]) -> str:
        """Serialize prebuilt events into a complete ASS document.

        Args:
            events: Events from build_events()

        Returns:
            ASS document, or an empty string when there are no events
        """
        if not events:
            return ""

        lines = [self._generate_header(), "[Events]", self._events_format()]
        lines.extend(self._generate_dialogue(event) for event in events)

        logger.info(f"Compiled {len(events)} subtitle events")
        return "\n".join(lines) + "\n"

    def write(self, words: Sequence[WordTiming], output_path: Path) -> Path:
        """Compile words and save the document.

        Args:
            words: Word timings in display order
            output_path: Path to save ASS file

        Returns:
            Path to generated ASS file
        """
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(self.compile(words), encoding="utf-8")
        return output_path

    def build_events(self, words: Sequence[WordTiming]) -> List[SubtitleEvent]:
        """Build one event per word per page, highlighting that word."""
        events = []
        for page in paginate(words, self.style.words_per_page):
            events.extend(self._page_events(page))
        return events

    def _page_events(self, page: Page) -> List[SubtitleEvent]:
        events = []
        for i, word in enumerate(page.words):
            end = page.words[i + 1].start if i < len(page.words) - 1 else page.end
            if end < word.start:
                logger.warning(
                    f"Word {word.word!r} on page {page.index} overlaps the next word, "
                    f"clamping event end {end} to {word.start}"
                )
                end = word.start

            events.append(
                SubtitleEvent(
                    start=word.start,
                    end=end,
                    rendered_text=self._highlight(page, i),
                    page_index=page.index,
                    highlight_index=i,
                )
            )
        return events

    def _highlight(self, page: Page, active_index: int) -> str:
        """Join the page's words, coloring the active one."""
        highlight = ass_inline_color(self.style.highlight_color)
        base = ass_inline_color(self.style.text_color)

        parts = []
        for i, word in enumerate(page.words):
            text = escape_text(word.word)
            if i == active_index:
                text = f"{{\\c{highlight}}}{text}{{\\c{base}}}"
            parts.append(text)
        return " ".join(parts)

    def _vertical_layout(self) -> Tuple[int, int]:
        """Return (alignment, MarginV) for the style's vertical position."""
        percent = self.style.vertical_position_percent
        position = self.style.position

        if position == "top":
            margin_v = round(percent / 100 * self.play_res_y)
        elif position == "bottom":
            margin_v = round((100 - percent) / 100 * self.play_res_y)
        else:
            # Middle alignment centers vertically and ignores MarginV
            margin_v = 0
        return ALIGNMENT[position], margin_v

    def _style_record(self) -> str:
        style = self.style

        if style.background_color is not None:
            border_style = BORDER_STYLE_BOX
            # libass fills the box with OutlineColour
            box = ass_color(style.background_color, 100 - style.background_opacity_percent)
            outline_color, back_color = box, box
            shadow = 0
        else:
            border_style = BORDER_STYLE_OUTLINE
            outline_color = ass_color(style.outline_color)
            back_color = ass_color(SHADOW_COLOR, SHADOW_TRANSPARENCY_PERCENT)
            shadow = SHADOW_DEPTH

        alignment, margin_v = self._vertical_layout()

        fields = [
            "Default",
            style.font_family,
            style.font_size_pt,
            ass_color(style.text_color),
            ass_color(style.highlight_color),
            outline_color,
            back_color,
            -1 if style.bold else 0,
            -1 if style.italic else 0,
            0,  # Underline
            0,  # StrikeOut
            100,
            100,
            0,
            0,
            border_style,
            style.outline_width_px,
            shadow,
            alignment,
            config.MARGIN_L,
            config.MARGIN_R,
            margin_v,
            1,
        ]
        return "Style: " + ",".join(str(value) for value in fields)

    def _generate_header(self) -> str:
        """Generate ASS file header with the caption style."""
        return f"""[Script Info]
Title: Karaoke Captions
ScriptType: v4.00+
WrapStyle: 0
ScaledBorderAndShadow: yes
YCbCr Matrix: TV.709
PlayResX: {self.play_res_x}
PlayResY: {self.play_res_y}

[V4+ Styles]
Format: Name, Fontname, Fontsize, PrimaryColour, SecondaryColour, OutlineColour, BackColour, Bold, Italic, Underline, StrikeOut, ScaleX, ScaleY, Spacing, Angle, BorderStyle, Outline, Shadow, Alignment, MarginL, MarginR, MarginV, Encoding
{self._style_record()}
"""

    def _events_format(self) -> str:
        return "Format: Layer, Start, End, Style, Name, MarginL, MarginR, MarginV, Effect, Text"

    def _generate_dialogue(self, event: SubtitleEvent) -> str:
        start = format_timestamp(event.start)
        end = format_timestamp(event.end)
        return f"Dialogue: 0,{start},{end},Default,,0,0,0,,{event.rendered_text}"


def compile_captions(words: Sequence[WordTiming], style: CaptionStyle) -> str:
    """Compile words into an ASS document with the given style."""
    return CaptionCompiler(style).compile(words)
