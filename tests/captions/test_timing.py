"""Tests for word timing estimation."""

import pytest

from src.captions.errors import MalformedSegment
from src.captions.models import TimedSegment, WordTiming
from src.captions.timing import (
    distribute_words,
    estimate_from_segments,
    estimate_from_srt,
    estimate_from_text,
    parse_srt,
    parse_timecode,
    sanitize,
)

SRT_WITH_BROKEN_ENTRY = """1
00:00:00,000 --> 00:00:02,000
hello world

2
00:00:xx,000 --> 00:00:04,000
broken entry

3
00:00:04,000 --> 00:00:06,500
good bye
"""


def test_distribute_weights_by_length_plus_one():
    """Test durations are proportional to (length + 1)."""
    words = distribute_words(["abc", "d", "efghijk"], 0.0, 11.0)

    durations = [w.end - w.start for w in words]
    expected = [11 * 4 / 14, 11 * 2 / 14, 11 * 8 / 14]

    for actual, wanted in zip(durations, expected):
        assert actual == pytest.approx(wanted, abs=1e-3)


def test_distribute_covers_span_exactly():
    """Test first word starts at span start and last ends at span end."""
    words = distribute_words(["a", "bb", "ccc"], 1.25, 4.75)

    assert words[0].start == 1.25
    assert words[-1].end == 4.75


def test_distribute_words_are_contiguous():
    """Test consecutive words share their boundary after rounding."""
    words = distribute_words(["one", "two", "three", "four", "five"], 0.0, 3.0)

    for prev, nxt in zip(words, words[1:]):
        assert prev.end == nxt.start


def test_distribute_rounds_to_milliseconds():
    """Test computed times carry at most three decimals."""
    words = distribute_words(["abc", "d", "efghijk"], 0.0, 11.0)

    for word in words:
        assert round(word.start, 3) == word.start
        assert round(word.end, 3) == word.end


def test_distribute_empty_span_raises():
    """Test a span with end <= start is malformed."""
    with pytest.raises(MalformedSegment):
        distribute_words(["hello"], 2.0, 2.0)

    with pytest.raises(MalformedSegment):
        distribute_words(["hello"], 3.0, 2.0)


def test_distribute_no_words():
    """Test distributing zero words."""
    assert distribute_words([], 0.0, 1.0) == []


def test_estimate_from_segments_hello_world():
    """Test even-length words split a segment in half."""
    words = estimate_from_segments([TimedSegment(start=0.0, end=2.0, text="hello world")])

    assert words == [
        WordTiming(word="hello", start=0.0, end=1.0),
        WordTiming(word="world", start=1.0, end=2.0),
    ]


def test_estimate_from_segments_skips_malformed():
    """Test a segment with no duration is skipped and the rest kept."""
    segments = [
        TimedSegment(start=0.0, end=1.0, text="first"),
        TimedSegment(start=1.0, end=1.0, text="broken"),
        TimedSegment(start=1.0, end=2.0, text="last"),
    ]

    words = estimate_from_segments(segments)

    assert [w.word for w in words] == ["first", "last"]


def test_estimate_from_segments_each_ends_at_segment_end():
    """Test the last word of each segment ends at that segment's end."""
    segments = [
        TimedSegment(start=0.0, end=1.7, text="the quick brown"),
        TimedSegment(start=2.0, end=3.3, text="fox jumps"),
    ]

    words = estimate_from_segments(segments)

    assert words[2].end == 1.7
    assert words[3].start == 2.0
    assert words[4].end == 3.3


def test_parse_timecode():
    """Test SRT timecode conversion."""
    assert parse_timecode("00:00:00,000") == 0.0
    assert parse_timecode("01:02:03,450") == pytest.approx(3723.45)
    assert parse_timecode("00:00:01.500") == pytest.approx(1.5)

    with pytest.raises(MalformedSegment):
        parse_timecode("00:00:xx,000")


def test_parse_srt_skips_broken_entry():
    """Test a block with an unparseable timing line does not stop parsing."""
    segments = parse_srt(SRT_WITH_BROKEN_ENTRY)

    assert len(segments) == 2
    assert segments[0] == TimedSegment(start=0.0, end=2.0, text="hello world")
    assert segments[1].start == 4.0
    assert segments[1].end == 6.5


def test_parse_srt_joins_text_lines():
    """Test multi-line cue text is joined with spaces."""
    srt = "1\r\n00:00:01,000 --> 00:00:03,000\r\nfirst line\r\nsecond line\r\n"

    segments = parse_srt(srt)

    assert segments[0].text == "first line second line"


def test_parse_srt_without_index_line():
    """Test cues that omit the sequence number."""
    srt = "00:00:00,000 --> 00:00:01,000\nhi there\n"

    segments = parse_srt(srt)

    assert segments == [TimedSegment(start=0.0, end=1.0, text="hi there")]


def test_estimate_from_srt():
    """Test SRT estimation yields words for all well-formed entries."""
    words = estimate_from_srt(SRT_WITH_BROKEN_ENTRY)

    assert [w.word for w in words] == ["hello", "world", "good", "bye"]
    assert words[2].start == 4.0
    assert words[2].end == pytest.approx(4.0 + 2.5 * 5 / 9, abs=1e-3)
    assert words[3].end == 6.5


def test_estimate_from_text_default_rate():
    """Test plain text is spread at 150 words per minute."""
    words = estimate_from_text("one two three", words_per_minute=150)

    assert len(words) == 3
    assert words[0].start == 0.0
    assert words[-1].end == pytest.approx(1.2)


def test_estimate_from_text_custom_rate():
    """Test a slower rate stretches the estimate."""
    words = estimate_from_text("one two three", words_per_minute=60)

    assert words[-1].end == pytest.approx(3.0)


def test_estimate_from_text_more_words_take_longer():
    """Test estimated duration grows with word count."""
    short = estimate_from_text("a b", words_per_minute=150)
    long = estimate_from_text("a b c d", words_per_minute=150)

    assert long[-1].end > short[-1].end


def test_estimate_from_text_empty():
    """Test whitespace-only text yields no words."""
    assert estimate_from_text("   \n ", words_per_minute=150) == []


def test_estimate_from_text_invalid_rate():
    """Test non-positive rates are rejected."""
    with pytest.raises(ValueError):
        estimate_from_text("hello", words_per_minute=0)


def test_sanitize_clamps_overlap():
    """Test an overlapping start is moved to the previous end."""
    words = [
        WordTiming(word="a", start=0.0, end=1.0),
        WordTiming(word="b", start=0.8, end=1.5),
    ]

    cleaned = sanitize(words)

    assert cleaned[1] == WordTiming(word="b", start=1.0, end=1.5)


def test_sanitize_drops_fully_overlapped_word():
    """Test a word with no duration left after clamping is dropped."""
    words = [
        WordTiming(word="a", start=0.0, end=1.0),
        WordTiming(word="b", start=0.5, end=0.9),
        WordTiming(word="c", start=1.0, end=1.2),
    ]

    cleaned = sanitize(words)

    assert [w.word for w in cleaned] == ["a", "c"]


def test_sanitize_clamps_to_duration():
    """Test words are clamped to the known audio duration."""
    words = [
        WordTiming(word="a", start=0.0, end=1.0),
        WordTiming(word="b", start=1.0, end=2.5),
        WordTiming(word="c", start=2.5, end=3.0),
    ]

    cleaned = sanitize(words, duration=2.0)

    assert [w.word for w in cleaned] == ["a", "b"]
    assert cleaned[-1].end == 2.0


def test_sanitize_keeps_clean_input():
    """Test already valid input passes through unchanged."""
    words = distribute_words(["clean", "input"], 0.0, 1.0)

    assert sanitize(words) == words


def test_parse_timecode_out_of_range():
    """Test minutes or seconds above 59 are malformed."""
    with pytest.raises(MalformedSegment):
        parse_timecode("00:99:00,000")

    with pytest.raises(MalformedSegment):
        parse_timecode("00:00:60,000")


def test_parse_srt_skips_out_of_range_entry():
    """Test a cue with an impossible timecode is skipped."""
    srt = (
        "1\n00:99:99,000 --> 01:00:00,000\nbroken\n\n"
        "2\n00:00:01,000 --> 00:00:02,000\nkept\n"
    )

    segments = parse_srt(srt)

    assert segments == [TimedSegment(start=1.0, end=2.0, text="kept")]
