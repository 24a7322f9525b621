"""Exceptions raised by the captions module."""


class CaptionError(Exception):
    """Base class for captioning failures."""


class NoTimingDataAvailable(CaptionError):
    """No strategy could extract a single timed word from the transcription."""


# Older name kept for callers that think in terms of transcripts
NoTranscriptAvailable = NoTimingDataAvailable


class MalformedSegment(CaptionError, ValueError):
    """A word, segment or subtitle entry is missing fields or has end <= start."""
