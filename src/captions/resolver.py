"""Word timing resolution with fallback estimators."""

import logging
from typing import List, Tuple, Union

from . import config
from .errors import NoTimingDataAvailable
from .models import TimingStrategy, TranscriptionSource, WordTiming
from .normalizer import normalize_transcription
from .timing import estimate_from_segments, estimate_from_srt, estimate_from_text, sanitize

logger = logging.getLogger(__name__)


class WordTimingResolver:
    """Produces per-word timings from the most precise data available.

    Strategies are tried in order: exact provider timestamps, segment
    estimation, SRT estimation, then an even split of plain text at a fixed
    speaking rate. The first strategy that yields any words wins.
    """

    def __init__(self, words_per_minute: float = None):
        """Initialize resolver.

        Args:
            words_per_minute: Speaking rate for the plain-text fallback
        """
        self.words_per_minute = (
            config.WORDS_PER_MINUTE if words_per_minute is None else words_per_minute
        )
        if self.words_per_minute <= 0:
            raise ValueError(f"Speaking rate must be positive: {self.words_per_minute}")

    def resolve(self, source: Union[TranscriptionSource, dict, list, str]) -> List[WordTiming]:
        """Resolve word timings.

        Args:
            source: TranscriptionSource or a raw provider payload

        Returns:
            Ordered, non-overlapping word timings

        Raises:
            NoTimingDataAvailable: If no strategy produced a single word
        """
        _, words = self.resolve_with_strategy(source)
        return words

    def resolve_with_strategy(
        self, source: Union[TranscriptionSource, dict, list, str]
    ) -> Tuple[TimingStrategy, List[WordTiming]]:
        """Resolve word timings and report which strategy produced them."""
        source = normalize_transcription(source)

        attempts = [
            (TimingStrategy.EXACT, lambda: list(source.words)),
            (TimingStrategy.SEGMENTS, lambda: estimate_from_segments(source.segments)),
            (TimingStrategy.SRT, lambda: estimate_from_srt(source.srt) if source.srt else []),
            (
                TimingStrategy.TEXT,
                lambda: estimate_from_text(source.text, self.words_per_minute),
            ),
        ]

        for strategy, attempt in attempts:
            words = sanitize(attempt(), source.duration)
            if not words:
                continue

            if strategy is TimingStrategy.EXACT:
                logger.info(f"Using exact word timestamps: {len(words)} words")
            else:
                logger.warning(
                    f"No exact word timestamps, estimated {len(words)} words from {strategy.value}"
                )
            return strategy, words

        raise NoTimingDataAvailable("Transcription contains no usable words")
