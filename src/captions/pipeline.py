"""Caption pipeline: transcription payload in, ASS document out."""

import logging
from typing import Union

from .ass_generator import CaptionCompiler
from .errors import CaptionError, NoTimingDataAvailable
from .models import CaptionResult, CaptionStyle, TranscriptionSource
from .resolver import WordTimingResolver

logger = logging.getLogger(__name__)


class CaptionPipeline:
    """Resolves word timings and compiles them into captions.

    Captions are an enhancement to a video job, never a hard dependency:
    run() reports failures in the result instead of raising, so the caller
    can deliver the video uncaptioned with a warning.
    """

    def __init__(
        self,
        style: CaptionStyle = None,
        resolver: WordTimingResolver = None,
        compiler: CaptionCompiler = None,
    ):
        """Initialize pipeline.

        Args:
            style: Caption style (ignored when a compiler is given)
            resolver: Word timing resolver
            compiler: Caption compiler
        """
        self.resolver = resolver or WordTimingResolver()
        self.compiler = compiler or CaptionCompiler(style)

    def run(self, payload: Union[TranscriptionSource, dict, list, str]) -> CaptionResult:
        """Execute resolve -> compile.

        Args:
            payload: Transcription provider response or TranscriptionSource

        Returns:
            CaptionResult; success is False when no captions could be made
        """
        try:
            strategy, words = self.resolver.resolve_with_strategy(payload)
            events = self.compiler.build_events(words)
            document = self.compiler.render(events)

            logger.info(
                f"Captions ready: {len(words)} words, {len(events)} events ({strategy.value} timing)"
            )
            return CaptionResult(
                success=True,
                document=document,
                word_count=len(words),
                event_count=len(events),
                strategy=strategy,
            )

        except NoTimingDataAvailable as e:
            logger.warning(f"Skipping captions, no timing data: {e}")
            return self._failed(f"No captions: {e}")
        except CaptionError as e:
            logger.warning(f"Skipping captions: {e}")
            return self._failed(f"No captions: {e}")
        except Exception as e:
            logger.error(f"Caption pipeline failed: {e}", exc_info=True)
            return self._failed(f"Caption generation failed: {e}")

    def _failed(self, warning: str) -> CaptionResult:
        return CaptionResult(
            success=False,
            document="",
            word_count=0,
            event_count=0,
            warning=warning,
        )
