"""Partitioning of word timings into caption pages."""

import logging
from typing import List, Sequence

from .models import Page, WordTiming

logger = logging.getLogger(__name__)


def paginate(words: Sequence[WordTiming], words_per_page: int) -> List[Page]:
    """Split words into consecutive pages shown together on screen.

    Args:
        words: Word timings in display order
        words_per_page: Maximum words per page (the last page may be shorter)

    Returns:
        Pages in input order
    """
    if words_per_page < 1:
        raise ValueError(f"words_per_page must be >= 1, got {words_per_page}")

    pages = [
        Page(index=index, words=tuple(words[offset:offset + words_per_page]))
        for index, offset in enumerate(range(0, len(words), words_per_page))
    ]

    logger.debug(f"Paginated {len(words)} words into {len(pages)} pages")
    return pages
