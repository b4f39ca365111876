"""Stage 3 — Subsequent-triplet validity and keyword pre-qualification."""

import logging
from typing import Iterator, Optional

from config import DEFAULT_CONFIG, FinderConfig
from models import Record
from stages.boundaries import count_words, ends_with_punctuation_or_next_capital
from stages.index import (
    FirstTriplet,
    KeywordIndex,
    closes_strongly,
    contains_in_range,
    duration_in_bounds,
    opens_after_boundary,
    span_duration,
)

logger = logging.getLogger(__name__)


def is_valid_subsequent_triplet(
    records: list[Record],
    start: int,
    frame2: int,
    frame3: int,
    entry: KeywordIndex,
    min_words: int,
    max_words: Optional[int] = None,
    config: FinderConfig = DEFAULT_CONFIG,
) -> bool:
    """Validate a T2/T3 candidate at the given record positions."""
    if start < 1 or frame3 >= len(records):
        return False

    words = count_words(records[frame3].text)
    if words < min_words or (max_words is not None and words > max_words):
        return False

    if not contains_in_range(entry, start, frame3):
        return False

    if not opens_after_boundary(records, start):
        return False

    if not ends_with_punctuation_or_next_capital(records[frame2].text, records[frame3].text):
        return False

    if not closes_strongly(records, frame3):
        return False

    return duration_in_bounds(span_duration(records, start, frame3), config)


def iter_subsequent_triplets(
    records: list[Record],
    search_start: int,
    entry: KeywordIndex,
    min_words: int,
    max_words: Optional[int] = None,
    config: FinderConfig = DEFAULT_CONFIG,
) -> Iterator[tuple[int, int, int]]:
    """Yield every valid (start, frame2, frame3) beginning in the search window."""
    search_end = min(search_start + config.search_window, len(records) - 2)

    for start in range(search_start, search_end):
        for fillers in range(config.max_fillers + 1):
            frame2 = start + 1 + fillers
            frame3 = frame2 + 1
            if frame3 >= len(records):
                break
            if is_valid_subsequent_triplet(records, start, frame2, frame3, entry, min_words, max_words, config):
                yield start, frame2, frame3


def has_complete_chain(
    records: list[Record],
    t1: FirstTriplet,
    entry: KeywordIndex,
    config: FinderConfig = DEFAULT_CONFIG,
) -> bool:
    """True as soon as one T1→T2→T3 chain is found for this opening triplet."""
    for _, _, t2_frame3 in iter_subsequent_triplets(
        records, t1.frame3 + 1, entry, config.t2_min_words, config.t2_max_words, config
    ):
        t3 = iter_subsequent_triplets(records, t2_frame3 + 1, entry, config.t3_min_words_qualify, None, config)
        if next(t3, None) is not None:
            return True
    return False


def prequalify_keywords(
    records: list[Record],
    first_triplets: list[FirstTriplet],
    keyword_index: dict[str, KeywordIndex],
    config: FinderConfig = DEFAULT_CONFIG,
) -> set[str]:
    """Return the keywords for which at least one complete chain exists."""
    qualified: set[str] = set()

    for t1 in first_triplets:
        if t1.keyword in qualified:
            continue
        if has_complete_chain(records, t1, keyword_index[t1.keyword], config):
            qualified.add(t1.keyword)

    logger.info(
        "Qualified keywords: %d of %d can form complete sequences",
        len(qualified),
        len(keyword_index),
    )
    return qualified
