"""Stage 2 — Opening-triplet index and per-keyword inverted index."""

import logging
import re
from bisect import bisect_left
from dataclasses import dataclass, field
from typing import Iterable, Optional

from config import DEFAULT_CONFIG, FinderConfig
from models import Record
from stages.boundaries import (
    contains_word,
    ends_with_punctuation_or_bracket_or_next_capital,
    ends_with_strong_punctuation_or_next_capital,
    extract_last_word,
    is_valid_t1_frame3,
    word_matcher,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FirstTriplet:
    """Positions (into the record list) of a valid opening triplet."""

    start: int
    frame2: int
    frame3: int
    keyword: str


@dataclass
class KeywordIndex:
    """Sorted record positions whose text contains the keyword."""

    keyword: str
    matcher: re.Pattern[str]
    occurrences: list[int] = field(default_factory=list)


def text_at(records: list[Record], pos: int) -> Optional[str]:
    """Text of the record at pos, or None past either end of the list."""
    if 0 <= pos < len(records):
        return records[pos].text
    return None


def _millis(seconds: float) -> int:
    return round(seconds * 1000)


def span_duration(records: list[Record], start: int, frame3: int) -> float:
    """Seconds from start's start to frame3's end, exact to the millisecond."""
    return (_millis(records[frame3].end) - _millis(records[start].start)) / 1000


def duration_in_bounds(duration: float, config: FinderConfig) -> bool:
    return config.min_duration <= duration <= config.max_duration


def opens_after_boundary(records: list[Record], start: int) -> bool:
    """The record before start closes a clause, or start opens with a capital."""
    if start < 1:
        return False
    return ends_with_punctuation_or_bracket_or_next_capital(records[start - 1].text, records[start].text)


def closes_strongly(records: list[Record], frame3: int) -> bool:
    return ends_with_strong_punctuation_or_next_capital(records[frame3].text, text_at(records, frame3 + 1))


def _keyword_revealed_early(records: list[Record], start: int, frame2: int, keyword: str) -> bool:
    return any(contains_word(records[pos].text, keyword) for pos in range(start, frame2 + 1))


def build_first_triplet_index(
    records: list[Record],
    config: FinderConfig = DEFAULT_CONFIG,
) -> list[FirstTriplet]:
    """Return every structurally valid opening triplet (T1), in position order.

    One forward pass; for each start, 0..max_fillers fillers sit between
    frame1 and frame2, and frame3 immediately follows frame2.
    """
    first_triplets: list[FirstTriplet] = []

    for start in range(1, len(records)):
        if not opens_after_boundary(records, start):
            continue

        for fillers in range(config.max_fillers + 1):
            frame2 = start + 1 + fillers
            frame3 = frame2 + 1
            if frame3 >= len(records):
                break

            frame3_text = records[frame3].text
            if not is_valid_t1_frame3(frame3_text):
                continue
            keyword = extract_last_word(frame3_text)
            if keyword is None:
                continue

            if not closes_strongly(records, frame3):
                continue
            if _keyword_revealed_early(records, start, frame2, keyword):
                continue
            if not duration_in_bounds(span_duration(records, start, frame3), config):
                continue

            first_triplets.append(FirstTriplet(start=start, frame2=frame2, frame3=frame3, keyword=keyword))

    return first_triplets


def build_keyword_index(records: list[Record], keywords: Iterable[str]) -> dict[str, KeywordIndex]:
    """Map each keyword to the sorted positions of records containing it."""
    index = {kw: KeywordIndex(keyword=kw, matcher=word_matcher(kw)) for kw in sorted(set(keywords))}

    for pos, record in enumerate(records):
        for entry in index.values():
            if entry.matcher.search(record.text):
                entry.occurrences.append(pos)

    logger.info("Indexed %d keywords over %d records", len(index), len(records))
    return index


def contains_in_range(entry: KeywordIndex, lo: int, hi: int) -> bool:
    """True if the keyword occurs in any record position within [lo, hi]."""
    i = bisect_left(entry.occurrences, lo)
    return i < len(entry.occurrences) and entry.occurrences[i] <= hi
