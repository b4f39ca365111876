"""Stage 5 — Exhaustive T1 → T2 → T3 chain enumeration."""

import logging
from dataclasses import dataclass, field
from typing import Mapping

from config import DEFAULT_CONFIG, FinderConfig
from models import Record, Sequence, Triplet
from stages.boundaries import contains_word, count_words
from stages.index import FirstTriplet, KeywordIndex
from stages.qualify import iter_subsequent_triplets

logger = logging.getLogger(__name__)


@dataclass
class EnumerationResult:
    """Raw sequences plus the commonness score of every searched keyword."""

    sequences: list[Sequence] = field(default_factory=list)
    commonness: dict[str, float] = field(default_factory=dict)


def make_triplet(records: list[Record], start: int, frame2: int, frame3: int, keyword: str) -> Triplet:
    return Triplet(
        frame1=records[start],
        frame2=records[frame2],
        frame3=records[frame3],
        span=records[start : frame3 + 1],
        keyword=keyword,
    )


def _time_range(records: list[Record], start: int, frame3: int) -> tuple[float, float]:
    return records[start].start, records[frame3].end


def _overlaps(a: tuple[float, float], b: tuple[float, float]) -> bool:
    # Touching ranges (one ends exactly when the other starts) do not overlap
    return a[0] < b[1] and a[1] > b[0]


def _reused_before_final_frame(records: list[Record], start: int, frame3: int, keyword: str) -> bool:
    return any(contains_word(records[pos].text, keyword) for pos in range(start, frame3))


def enumerate_chains(
    records: list[Record],
    first_triplets: list[FirstTriplet],
    keyword_index: Mapping[str, KeywordIndex],
    commonness: Mapping[str, float],
    config: FinderConfig = DEFAULT_CONFIG,
) -> EnumerationResult:
    """Collect every valid sequence for opening triplets with a surviving keyword.

    T2's final frame has t2_min_words..t2_max_words words; T3's final frame has
    at least as many words as T2's. The keyword must show up in a non-final
    record of T2 or T3. At most max_results_per_keyword sequences per keyword.
    """
    result = EnumerationResult(commonness=dict(commonness))
    counts: dict[str, int] = {}
    cap = config.max_results_per_keyword

    candidates = [t1 for t1 in first_triplets if t1.keyword in commonness]
    logger.info("Searching %d of %d first triplets (filtered by rarity)", len(candidates), len(first_triplets))

    for checked, t1 in enumerate(candidates, start=1):
        if checked % 100 == 0:
            logger.info("  Progress: %d/%d first triplets checked", checked, len(candidates))

        keyword = t1.keyword
        if counts.get(keyword, 0) >= cap:
            continue

        entry = keyword_index[keyword]
        t1_range = _time_range(records, t1.start, t1.frame3)

        for s2, f2, e2 in iter_subsequent_triplets(
            records, t1.frame3 + 1, entry, config.t2_min_words, config.t2_max_words, config
        ):
            t2_range = _time_range(records, s2, e2)
            if _overlaps(t2_range, t1_range):
                continue

            t2_words = count_words(records[e2].text)
            t2_reuses = _reused_before_final_frame(records, s2, e2, keyword)

            for s3, f3, e3 in iter_subsequent_triplets(records, e2 + 1, entry, t2_words, None, config):
                t3_range = _time_range(records, s3, e3)
                if _overlaps(t3_range, t1_range) or _overlaps(t3_range, t2_range):
                    continue
                if not (t2_reuses or _reused_before_final_frame(records, s3, e3, keyword)):
                    continue

                result.sequences.append(
                    Sequence(
                        keyword=keyword,
                        triplets=[
                            make_triplet(records, t1.start, t1.frame2, t1.frame3, keyword),
                            make_triplet(records, s2, f2, e2, keyword),
                            make_triplet(records, s3, f3, e3, keyword),
                        ],
                    )
                )
                counts[keyword] = counts.get(keyword, 0) + 1
                if counts[keyword] >= cap:
                    break

            if counts.get(keyword, 0) >= cap:
                break

    logger.info("Found %d raw sequences across %d keywords", len(result.sequences), len(counts))
    return result
