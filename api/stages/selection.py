"""Stage 6 — Diversity selection over raw sequences.

Runs a few independent randomized trials. Each trial keeps picking a keyword
at random among the rarest remaining ones, then takes that keyword's
sequence with the least time overlap against what is already picked. The
trial with the least total overlap (then the most dialogue) wins.
"""

import logging
import random
from dataclasses import dataclass
from typing import Mapping, Optional

from config import DEFAULT_CONFIG, FinderConfig
from models import Sequence, TimeRange
from stages.boundaries import alpha_char_count

logger = logging.getLogger(__name__)


@dataclass
class SelectionCandidate:
    sequence: Sequence
    range: TimeRange
    content_weight: int
    keyword: str


@dataclass
class TrialResult:
    selected: list[SelectionCandidate]
    overlap: float
    content_weight: int


def sequence_time_range(sequence: Sequence) -> TimeRange:
    start = sequence.triplets[0].frame1.start
    end = sequence.triplets[-1].frame3.end
    return TimeRange(start=start, end=end, duration=end - start)


def content_weight(sequence: Sequence) -> int:
    """Alphabetic characters across every record of the sequence, fillers included."""
    return sum(alpha_char_count(record.text) for triplet in sequence.triplets for record in triplet.span)


def overlap_seconds(a: TimeRange, b: TimeRange) -> float:
    return max(0.0, min(a.end, b.end) - max(a.start, b.start))


def total_pairwise_overlap(candidates: list[SelectionCandidate]) -> float:
    total = 0.0
    for i, a in enumerate(candidates):
        for b in candidates[i + 1 :]:
            total += overlap_seconds(a.range, b.range)
    return total


def _group_by_keyword(sequences: list[Sequence]) -> dict[str, list[SelectionCandidate]]:
    groups: dict[str, list[SelectionCandidate]] = {}
    for seq in sequences:
        groups.setdefault(seq.keyword, []).append(
            SelectionCandidate(
                sequence=seq,
                range=sequence_time_range(seq),
                content_weight=content_weight(seq),
                keyword=seq.keyword,
            )
        )
    return groups


def _run_trial(
    groups: dict[str, list[SelectionCandidate]],
    commonness: Mapping[str, float],
    config: FinderConfig,
    rng: random.Random,
) -> TrialResult:
    pool = list(groups)
    selected: list[SelectionCandidate] = []

    while len(selected) < config.target_n and pool:
        pool.sort(key=lambda kw: commonness.get(kw, 0.0))
        keyword = rng.choice(pool[: config.rarest_pool])
        pool.remove(keyword)

        candidates = groups[keyword]
        if not selected:
            pick = rng.choice(candidates)
        else:
            pick = min(
                candidates,
                key=lambda c: (sum(overlap_seconds(c.range, s.range) for s in selected), -c.content_weight),
            )
        selected.append(pick)

    return TrialResult(
        selected=selected,
        overlap=total_pairwise_overlap(selected),
        content_weight=sum(c.content_weight for c in selected),
    )


def select_sequences(
    sequences: list[Sequence],
    commonness: Mapping[str, float],
    config: FinderConfig = DEFAULT_CONFIG,
    rng: Optional[random.Random] = None,
) -> list[Sequence]:
    """Pick at most target_n sequences, one per keyword, favoring rare keywords
    and minimal temporal overlap.
    """
    if not sequences:
        return []

    rng = rng or random.Random()
    groups = _group_by_keyword(sequences)
    logger.info("Selecting from %d sequences over %d unique keywords", len(sequences), len(groups))

    trials: list[TrialResult] = []
    for n in range(config.trials):
        trial = _run_trial(groups, commonness, config, rng)
        logger.info(
            "  Trial %d: %d sequences, overlap %.1fs, content weight %d",
            n + 1,
            len(trial.selected),
            trial.overlap,
            trial.content_weight,
        )
        trials.append(trial)

    least_overlap = min(t.overlap for t in trials)
    best = [t for t in trials if t.overlap == least_overlap]
    most_weight = max(t.content_weight for t in best)
    best = [t for t in best if t.content_weight == most_weight]
    winner = rng.choice(best)

    logger.info("Selected %d sequences (overlap %.1fs)", len(winner.selected), winner.overlap)
    return [c.sequence for c in winner.selected]
