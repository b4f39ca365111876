"""Triplet finder — Pipeline orchestrator.

Runs the full search once per transcript:
  strip markup → parse → first triplets → keyword index → pre-qualify
  → rarity (async oracle) → enumerate chains → select
"""

import asyncio
import logging
import random
from typing import Optional, Union

from config import DEFAULT_CONFIG, FinderConfig
from models import DebugInfo, Sequence
from stages.chains import enumerate_chains
from stages.index import build_first_triplet_index, build_keyword_index
from stages.markup import strip_markup
from stages.qualify import prequalify_keywords
from stages.rarity import CommonnessOracle, filter_by_rarity, get_oracle, score_keywords
from stages.selection import select_sequences
from stages.subtitles import parse_srt

logger = logging.getLogger(__name__)


async def find_sequences(
    raw_transcript: str,
    oracle: Optional[CommonnessOracle] = None,
    config: FinderConfig = DEFAULT_CONFIG,
    rng: Optional[random.Random] = None,
    debug: bool = False,
) -> Union[list[Sequence], tuple[list[Sequence], DebugInfo]]:
    """Find at most config.target_n keyword-linked triplet sequences.

    Args:
        raw_transcript: SRT file content.
        oracle: Commonness oracle; defaults to the provider selected by env.
        config: Search and selection tunables.
        rng: Random source for selection (seed it for reproducible output).
        debug: If True, returns (sequences, DebugInfo) with stage counts.

    Returns:
        If debug=False: list of selected Sequence objects.
        If debug=True: tuple of (sequences, DebugInfo).
    """
    if oracle is None:
        oracle = get_oracle()

    debug_info = DebugInfo(
        num_records=0,
        num_first_triplets=0,
        num_keywords=0,
        num_qualified_keywords=0,
        num_rare_keywords=0,
        num_raw_sequences=0,
    )

    def _done(sequences: list[Sequence]):
        return (sequences, debug_info) if debug else sequences

    # Stage 1: Strip markup and parse
    logger.info("Stage 1: Parsing transcript")
    records = parse_srt(strip_markup(raw_transcript))
    logger.info("Parsed %d SRT records", len(records))
    debug_info.num_records = len(records)

    # Stage 2: Opening triplets
    logger.info("Stage 2: Building first triplet index")
    first_triplets = build_first_triplet_index(records, config)
    logger.info("Found %d valid first triplets", len(first_triplets))
    debug_info.num_first_triplets = len(first_triplets)

    if not first_triplets:
        logger.warning("No valid first triplets — returning empty results")
        return _done([])

    keywords = {t.keyword for t in first_triplets}
    keyword_index = build_keyword_index(records, keywords)
    debug_info.num_keywords = len(keywords)

    # Stage 3: Pre-qualification
    logger.info("Stage 3: Pre-qualifying keywords (checking for T1→T2→T3 chains)")
    qualified = prequalify_keywords(records, first_triplets, keyword_index, config)
    debug_info.num_qualified_keywords = len(qualified)

    if not qualified:
        logger.warning("No keyword can form a complete sequence — returning empty results")
        return _done([])

    # Stage 4: Rarity
    logger.info("Stage 4: Scoring %d keywords by commonness", len(qualified))
    scores = await score_keywords(qualified, oracle)
    rare = filter_by_rarity(scores, config)
    logger.info("Kept %d keywords after rarity filtering", len(rare))
    debug_info.num_rare_keywords = len(rare)

    # Stage 5: Enumeration
    logger.info("Stage 5: Enumerating triplet sequences")
    enumerated = enumerate_chains(records, first_triplets, keyword_index, rare, config)
    debug_info.num_raw_sequences = len(enumerated.sequences)

    if not enumerated.sequences:
        logger.warning("No raw sequences found — returning empty results")
        return _done([])

    # Stage 6: Selection
    logger.info("Stage 6: Selecting diverse sequences")
    selected = select_sequences(enumerated.sequences, enumerated.commonness, config, rng)
    logger.info("Final sequences after selection: %d", len(selected))

    return _done(selected)


def run_pipeline(
    raw_transcript: str,
    oracle: Optional[CommonnessOracle] = None,
    config: FinderConfig = DEFAULT_CONFIG,
    rng: Optional[random.Random] = None,
    debug: bool = False,
) -> Union[list[Sequence], tuple[list[Sequence], DebugInfo]]:
    """Synchronous wrapper around find_sequences for scripts and the CLI."""
    return asyncio.run(find_sequences(raw_transcript, oracle=oracle, config=config, rng=rng, debug=debug))
