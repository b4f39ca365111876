"""Stage 4 — Keyword commonness scoring and rarity filtering.

Scores come from a commonness oracle (higher = more common). Providers:
  - wordlist (default): WORD;COUNT file, one entry per line
  - wordfreq: the wordfreq library, scaled to occurrences per billion words
  - mock: fixed scores from a mapping, no I/O
"""

import logging
import re
from pathlib import Path
from typing import Iterable, Mapping, Optional, Protocol

from config import DEFAULT_CONFIG, FinderConfig, get_commonness_provider, get_wordlist_path

logger = logging.getLogger(__name__)

_NON_ALPHA_RE = re.compile(r"[^a-zA-Z]")


class CommonnessLookupError(RuntimeError):
    """The commonness oracle could not score a word."""


class CommonnessOracle(Protocol):
    async def score(self, word: str) -> float: ...


def _alpha_only(word: str) -> str:
    # you're → youre, kichi-san → kichisan
    return _NON_ALPHA_RE.sub("", word or "")


class WordlistOracle:
    """Frequency counts from a semicolon-delimited word list, loaded once."""

    def __init__(self, path: Path | str):
        self.path = Path(path)
        self._counts: Optional[dict[str, int]] = None

    def _load(self) -> dict[str, int]:
        if self._counts is not None:
            return self._counts

        try:
            content = self.path.read_text(encoding="utf-8")
        except OSError as e:
            raise CommonnessLookupError(f"Cannot read word frequency list {self.path}: {e}") from e

        counts: dict[str, int] = {}
        for line in content.splitlines():
            word, _, count = line.strip().partition(";")
            if not word or not count:
                continue
            try:
                counts[word.upper()] = int(count)
            except ValueError:
                continue

        logger.info("Loaded %d words from %s", len(counts), self.path)
        self._counts = counts
        return counts

    async def score(self, word: str) -> float:
        alpha = _alpha_only(word)
        if not alpha:
            return 0
        return self._load().get(alpha.upper(), 0)


class WordfreqOracle:
    """English word frequency from the wordfreq package, per billion words."""

    def __init__(self, lang: str = "en"):
        self.lang = lang

    async def score(self, word: str) -> float:
        from wordfreq import word_frequency

        alpha = _alpha_only(word)
        if not alpha:
            return 0
        return word_frequency(alpha.lower(), self.lang) * 1e9


class StaticOracle:
    """Fixed scores from a mapping; unknown words get the default."""

    def __init__(self, scores: Optional[Mapping[str, float]] = None, default: float = 0.0):
        self.scores = {k.lower(): v for k, v in (scores or {}).items()}
        self.default = default

    async def score(self, word: str) -> float:
        return self.scores.get(word.lower(), self.default)


def get_oracle(provider: Optional[str] = None, wordlist_path: Optional[Path | str] = None) -> CommonnessOracle:
    """Build the commonness oracle for the given provider and word list (env defaults).

    Raises ValueError for an unknown provider.
    """
    provider = (provider or get_commonness_provider()).strip().lower()

    if provider == "wordlist":
        return WordlistOracle(wordlist_path or get_wordlist_path())
    elif provider == "wordfreq":
        return WordfreqOracle()
    elif provider == "mock":
        return StaticOracle()
    else:
        raise ValueError(f"Unknown COMMONNESS_PROVIDER: {provider}. Must be 'wordlist', 'wordfreq', or 'mock'.")


async def score_keywords(keywords: Iterable[str], oracle: CommonnessOracle) -> dict[str, float]:
    """Score every keyword, one oracle call at a time.

    Oracle errors propagate: a guessed score would skew the whole selection.
    """
    scores: dict[str, float] = {}
    for keyword in sorted(set(keywords)):
        scores[keyword] = await oracle.score(keyword)
    return scores


def filter_by_rarity(scores: Mapping[str, float], config: FinderConfig = DEFAULT_CONFIG) -> dict[str, float]:
    """Drop keywords more common than the threshold, keeping a floor of the rarest.

    Returns the surviving keywords ordered rarest first.
    """
    ranked = sorted(scores.items(), key=lambda item: (item[1], item[0]))
    kept = [(kw, score) for kw, score in ranked if score <= config.common_threshold]

    if len(kept) < config.keyword_floor:
        floor = ranked[: config.keyword_floor]
        if len(floor) > len(kept):
            logger.warning(
                "Only %d keywords with commonness <= %s; keeping the %d rarest",
                len(kept),
                config.common_threshold,
                len(floor),
            )
        kept = floor
    elif len(kept) < len(ranked):
        logger.info("Filtered out %d common keywords (commonness > %s)", len(ranked) - len(kept), config.common_threshold)

    for keyword, score in kept:
        logger.debug("  %s: %s", keyword, score)

    return dict(kept)
