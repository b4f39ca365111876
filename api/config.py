"""Triplet finder — configuration defaults and environment helpers."""

import math
import os
from dataclasses import dataclass
from pathlib import Path

FIXTURES_DIR = Path(__file__).resolve().parent / "fixtures"


@dataclass(frozen=True)
class FinderConfig:
    """Tunables for the triplet search and selection stages."""

    # Output size
    target_n: int = 18

    # Triplet shape (seconds / records)
    min_duration: float = 4.0
    max_duration: float = 20.0
    max_fillers: int = 6

    # Search bounds
    search_window: int = 1000
    max_results_per_keyword: int = 100

    # Word counts on the final frame of T2 / T3
    t2_min_words: int = 1
    t2_max_words: int = 6
    t3_min_words_qualify: int = 2

    # Rarity filter
    common_threshold: float = 10000
    keyword_floor_ratio: float = 1.2

    # Selection
    rarest_pool: int = 6
    trials: int = 3

    @property
    def keyword_floor(self) -> int:
        return math.ceil(self.target_n * self.keyword_floor_ratio)


DEFAULT_CONFIG = FinderConfig()


def _is_truthy_env(name: str) -> bool:
    return os.environ.get(name, "").strip().lower() in ("1", "true", "yes", "on")


def is_mock_mode() -> bool:
    return _is_truthy_env("MOCK_MODE")


def is_debug_mode() -> bool:
    return _is_truthy_env("DEBUG")


def get_commonness_provider() -> str:
    """Commonness provider from env, defaults to 'wordlist'. MOCK_MODE forces 'mock'."""
    if is_mock_mode():
        return "mock"
    return os.environ.get("COMMONNESS_PROVIDER", "wordlist").strip().lower()


def get_wordlist_path() -> Path:
    raw = os.environ.get("WORDLIST_PATH", "").strip()
    return Path(raw) if raw else FIXTURES_DIR / "wordlist.txt"
