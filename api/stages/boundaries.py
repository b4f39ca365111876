"""Boundary predicates and keyword extraction over subtitle text."""

import re
from functools import lru_cache
from typing import Optional

PUNCTUATION = frozenset(".!?-;,")
STRONG_PUNCTUATION = frozenset(".!?")
PUNCTUATION_OR_BRACKET = frozenset(".!?-;)]")

# Words that recur constantly and make poor blanks
EXCLUDED_WORDS: frozenset[str] = frozenset(
    {
        "the", "yes", "no", "why", "how", "when", "where", "me", "i", "you",
        "good", "bad", "yep", "yeah", "nah", "nope", "one", "two", "three",
        "none", "nada", "nothing",
    }
)

# Dialogue lines often open with a dash or a quote before the first letter
_LEADING_NOISE = " \t\r\n-\"'"
_NON_ALPHA_RE = re.compile(r"[^a-zA-Z]")


def _last_char(text: str) -> str:
    return text.strip()[-1:]


def ends_with_punctuation(text: str) -> bool:
    return _last_char(text) in PUNCTUATION


def ends_with_strong_punctuation(text: str) -> bool:
    """Sentence-final marks only: . ! ?"""
    return _last_char(text) in STRONG_PUNCTUATION


def ends_with_punctuation_or_bracket(text: str) -> bool:
    return _last_char(text) in PUNCTUATION_OR_BRACKET


def starts_with_capital(text: str) -> bool:
    """True if the first letter (after dialogue dashes / quotes) is A-Z."""
    first = text.lstrip(_LEADING_NOISE)[:1]
    return "A" <= first <= "Z"


def ends_with_punctuation_or_next_capital(text: str, next_text: Optional[str]) -> bool:
    if ends_with_punctuation(text):
        return True
    return next_text is not None and starts_with_capital(next_text)


def ends_with_strong_punctuation_or_next_capital(text: str, next_text: Optional[str]) -> bool:
    if ends_with_strong_punctuation(text):
        return True
    return next_text is not None and starts_with_capital(next_text)


def ends_with_punctuation_or_bracket_or_next_capital(text: str, next_text: Optional[str]) -> bool:
    if ends_with_punctuation_or_bracket(text):
        return True
    return next_text is not None and starts_with_capital(next_text)


def extract_last_word(text: str) -> Optional[str]:
    """Last whitespace-separated token, letters only, lowercased. None if nothing is left."""
    words = text.split()
    if not words:
        return None
    word = _NON_ALPHA_RE.sub("", words[-1]).lower()
    return word or None


def is_excluded_word(word: str) -> bool:
    return word.lower() in EXCLUDED_WORDS


def count_words(text: str) -> int:
    return len(text.split())


def is_valid_t1_frame3(text: str) -> bool:
    """The opening punch line must be exactly one content word.

    "Answer!" is valid; "Yes!" (excluded), "Go home." (two words) and
    "Wait," (trailing comma, unfinished) are not.
    """
    trimmed = text.strip()
    if not trimmed or trimmed.endswith(","):
        return False
    if count_words(trimmed) != 1:
        return False
    word = extract_last_word(trimmed)
    return word is not None and not is_excluded_word(word)


@lru_cache(maxsize=4096)
def word_matcher(word: str) -> re.Pattern[str]:
    """Case-insensitive, word-boundary matcher for a literal word."""
    return re.compile(rf"\b{re.escape(word.strip())}\b", re.IGNORECASE | re.ASCII)


def contains_word(text: str, word: str) -> bool:
    """Check if text contains word as a standalone word (case-insensitive)."""
    return word_matcher(word).search(text) is not None


def alpha_char_count(text: str) -> int:
    return len(_NON_ALPHA_RE.sub("", text))
