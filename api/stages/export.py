"""Stage 7 — Render selected sequences as triplet files and blanked SRT clips."""

import re

from models import Sequence, Triplet
from stages.subtitles import compose, format_record, to_subtitle

BLANK = "_____"
MAX_BLANK_WORDS = 8


def format_triplet(triplet: Triplet) -> str:
    """Every record of the triplet's span as SRT blocks."""
    return "\n\n".join(format_record(record) for record in triplet.span)


def format_sequence(sequence: Sequence) -> str:
    """Triplet file layout: three SRT segments separated by '---'."""
    return "\n\n---\n\n".join(format_triplet(t) for t in sequence.triplets)


def replace_keyword_with_blank(text: str, keyword: str) -> str:
    """Replace the keyword with _____, keeping directly attached . ! ? marks."""
    pattern = re.compile(rf"\b{re.escape(keyword)}([.!?]*)(?=\s|$)", re.IGNORECASE)
    return pattern.sub(lambda m: BLANK + m.group(1), text)


def replace_keyword_with_brackets(text: str, keyword: str) -> str:
    pattern = re.compile(rf"\b{re.escape(keyword)}\b", re.IGNORECASE)
    return pattern.sub("[keyword]", text)


def blank_with_spaces(text: str) -> str:
    """Every non-space character becomes '_'; runs of 5+ condense to 4.

    "I'll be back!" → "____ __ ____"
    """
    return re.sub(r"_{5,}", "____", re.sub(r"\S", "_", text))


def condense_and_blank(lines: list[str]) -> str:
    """Join lines, blank them, and keep at most MAX_BLANK_WORDS blank words."""
    blanked = blank_with_spaces(" ".join(lines).strip())
    words = blanked.split()
    if len(words) > MAX_BLANK_WORDS:
        return " ".join(words[:MAX_BLANK_WORDS])
    return blanked


def rebase_triplet_srt(triplet: Triplet, triplet_number: int, keyword: str) -> str:
    """Standalone SRT for one triplet clip, starting at 00:00:00,000.

    Triplet 1 shows the keyword as a blank; triplets 2 and 3 show it as
    "[keyword]" and blank out their final frame entirely.
    """
    offset = triplet.frame1.start
    subtitles = []

    for i, record in enumerate(triplet.span):
        lines = record.text.split("\n")
        is_last = i == len(triplet.span) - 1

        if triplet_number >= 2 and is_last:
            lines = [condense_and_blank(lines)]
        elif triplet_number == 1:
            lines = [replace_keyword_with_blank(line, keyword) for line in lines]
        else:
            lines = [replace_keyword_with_brackets(line, keyword) for line in lines]

        subtitles.append(to_subtitle(record, index=i + 1, offset=offset, text="\n".join(lines)))

    return compose(subtitles)
