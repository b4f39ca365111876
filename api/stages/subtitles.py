"""Stage 1 — Parse SRT text into timestamped records (via the srt library)."""

import re
from datetime import timedelta
from typing import Iterable, Optional

import srt

from models import Record

_BLOCK_SPLIT_RE = re.compile(r"\n\n+")


def to_timedelta(seconds: float) -> timedelta:
    """Seconds as a timedelta, rounded to the millisecond."""
    return timedelta(milliseconds=max(0, round(seconds * 1000)))


def _parse_block(block: str) -> list[Record]:
    try:
        subtitles = list(srt.parse(block))
    except (srt.SRTParseError, srt.TimestampParseError):
        return []

    # No index line, or nothing under the timing line
    return [
        Record(
            index=sub.index,
            start=sub.start.total_seconds(),
            end=sub.end.total_seconds(),
            text=sub.content,
        )
        for sub in subtitles
        if isinstance(sub.index, int) and sub.content.strip()
    ]


def parse_srt(content: str) -> list[Record]:
    """Parse SRT content into an ordered list of records.

    Each blank-line separated block is handed to srt.parse on its own, so a
    malformed block (non-integer index, missing or unparseable timing line,
    no text) is skipped instead of being folded into its neighbour.
    """
    normalized = content.lstrip("\ufeff").replace("\r\n", "\n").replace("\r", "\n")
    records: list[Record] = []
    for block in _BLOCK_SPLIT_RE.split(normalized):
        if block.strip():
            records.extend(_parse_block(block))
    return records


def to_subtitle(record: Record, index: Optional[int] = None, offset: float = 0.0, text: Optional[str] = None) -> srt.Subtitle:
    """Record as an srt.Subtitle, optionally renumbered, shifted back by offset, or re-texted."""
    return srt.Subtitle(
        index=record.index if index is None else index,
        start=to_timedelta(record.start - offset),
        end=to_timedelta(record.end - offset),
        content=record.text if text is None else text,
    )


def compose(subtitles: Iterable[srt.Subtitle]) -> str:
    """SRT text for the subtitles, numbered as given."""
    return srt.compose(subtitles, reindex=False)


def format_record(record: Record, index: Optional[int] = None) -> str:
    """Render one record back into an SRT block (no trailing blank line)."""
    return compose([to_subtitle(record, index)]).rstrip("\n")
