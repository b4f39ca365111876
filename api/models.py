"""Triplet finder — Pydantic data models."""

from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


class Record(BaseModel):
    """One timestamped subtitle block."""

    model_config = ConfigDict(frozen=True)

    index: int = Field(description="Block number from the SRT file")
    start: float = Field(description="Start time in seconds")
    end: float = Field(description="End time in seconds")
    text: str


class Triplet(BaseModel):
    """Three official frames (plus fillers) ending in the keyword line."""

    model_config = ConfigDict(frozen=True)

    frame1: Record
    frame2: Record
    frame3: Record
    span: list[Record] = Field(description="frame1..frame3 inclusive, fillers included")
    keyword: str

    @property
    def start(self) -> float:
        return self.frame1.start

    @property
    def end(self) -> float:
        return self.frame3.end

    @property
    def duration(self) -> float:
        return self.frame3.end - self.frame1.start


class Sequence(BaseModel):
    """Three keyword-linked, non-overlapping triplets in time order."""

    model_config = ConfigDict(frozen=True)

    keyword: str
    triplets: list[Triplet] = Field(min_length=3, max_length=3)


class TimeRange(BaseModel):
    """Span of a sequence: T1 frame1 start → T3 frame3 end."""

    start: float
    end: float
    duration: float


class DebugInfo(BaseModel):
    """Stage counts for one pipeline run (only included when DEBUG=1)."""

    num_records: int = Field(description="Number of parsed SRT records")
    num_first_triplets: int = Field(description="Number of valid opening triplets")
    num_keywords: int = Field(description="Unique keywords among opening triplets")
    num_qualified_keywords: int = Field(description="Keywords that can complete a T1→T2→T3 chain")
    num_rare_keywords: int = Field(description="Keywords kept by the rarity filter")
    num_raw_sequences: int = Field(description="Sequences found before selection")


class SequencesResponse(BaseModel):
    """Response from POST /sequences."""

    sequences: list[Sequence]
    mode: Literal["mock", "real"] = Field(description="Whether commonness scores came from the mock provider")
    debug: Optional[DebugInfo] = Field(default=None, description="Debug metadata (only present when DEBUG=1)")
