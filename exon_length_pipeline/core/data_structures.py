#!/usr/bin/env python3

"""
Core data structures for the exon length pipeline.

Defines the per-line exon record and the per-gene coverage summary.
"""

from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

U32_MAX = 2 ** 32 - 1

# gene_id -> [(start, end), ...] in insertion order
Interval = Tuple[int, int]
IntervalMap = Dict[str, List[Interval]]


@dataclass(frozen=True)
class ExonRecord:
    """A single exon line reduced to the columns the pipeline consumes."""
    feature: str
    start: int
    end: int
    gene_id: str
    transcript_id: Optional[str] = None

    def __post_init__(self):
        """Validate record data after initialization."""
        if not self.gene_id:
            raise ValueError("Gene ID cannot be empty")
        for name, value in (("start", self.start), ("end", self.end)):
            if not 0 <= value <= U32_MAX:
                raise ValueError(f"Invalid {name} coordinate: {value}")

    @property
    def length(self) -> int:
        """Get exon length."""
        return self.end - self.start + 1

    def info(self) -> Tuple[int, int, str]:
        """Return (start, end, gene_id)."""
        return self.start, self.end, self.gene_id

    def interval(self) -> Interval:
        return self.start, self.end


@dataclass
class GeneCoverage:
    """Covered base pairs for one gene together with its exon span."""
    gene_id: str
    covered_length: int
    exon_count: int = 0
    span_start: int = 0
    span_end: int = 0

    @property
    def span(self) -> int:
        """Get genomic span from the first exon start to the last exon end."""
        if self.span_end < self.span_start:
            return 0
        return self.span_end - self.span_start + 1

    @property
    def coverage_fraction(self) -> float:
        """Fraction of the span that is exonic."""
        span = self.span
        return self.covered_length / span if span else 0.0

    def as_tuple(self) -> Tuple[str, int]:
        return self.gene_id, self.covered_length
