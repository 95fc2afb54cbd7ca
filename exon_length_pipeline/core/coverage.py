#!/usr/bin/env python3

"""
Per-gene exon coverage: base pairs covered by at least one exon.

Three interchangeable strategies produce identical counts:

- buffer: mark every position of the gene span in a byte buffer, O(span)
- sweep: sort the intervals and merge them in one pass, O(k log k)
- intervaltree: merge overlaps with an IntervalTree

``auto`` uses the buffer unless a gene spans more than max_buffer_span
base pairs, then falls back to the sweep.
"""

import logging
from concurrent.futures import ProcessPoolExecutor
from itertools import repeat
from typing import Callable, List, Optional, Sequence, Tuple

from intervaltree import IntervalTree, Interval

from .config import COVERAGE_STRATEGIES
from .data_structures import GeneCoverage, IntervalMap
from .exceptions import ConfigurationError
from .ingestion import partition

DEFAULT_MAX_BUFFER_SPAN = 10_000_000

# gene chunks handed out per worker, to even out genes of very different size
CHUNKS_PER_WORKER = 4


def gene_span(intervals: Sequence[Tuple[int, int]]) -> Tuple[int, int]:
    """Return (min_start, max_end) over all intervals."""
    return min(start for start, _ in intervals), max(end for _, end in intervals)


def buffer_coverage(intervals: Sequence[Tuple[int, int]]) -> int:
    """Count covered positions by marking a buffer over the gene span."""
    if not intervals:
        return 0

    min_start, max_end = gene_span(intervals)
    if max_end < min_start:
        return 0

    covered = bytearray(max_end - min_start + 1)
    for start, end in intervals:
        lo = start - min_start
        hi = end - min_start + 1
        if hi > lo:
            covered[lo:hi] = b"\x01" * (hi - lo)

    return covered.count(1)


def sweep_coverage(intervals: Sequence[Tuple[int, int]]) -> int:
    """Count covered positions by sorting and merging closed intervals."""
    total = 0
    block_start = block_end = None

    for start, end in sorted(intervals):
        if end < start:
            continue
        if block_end is None or start > block_end:
            if block_end is not None:
                total += block_end - block_start + 1
            block_start, block_end = start, end
        elif end > block_end:
            block_end = end

    if block_end is not None:
        total += block_end - block_start + 1
    return total


def interval_tree_coverage(intervals: Sequence[Tuple[int, int]]) -> int:
    """Count covered positions with IntervalTree.merge_overlaps."""
    # IntervalTree is half-open, exon coordinates are closed
    tree = IntervalTree(Interval(start, end + 1) for start, end in intervals if end >= start)
    tree.merge_overlaps()
    return sum(interval.end - interval.begin for interval in tree)


_STRATEGY_FUNCTIONS = {
    "buffer": buffer_coverage,
    "sweep": sweep_coverage,
    "intervaltree": interval_tree_coverage,
}


def covered_length(intervals: Sequence[Tuple[int, int]],
                   strategy: str = "buffer",
                   max_buffer_span: int = DEFAULT_MAX_BUFFER_SPAN) -> int:
    """Count the distinct positions covered by a gene's exon intervals."""
    if strategy == "auto":
        if intervals:
            min_start, max_end = gene_span(intervals)
            strategy = "sweep" if max_end - min_start + 1 > max_buffer_span else "buffer"
        else:
            strategy = "buffer"

    function = _STRATEGY_FUNCTIONS.get(strategy)
    if function is None:
        raise ConfigurationError(
            f"Unknown coverage strategy '{strategy}' (expected one of {', '.join(COVERAGE_STRATEGIES)})"
        )
    return function(intervals)


def summarize_gene(gene_id: str,
                   intervals: Sequence[Tuple[int, int]],
                   strategy: str = "buffer",
                   max_buffer_span: int = DEFAULT_MAX_BUFFER_SPAN) -> GeneCoverage:
    """Compute the coverage summary of one gene."""
    span_start, span_end = gene_span(intervals) if intervals else (0, 0)
    return GeneCoverage(
        gene_id=gene_id,
        covered_length=covered_length(intervals, strategy, max_buffer_span),
        exon_count=len(intervals),
        span_start=span_start,
        span_end=span_end,
    )


def _summarize_chunk(items: Sequence[Tuple[str, List[Tuple[int, int]]]],
                     strategy: str,
                     max_buffer_span: int) -> List[GeneCoverage]:
    return [summarize_gene(gene_id, intervals, strategy, max_buffer_span)
            for gene_id, intervals in items]


def compute_gene_coverage(intervals_by_gene: IntervalMap,
                          workers: int = 1,
                          strategy: str = "buffer",
                          max_buffer_span: int = DEFAULT_MAX_BUFFER_SPAN,
                          on_chunk: Optional[Callable[[], object]] = None) -> List[GeneCoverage]:
    """
    Compute coverage for every gene, in parallel across genes.

    The input map is not modified. The result holds exactly one entry per
    gene, in no particular order. on_chunk is called in this process after
    each pooled chunk of genes completes.
    """
    if strategy != "auto" and strategy not in _STRATEGY_FUNCTIONS:
        raise ConfigurationError(f"Unknown coverage strategy '{strategy}'")

    items = list(intervals_by_gene.items())
    if workers > 1 and len(items) > 1:
        chunk_size = max(1, -(-len(items) // (workers * CHUNKS_PER_WORKER)))
        chunks = partition(items, chunk_size)
        logging.debug(f"Computing coverage for {len(items)} genes in {len(chunks)} chunks "
                      f"on {workers} workers")
        with ProcessPoolExecutor(max_workers=min(workers, len(chunks))) as executor:
            summaries = []
            for part in executor.map(_summarize_chunk, chunks,
                                     repeat(strategy), repeat(max_buffer_span)):
                summaries.extend(part)
                if on_chunk is not None:
                    on_chunk()
            return summaries

    return _summarize_chunk(items, strategy, max_buffer_span)


def compute_exon_lengths(intervals_by_gene: IntervalMap,
                         workers: int = 1,
                         strategy: str = "buffer",
                         max_buffer_span: int = DEFAULT_MAX_BUFFER_SPAN) -> List[Tuple[str, int]]:
    """Return [(gene_id, covered_length), ...] for every gene."""
    summaries = compute_gene_coverage(intervals_by_gene, workers, strategy, max_buffer_span)
    return [summary.as_tuple() for summary in summaries]
