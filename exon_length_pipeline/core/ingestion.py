#!/usr/bin/env python3

"""
Annotation ingestion: file text to per-gene exon intervals.

Lines are partitioned into chunks, each chunk is folded into its own
gene -> intervals map by a worker, and the partial maps are reduced
pairwise into one. Workers never share a map, so no locking is needed.
"""

import logging
from collections import Counter
from concurrent.futures import ProcessPoolExecutor
from dataclasses import dataclass, field
from functools import reduce
from itertools import repeat
from pathlib import Path
from typing import Callable, Dict, Iterable, List, Optional, Sequence, Union

from .config import DEFAULT_EXTENSIONS
from .data_structures import IntervalMap
from .exceptions import ParseError, InputFormatError, AnnotationReadError
from .records import RecordParser

PathLike = Union[str, Path]


@dataclass
class IngestionResult:
    """Interval map plus line accounting for one or more folded chunks."""
    intervals: IntervalMap = field(default_factory=dict)
    lines_total: int = 0
    records_parsed: int = 0
    skipped: Dict[str, int] = field(default_factory=dict)

    @property
    def gene_count(self) -> int:
        return len(self.intervals)

    @property
    def skipped_total(self) -> int:
        return sum(self.skipped.values())


def validate_annotation_path(path: PathLike,
                             allowed_extensions: Iterable[str] = DEFAULT_EXTENSIONS) -> Path:
    """Reject files whose extension is not an accepted annotation format."""
    path = Path(path)
    extension = path.suffix.lower().lstrip(".")
    if extension not in allowed_extensions:
        raise InputFormatError(
            "No gtf/gff file provided. Check the extension of your file.", str(path)
        )
    return path


def read_annotation(path: PathLike) -> str:
    """Read the whole annotation file into memory."""
    try:
        with open(path, "r", encoding="utf-8", errors="replace") as handle:
            return handle.read()
    except OSError as e:
        raise AnnotationReadError(f"Cannot read annotation file: {e}", str(path))


def split_lines(text: str) -> List[str]:
    """
    Split annotation text on '\\n' only.

    str.splitlines would also break on form feeds, '\\x85' and other
    Unicode separators that may sit inside a record. A trailing '\\r' is
    left for the record parser to strip.
    """
    lines = text.split("\n")
    if lines and not lines[-1]:
        lines.pop()
    return lines


def partition(items: Sequence, chunk_size: int) -> List[Sequence]:
    """Split a sequence into consecutive chunks of at most chunk_size items."""
    return [items[i:i + chunk_size] for i in range(0, len(items), chunk_size)]


def fold_lines(lines: Iterable[str], parser: RecordParser) -> IngestionResult:
    """Parse a chunk of lines into a local interval map, dropping failures."""
    intervals: IntervalMap = {}
    skipped: Counter = Counter()
    total = 0
    parsed = 0

    for line in lines:
        total += 1
        try:
            record = parser.parse(line)
        except ParseError as e:
            skipped[e.kind] += 1
            continue

        intervals.setdefault(record.gene_id, []).append((record.start, record.end))
        parsed += 1

    return IngestionResult(intervals, total, parsed, dict(skipped))


def merge_interval_maps(left: IntervalMap, right: IntervalMap) -> IntervalMap:
    """
    Merge right into left and return left.

    Interval lists of genes present in both maps are concatenated; the
    relative order of the two lists carries no meaning.
    """
    for gene_id, intervals in right.items():
        existing = left.get(gene_id)
        if existing is None:
            left[gene_id] = intervals
        else:
            existing.extend(intervals)
    return left


def merge_results(left: IngestionResult, right: IngestionResult) -> IngestionResult:
    merge_interval_maps(left.intervals, right.intervals)
    left.lines_total += right.lines_total
    left.records_parsed += right.records_parsed
    left.skipped = dict(Counter(left.skipped) + Counter(right.skipped))
    return left


def _collect(results: Iterable, on_chunk: Optional[Callable[[], object]]) -> list:
    collected = []
    for result in results:
        collected.append(result)
        if on_chunk is not None:
            on_chunk()
    return collected


def collect_exon_intervals(text: str,
                           workers: int = 1,
                           chunk_size: int = 50000,
                           parser: Optional[RecordParser] = None,
                           on_chunk: Optional[Callable[[], object]] = None) -> IngestionResult:
    """
    Build the gene -> exon interval map from annotation text.

    Args:
        text: Whole annotation file content
        workers: Number of worker processes; 1 folds in the calling process
        chunk_size: Upper bound on lines handed to one worker task
        parser: Record parser carrying attribute options
        on_chunk: Called in this process after each chunk is folded

    Returns:
        IngestionResult with the merged interval map
    """
    parser = parser or RecordParser()
    lines = split_lines(text)

    # keep every worker busy on small inputs
    per_worker = -(-len(lines) // workers) if lines else 1
    chunks = partition(lines, max(1, min(chunk_size, per_worker)))

    if workers > 1 and len(chunks) > 1:
        logging.debug(f"Folding {len(lines)} lines in {len(chunks)} chunks on {workers} workers")
        with ProcessPoolExecutor(max_workers=min(workers, len(chunks))) as executor:
            partials = _collect(executor.map(fold_lines, chunks, repeat(parser)), on_chunk)
    else:
        partials = _collect((fold_lines(chunk, parser) for chunk in chunks), on_chunk)

    return reduce(merge_results, partials, IngestionResult())


def ingest_annotation(path: PathLike,
                      workers: int = 1,
                      chunk_size: int = 50000,
                      parser: Optional[RecordParser] = None,
                      allowed_extensions: Iterable[str] = DEFAULT_EXTENSIONS,
                      on_chunk: Optional[Callable[[], object]] = None) -> IngestionResult:
    """Validate, read and fold an annotation file."""
    path = validate_annotation_path(path, allowed_extensions)
    logging.info(f"Reading annotation file: {path}")

    result = collect_exon_intervals(read_annotation(path), workers, chunk_size,
                                    parser, on_chunk)

    logging.info(f"Parsed {result.records_parsed} exon records for {result.gene_count} genes "
                 f"({result.skipped_total} of {result.lines_total} lines skipped)")
    if result.skipped:
        logging.debug(f"Skipped lines by kind: {result.skipped}")
    return result


def read_exon_intervals(path: PathLike, workers: int = 1, **kwargs) -> IntervalMap:
    """Return only the gene -> [(start, end), ...] map of an annotation file."""
    return ingest_annotation(path, workers, **kwargs).intervals
