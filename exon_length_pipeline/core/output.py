#!/usr/bin/env python3

"""
Result emitter: one ``gene_id<TAB>covered_length`` line per gene.
"""

import logging
from pathlib import Path
from typing import Iterable, TextIO, Tuple, Union


def format_line(gene_id: str, length: int) -> str:
    return f"{gene_id}\t{length}\n"


def write_lengths(results: Iterable[Tuple[str, int]],
                  out: Union[str, Path, TextIO],
                  sort: bool = False) -> int:
    """
    Write per-gene covered lengths.

    Args:
        results: (gene_id, covered_length) pairs
        out: Output path or an open text stream
        sort: Sort lines by gene id instead of keeping result order

    Returns:
        Number of lines written
    """
    if sort:
        results = sorted(results)

    if isinstance(out, (str, Path)):
        path = Path(out)
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w") as handle:
            count = _write(results, handle)
        logging.info(f"Wrote {count} genes to {path}")
        return count

    return _write(results, out)


def _write(results: Iterable[Tuple[str, int]], handle: TextIO) -> int:
    count = 0
    for gene_id, length in results:
        handle.write(format_line(gene_id, length))
        count += 1
    return count
