#!/usr/bin/env python3

"""
Run monitoring for the exon length pipeline.

Times the ingestion, coverage and output phases and tracks resident
memory of the pipeline process together with its worker processes.
"""

import time
import logging
import psutil
from dataclasses import dataclass
from typing import Optional, Dict
from contextlib import contextmanager

from ..core.exceptions import MemoryError as PipelineMemoryError

BYTES_PER_MB = 1024 * 1024


@dataclass
class PerformanceMetrics:
    """Timing and memory of one phase."""
    phase_name: str
    start_time: float
    end_time: Optional[float] = None
    peak_memory_mb: float = 0.0
    operations_count: int = 0

    @property
    def elapsed_time(self) -> float:
        end_time = self.end_time if self.end_time is not None else time.time()
        return end_time - self.start_time


class PerformanceMonitor:
    """
    Phase timer and memory sampler backed by psutil.

    A memory sample is the RSS of this process plus the RSS of its live
    child processes, so ProcessPoolExecutor workers count while they
    exist. Samples are taken at phase boundaries and whenever
    ``get_memory_usage`` is called; the pool drivers call it after every
    finished chunk so worker memory is seen while the pool is up.
    """

    def __init__(self, memory_limit_mb: int = 16384):
        self.memory_limit_mb = memory_limit_mb
        self.start_time = time.time()
        self.phase_metrics: Dict[str, PerformanceMetrics] = {}
        self.current_phase: Optional[str] = None

        try:
            self.process = psutil.Process()
        except psutil.Error as e:
            self.process = None
            logging.warning(f"Cannot inspect current process, memory monitoring disabled: {e}")

        self.peak_memory_mb = 0.0
        self.start_memory_mb = self.get_memory_usage()

    def children_memory_mb(self) -> float:
        """RSS of all live descendant processes in MB."""
        if not self.process:
            return 0.0

        try:
            children = self.process.children(recursive=True)
        except psutil.Error as e:
            logging.debug(f"Cannot list child processes: {e}")
            return 0.0

        total = 0
        for child in children:
            try:
                total += child.memory_info().rss
            except psutil.Error:
                # exited between listing and sampling
                continue
        return total / BYTES_PER_MB

    def get_memory_usage(self) -> float:
        """Sample current memory in MB and update the peaks."""
        if not self.process:
            return 0.0

        try:
            own_mb = self.process.memory_info().rss / BYTES_PER_MB
        except psutil.Error as e:
            logging.warning(f"Error getting memory usage: {e}")
            return 0.0

        memory_mb = own_mb + self.children_memory_mb()
        self.peak_memory_mb = max(self.peak_memory_mb, memory_mb)

        metrics = self.phase_metrics.get(self.current_phase) if self.current_phase else None
        if metrics is not None:
            metrics.peak_memory_mb = max(metrics.peak_memory_mb, memory_mb)

        return memory_mb

    def check_memory_limit(self) -> None:
        """Raise MemoryError when the current sample is above the limit."""
        current_memory = self.get_memory_usage()

        if current_memory > self.memory_limit_mb:
            logging.warning(f"Memory usage exceeded limit: "
                            f"{current_memory:.1f}MB > {self.memory_limit_mb}MB")
            raise PipelineMemoryError("Memory usage exceeded limit",
                                      current_memory, self.memory_limit_mb)

    @contextmanager
    def phase_context(self, phase_name: str):
        """Time a phase; yields its PerformanceMetrics."""
        metrics = PerformanceMetrics(phase_name=phase_name, start_time=time.time())
        self.phase_metrics[phase_name] = metrics
        self.current_phase = phase_name
        self.get_memory_usage()
        logging.info(f"Started phase: {phase_name}")

        try:
            yield metrics
        finally:
            self.get_memory_usage()
            metrics.end_time = time.time()
            self.current_phase = None
            logging.info(f"Completed phase {phase_name} in {metrics.elapsed_time:.2f}s "
                         f"(peak memory: {metrics.peak_memory_mb:.1f}MB)")

    def get_total_elapsed_time(self) -> float:
        return time.time() - self.start_time

    def memory_delta_mb(self) -> float:
        """Peak memory growth since the monitor was created."""
        self.get_memory_usage()
        return max(self.peak_memory_mb - self.start_memory_mb, 0.0)

    def format_footer(self) -> str:
        """One-line run summary for the diagnostic stream."""
        return f"Elapsed: {self.get_total_elapsed_time():.4f}s | Memory: {self.memory_delta_mb():.4f} MB"

    def log_performance_report(self) -> None:
        """Log total time, peak memory and one line per phase."""
        logging.info(f"Total time: {self.get_total_elapsed_time():.2f}s, "
                     f"peak memory: {self.peak_memory_mb:.1f}MB "
                     f"(+{self.memory_delta_mb():.1f}MB, limit {self.memory_limit_mb}MB)")

        for name, metrics in self.phase_metrics.items():
            logging.info(f"  {name}: {metrics.elapsed_time:.2f}s, "
                         f"{metrics.operations_count} items, "
                         f"peak {metrics.peak_memory_mb:.1f}MB")
