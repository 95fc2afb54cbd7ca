#!/usr/bin/env python3

"""
Main pipeline class for non-overlapping exon length calculation.

Runs ingestion, coverage and output as monitored phases.
"""

import logging
from pathlib import Path
from typing import List, Optional, Tuple

from .config import PipelineConfig
from .coverage import compute_gene_coverage
from .data_structures import GeneCoverage
from .exceptions import PipelineError
from .ingestion import IngestionResult, ingest_annotation
from .output import write_lengths
from .records import RecordParser
from ..utils.performance_monitor import PerformanceMonitor


class ExonLengthPipeline:
    """Main pipeline class that coordinates all processing phases."""

    def __init__(self, config: Optional[PipelineConfig] = None):
        self.config = config or PipelineConfig()
        self.monitor = PerformanceMonitor(memory_limit_mb=self.config.memory_limit_mb)
        self.parser = RecordParser(
            require_transcript_id=self.config.require_transcript_id,
            separator=self.config.version_separator,
            strip_versions=self.config.strip_gene_version,
        )
        self.ingestion: Optional[IngestionResult] = None
        self.coverage: List[GeneCoverage] = []

    @property
    def results(self) -> List[Tuple[str, int]]:
        """(gene_id, covered_length) pairs of the last run."""
        return [summary.as_tuple() for summary in self.coverage]

    def run(self, annotation_file: str, output_file: str,
            log_file: Optional[str] = None) -> bool:
        """
        Run the complete pipeline.

        Args:
            annotation_file: Path to the GTF/GFF annotation
            output_file: Path of the gene_id/length table to write
            log_file: Optional path for a run log

        Returns:
            True if pipeline completed successfully
        """
        try:
            if log_file:
                self._setup_pipeline_logging(log_file)

            logging.info("Starting exon length pipeline")
            logging.info(f"Configuration: {self.config}")
            logging.info(f"Input file: {annotation_file}")
            logging.info(f"Output file: {output_file}")

            self._ingest(annotation_file)
            self._compute_coverage()
            self._write_output(output_file)

            logging.info("Pipeline completed successfully")
            self.monitor.log_performance_report()
            return True

        except PipelineError as e:
            logging.error(f"Pipeline failed: {e}")
            logging.debug("Full traceback:", exc_info=True)
            return False

    def _setup_pipeline_logging(self, log_file: str) -> None:
        """Attach a file handler for this run to the root logger."""
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(logging.Formatter(
            '%(asctime)s - %(levelname)s - %(message)s'
        ))

        root_logger = logging.getLogger()
        root_logger.addHandler(file_handler)

        if self.config.debug_mode:
            root_logger.setLevel(logging.DEBUG)

    def _check_memory(self) -> None:
        if self.config.enable_memory_monitoring:
            self.monitor.check_memory_limit()

    def _ingest(self, annotation_file: str) -> None:
        """Read the annotation into per-gene exon intervals."""
        with self.monitor.phase_context("ingestion") as metrics:
            self.ingestion = ingest_annotation(
                annotation_file,
                workers=self.config.workers,
                chunk_size=self.config.chunk_size,
                parser=self.parser,
                allowed_extensions=self.config.allowed_extensions,
                on_chunk=self.monitor.get_memory_usage,
            )
            metrics.operations_count = self.ingestion.lines_total
        self._check_memory()

    def _compute_coverage(self) -> None:
        """Compute covered base pairs for every gene."""
        with self.monitor.phase_context("coverage") as metrics:
            logging.info(f"Computing coverage for {self.ingestion.gene_count} genes "
                         f"(strategy: {self.config.coverage_strategy})")
            self.coverage = compute_gene_coverage(
                self.ingestion.intervals,
                workers=self.config.workers,
                strategy=self.config.coverage_strategy,
                max_buffer_span=self.config.max_buffer_span,
                on_chunk=self.monitor.get_memory_usage,
            )
            metrics.operations_count = len(self.coverage)
        self._check_memory()

    def _write_output(self, output_file: str) -> None:
        """Write the gene_id/length table."""
        with self.monitor.phase_context("output") as metrics:
            try:
                metrics.operations_count = write_lengths(
                    self.results, output_file, sort=self.config.sort_output
                )
            except OSError as e:
                raise PipelineError(f"Failed to write output file {output_file}: {e}")
