#!/usr/bin/env python3

"""
Non-Overlapping Exon Length pipeline

Computes, for each gene of a GTF/GFF annotation, the number of base pairs
covered by at least one exon, counting overlapping exons once.

Modules:
- core: record parsing, ingestion, coverage, configuration and errors
- utils: performance monitoring
- tests: unit test suite
"""

__version__ = "0.3.0"
__author__ = "Exon Length Pipeline Team"

# Import main components for easy access
from .core.data_structures import ExonRecord, GeneCoverage
from .core.exceptions import (
    PipelineError, ParseError, EmptyInputError, NotExonError,
    InvalidAttributesError, AttributeParseError, RecordParseError,
    InputFormatError, AnnotationReadError, ConfigurationError, MemoryError
)
from .core.config import PipelineConfig, load_config
from .core.attributes import extract_gene_id, extract_attributes, strip_version
from .core.records import RecordParser, parse_record
from .core.ingestion import collect_exon_intervals, ingest_annotation, read_exon_intervals
from .core.coverage import covered_length, compute_exon_lengths, compute_gene_coverage
from .core.output import write_lengths
from .core.pipeline import ExonLengthPipeline

__all__ = [
    # Main pipeline
    'ExonLengthPipeline',
    # Data structures
    'ExonRecord', 'GeneCoverage',
    # Parsing and computation
    'extract_gene_id', 'extract_attributes', 'strip_version',
    'RecordParser', 'parse_record',
    'collect_exon_intervals', 'ingest_annotation', 'read_exon_intervals',
    'covered_length', 'compute_exon_lengths', 'compute_gene_coverage',
    'write_lengths',
    # Exceptions
    'PipelineError', 'ParseError', 'EmptyInputError', 'NotExonError',
    'InvalidAttributesError', 'AttributeParseError', 'RecordParseError',
    'InputFormatError', 'AnnotationReadError', 'ConfigurationError', 'MemoryError',
    # Configuration
    'PipelineConfig', 'load_config'
]
