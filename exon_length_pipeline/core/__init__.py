#!/usr/bin/env python3

"""
Core module for the exon length pipeline.

Contains the record parser, ingestion, coverage calculation, configuration
and exception types.
"""

from .data_structures import ExonRecord, GeneCoverage
from .exceptions import (
    PipelineError, ParseError, ParseErrorKind, EmptyInputError, NotExonError,
    InvalidAttributesError, AttributeParseError, RecordParseError,
    InputFormatError, AnnotationReadError, ConfigurationError, MemoryError
)
from .config import PipelineConfig, load_config

__all__ = [
    'ExonRecord', 'GeneCoverage',
    'PipelineError', 'ParseError', 'ParseErrorKind', 'EmptyInputError', 'NotExonError',
    'InvalidAttributesError', 'AttributeParseError', 'RecordParseError',
    'InputFormatError', 'AnnotationReadError', 'ConfigurationError', 'MemoryError',
    'PipelineConfig', 'load_config'
]
