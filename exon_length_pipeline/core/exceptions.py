#!/usr/bin/env python3

"""
Custom exceptions for the exon length pipeline.

Line-level parse errors are recoverable and are swallowed by ingestion;
the remaining types are fatal for a run.
"""


class ParseErrorKind:
    """Kinds of line-level parse failure."""
    EMPTY = "Empty"
    NO_EXON = "NoExon"
    INVALID = "Invalid"
    PARSE = "Parse"

    ALL = (EMPTY, NO_EXON, INVALID, PARSE)


class PipelineError(Exception):
    """Base exception for all pipeline-related errors."""
    pass


class ParseError(PipelineError):
    """Error occurred while parsing an annotation line or attribute field."""

    kind = ParseErrorKind.PARSE
    default_message = "Parsing error"

    def __init__(self, message: str = "", filename: str = "", line_number: int = 0):
        super().__init__(message or self.default_message)
        self.filename = filename
        self.line_number = line_number

    def __str__(self):
        if self.filename and self.line_number:
            return f"Parse error in {self.filename} at line {self.line_number}: {super().__str__()}"
        elif self.filename:
            return f"Parse error in {self.filename}: {super().__str__()}"
        return super().__str__()


class EmptyInputError(ParseError):
    """Line or attribute field was empty (comments count as empty)."""
    kind = ParseErrorKind.EMPTY
    default_message = "Empty line"


class NotExonError(ParseError):
    """Feature-type column is not ``exon``."""
    kind = ParseErrorKind.NO_EXON
    default_message = "Not an exon"


class InvalidAttributesError(ParseError):
    """A required attribute is absent after a full scan."""
    kind = ParseErrorKind.INVALID
    default_message = "Invalid GTF line"

    def __init__(self, message: str = "", key: str = "gene_id", **kwargs):
        super().__init__(message or f"Missing required attribute '{key}'", **kwargs)
        self.key = key


class AttributeParseError(ParseError):
    """A key/value pair could not be split into key and value."""
    kind = ParseErrorKind.PARSE

    def __init__(self, message: str = "", segment: str = "", **kwargs):
        super().__init__(message or f"Cannot split attribute pair: {segment!r}", **kwargs)
        self.segment = segment


class RecordParseError(ParseError):
    """Columns or numeric fields of a record could not be decoded."""
    kind = ParseErrorKind.PARSE


class InputFormatError(PipelineError):
    """Input file does not carry an accepted annotation extension."""

    def __init__(self, message: str, path: str = ""):
        super().__init__(message)
        self.path = path

    def __str__(self):
        if self.path:
            return f"{super().__str__()} ({self.path})"
        return super().__str__()


class AnnotationReadError(PipelineError):
    """Annotation file could not be read at all."""

    def __init__(self, message: str, path: str = ""):
        super().__init__(message)
        self.path = path


class ConfigurationError(PipelineError):
    """Error in pipeline configuration."""
    pass


class MemoryError(PipelineError):
    """Memory usage exceeded limits."""

    def __init__(self, message: str, current_usage: float, limit: float):
        super().__init__(message)
        self.current_usage = current_usage
        self.limit = limit

    def __str__(self):
        return f"Memory error: {super().__str__()} (current: {self.current_usage:.1f}MB, limit: {self.limit:.1f}MB)"
