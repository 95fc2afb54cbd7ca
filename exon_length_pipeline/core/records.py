#!/usr/bin/env python3

"""
Record parser for tab-delimited GTF/GFF annotation lines.

Turns one line into an ExonRecord or raises a ParseError subclass;
malformed input never escapes as anything else.
"""

from .attributes import (
    GENE_ID, TRANSCRIPT_ID, DEFAULT_SEPARATOR, extract_attributes
)
from .data_structures import ExonRecord, U32_MAX
from .exceptions import EmptyInputError, NotExonError, RecordParseError

EXON_FEATURE = "exon"
MIN_FIELDS = 9

FEATURE_COLUMN = 2
START_COLUMN = 3
END_COLUMN = 4
ATTRIBUTE_COLUMN = 8


def parse_coordinate(text: str, name: str = "coordinate") -> int:
    """Parse an unsigned 32-bit genomic coordinate."""
    if not (text.isascii() and text.isdigit()):
        raise RecordParseError(f"Invalid {name}: {text!r}")
    value = int(text)
    if value > U32_MAX:
        raise RecordParseError(f"{name.capitalize()} out of range: {value}")
    return value


class RecordParser:
    """Parse annotation lines into exon records."""

    def __init__(self, require_transcript_id: bool = False,
                 separator: str = DEFAULT_SEPARATOR,
                 strip_versions: bool = True):
        self.require_transcript_id = require_transcript_id
        self.separator = separator
        self.strip_versions = strip_versions
        self.keys = (GENE_ID, TRANSCRIPT_ID) if require_transcript_id else (GENE_ID,)

    def parse(self, line: str) -> ExonRecord:
        """
        Parse one annotation line.

        Args:
            line: Raw line; a trailing newline is tolerated

        Returns:
            ExonRecord for exon lines

        Raises:
            EmptyInputError: blank or comment line
            RecordParseError: too few columns or bad coordinates
            NotExonError: feature column is not ``exon``
            InvalidAttributesError, AttributeParseError: from the attribute field
        """
        line = line.rstrip("\r\n")
        if not line or line.startswith("#"):
            raise EmptyInputError()

        fields = line.split("\t")
        if len(fields) < MIN_FIELDS:
            raise RecordParseError(f"Expected {MIN_FIELDS} columns, found {len(fields)}")

        feature = fields[FEATURE_COLUMN]
        if feature != EXON_FEATURE:
            raise NotExonError()

        start = parse_coordinate(fields[START_COLUMN], "start")
        end = parse_coordinate(fields[END_COLUMN], "end")

        attributes = extract_attributes(
            fields[ATTRIBUTE_COLUMN], self.keys, self.separator, self.strip_versions
        )

        return ExonRecord(
            feature=feature,
            start=start,
            end=end,
            gene_id=attributes[GENE_ID],
            transcript_id=attributes.get(TRANSCRIPT_ID),
        )


def parse_record(line: str,
                 require_transcript_id: bool = False,
                 separator: str = DEFAULT_SEPARATOR,
                 strip_versions: bool = True) -> ExonRecord:
    """Parse a single line; see RecordParser.parse."""
    return RecordParser(require_transcript_id, separator, strip_versions).parse(line)
