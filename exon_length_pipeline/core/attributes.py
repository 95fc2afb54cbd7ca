#!/usr/bin/env python3

"""
Attribute field extraction for GTF and GFF annotation lines.

The ninth column is split into key/value pairs and only the requested
identifier keys are decoded. Both dialects are handled per pair:

    GTF:  gene_id "ENSG00000157911"; transcript_id "ENST00000508384";
    GFF:  ID=exon:ENST00000456328.2.1;gene_id=ENSG00000290825.1,exon_number=1
"""

import re
from typing import Dict, Iterable, Tuple

from .exceptions import EmptyInputError, InvalidAttributesError, AttributeParseError

GENE_ID = "gene_id"
TRANSCRIPT_ID = "transcript_id"
VERSIONED_KEYS = frozenset((GENE_ID, TRANSCRIPT_ID))

DEFAULT_SEPARATOR = "."
QUOTE_CHARS = "\"'"

# ';' separates pairs in both dialects, ',' shows up in some GFF exports.
# A ',' only counts when an even number of quotes follows it, i.e. outside
# a quoted GTF value such as gene_id "lnc,1".
_PAIR_DELIMITER = re.compile(r';|,(?=[^"]*(?:"[^"]*"[^"]*)*$)')
# first ' ' (GTF) or '=' (GFF) splits key from value
_KEY_VALUE_SEPARATOR = re.compile(r"[ =]")


def strip_version(value: str, separator: str = DEFAULT_SEPARATOR) -> str:
    """
    Drop a version suffix from an identifier.

    Everything up to the first separator is kept, so
    ``ENSG00000290825.1`` becomes ``ENSG00000290825`` and
    ``ENSG00000290825.1.2`` still becomes ``ENSG00000290825``.
    """
    head, _, _ = value.partition(separator)
    return head


def split_pair(segment: str) -> Tuple[str, str]:
    """Split one ``key "value"`` or ``key=value`` pair."""
    match = _KEY_VALUE_SEPARATOR.search(segment)
    if match is None:
        raise AttributeParseError(segment=segment)

    key = segment[:match.start()]
    value = segment[match.end():].strip().strip(QUOTE_CHARS)
    return key, value


def extract_attributes(field: str,
                       keys: Iterable[str] = (GENE_ID,),
                       separator: str = DEFAULT_SEPARATOR,
                       strip_versions: bool = True) -> Dict[str, str]:
    """
    Extract the requested keys from a raw attribute field.

    Pairs whose text does not start with one of the requested keys are
    skipped without being split. The first pair for a key wins and
    scanning stops once every key has been seen.

    Raises:
        EmptyInputError: the field is empty
        AttributeParseError: a candidate pair has no key/value separator
        InvalidAttributesError: a requested key is missing or empty
    """
    if not field or field.isspace():
        raise EmptyInputError("Empty attribute field")

    keys = tuple(keys)
    found: Dict[str, str] = {}

    for segment in _PAIR_DELIMITER.split(field):
        segment = segment.strip()
        if not segment.startswith(keys):
            continue

        key, value = split_pair(segment)
        if key not in keys or key in found:
            continue

        if strip_versions and key in VERSIONED_KEYS:
            value = strip_version(value, separator)
        found[key] = value

        if len(found) == len(keys):
            break

    for key in keys:
        if not found.get(key):
            raise InvalidAttributesError(key=key)

    return found


def extract_gene_id(field: str,
                    separator: str = DEFAULT_SEPARATOR,
                    strip_versions: bool = True) -> str:
    """Return the canonical gene identifier of an attribute field."""
    return extract_attributes(field, (GENE_ID,), separator, strip_versions)[GENE_ID]
