#!/usr/bin/env python3

"""
Unit tests for attribute field extraction.
"""

import os
import sys
import unittest

# Add the parent directory to the path to import modules
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '../..')))

from exon_length_pipeline.core.attributes import (
    extract_gene_id, extract_attributes, split_pair, strip_version
)
from exon_length_pipeline.core.exceptions import (
    EmptyInputError, InvalidAttributesError, AttributeParseError, ParseErrorKind
)

ENSEMBL_ATTRIBUTES = (
    'gene_id "ENSG00000157911"; gene_version "11"; transcript_id "ENST00000508384"; '
    'transcript_version "5"; exon_number "3"; gene_name "PEX10"; gene_source "ensembl_havana";'
)
GENCODE_ATTRIBUTES = (
    'gene_id "ENSG00000290825.1"; transcript_id "ENST00000456328.2"; gene_type "lncRNA"; '
    'gene_name "DDX11L2"; exon_number 2; exon_id "ENSE00003582793.1"; level 2; tag "basic";'
)
GFF_ATTRIBUTES = (
    "ID=exon:ENST00000456328.2.1;Parent=ENST00000456328.2;gene_id=ENSG00000290825.1;"
    "transcript_id=ENST00000456328.2,exon_number=1"
)


class TestStripVersion(unittest.TestCase):
    """Test version suffix removal."""

    def test_single_separator(self):
        self.assertEqual(strip_version("ENSG00000290825.1"), "ENSG00000290825")

    def test_no_separator(self):
        self.assertEqual(strip_version("ENSG00000157911"), "ENSG00000157911")

    def test_multiple_separators_use_first(self):
        """Only the text before the first separator is kept."""
        self.assertEqual(strip_version("ENSG00000290825.1.2"), "ENSG00000290825")
        self.assertEqual(strip_version("a.b.c.d"), "a")

    def test_custom_separator(self):
        self.assertEqual(strip_version("gene_7-2", separator="-"), "gene_7")
        self.assertEqual(strip_version("ENSG1.2", separator="-"), "ENSG1.2")


class TestSplitPair(unittest.TestCase):
    """Test key/value splitting for both dialects."""

    def test_gtf_pair(self):
        self.assertEqual(split_pair('gene_id "ABC"'), ("gene_id", "ABC"))

    def test_gff_pair(self):
        self.assertEqual(split_pair("gene_id=ENSG00000290825.1"),
                         ("gene_id", "ENSG00000290825.1"))

    def test_unquoted_value(self):
        self.assertEqual(split_pair("level 2"), ("level", "2"))

    def test_first_separator_wins(self):
        self.assertEqual(split_pair('note "a=b c"'), ("note", "a=b c"))
        self.assertEqual(split_pair("Name=x y"), ("Name", "x y"))

    def test_missing_separator(self):
        with self.assertRaises(AttributeParseError) as ctx:
            split_pair("gene_id")
        self.assertEqual(ctx.exception.kind, ParseErrorKind.PARSE)


class TestExtractGeneId(unittest.TestCase):
    """Test gene identifier extraction."""

    def test_gtf_attributes(self):
        field = 'gene_id "ABC"; transcript_id "XYZ"; exon_number "1"; exon_id "123";'
        self.assertEqual(extract_gene_id(field), "ABC")

    def test_ensembl_attributes(self):
        self.assertEqual(extract_gene_id(ENSEMBL_ATTRIBUTES), "ENSG00000157911")

    def test_gencode_version_is_stripped(self):
        self.assertEqual(extract_gene_id(GENCODE_ATTRIBUTES), "ENSG00000290825")

    def test_gff_attributes(self):
        self.assertEqual(extract_gene_id(GFF_ATTRIBUTES), "ENSG00000290825")

    def test_gff_single_pair_without_trailing_delimiter(self):
        self.assertEqual(extract_gene_id("gene_id=ENSG00000290825.1"), "ENSG00000290825")

    def test_gene_id_not_first(self):
        field = 'transcript_id "T1"; gene_name "X"; gene_id "G1.4";'
        self.assertEqual(extract_gene_id(field), "G1")

    def test_keep_version(self):
        self.assertEqual(extract_gene_id(GENCODE_ATTRIBUTES, strip_versions=False),
                         "ENSG00000290825.1")

    def test_similar_key_is_not_gene_id(self):
        field = 'gene_id_source "havana"; gene_id "G2";'
        self.assertEqual(extract_gene_id(field), "G2")

    def test_first_gene_id_wins(self):
        self.assertEqual(extract_gene_id('gene_id "G1"; gene_id "G2";'), "G1")

    def test_empty_field(self):
        with self.assertRaises(EmptyInputError) as ctx:
            extract_gene_id("")
        self.assertEqual(ctx.exception.kind, ParseErrorKind.EMPTY)

    def test_missing_gene_id(self):
        with self.assertRaises(InvalidAttributesError) as ctx:
            extract_gene_id('transcript_id "XYZ"; exon_number "1";')
        self.assertEqual(ctx.exception.kind, ParseErrorKind.INVALID)

    def test_empty_gene_id_value(self):
        with self.assertRaises(InvalidAttributesError):
            extract_gene_id('gene_id ""; transcript_id "XYZ";')

    def test_gene_id_without_value(self):
        with self.assertRaises(AttributeParseError):
            extract_gene_id('transcript_id "XYZ"; gene_id;')

    def test_other_malformed_pairs_are_ignored(self):
        self.assertEqual(extract_gene_id('junk; gene_id "G3"; more_junk'), "G3")

    def test_comma_inside_quoted_gtf_value(self):
        field = 'gene_id "lnc,1"; transcript_id "t1";'
        self.assertEqual(extract_gene_id(field), "lnc,1")
        self.assertEqual(extract_attributes(field, ("gene_id", "transcript_id")),
                         {"gene_id": "lnc,1", "transcript_id": "t1"})

    def test_comma_delimited_gff_pairs(self):
        self.assertEqual(extract_gene_id("exon_number=1,gene_id=G5.2,level=2"), "G5")
        self.assertEqual(extract_gene_id('Note="a,b",gene_id=G6'), "G6")


class TestExtractAttributes(unittest.TestCase):
    """Test extraction of several identifier keys."""

    def test_gene_and_transcript(self):
        attributes = extract_attributes(GENCODE_ATTRIBUTES, ("gene_id", "transcript_id"))
        self.assertEqual(attributes, {
            "gene_id": "ENSG00000290825",
            "transcript_id": "ENST00000456328",
        })

    def test_gff_gene_and_transcript(self):
        attributes = extract_attributes(GFF_ATTRIBUTES, ("gene_id", "transcript_id"))
        self.assertEqual(attributes["transcript_id"], "ENST00000456328")

    def test_missing_transcript(self):
        with self.assertRaises(InvalidAttributesError) as ctx:
            extract_attributes('gene_id "G1";', ("gene_id", "transcript_id"))
        self.assertEqual(ctx.exception.key, "transcript_id")


if __name__ == '__main__':
    unittest.main()
