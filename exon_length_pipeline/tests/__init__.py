#!/usr/bin/env python3

"""
Test suite for the exon length pipeline.

Unit tests covering:
- Attribute extraction in GTF and GFF dialects
- Record parsing and the line-level error taxonomy
- Ingestion fold/reduce with one and several workers
- Coverage strategies and their agreement
- Configuration, output, monitoring and the command line
"""
