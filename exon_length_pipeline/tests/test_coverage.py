#!/usr/bin/env python3

"""
Unit tests for per-gene exon coverage.

Every strategy must give the same counts; the buffer strategy is the
reference.
"""

import os
import random
import sys
import unittest

# Add the parent directory to the path to import modules
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '../..')))

from exon_length_pipeline.core.coverage import (
    buffer_coverage, sweep_coverage, interval_tree_coverage, covered_length,
    summarize_gene, compute_gene_coverage, compute_exon_lengths, gene_span
)
from exon_length_pipeline.core.exceptions import ConfigurationError

STRATEGIES = ("buffer", "sweep", "intervaltree", "auto")


class TestCoveredLength(unittest.TestCase):
    """Test the union length of closed intervals."""

    def assertAllStrategies(self, intervals, expected):
        for strategy in STRATEGIES:
            with self.subTest(strategy=strategy):
                self.assertEqual(covered_length(intervals, strategy), expected)

    def test_single_interval(self):
        self.assertAllStrategies([(10, 20)], 11)

    def test_overlapping_intervals(self):
        self.assertAllStrategies([(10, 20), (15, 25)], 16)

    def test_disjoint_intervals(self):
        self.assertAllStrategies([(1, 5), (10, 12)], 8)

    def test_nested_intervals(self):
        self.assertAllStrategies([(1, 100), (20, 30), (40, 40)], 100)

    def test_adjacent_intervals(self):
        self.assertAllStrategies([(1, 5), (6, 10)], 10)

    def test_duplicate_intervals(self):
        self.assertAllStrategies([(7, 9), (7, 9), (7, 9)], 3)

    def test_single_base(self):
        self.assertAllStrategies([(42, 42)], 1)

    def test_unsorted_input(self):
        self.assertAllStrategies([(50, 60), (1, 3), (55, 70), (2, 4)], 25)

    def test_reversed_interval_covers_nothing(self):
        self.assertAllStrategies([(20, 10)], 0)
        self.assertAllStrategies([(20, 10), (1, 3)], 3)

    def test_empty(self):
        for function in (buffer_coverage, sweep_coverage, interval_tree_coverage):
            with self.subTest(function=function.__name__):
                self.assertEqual(function([]), 0)

    def test_strategies_agree_on_random_genes(self):
        rng = random.Random(1234)
        for _ in range(200):
            intervals = []
            for _ in range(rng.randint(1, 12)):
                start = rng.randint(1, 2000)
                intervals.append((start, start + rng.randint(0, 300)))
            expected = buffer_coverage(intervals)
            self.assertEqual(sweep_coverage(intervals), expected, intervals)
            self.assertEqual(interval_tree_coverage(intervals), expected, intervals)

    def test_auto_avoids_buffer_for_wide_genes(self):
        intervals = [(1, 10), (999_991, 1_000_000)]
        self.assertEqual(covered_length(intervals, "auto", max_buffer_span=1000), 20)

    def test_unknown_strategy(self):
        with self.assertRaises(ConfigurationError):
            covered_length([(1, 2)], "bitmap")


class TestGeneSummaries(unittest.TestCase):
    """Test per-gene summaries and the parallel driver."""

    def setUp(self):
        self.intervals = {
            "G1": [(10, 20)],
            "G2": [(10, 20), (15, 25)],
            "G3": [(1, 5), (10, 12)],
            "G4": [(100, 200), (150, 160), (300, 300)],
        }
        self.expected = {"G1": 11, "G2": 16, "G3": 8, "G4": 102}

    def test_gene_span(self):
        self.assertEqual(gene_span([(30, 40), (10, 20), (15, 50)]), (10, 50))

    def test_summarize_gene(self):
        summary = summarize_gene("G4", self.intervals["G4"])

        self.assertEqual(summary.gene_id, "G4")
        self.assertEqual(summary.covered_length, 102)
        self.assertEqual(summary.exon_count, 3)
        self.assertEqual((summary.span_start, summary.span_end), (100, 300))
        self.assertEqual(summary.span, 201)
        self.assertAlmostEqual(summary.coverage_fraction, 102 / 201)

    def test_compute_exon_lengths(self):
        results = compute_exon_lengths(self.intervals)
        self.assertEqual(dict(results), self.expected)

    def test_one_entry_per_gene(self):
        results = compute_exon_lengths(self.intervals, workers=3)

        gene_ids = [gene_id for gene_id, _ in results]
        self.assertEqual(len(gene_ids), len(set(gene_ids)))
        self.assertEqual(set(gene_ids), set(self.intervals))

    def test_parallel_matches_sequential(self):
        for strategy in STRATEGIES:
            with self.subTest(strategy=strategy):
                results = compute_exon_lengths(self.intervals, workers=2, strategy=strategy)
                self.assertEqual(dict(results), self.expected)

    def test_input_is_not_modified(self):
        snapshot = {gene_id: list(v) for gene_id, v in self.intervals.items()}
        compute_gene_coverage(self.intervals, workers=2)
        self.assertEqual(self.intervals, snapshot)

    def test_empty_collection(self):
        self.assertEqual(compute_exon_lengths({}, workers=4), [])

    def test_unknown_strategy_rejected_up_front(self):
        with self.assertRaises(ConfigurationError):
            compute_gene_coverage(self.intervals, strategy="bitmap")


if __name__ == '__main__':
    unittest.main()
