#!/usr/bin/env python3
"""
Unit tests for the consistency analyzer.

Copyright (C) 2025, David Beckett https://www.dajobe.org/

This package is Free Software and part of Redland http://librdf.org/

It is licensed under the following three licenses as alternatives:
  1. GNU Lesser General Public License (LGPL) V2.1 or any newer version
  2. GNU General Public License (GPL) V2 or any newer version
  3. Apache License, V2.0 or any newer version

You may not use this file except in compliance with at least one of
the above three licenses.

See LICENSE.html or LICENSE.txt at the top of this package for the
complete terms and further detail along with the license texts for
the licenses in COPYING.LIB, COPYING and LICENSE-2.0.txt respectively.
"""

import unittest

import sys
import os

sys.path.insert(0, os.path.dirname(__file__))
from test_base import CrossLayerTestBase
from crosslayer_test_framework import (
    ConsistencyAnalyzer,
    Layer,
    Relationship,
    WorldAssumption,
)
from crosslayer_test_framework.analysis import classify

LOGGER_NAME = "crosslayer_test_framework.analysis"


class TestClassify(unittest.TestCase):
    """Test the open-world versus closed-world relationship."""

    def test_classify(self):
        """Test equal, superset and deficit classification."""
        self.assertIs(classify(7, 7), Relationship.EQUAL)
        self.assertIs(classify(0, 12), Relationship.SUPERSET)
        self.assertIs(classify(5, 3), Relationship.SUBSET)


class TestConsistencyAnalyzer(CrossLayerTestBase):
    """Test per-case verdicts and advisory observations."""

    def setUp(self):
        super().setUp()
        self.analyzer = ConsistencyAnalyzer()

    def test_superset_is_expected_and_passes(self):
        """Test an open-world superset with met expectations passes."""
        owa = WorldAssumption.OPEN_WORLD
        results = [
            self.create_layer_result(Layer.RELATIONAL, 0, 0, world_assumption=owa),
            self.create_layer_result(
                Layer.ONTOLOGY_MEDIATED, 12, 12, world_assumption=owa
            ),
            self.create_layer_result(Layer.REASONING, 8, 8, world_assumption=owa),
        ]
        with self.assertLogs(LOGGER_NAME, level="INFO") as logs:
            analysis = self.analyzer.analyze(results)

        self.assertTrue(analysis.passed)
        self.assertEqual(
            [o.relationship for o in analysis.observations],
            [Relationship.SUPERSET, Relationship.SUPERSET],
        )
        self.assertTrue(all(line.startswith("INFO") for line in logs.output))
        self.assertIn("superset as expected", logs.output[0])

    def test_deficit_is_logged_as_warning(self):
        """Test an open-world count below the relational count warns."""
        results = [
            self.create_layer_result(Layer.RELATIONAL, 7, 7),
            self.create_layer_result(Layer.ONTOLOGY_MEDIATED, 5, 5),
        ]
        with self.assertLogs(LOGGER_NAME, level="WARNING") as logs:
            analysis = self.analyzer.analyze(results)

        self.assertTrue(analysis.passed)
        self.assertIs(analysis.observations[0].relationship, Relationship.SUBSET)
        self.assertIn("unexpected deficit", logs.output[0])

    def test_equal_counts(self):
        """Test agreeing layers produce an EQUAL observation."""
        results = [
            self.create_layer_result(Layer.RELATIONAL),
            self.create_layer_result(Layer.ONTOLOGY_MEDIATED),
        ]
        analysis = self.analyzer.analyze(results)
        self.assertIs(analysis.observations[0].relationship, Relationship.EQUAL)
        self.assertEqual(analysis.observations[0].closed_world_count, 7)

    def test_verdict_uses_expectations_not_relationships(self):
        """Test a layer missing its expectation fails even when counts agree."""
        results = [
            self.create_layer_result(Layer.RELATIONAL, 7, 6),
            self.create_layer_result(Layer.ONTOLOGY_MEDIATED, 7, 6),
        ]
        analysis = self.analyzer.analyze(results)

        self.assertFalse(analysis.passed)
        self.assertEqual(
            analysis.failed_layers, [Layer.RELATIONAL, Layer.ONTOLOGY_MEDIATED]
        )
        self.assertIs(analysis.observations[0].relationship, Relationship.EQUAL)

    def test_errors_produce_no_observations(self):
        """Test error outcomes are not compared."""
        results = [
            self.create_layer_result(Layer.RELATIONAL, 7, "locked"),
            self.create_layer_result(Layer.ONTOLOGY_MEDIATED),
        ]
        analysis = self.analyzer.analyze(results)
        self.assertEqual(analysis.observations, [])
        self.assertFalse(analysis.passed)

    def test_unavailable_layer_does_not_fail_case(self):
        """Test an unavailable layer leaves the case passing."""
        results = [
            self.create_layer_result(Layer.RELATIONAL),
            self.create_layer_result(
                Layer.ONTOLOGY_MEDIATED, 7, "no executable", unavailable=True
            ),
        ]
        analysis = self.analyzer.analyze(results)
        self.assertTrue(analysis.passed)
        self.assertEqual(analysis.failed_layers, [])

    def test_analyze_empty_raises(self):
        """Test analyzing no results is rejected."""
        with self.assertRaises(ValueError):
            self.analyzer.analyze([])

    def test_analyze_all_groups_by_test_id(self):
        """Test results are grouped per case in first-seen order."""
        results = [
            self.create_layer_result(Layer.RELATIONAL, test_id="B"),
            self.create_layer_result(Layer.RELATIONAL, test_id="A"),
            self.create_layer_result(Layer.ONTOLOGY_MEDIATED, test_id="B"),
        ]
        analyses = self.analyzer.analyze_all(results)
        self.assertEqual([a.test_id for a in analyses], ["B", "A"])
        self.assertEqual(len(analyses[0].results), 2)


if __name__ == "__main__":
    unittest.main()
