#!/usr/bin/env python3
"""
Unit tests for named query loading and the built-in suites.

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
    KNOWN_SUITES,
    MissingArtifactError,
    QueryLoader,
    WorldAssumption,
    build_suite,
    get_available_suites,
)
from crosslayer_test_framework.queries import parse_named_queries

CONSOLIDATED_SQL = """-- header comment
/* COUNT_ALL_TEAMS */
SELECT COUNT(*) FROM team;

/* count_youth */
SELECT COUNT(*)
FROM team
WHERE is_youth = 1;
"""

CONSOLIDATED_SPARQL = """#### ALL_TEAMS ####
SELECT (COUNT(?t) AS ?count) WHERE { ?t a :Team }
"""


class TestParseNamedQueries(unittest.TestCase):
    """Test splitting consolidated query files."""

    def test_sql_markers(self):
        """Test block-comment markers split SQL and names are upper-cased."""
        queries = parse_named_queries(CONSOLIDATED_SQL)
        self.assertEqual(sorted(queries), ["COUNT_ALL_TEAMS", "COUNT_YOUTH"])
        self.assertEqual(queries["COUNT_ALL_TEAMS"], "SELECT COUNT(*) FROM team;")
        self.assertEqual(
            queries["COUNT_YOUTH"], "SELECT COUNT(*)\nFROM team\nWHERE is_youth = 1;"
        )

    def test_sparql_markers(self):
        """Test hash markers split SPARQL."""
        queries = parse_named_queries(CONSOLIDATED_SPARQL)
        self.assertEqual(list(queries), ["ALL_TEAMS"])

    def test_text_before_first_marker_is_ignored(self):
        """Test leading comments do not become a query."""
        self.assertEqual(parse_named_queries("-- nothing here\n"), {})


class TestQueryLoader(CrossLayerTestBase):
    """Test the QueryLoader lookup order."""

    def setUp(self):
        super().setUp()
        (self.temp_dir / "integrity_queries.sql").write_text(CONSOLIDATED_SQL)
        single = self.temp_dir / "integrity"
        single.mkdir()
        (single / "count_coaches.sql").write_text("SELECT COUNT(*) FROM coach_role\n")
        self.loader = QueryLoader(self.temp_dir)

    def test_consolidated_file_case_insensitive(self):
        """Test names are matched case-insensitively."""
        self.assertEqual(
            self.loader.load_sql("integrity", "count_all_teams"),
            "SELECT COUNT(*) FROM team;",
        )

    def test_single_file_fallback(self):
        """Test a per-query file is used when the consolidated file lacks it."""
        self.assertEqual(
            self.loader.load_sql("integrity", "count_coaches"),
            "SELECT COUNT(*) FROM coach_role",
        )

    def test_missing_query_raises(self):
        """Test an unknown query raises MissingArtifactError."""
        with self.assertRaises(MissingArtifactError) as cm:
            self.loader.load_sparql("integrity", "count_all_teams")
        self.assertEqual(
            cm.exception.path, self.temp_dir / "integrity" / "count_all_teams.sparql"
        )

    def test_packaged_pairs(self):
        """Test every packaged pair loads in both languages."""
        loader = QueryLoader()
        sql, sparql = loader.load_pair("integrity", "count_all_teams")
        self.assertIn("FROM team", sql)
        self.assertIn("?count", sparql)


class TestSuites(unittest.TestCase):
    """Test the built-in suite definitions."""

    def test_available_suites(self):
        """Test the four suites are registered in order."""
        self.assertEqual(
            get_available_suites(),
            ["INTEGRITY", "ASSUMPTIONS", "REASONING", "VALIDATION"],
        )
        self.assertEqual(list(KNOWN_SUITES), get_available_suites())

    def test_unknown_suite_raises(self):
        """Test an unknown suite name raises ValueError."""
        with self.assertRaises(ValueError):
            build_suite("performance")

    def test_integrity_expectations(self):
        """Test integrity cases expect equal SQL and SPARQL counts."""
        cases = build_suite("integrity")
        self.assertEqual(
            [(c.test_id, c.expected_relational, c.expected_sparql) for c in cases],
            [("INT-01", 7, 7), ("INT-02", 12, 12), ("INT-03", 7, 7)],
        )
        self.assertFalse(any(c.expects_reasoning for c in cases))

    def test_assumptions_expectations(self):
        """Test each world-assumption case expects its own per-layer counts."""
        cases = build_suite("ASSUMPTIONS")
        self.assertEqual(
            [
                (
                    c.test_id,
                    c.expected_relational,
                    c.expected_sparql,
                    c.expected_reasoning,
                    c.world_assumption,
                )
                for c in cases
            ],
            [
                ("OWA-03", 0, 12, 8, WorldAssumption.OPEN_WORLD),
                ("OWA-04", 9, 9, 8, WorldAssumption.OPEN_WORLD),
                ("CWA-02", 3, 3, 8, WorldAssumption.CLOSED_WORLD),
            ],
        )
        self.assertEqual(cases[1].reasoning_query.class_names, ("ContractHolder",))
        self.assertEqual(cases[2].reasoning_query.class_names, ("Player",))

    def test_reasoning_expectations(self):
        """Test reasoning cases expect the same count on all three layers."""
        cases = build_suite("reasoning")
        self.assertEqual(
            [
                (c.expected_relational, c.expected_sparql, c.expected_reasoning)
                for c in cases
            ],
            [(3, 3, 3), (5, 5, 5), (1, 1, 1)],
        )
        self.assertTrue(cases[2].reasoning_query.is_intersection)

    def test_validation_expectations(self):
        """Test the consistency checks and their reasoning questions."""
        cases = build_suite("validation")
        self.assertEqual(
            [
                (c.test_id, c.expected_relational, c.expected_sparql, c.expected_reasoning)
                for c in cases
            ],
            [
                ("CON-01", 26, 26, None),
                ("CON-02", 3, 3, 3),
                ("CON-03", 12, 12, None),
                ("CON-04", 0, 0, 0),
            ],
        )
        self.assertTrue(cases[3].reasoning_query.is_intersection)
        self.assertIs(cases[3].world_assumption, WorldAssumption.REASONING_ONLY)
        self.assertTrue(all(c.category == "VALIDATION" for c in cases))

    def test_every_case_has_queries(self):
        """Test all packaged queries resolve to non-empty text."""
        for name in get_available_suites():
            for case in build_suite(name):
                self.assertTrue(case.relational_query.strip(), case.test_id)
                self.assertTrue(case.sparql_query.strip(), case.test_id)

    def test_test_ids_are_unique(self):
        """Test no two built-in cases share an identifier."""
        ids = [c.test_id for name in get_available_suites() for c in build_suite(name)]
        self.assertEqual(len(ids), len(set(ids)))


if __name__ == "__main__":
    unittest.main()
