#!/usr/bin/env python3
"""
Unit tests for the translation-process adapter.

These tests drive a fake translation executable written as a small
Python script, so they need no real translator installed.

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

import time
import unittest
from unittest.mock import MagicMock

import sys
import os

sys.path.insert(0, os.path.dirname(os.path.dirname(__file__)))
from test_base import CrossLayerTestBase
from crosslayer_test_framework import (
    ExecutableNotFoundError,
    MissingArtifactError,
    PreconditionError,
    RelationalEngine,
    TranslationConfig,
    TranslationEngine,
    TranslationExecutionError,
    discover_executable,
    probe_executable,
)

QUERY = "SELECT (COUNT(?t) AS ?count) WHERE { ?t a <http://example.org/Team> }"


class TranslationTestBase(CrossLayerTestBase):
    """Shared fixtures: a started relational engine and placeholder artifacts."""

    def setUp(self):
        super().setUp()
        self.relational = RelationalEngine(self.create_db_config())
        self.relational.start()
        self.ontology, self.mapping = self.create_artifacts()
        self.work_dir = self.temp_dir / "work"
        self.work_dir.mkdir()

    def tearDown(self):
        self.relational.stop()
        super().tearDown()

    def create_engine(self, candidates, timeout=30.0, probe_timeout=5.0, preserve_temp=False):
        config = TranslationConfig(
            ontology_path=self.ontology,
            mapping_path=self.mapping,
            candidates=[str(c) for c in candidates],
            timeout=timeout,
            probe_timeout=probe_timeout,
            temp_dir=self.work_dir,
            preserve_temp=preserve_temp,
        )
        return TranslationEngine(self.relational, config)

    def leftover_temp_files(self):
        return sorted(p.name for p in self.work_dir.glob("sparql_*"))


class TestTranslationSetup(TranslationTestBase):
    """Test setup preconditions and the generated properties file."""

    def test_setup_requires_started_relational_engine(self):
        """Test setup() refuses to run before the relational engine starts."""
        stopped = RelationalEngine(self.create_db_config("other.sqlite"))
        engine = TranslationEngine(
            stopped,
            TranslationConfig(ontology_path=self.ontology, mapping_path=self.mapping),
        )
        with self.assertRaises(PreconditionError):
            engine.setup()

    def test_setup_reports_missing_ontology(self):
        """Test a missing ontology file is named in MissingArtifactError."""
        self.ontology.unlink()
        engine = self.create_engine([])
        with self.assertRaises(MissingArtifactError) as cm:
            engine.setup()
        self.assertEqual(cm.exception.path, self.ontology)
        self.assertFalse(engine.is_setup)

    def test_setup_reports_missing_mapping(self):
        """Test a missing mapping file is named in MissingArtifactError."""
        self.mapping.unlink()
        engine = self.create_engine([])
        with self.assertRaises(MissingArtifactError) as cm:
            engine.setup()
        self.assertIn("mapping", str(cm.exception))

    def test_setup_writes_connection_properties(self):
        """Test the properties file mirrors the relational connection."""
        engine = self.create_engine([])
        engine.setup()

        content = engine.properties_path.read_text()
        self.assertIn(f"jdbc.url={self.relational.connection_url}\n", content)
        self.assertIn("jdbc.driver=org.sqlite.JDBC\n", content)
        self.assertIn("jdbc.user=sa\n", content)
        self.assertIn("jdbc.password=\n", content)

    def test_setup_succeeds_without_executable(self):
        """Test setup() only validates artifacts and does not probe executables."""
        discover = MagicMock(side_effect=ExecutableNotFoundError("none", ["ontop"]))
        engine = TranslationEngine(
            self.relational,
            TranslationConfig(
                ontology_path=self.ontology,
                mapping_path=self.mapping,
                temp_dir=self.work_dir,
            ),
            discover=discover,
        )
        engine.setup()
        self.assertTrue(engine.is_setup)
        discover.assert_not_called()

    def test_cleanup_removes_properties_and_is_idempotent(self):
        """Test cleanup() deletes the generated properties file and can repeat."""
        engine = self.create_engine([])
        engine.setup()
        properties = engine.properties_path

        engine.cleanup()
        engine.cleanup()

        self.assertFalse(properties.exists())
        self.assertFalse(engine.is_setup)


class TestExecutableDiscovery(TranslationTestBase):
    """Test probing of the ordered candidate list."""

    def setUp(self):
        self.require_posix()
        super().setUp()

    def test_first_working_candidate_wins(self):
        """Test missing and failing candidates are skipped in order."""
        failing = self.create_fake_translator(mode="probe-fail", name="broken")
        working = self.create_fake_translator(name="ontop")
        also_working = self.create_fake_translator(name="ontop2")

        found = discover_executable(
            [str(self.temp_dir / "missing"), str(failing), str(working), str(also_working)]
        )
        self.assertEqual(found, str(working))

    def test_no_candidate_raises(self):
        """Test an exhausted candidate list raises ExecutableNotFoundError."""
        candidates = [str(self.temp_dir / "missing"), "no-such-translator-cmd"]
        with self.assertRaises(ExecutableNotFoundError) as cm:
            discover_executable(candidates)
        self.assertEqual(cm.exception.candidates, candidates)

    def test_probe_timeout_rejects_hanging_candidate(self):
        """Test a probe that does not answer within the timeout is rejected."""
        hanging = self.create_fake_translator(mode="probe-hang")

        start = time.monotonic()
        self.assertFalse(probe_executable(str(hanging), timeout=0.5))
        self.assertLess(time.monotonic() - start, 10)

    def test_version_check_kills_hanging_launcher_children(self):
        """Test a launcher whose '--version' blocks in a child is rejected promptly."""
        launcher = self.create_launcher_translator(hang_on_version=True)

        start = time.monotonic()
        self.assertFalse(probe_executable(str(launcher), timeout=0.5))
        self.assertLess(time.monotonic() - start, 3.0)

    def test_discovery_result_is_cached(self):
        """Test discovery runs once even when it fails."""
        discover = MagicMock(side_effect=ExecutableNotFoundError("none", ["ontop"]))
        engine = self.create_engine([])
        engine.discover = discover

        for _ in range(2):
            with self.assertRaises(ExecutableNotFoundError):
                engine.execute(QUERY)
        discover.assert_called_once()


class TestTranslationExecution(TranslationTestBase):
    """Test running queries through a fake translator."""

    def setUp(self):
        self.require_posix()
        super().setUp()

    def test_execute_returns_result_lines(self):
        """Test a successful run returns header and data lines."""
        engine = self.create_engine([self.create_fake_translator()])
        self.assertEqual(engine.execute(QUERY), ["count", "7"])
        self.assertEqual(self.leftover_temp_files(), [])

    def test_execute_sets_up_automatically(self):
        """Test execute() runs setup() when needed."""
        engine = self.create_engine([self.create_fake_translator()])
        self.assertFalse(engine.is_setup)
        engine.execute(QUERY)
        self.assertTrue(engine.is_setup)

    def test_execute_count_aggregate_header(self):
        """Test a count header is parsed from the single data line."""
        script = self.create_fake_translator(
            result='count\n"12"^^<http://www.w3.org/2001/XMLSchema#integer>\n'
        )
        engine = self.create_engine([script])
        self.assertEqual(engine.execute_count(QUERY), 12)

    def test_execute_count_rows(self):
        """Test a non-aggregate header counts non-empty data lines."""
        script = self.create_fake_translator(
            result="player\nhttp://x/1\nhttp://x/2\n\nhttp://x/3\n"
        )
        engine = self.create_engine([script])
        self.assertEqual(engine.execute_count(QUERY), 3)

    def test_command_line_protocol(self):
        """Test the executable receives every artifact path and the query."""
        script = self.create_fake_translator(record=True)
        engine = self.create_engine([script])
        engine.execute(QUERY)

        record = self.read_translator_record(script)
        args = record["args"]
        self.assertEqual(args[0], "query")
        self.assertEqual(args[args.index("--ontology") + 1], str(self.ontology))
        self.assertEqual(args[args.index("--mapping") + 1], str(self.mapping))
        self.assertTrue(args[args.index("--query") + 1].endswith(".sparql"))
        self.assertTrue(args[args.index("--output") + 1].endswith(".csv"))
        self.assertEqual(record["query"], QUERY)
        self.assertIn(self.relational.connection_url, record["properties"])

    def test_non_zero_exit_raises_with_output(self):
        """Test a failing process raises and cleans up its temp files."""
        engine = self.create_engine([self.create_fake_translator(mode="fail")])

        with self.assertRaises(TranslationExecutionError) as cm:
            engine.execute(QUERY)

        self.assertEqual(cm.exception.returncode, 3)
        self.assertIn("cannot translate query", cm.exception.output)
        self.assertFalse(cm.exception.timed_out)
        self.assertEqual(self.leftover_temp_files(), [])

    def test_empty_result_file_raises(self):
        """Test exit 0 without a populated output file is a failure."""
        engine = self.create_engine([self.create_fake_translator(mode="empty")])
        with self.assertRaises(TranslationExecutionError):
            engine.execute(QUERY)
        self.assertEqual(self.leftover_temp_files(), [])

    def test_timeout_raises_within_bounded_time(self):
        """Test a hanging process is killed, reaped and reported."""
        engine = self.create_engine(
            [self.create_fake_translator(mode="hang")], timeout=1.0
        )

        start = time.monotonic()
        with self.assertRaises(TranslationExecutionError) as cm:
            engine.execute(QUERY)
        elapsed = time.monotonic() - start

        self.assertTrue(cm.exception.timed_out)
        self.assertLess(elapsed, 1.0 + 10)
        self.assertEqual(self.leftover_temp_files(), [])

    def test_timeout_kills_launcher_child_processes(self):
        """Test a shell launcher and the tool it started are both killed on timeout."""
        engine = self.create_engine([self.create_launcher_translator()], timeout=1.0)

        start = time.monotonic()
        with self.assertRaises(TranslationExecutionError) as cm:
            engine.execute(QUERY)
        elapsed = time.monotonic() - start

        self.assertTrue(cm.exception.timed_out)
        self.assertNotIn("done", cm.exception.output)
        self.assertLess(elapsed, 3.0)
        self.assertEqual(self.leftover_temp_files(), [])

    def test_removed_result_file_raises(self):
        """Test exit 0 with the output file gone raises with the exit status."""
        engine = self.create_engine([self.create_fake_translator(mode="remove")])

        with self.assertRaises(TranslationExecutionError) as cm:
            engine.execute(QUERY)

        self.assertEqual(cm.exception.returncode, 0)
        self.assertIn("Cannot read translation result file", str(cm.exception))
        self.assertEqual(self.leftover_temp_files(), [])

    def test_undecodable_result_file_raises(self):
        """Test a result file that is not UTF-8 raises TranslationExecutionError."""
        engine = self.create_engine([self.create_fake_translator(mode="binary")])

        with self.assertRaises(TranslationExecutionError) as cm:
            engine.execute(QUERY)

        self.assertEqual(cm.exception.returncode, 0)
        self.assertFalse(cm.exception.timed_out)
        self.assertEqual(self.leftover_temp_files(), [])

    def test_preserve_temp_keeps_query_and_result_files(self):
        """Test preserve_temp leaves the query and result files for inspection."""
        engine = self.create_engine([self.create_fake_translator()], preserve_temp=True)
        engine.execute(QUERY)

        names = self.leftover_temp_files()
        self.assertEqual(len(names), 2)
        self.assertTrue(names[0].startswith("sparql_query_"))
        self.assertTrue(names[1].startswith("sparql_result_"))
        query_file = next(self.work_dir.glob("sparql_query_*"))
        self.assertEqual(query_file.read_text(), QUERY)

    def test_missing_executable_fails_execute(self):
        """Test execute() raises ExecutableNotFoundError when nothing answers."""
        engine = self.create_engine([self.temp_dir / "missing"])
        engine.setup()
        with self.assertRaises(ExecutableNotFoundError):
            engine.execute(QUERY)
        self.assertEqual(self.leftover_temp_files(), [])


if __name__ == "__main__":
    unittest.main()
