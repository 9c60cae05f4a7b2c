"""
Session-level result aggregation for the cross-layer test framework.

A single process-wide ResultAggregator collects LayerResults from every
suite run between start_session() and end_session(), then computes
per-layer and per-suite pass rates, flags slow operations and renders
the session report.

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

import io
import logging
import time
from typing import Any, Dict, Iterable, List, Optional, Tuple

from .config import PerformanceThresholds
from .data.data_models import (
    LayerResult,
    LayerStats,
    SessionReport,
    SlowOperation,
    SuiteStats,
    TestCase,
)
from .test_types import LAYER_ORDER, Layer, LayerStatus
from .utils import PreconditionError

logger = logging.getLogger(__name__)

BANNER_WIDTH = 78
INDENT_STR = "  "
DESCRIPTION_WIDTH = 35
SLOW_REPORT_LIMIT = 5


class ResultAggregator:
    """Accumulates layer results across suites for one explicit session."""

    def __init__(self, thresholds: Optional[PerformanceThresholds] = None):
        self.thresholds = thresholds or PerformanceThresholds()
        self.active = False
        self._entries: List[Tuple[str, LayerResult]] = []
        self._descriptions: Dict[str, str] = {}
        self._started_at: Optional[float] = None

    def start_session(self) -> None:
        """Reset all counters and begin accepting results."""
        if self.active:
            logger.warning("Starting a new session while one is active; discarding it")
        self.clear()
        self.active = True
        self._started_at = time.perf_counter()
        logger.info("Result session started")

    def register(
        self,
        suite_name: str,
        results: Iterable[LayerResult],
        cases: Iterable[TestCase] = (),
    ) -> None:
        """
        Add a suite's layer results to the session.

        Args:
            suite_name: Name of the suite the results belong to
            results: LayerResults in execution order
            cases: Optional test cases, used for report descriptions
        """
        if not self.active:
            raise PreconditionError("register() called outside an active session")

        results = list(results)
        for case in cases:
            self._descriptions[case.test_id] = case.description or case.name
        self._entries.extend((suite_name, result) for result in results)
        logger.debug(f"Registered {len(results)} results for suite {suite_name}")

    def end_session(self, stream=None) -> SessionReport:
        """
        Close the session and build its report.

        Collected results are kept until the next start_session() or clear().

        Args:
            stream: Optional file handle the rendered report is written to

        Returns:
            The SessionReport
        """
        if not self.active:
            raise PreconditionError("end_session() called without an active session")
        self.active = False

        duration_s = time.perf_counter() - self._started_at if self._started_at else 0.0
        report = self.build_report(duration_s)

        buffer = io.StringIO()
        format_session_report(buffer, report, self._entries, self._descriptions)
        report.text = buffer.getvalue()

        if stream is not None:
            stream.write(report.text)
        logger.info(
            f"Result session ended: {report.passed}/{report.total} layer results passed"
        )
        return report

    def build_report(self, duration_s: float = 0.0) -> SessionReport:
        """Compute statistics over the collected results without ending the session."""
        results = [result for _, result in self._entries]

        layer_stats = {layer: LayerStats(layer) for layer in LAYER_ORDER}
        suite_stats: Dict[str, SuiteStats] = {}
        slow_operations = []

        for suite_name, result in self._entries:
            stats = layer_stats[result.layer]
            stats.total += 1
            status = result.status
            if status is LayerStatus.PASSED:
                stats.passed += 1
            elif status is LayerStatus.FAILED:
                stats.failed += 1
            elif status is LayerStatus.ERROR:
                stats.errors += 1
            else:
                stats.unavailable += 1

            suite = suite_stats.setdefault(suite_name, SuiteStats(suite_name))
            suite.total += 1
            if result.passed:
                suite.passed += 1
            if result.test_id not in suite.test_ids:
                suite.test_ids.append(result.test_id)

            threshold = self.thresholds.for_layer(result.layer)
            if result.is_slow(threshold):
                slow_operations.append(SlowOperation(suite_name, result, threshold))

        slow_operations.sort(key=lambda op: op.result.elapsed_ms, reverse=True)
        failures = [
            r
            for r in results
            if r.status in (LayerStatus.FAILED, LayerStatus.ERROR)
        ]

        return SessionReport(
            results=results,
            layer_stats=layer_stats,
            suite_stats=suite_stats,
            slow_operations=slow_operations,
            failures=failures,
            duration_s=duration_s,
        )

    def session_stats(self) -> Dict[str, Any]:
        """Return a snapshot of the current counts."""
        results = [result for _, result in self._entries]
        return {
            "active": self.active,
            "total": len(results),
            "passed": sum(1 for r in results if r.passed),
            "unavailable": sum(1 for r in results if r.unavailable),
            "suites": sorted({suite for suite, _ in self._entries}),
        }

    def clear(self) -> None:
        """Discard all collected results."""
        self._entries = []
        self._descriptions = {}
        self._started_at = None


_aggregator: Optional[ResultAggregator] = None


def get_aggregator() -> ResultAggregator:
    """Return the process-wide aggregator, creating it on first use."""
    global _aggregator
    if _aggregator is None:
        _aggregator = ResultAggregator()
    return _aggregator


def _truncate(text: str, width: int) -> str:
    return text if len(text) <= width else text[: width - 3] + "..."


def format_session_report(
    file_handle,
    report: SessionReport,
    entries: List[Tuple[str, LayerResult]],
    descriptions: Optional[Dict[str, str]] = None,
) -> None:
    """
    Formats and prints a session report to the given file handle.
    """
    descriptions = descriptions or {}

    # Result matrix, one row per (suite, test case)
    rows: Dict[Tuple[str, str], Dict[Layer, LayerResult]] = {}
    for suite_name, result in entries:
        rows.setdefault((suite_name, result.test_id), {})[result.layer] = result

    file_handle.write(f"{'=' * BANNER_WIDTH}\n")
    file_handle.write("CROSS-LAYER VALIDATION RESULTS\n")
    file_handle.write(f"{'=' * BANNER_WIDTH}\n")
    file_handle.write(
        f"{'DOMAIN':<12} {'TEST ID':<8} {'DESCRIPTION':<{DESCRIPTION_WIDTH}} "
        f"{'SQL':<6} {'SPARQL':<6} {'REASONING':<9}\n"
    )
    file_handle.write(f"{'-' * BANNER_WIDTH}\n")
    for (suite_name, test_id), layers in rows.items():
        cells = [
            layers[layer].status.display_char() if layer in layers else "---"
            for layer in LAYER_ORDER
        ]
        description = _truncate(descriptions.get(test_id, ""), DESCRIPTION_WIDTH)
        file_handle.write(
            f"{_truncate(suite_name, 12):<12} {test_id:<8} "
            f"{description:<{DESCRIPTION_WIDTH}} "
            f"{cells[0]:<6} {cells[1]:<6} {cells[2]:<9}\n"
        )

    file_handle.write(f"\n{'=' * BANNER_WIDTH}\n")
    file_handle.write("SESSION SUMMARY\n")
    file_handle.write(f"{'=' * BANNER_WIDTH}\n")
    file_handle.write(f"{INDENT_STR}Total layer results: {report.total}\n")
    file_handle.write(f"{INDENT_STR}Passed: {report.passed}\n")
    file_handle.write(f"{INDENT_STR}Failed: {report.failed}\n")
    if report.unavailable:
        file_handle.write(f"{INDENT_STR}Unavailable: {report.unavailable}\n")
    file_handle.write(f"{INDENT_STR}Pass rate: {report.pass_rate:.1f}%\n")
    file_handle.write(f"{INDENT_STR}Duration: {report.duration_s:.2f}s\n")

    file_handle.write("\nBy layer:\n")
    for layer, stats in report.layer_stats.items():
        if not stats.total:
            continue
        line = (
            f"{INDENT_STR}{layer.display_name():<10} {stats.passed}/{stats.total} "
            f"({stats.pass_rate:.1f}%)"
        )
        if stats.errors:
            line += f" errors: {stats.errors}"
        if stats.unavailable:
            line += f" unavailable: {stats.unavailable}"
        file_handle.write(line + "\n")

    file_handle.write("\nBy suite:\n")
    for name, stats in report.suite_stats.items():
        file_handle.write(
            f"{INDENT_STR}{name:<12} {stats.passed}/{stats.total} "
            f"({stats.pass_rate:.1f}%) cases: {len(stats.test_ids)}\n"
        )

    if report.slow_operations:
        file_handle.write("\nPerformance warnings:\n")
        for op in report.slow_operations[:SLOW_REPORT_LIMIT]:
            file_handle.write(
                f"{INDENT_STR}{op.result.test_id} [{op.result.layer}] "
                f"{op.result.elapsed_ms:.0f}ms > {op.threshold_ms:.0f}ms\n"
            )
        remaining = len(report.slow_operations) - SLOW_REPORT_LIMIT
        if remaining > 0:
            file_handle.write(f"{INDENT_STR}... and {remaining} more\n")

    if report.failures:
        file_handle.write("\nFailed layer results:\n")
        for result in report.failures:
            if result.actual.is_error:
                detail = result.actual.error
            else:
                detail = f"expected {result.expected}, got {result.actual}"
            file_handle.write(
                f"{INDENT_STR}{result.test_id} [{result.layer}] "
                f"{result.status.display_name()}: {detail}\n"
            )
