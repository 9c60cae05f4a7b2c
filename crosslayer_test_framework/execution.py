"""
Test execution for the cross-layer test framework.

This module runs a TestCase against each applicable layer, times each
adapter call on its own, and turns adapter errors into LayerResults so
that one failing layer never hides the others.

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

import logging
import time
from typing import Any, Callable, Iterable, List, Optional

from .data.data_models import LayerResult, Outcome, ReasoningQuery, TestCase
from .engines.reasoning import ReasoningEngine
from .engines.relational import RelationalEngine
from .engines.translation import TranslationEngine
from .normalizer import normalize
from .test_types import Layer
from .utils import ExecutableNotFoundError, NotReadyError, ResultProcessingError

logger = logging.getLogger(__name__)

# Errors meaning the layer could not run at all, as opposed to answering wrongly
UNAVAILABLE_ERRORS = (ExecutableNotFoundError, NotReadyError)


def format_error(error: BaseException) -> str:
    return f"{type(error).__name__}: {error}"


class TestExecutor:
    """Runs test cases against the relational, translation and reasoning layers."""

    __test__ = False  # Not a pytest collection target

    def __init__(
        self,
        relational: Optional[RelationalEngine],
        translation: Optional[TranslationEngine] = None,
        reasoning: Optional[ReasoningEngine] = None,
    ):
        self.relational = relational
        self.translation = translation
        self.reasoning = reasoning

    def run_case(self, case: TestCase) -> List[LayerResult]:
        """
        Run one test case in the fixed layer order.

        The relational layer always runs, the translation layer runs when
        the case has an ontology query, and the reasoning layer runs only
        when the case declares a reasoning expectation.

        Args:
            case: The test case to run

        Returns:
            One LayerResult per executed layer, in execution order
        """
        logger.info(f"Running {case.test_id}: {case.name}")
        results = []

        results.append(
            self._run_layer(
                case,
                Layer.RELATIONAL,
                self.relational,
                lambda engine: engine.execute_scalar(case.relational_query),
            )
        )

        if case.sparql_query is not None:
            results.append(
                self._run_layer(
                    case,
                    Layer.ONTOLOGY_MEDIATED,
                    self.translation,
                    lambda engine: engine.execute(case.sparql_query),
                )
            )

        if case.expects_reasoning:
            results.append(
                self._run_layer(
                    case,
                    Layer.REASONING,
                    self.reasoning,
                    lambda engine: self._run_reasoning(engine, case.reasoning_query),
                )
            )

        return results

    def run_suite(self, cases: Iterable[TestCase]) -> List[LayerResult]:
        """Run every case and return all layer results in order."""
        results = []
        for case in cases:
            results.extend(self.run_case(case))
        return results

    @staticmethod
    def _run_reasoning(engine: ReasoningEngine, query: ReasoningQuery) -> int:
        if query.is_intersection:
            return engine.count_instances_of_both(*query.class_names)
        return engine.count_instances_of(query.class_names[0])

    def _run_layer(
        self,
        case: TestCase,
        layer: Layer,
        engine: Any,
        call: Callable[[Any], Any],
    ) -> LayerResult:
        expected = Outcome.of(case.expected_for(layer))

        if engine is None:
            logger.warning(f"  [{layer}] engine not available")
            return LayerResult(
                test_id=case.test_id,
                layer=layer,
                expected=expected,
                actual=Outcome.failure(f"{layer} engine not available"),
                world_assumption=case.world_assumption,
                unavailable=True,
            )

        unavailable = False
        start = time.perf_counter()
        try:
            raw = call(engine)
        except Exception as e:
            elapsed_ms = (time.perf_counter() - start) * 1000.0
            unavailable = isinstance(e, UNAVAILABLE_ERRORS)
            actual = Outcome.failure(format_error(e))
            logger.error(f"  [{layer}] {format_error(e)}")
        else:
            elapsed_ms = (time.perf_counter() - start) * 1000.0
            try:
                actual = normalize(raw)
            except ResultProcessingError as e:
                actual = Outcome.failure(format_error(e))
                logger.error(f"  [{layer}] {format_error(e)}")

        result = LayerResult(
            test_id=case.test_id,
            layer=layer,
            expected=expected,
            actual=actual,
            elapsed_ms=elapsed_ms,
            world_assumption=case.world_assumption,
            unavailable=unavailable,
        )
        logger.info(
            f"  [{layer}] expected {expected}, got {actual} "
            f"({elapsed_ms:.0f}ms) {result.status.display_name()}"
        )
        return result
