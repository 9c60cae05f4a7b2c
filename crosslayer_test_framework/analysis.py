"""
Consistency analysis for the cross-layer test framework.

Pass/fail is decided for each layer against that layer's own expected
count. Comparing layers with each other is advisory only: an open-world
layer seeing more individuals than the closed-world store is the normal
case, and is logged as an observation rather than a failure.

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
from typing import Dict, Iterable, List, Optional

from .data.data_models import CaseAnalysis, LayerResult, Observation
from .test_types import Layer, Relationship

logger = logging.getLogger(__name__)


def classify(closed_world_count: int, open_world_count: int) -> Relationship:
    """Classify an open-world count relative to the closed-world count."""
    if open_world_count == closed_world_count:
        return Relationship.EQUAL
    if open_world_count > closed_world_count:
        return Relationship.SUPERSET
    return Relationship.SUBSET


class ConsistencyAnalyzer:
    """Judges layer results and reports advisory cross-layer relationships."""

    def analyze(self, results: List[LayerResult]) -> CaseAnalysis:
        """
        Analyze the layer results of a single test case.

        Args:
            results: LayerResults sharing one test id

        Returns:
            CaseAnalysis with the results and any observations
        """
        if not results:
            raise ValueError("No layer results to analyze")

        test_id = results[0].test_id
        analysis = CaseAnalysis(test_id=test_id, results=list(results))

        closed_world = self._closed_world_result(results)
        if closed_world is not None:
            for result in results:
                if not result.layer.is_open_world or result.actual.is_error:
                    continue
                observation = Observation(
                    test_id=test_id,
                    layer=result.layer,
                    relationship=classify(
                        closed_world.actual.count, result.actual.count
                    ),
                    closed_world_count=closed_world.actual.count,
                    open_world_count=result.actual.count,
                    world_assumption=result.world_assumption,
                )
                analysis.observations.append(observation)
                if observation.relationship is Relationship.SUBSET:
                    logger.warning(observation.describe())
                else:
                    logger.info(observation.describe())

        for layer in analysis.failed_layers:
            logger.info(f"{test_id}: {layer} did not meet its expectation")

        return analysis

    def analyze_all(self, results: Iterable[LayerResult]) -> List[CaseAnalysis]:
        """Group results by test id, preserving first-seen order, and analyze each."""
        grouped: Dict[str, List[LayerResult]] = {}
        for result in results:
            grouped.setdefault(result.test_id, []).append(result)
        return [self.analyze(group) for group in grouped.values()]

    @staticmethod
    def _closed_world_result(results: List[LayerResult]) -> Optional[LayerResult]:
        for result in results:
            if result.layer is Layer.RELATIONAL and not result.actual.is_error:
                return result
        return None
