"""
Data models for cross-layer validation.

This module contains the immutable records that flow from test case
definitions through execution and analysis into the session report.

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

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from ..test_types import Layer, LayerStatus, Relationship, WorldAssumption


@dataclass(frozen=True)
class Outcome:
    """A normalized layer answer: a non-negative count or an error message, never both."""

    count: Optional[int] = None
    error: Optional[str] = None

    def __post_init__(self):
        if (self.count is None) == (self.error is None):
            raise ValueError("Outcome needs exactly one of count or error")
        if self.count is not None:
            if isinstance(self.count, bool) or not isinstance(self.count, int):
                raise ValueError(f"Outcome count must be an int, got {self.count!r}")
            if self.count < 0:
                raise ValueError(f"Outcome count must be non-negative, got {self.count}")

    @classmethod
    def of(cls, count: int) -> "Outcome":
        return cls(count=count)

    @classmethod
    def failure(cls, message: str) -> "Outcome":
        return cls(error=message or "unknown error")

    @property
    def is_error(self) -> bool:
        return self.error is not None

    def __str__(self):
        return f"ERROR({self.error})" if self.is_error else str(self.count)


@dataclass(frozen=True)
class ReasoningQuery:
    """Typed reasoner query: one class counts instances, two count the intersection."""

    class_names: Tuple[str, ...]

    def __post_init__(self):
        names = tuple(self.class_names)
        if len(names) not in (1, 2):
            raise ValueError(
                f"ReasoningQuery takes one or two class names, got {len(names)}"
            )
        object.__setattr__(self, "class_names", names)

    @classmethod
    def instances_of(cls, class_name: str) -> "ReasoningQuery":
        return cls((class_name,))

    @classmethod
    def instances_of_both(cls, class_a: str, class_b: str) -> "ReasoningQuery":
        return cls((class_a, class_b))

    @property
    def is_intersection(self) -> bool:
        return len(self.class_names) == 2

    def __str__(self):
        return " AND ".join(self.class_names)


@dataclass(frozen=True)
class TestCase:
    """A declarative cross-layer test: one query and one expectation per layer."""

    __test__ = False  # Not a pytest collection target

    test_id: str
    name: str
    category: str
    relational_query: str
    expected_relational: int
    description: str = ""
    sparql_query: Optional[str] = None
    expected_sparql: Optional[int] = None
    reasoning_query: Optional[ReasoningQuery] = None
    expected_reasoning: Optional[int] = None
    world_assumption: WorldAssumption = WorldAssumption.CLOSED_WORLD

    def __post_init__(self):
        # The ontology layer expects the relational answer unless told otherwise
        if self.expected_sparql is None and self.sparql_query is not None:
            object.__setattr__(self, "expected_sparql", self.expected_relational)

    @property
    def expects_reasoning(self) -> bool:
        """True only when the case carries both a reasoner query and its expectation."""
        return self.expected_reasoning is not None and self.reasoning_query is not None

    def expected_for(self, layer: Layer) -> Optional[int]:
        """Return this case's expected count for a layer."""
        return {
            Layer.RELATIONAL: self.expected_relational,
            Layer.ONTOLOGY_MEDIATED: self.expected_sparql,
            Layer.REASONING: self.expected_reasoning,
        }[layer]


@dataclass(frozen=True)
class LayerResult:
    """The outcome of running one test case against one layer."""

    test_id: str
    layer: Layer
    expected: Outcome
    actual: Outcome
    elapsed_ms: float = 0.0
    world_assumption: WorldAssumption = WorldAssumption.CLOSED_WORLD
    unavailable: bool = False

    @property
    def passed(self) -> bool:
        if self.unavailable or self.expected.is_error or self.actual.is_error:
            return False
        return self.actual.count == self.expected.count

    @property
    def status(self) -> LayerStatus:
        if self.unavailable:
            return LayerStatus.UNAVAILABLE
        if self.actual.is_error:
            return LayerStatus.ERROR
        return LayerStatus.PASSED if self.passed else LayerStatus.FAILED

    def is_slow(self, threshold_ms: float) -> bool:
        return self.elapsed_ms > threshold_ms


@dataclass(frozen=True)
class Observation:
    """Advisory comparison of an open-world layer count against the relational count."""

    test_id: str
    layer: Layer
    relationship: Relationship
    closed_world_count: int
    open_world_count: int
    world_assumption: WorldAssumption

    def describe(self) -> str:
        return (
            f"{self.test_id} [{self.world_assumption}] {self.layer} "
            f"{self.open_world_count} vs SQL {self.closed_world_count}: "
            f"{self.relationship}"
        )


@dataclass
class CaseAnalysis:
    """Per-case verdicts plus advisory cross-layer observations."""

    test_id: str
    results: List[LayerResult]
    observations: List[Observation] = field(default_factory=list)

    @property
    def passed(self) -> bool:
        """True when no layer failed or errored; unavailable layers are not failures."""
        return all(
            r.status in (LayerStatus.PASSED, LayerStatus.UNAVAILABLE)
            for r in self.results
        )

    @property
    def failed_layers(self) -> List[Layer]:
        return [
            r.layer
            for r in self.results
            if r.status in (LayerStatus.FAILED, LayerStatus.ERROR)
        ]


@dataclass
class LayerStats:
    """Counts for one layer across a session."""

    layer: Layer
    total: int = 0
    passed: int = 0
    failed: int = 0
    errors: int = 0
    unavailable: int = 0

    @property
    def pass_rate(self) -> float:
        return 100.0 * self.passed / self.total if self.total else 0.0


@dataclass
class SuiteStats:
    """Counts for one registered suite across a session."""

    name: str
    total: int = 0
    passed: int = 0
    test_ids: List[str] = field(default_factory=list)

    @property
    def pass_rate(self) -> float:
        return 100.0 * self.passed / self.total if self.total else 0.0


@dataclass(frozen=True)
class SlowOperation:
    """A layer result that exceeded its layer's time threshold."""

    suite_name: str
    result: LayerResult
    threshold_ms: float


@dataclass
class SessionReport:
    """Aggregated results of a validation session."""

    results: List[LayerResult]
    layer_stats: Dict[Layer, LayerStats]
    suite_stats: Dict[str, SuiteStats]
    slow_operations: List[SlowOperation]
    failures: List[LayerResult]
    duration_s: float = 0.0
    text: str = ""

    @property
    def total(self) -> int:
        return len(self.results)

    @property
    def passed(self) -> int:
        return sum(1 for r in self.results if r.passed)

    @property
    def unavailable(self) -> int:
        return sum(1 for r in self.results if r.unavailable)

    @property
    def failed(self) -> int:
        return len(self.failures)

    @property
    def pass_rate(self) -> float:
        return 100.0 * self.passed / self.total if self.total else 0.0

    @property
    def all_passed(self) -> bool:
        return not self.failures
