"""
Cross-Layer Test Framework

A framework for checking that a relational store, an ontology-mediated
query layer driven through an external translation process, and an
OWL reasoner agree, or intentionally disagree, on the same questions
over the same facts.

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

# Framework metadata
__version__ = "1.0.0"
__author__ = "David Beckett"
__email__ = "dave@dajobe.org"
__license__ = "LGPL/GPL/Apache"

# Re-export main classes for convenience
from .utils import (
    CrossLayerTestError,
    ConnectionError,
    PreconditionError,
    MissingArtifactError,
    ArtifactNotFoundError,
    ExecutableNotFoundError,
    TranslationExecutionError,
    InconsistencyError,
    NotReadyError,
    ResultProcessingError,
    TempFileManager,
    setup_logging,
    add_common_arguments,
)
from .test_types import (
    Layer,
    LayerStatus,
    Namespaces,
    ReasonerState,
    Relationship,
    WorldAssumption,
)
from .config import (
    DatabaseConfig,
    FrameworkConfig,
    PerformanceThresholds,
    ReasonerConfig,
    TranslationConfig,
    default_candidates,
)
from .data import (
    Outcome,
    ReasoningQuery,
    TestCase,
    LayerResult,
    Observation,
    CaseAnalysis,
    SessionReport,
)
from .engines import (
    RelationalEngine,
    TranslationEngine,
    ReasoningEngine,
    discover_executable,
    probe_executable,
)
from .normalizer import normalize, count_from_lines
from .execution import TestExecutor
from .analysis import ConsistencyAnalyzer
from .aggregator import ResultAggregator, get_aggregator
from .queries import QueryLoader
from .suites import KNOWN_SUITES, build_suite, get_available_suites
from .runner import CrossLayerTestRunner, bootstrap_engines, shutdown_engines

__all__ = [
    # Errors
    "CrossLayerTestError",
    "ConnectionError",
    "PreconditionError",
    "MissingArtifactError",
    "ArtifactNotFoundError",
    "ExecutableNotFoundError",
    "TranslationExecutionError",
    "InconsistencyError",
    "NotReadyError",
    "ResultProcessingError",
    # Utilities
    "TempFileManager",
    "setup_logging",
    "add_common_arguments",
    # Types
    "Layer",
    "LayerStatus",
    "Namespaces",
    "ReasonerState",
    "Relationship",
    "WorldAssumption",
    # Configuration
    "DatabaseConfig",
    "FrameworkConfig",
    "PerformanceThresholds",
    "ReasonerConfig",
    "TranslationConfig",
    "default_candidates",
    # Data models
    "Outcome",
    "ReasoningQuery",
    "TestCase",
    "LayerResult",
    "Observation",
    "CaseAnalysis",
    "SessionReport",
    # Engines
    "RelationalEngine",
    "TranslationEngine",
    "ReasoningEngine",
    "discover_executable",
    "probe_executable",
    # Pipeline
    "normalize",
    "count_from_lines",
    "TestExecutor",
    "ConsistencyAnalyzer",
    "ResultAggregator",
    "get_aggregator",
    "QueryLoader",
    "KNOWN_SUITES",
    "build_suite",
    "get_available_suites",
    "CrossLayerTestRunner",
    "bootstrap_engines",
    "shutdown_engines",
]
