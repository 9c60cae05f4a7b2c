#!/usr/bin/env python3
"""
Cross-layer test runner

This module starts the three engines, runs the selected suites through
the executor and analyzer, and prints the session report.

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

import argparse
import logging
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

from .aggregator import get_aggregator
from .analysis import ConsistencyAnalyzer
from .config import FrameworkConfig
from .data.data_models import SessionReport
from .engines.reasoning import ReasoningEngine
from .engines.relational import RelationalEngine
from .engines.translation import TranslationEngine
from .execution import TestExecutor
from .queries import QueryLoader
from .suites import build_suite, get_available_suites
from .utils import (
    CrossLayerTestError,
    MissingArtifactError,
    add_common_arguments,
    setup_logging,
    verbosity_to_level,
)

logger = logging.getLogger(__name__)


@dataclass
class Engines:
    """The engines available for one session; unavailable layers are None."""

    relational: RelationalEngine
    translation: Optional[TranslationEngine] = None
    reasoning: Optional[ReasoningEngine] = None


def bootstrap_engines(config: FrameworkConfig) -> Engines:
    """
    Start the relational engine and set up the other layers.

    A relational failure is fatal and propagates. A translation or
    reasoner setup failure only leaves that layer out of the session.

    Args:
        config: Framework configuration

    Returns:
        The started engines
    """
    relational = RelationalEngine(config.database)
    relational.start()
    engines = Engines(relational=relational)

    translation = TranslationEngine(relational, config.translation)
    try:
        translation.setup()
        engines.translation = translation
    except MissingArtifactError as e:
        logger.error(f"Translation layer unavailable: {e}")

    reasoning = ReasoningEngine(config.reasoner)
    try:
        reasoning.setup()
        engines.reasoning = reasoning
    except CrossLayerTestError as e:
        logger.error(f"Reasoning layer unavailable: {e}")

    return engines


def shutdown_engines(engines: Engines) -> None:
    if engines.reasoning is not None:
        engines.reasoning.cleanup()
    if engines.translation is not None:
        engines.translation.cleanup()
    engines.relational.stop()


class CrossLayerTestRunner:
    """Command-line runner for the built-in cross-layer suites."""

    def __init__(self):
        self.config: Optional[FrameworkConfig] = None
        self.suite_names: List[str] = []

    def setup_argument_parser(self) -> argparse.ArgumentParser:
        """Setup and return the argument parser."""
        parser = argparse.ArgumentParser(
            description="Validate SQL, SPARQL and reasoning layers against each other",
            formatter_class=argparse.RawDescriptionHelpFormatter,
            epilog=f"Available suites: {', '.join(get_available_suites())}",
        )
        add_common_arguments(parser)
        parser.add_argument(
            "--suite",
            action="append",
            metavar="NAME",
            help="Suite to run; may be repeated (default: all)",
        )
        parser.add_argument(
            "--ontop", type=Path, help="Translation executable to try first"
        )
        parser.add_argument(
            "--timeout",
            type=float,
            help="Seconds to wait for each translation process (default: 30)",
        )
        parser.add_argument(
            "--preserve-temp",
            action="store_true",
            help="Keep translation query and result files for debugging",
        )
        parser.add_argument(
            "--list-suites", action="store_true", help="List suites and exit"
        )
        return parser

    def process_arguments(self, args: argparse.Namespace) -> None:
        """Process and validate command line arguments."""
        setup_logging(level=verbosity_to_level(args.debug))
        if args.timeout is not None and args.timeout <= 0:
            raise ValueError(f"--timeout must be positive, got {args.timeout}")
        self.config = FrameworkConfig.from_args(args)
        self.suite_names = [name.upper() for name in self.config.suites] or (
            get_available_suites()
        )
        for name in self.suite_names:
            if name not in get_available_suites():
                raise ValueError(
                    f"Unknown suite '{name}'. "
                    f"Available suites: {', '.join(get_available_suites())}"
                )

    def run_session(self, engines: Engines, stream=sys.stdout) -> SessionReport:
        """Run the selected suites and return the session report."""
        executor = TestExecutor(engines.relational, engines.translation, engines.reasoning)
        analyzer = ConsistencyAnalyzer()
        aggregator = get_aggregator()
        aggregator.thresholds = self.config.thresholds
        loader = QueryLoader()

        aggregator.start_session()
        for name in self.suite_names:
            cases = build_suite(name, loader)
            logger.info(f"Running suite {name} ({len(cases)} cases)")
            results = executor.run_suite(cases)
            analyzer.analyze_all(results)
            aggregator.register(name, results, cases)
        return aggregator.end_session(stream)

    def main(self, argv: Optional[List[str]] = None) -> int:
        """Main method to run the cross-layer test runner."""
        parser = self.setup_argument_parser()
        args = parser.parse_args(argv)

        if args.list_suites:
            for name in get_available_suites():
                print(name)
            return 0

        try:
            self.process_arguments(args)
        except ValueError as e:
            parser.error(str(e))

        try:
            engines = bootstrap_engines(self.config)
        except CrossLayerTestError as e:
            logger.error(f"Session bootstrap failed: {e}")
            return 2

        try:
            report = self.run_session(engines)
        finally:
            shutdown_engines(engines)

        return 0 if report.all_passed else 1


def main():
    """Main entry point for cross-layer testing."""
    runner = CrossLayerTestRunner()
    return runner.main()


if __name__ == "__main__":
    sys.exit(main())
