"""
Utility functions and classes for the cross-layer test framework.

This module contains the base exception, logging setup, command-line
helpers and executable lookup shared by the engines and runner.

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
import os
import shutil
import sys
from pathlib import Path
from typing import Optional


# Base exception class
class CrossLayerTestError(Exception):
    """Base exception for cross-layer test framework errors."""

    pass


# Core utility functions
def setup_logging(
    debug: bool = False, level: Optional[int] = None, stream=sys.stderr
) -> logging.Logger:
    """Setup logging configuration and return logger."""
    if level is None:
        level = logging.DEBUG if debug else logging.INFO

    logging.basicConfig(level=level, format="%(levelname)s: %(message)s", stream=stream)
    return logging.getLogger(__name__)


def add_common_arguments(parser: argparse.ArgumentParser) -> None:
    """
    Add command-line arguments shared by the runner entry points.

    Args:
        parser: ArgumentParser instance to add arguments to
    """
    parser.add_argument(
        "-d",
        "--debug",
        action="count",
        default=0,
        help="Increase verbosity (-d info, -dd debug)",
    )
    parser.add_argument(
        "--database", type=Path, help="Path to the sqlite database file"
    )
    parser.add_argument(
        "--ontology", type=Path, help="Ontology document passed to the translator"
    )
    parser.add_argument(
        "--mapping", type=Path, help="Mapping document passed to the translator"
    )
    parser.add_argument(
        "--fact-base",
        type=Path,
        help="Ontology plus individuals loaded by the reasoner",
    )


def verbosity_to_level(debug: int) -> int:
    """Map a -d count to a logging level."""
    if debug >= 2:
        return logging.DEBUG
    if debug == 1:
        return logging.INFO
    return logging.WARNING


def resolve_executable(candidate: str) -> Optional[str]:
    """
    Resolve a candidate executable to a concrete path.

    A candidate containing a path separator must name an existing file;
    a bare name is looked up on the system PATH.

    Args:
        candidate: Path or bare command name

    Returns:
        Path to the executable if it can be resolved, None otherwise
    """
    logger = logging.getLogger(__name__)

    if not candidate:
        return None

    expanded = os.path.expanduser(candidate)
    if os.sep in expanded or (os.altsep and os.altsep in expanded):
        path = Path(expanded)
        if path.is_file():
            logger.debug(f"Candidate {candidate} exists at {path}")
            return str(path)
        logger.debug(f"Candidate {candidate} does not exist")
        return None

    tool_path_in_path = shutil.which(expanded)
    if tool_path_in_path:
        logger.debug(f"Found {candidate} in system PATH: {tool_path_in_path}")
    return tool_path_in_path


# Import exception and file classes after the base error is defined
from .exceptions import (
    ConnectionError,
    PreconditionError,
    MissingArtifactError,
    ArtifactNotFoundError,
    ExecutableNotFoundError,
    TranslationExecutionError,
    InconsistencyError,
    NotReadyError,
    ResultProcessingError,
)
from .temp_file_manager import TempFileManager

__all__ = [
    "CrossLayerTestError",
    "setup_logging",
    "add_common_arguments",
    "verbosity_to_level",
    "resolve_executable",
    "ConnectionError",
    "PreconditionError",
    "MissingArtifactError",
    "ArtifactNotFoundError",
    "ExecutableNotFoundError",
    "TranslationExecutionError",
    "InconsistencyError",
    "NotReadyError",
    "ResultProcessingError",
    "TempFileManager",
]
