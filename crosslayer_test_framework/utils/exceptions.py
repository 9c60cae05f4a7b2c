"""
Custom exceptions for the cross-layer test framework.

This module provides specific exception types for the error conditions
raised by the relational, translation and reasoning engines.

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

from pathlib import Path
from typing import Iterable, List, Optional

from . import CrossLayerTestError


class ConnectionError(CrossLayerTestError):
    """Raised when the relational store cannot be reached or seeded."""

    def __init__(self, message: str, url: str = None):
        super().__init__(message)
        self.url = url


class PreconditionError(CrossLayerTestError):
    """Raised when an engine is used out of order."""

    pass


class MissingArtifactError(CrossLayerTestError):
    """Raised when an ontology, mapping or query file is absent."""

    def __init__(self, message: str, path: Path = None):
        super().__init__(message)
        self.path = path


class ArtifactNotFoundError(MissingArtifactError):
    """Raised when the reasoner fact base is absent."""

    pass


class ExecutableNotFoundError(CrossLayerTestError):
    """Raised when no translation executable candidate answers the probe."""

    def __init__(self, message: str, candidates: Iterable[str] = ()):
        super().__init__(message)
        self.candidates: List[str] = list(candidates)


class TranslationExecutionError(CrossLayerTestError):
    """Raised when the translation process times out or exits non-zero."""

    def __init__(
        self,
        message: str,
        output: str = "",
        returncode: Optional[int] = None,
        timed_out: bool = False,
    ):
        super().__init__(message)
        self.output = output
        self.returncode = returncode
        self.timed_out = timed_out


class InconsistencyError(CrossLayerTestError):
    """Raised when the reasoner fact base is logically inconsistent."""

    def __init__(self, message: str, reasons: Iterable[str] = ()):
        super().__init__(message)
        self.reasons: List[str] = list(reasons)


class NotReadyError(CrossLayerTestError):
    """Raised when the reasoner is queried before inference is ready."""

    def __init__(self, message: str, state=None):
        super().__init__(message)
        self.state = state


class ResultProcessingError(CrossLayerTestError):
    """Raised when a layer's raw output cannot be normalized."""

    def __init__(self, message: str, raw: str = None):
        super().__init__(message)
        self.raw = raw
