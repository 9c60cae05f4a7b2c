"""
Query engine adapters for the cross-layer test framework.

This package contains the relational, translation-process and
reasoning adapters that each layer of a test case runs against.

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

from .relational import RelationalEngine, SAMPLE_ROW_LIMIT
from .seed import seed_sports_database
from .translation import TranslationEngine, discover_executable, probe_executable
from .reasoning import ReasoningEngine

__all__ = [
    "RelationalEngine",
    "SAMPLE_ROW_LIMIT",
    "seed_sports_database",
    "TranslationEngine",
    "discover_executable",
    "probe_executable",
    "ReasoningEngine",
]
