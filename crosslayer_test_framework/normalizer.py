"""
Result normalization for the cross-layer test framework.

Each layer answers in its own shape: the relational store returns a
typed scalar, the translation process writes header-plus-rows text and
the reasoner returns sets of individuals. This module reduces all three
to a single Outcome count.

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
import re
from typing import Any, Iterable, Sequence

from .data.data_models import Outcome
from .utils import ResultProcessingError

logger = logging.getLogger(__name__)

# "12"^^<http://www.w3.org/2001/XMLSchema#integer> or "12"^^xsd:integer
_DATATYPE_SUFFIX = re.compile(r"\^\^.*$")


def _strip_value(value: str) -> str:
    value = _DATATYPE_SUFFIX.sub("", value.strip())
    return value.strip().strip('"').strip("'").strip()


def parse_count_value(value: str) -> int:
    """
    Parse an aggregate cell into an integer, truncating any decimal part.

    Args:
        value: Raw cell text such as '12', '12.0' or '"12"^^xsd:integer'

    Returns:
        The integer value
    """
    text = _strip_value(value)
    # Only the first column of a comma-separated row carries the count
    text = text.split(",", 1)[0].strip().strip('"')
    if "." in text:
        text = text.split(".", 1)[0]
    try:
        return int(text)
    except ValueError:
        raise ResultProcessingError(f"Cannot parse count from {value!r}", raw=value)


def count_from_lines(lines: Sequence[str]) -> int:
    """
    Interpret translation-layer output lines as a count.

    The first line is a header. When it names an aggregate (contains
    'count' in any case) the first data line is parsed as the count;
    otherwise the non-empty data lines are counted.

    Args:
        lines: Result file lines, header first

    Returns:
        The normalized count
    """
    if not lines:
        return 0

    header = lines[0]
    data_lines = [line for line in lines[1:] if line.strip()]

    if "count" in header.lower():
        if not data_lines:
            logger.debug(f"Aggregate header {header!r} with no data line")
            return 0
        return parse_count_value(data_lines[0])

    return len(data_lines)


def count_from_scalar(value: Any) -> int:
    """Validate a relational scalar as a non-negative count."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ResultProcessingError(f"Expected a numeric result, got {value!r}")
    count = int(value)
    if count < 0:
        raise ResultProcessingError(f"Negative count {count}")
    return count


def count_from_entities(entities: Iterable[Any]) -> int:
    """Count the distinct members of an entity collection."""
    return len(set(entities))


def normalize(raw: Any) -> Outcome:
    """
    Normalize any layer's raw answer into an Outcome.

    Args:
        raw: An int/float scalar, a list of result lines, or a set of entities

    Returns:
        An Outcome carrying the count
    """
    if isinstance(raw, Outcome):
        return raw
    if isinstance(raw, (int, float)) and not isinstance(raw, bool):
        return Outcome.of(count_from_scalar(raw))
    if isinstance(raw, (list, tuple)) and all(isinstance(line, str) for line in raw):
        return Outcome.of(count_from_lines(raw))
    if isinstance(raw, (set, frozenset)):
        return Outcome.of(count_from_entities(raw))
    raise ResultProcessingError(f"Cannot normalize result of type {type(raw).__name__}")
