"""
Named query loading for the cross-layer test framework.

Queries live in consolidated per-domain files such as
'integrity_queries.sql' and 'integrity_queries.sparql', where each query
is introduced by a marker line:

    /* COUNT_ALL_TEAMS */          (SQL)
    #### COUNT_ALL_TEAMS ####      (SPARQL)

A query missing from the consolidated file is looked up as an individual
file '<domain>/<name>.<ext>'.

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
from pathlib import Path
from typing import Dict, Optional, Tuple

from .config import QUERIES_DIR
from .utils import MissingArtifactError

logger = logging.getLogger(__name__)

_MARKER = re.compile(r"^\s*(?:/\*\s*(?P<sql>[\w-]+)\s*\*/|####\s*(?P<sparql>[\w-]+)\s*####)\s*$")


def parse_named_queries(content: str) -> Dict[str, str]:
    """
    Split a consolidated query file into its named queries.

    Args:
        content: File text containing marker lines

    Returns:
        Dict mapping upper-cased query names to stripped query text
    """
    queries: Dict[str, str] = {}
    current: Optional[str] = None
    body = []

    for line in content.splitlines():
        match = _MARKER.match(line)
        if match:
            if current is not None:
                queries[current] = "\n".join(body).strip()
            current = (match.group("sql") or match.group("sparql")).upper()
            body = []
        elif current is not None:
            body.append(line)

    if current is not None:
        queries[current] = "\n".join(body).strip()
    return queries


class QueryLoader:
    """Loads named SQL and SPARQL queries from a query directory."""

    def __init__(self, base_dir: Optional[Path] = None):
        self.base_dir = Path(base_dir) if base_dir else QUERIES_DIR
        self._cache: Dict[Path, Dict[str, str]] = {}

    def _consolidated(self, domain: str, extension: str) -> Dict[str, str]:
        path = self.base_dir / f"{domain}_queries.{extension}"
        if path not in self._cache:
            if path.is_file():
                self._cache[path] = parse_named_queries(path.read_text(encoding="utf-8"))
                logger.debug(f"Loaded {len(self._cache[path])} queries from {path}")
            else:
                self._cache[path] = {}
        return self._cache[path]

    def load(self, domain: str, name: str, extension: str) -> str:
        """
        Load one named query.

        Args:
            domain: Query domain (e.g., 'integrity')
            name: Query name (e.g., 'count_all_teams'); matched case-insensitively
            extension: 'sql' or 'sparql'

        Returns:
            The query text
        """
        query = self._consolidated(domain, extension).get(name.upper())
        if query:
            return query

        path = self.base_dir / domain / f"{name}.{extension}"
        if not path.is_file():
            raise MissingArtifactError(
                f"Query {name} not found in {domain}_queries.{extension} or {path}",
                path=path,
            )
        return path.read_text(encoding="utf-8").strip()

    def load_sql(self, domain: str, name: str) -> str:
        return self.load(domain, name, "sql")

    def load_sparql(self, domain: str, name: str) -> str:
        return self.load(domain, name, "sparql")

    def load_pair(self, domain: str, name: str) -> Tuple[str, str]:
        """Load the SQL and SPARQL forms of the same question."""
        return self.load_sql(domain, name), self.load_sparql(domain, name)
