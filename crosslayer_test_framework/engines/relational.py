"""
Relational engine adapter for the cross-layer test framework.

This module holds the connection to the file-backed sqlite store that
serves as the closed-world layer, seeds it with the baseline facts on
start and answers count-style queries.

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
import sqlite3
from pathlib import Path
from typing import Callable, Dict, Optional

from ..config import DatabaseConfig
from ..utils import ConnectionError, PreconditionError
from .seed import SEEDED_TABLES, seed_sports_database

logger = logging.getLogger(__name__)

# Rows logged for diagnostics when a query falls back to row counting
SAMPLE_ROW_LIMIT = 3
SAMPLE_COLUMN_LIMIT = 3

Seeder = Callable[[sqlite3.Connection], None]


class RelationalEngine:
    """Closed-world layer backed by a single shared sqlite connection."""

    def __init__(
        self,
        config: Optional[DatabaseConfig] = None,
        seeder: Optional[Seeder] = seed_sports_database,
    ):
        """
        Args:
            config: Database location, credentials and connection options
            seeder: Callable that writes the baseline facts, None to skip seeding
        """
        self.config = config or DatabaseConfig()
        self.seeder = seeder
        self.connection: Optional[sqlite3.Connection] = None

    @property
    def is_started(self) -> bool:
        return self.connection is not None

    @property
    def connection_url(self) -> str:
        return self.config.url

    def start(self) -> None:
        """
        Open the store and seed it.

        Either the connection is open and fully seeded afterwards, or the
        engine is left unstarted and ConnectionError is raised.
        """
        if self.is_started:
            logger.warning("Relational engine already started")
            return

        db_path = Path(self.config.path)
        logger.info(f"Starting relational engine at {self.connection_url}")

        connection = None
        try:
            db_path.parent.mkdir(parents=True, exist_ok=True)
            # Autocommit mode; the seed runs in an explicit transaction below
            connection = sqlite3.connect(str(db_path), isolation_level=None)
            for name, value in self.config.options.items():
                connection.execute(f"PRAGMA {name} = {value}")

            if self.seeder is not None:
                connection.execute("BEGIN")
                try:
                    self.seeder(connection)
                except Exception:
                    if connection.in_transaction:
                        connection.execute("ROLLBACK")
                    raise
                connection.execute("COMMIT")

            connection.execute("SELECT 1").fetchone()
        except Exception as e:
            if connection is not None:
                connection.close()
            logger.error(f"Failed to start relational engine: {e}")
            raise ConnectionError(
                f"Cannot start relational store {self.connection_url}: {e}",
                url=self.connection_url,
            ) from e

        self.connection = connection
        logger.info("Relational engine started")

    def _require_started(self) -> sqlite3.Connection:
        if self.connection is None:
            raise PreconditionError("Relational engine is not started")
        return self.connection

    def execute_scalar(self, query: str) -> int:
        """
        Run a count-style query and return a single number.

        A result of exactly one row with one numeric column is returned
        as that number. Anything else is counted row by row; the first
        SAMPLE_ROW_LIMIT rows are logged for diagnostics.

        Args:
            query: SQL query string

        Returns:
            The numeric value or the number of returned rows
        """
        connection = self._require_started()
        logger.debug(f"Executing SQL: {query.strip()}")

        rows = connection.execute(query).fetchall()

        if len(rows) == 1 and len(rows[0]) == 1:
            value = rows[0][0]
            if isinstance(value, (int, float)) and not isinstance(value, bool):
                return int(value)

        for index, row in enumerate(rows[:SAMPLE_ROW_LIMIT]):
            sample = ", ".join(str(v) for v in row[:SAMPLE_COLUMN_LIMIT])
            logger.debug(f"  row {index + 1}: {sample}")
        if len(rows) > SAMPLE_ROW_LIMIT:
            logger.debug(f"  ... {len(rows) - SAMPLE_ROW_LIMIT} more rows")

        return len(rows)

    def is_healthy(self) -> bool:
        """Probe the connection with a trivial query."""
        if self.connection is None:
            return False
        try:
            return self.connection.execute("SELECT 1").fetchone() == (1,)
        except sqlite3.Error as e:
            logger.warning(f"Relational health check failed: {e}")
            return False

    def table_counts(self) -> Dict[str, int]:
        """Return row counts for the seeded tables that exist."""
        connection = self._require_started()
        existing = {
            row[0]
            for row in connection.execute(
                "SELECT name FROM sqlite_master WHERE type = 'table'"
            )
        }
        counts = {}
        for table in reversed(SEEDED_TABLES):
            if table in existing:
                counts[table] = connection.execute(
                    f"SELECT COUNT(*) FROM {table}"
                ).fetchone()[0]
        return counts

    def stop(self) -> None:
        """Close the connection; stopping an unstarted engine only warns."""
        if self.connection is None:
            logger.warning("Relational engine stop() called but it was not started")
            return
        self.connection.close()
        self.connection = None
        logger.info("Relational engine stopped")

    def __enter__(self):
        self.start()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.stop()
