"""
Configuration for the cross-layer test framework

This module contains the configuration dataclasses for the relational
store, the translation process, the reasoner and the performance
thresholds used in session reports.

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
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional

from .test_types import Layer, Namespaces

# Packaged ontology, mapping, fact base and query files
RESOURCES_DIR = Path(__file__).parent / "resources"
QUERIES_DIR = RESOURCES_DIR / "queries"

DEFAULT_DATABASE = Path("database") / "sports-db.sqlite"
DEFAULT_ONTOLOGY = RESOURCES_DIR / "sport-ontology.ttl"
DEFAULT_MAPPING = RESOURCES_DIR / "sport-mapping.ttl"
DEFAULT_FACT_BASE = RESOURCES_DIR / "sport-facts.ttl"

# Environment overrides
ONTOP_ENV_VAR = "ONTOP"
DATABASE_ENV_VAR = "CROSSLAYER_DB"

TRANSLATION_TIMEOUT = 30.0
PROBE_TIMEOUT = 5.0


def _default_database_path() -> Path:
    env_val = os.environ.get(DATABASE_ENV_VAR)
    return Path(env_val) if env_val else DEFAULT_DATABASE


@dataclass
class DatabaseConfig:
    """Connection settings for the file-backed relational store."""

    path: Path = field(default_factory=_default_database_path)
    user: str = "sa"
    password: str = ""
    # sqlite equivalents of the case/identifier normalization flag pair
    options: Dict[str, str] = field(
        default_factory=lambda: {"case_sensitive_like": "false", "foreign_keys": "true"}
    )

    @property
    def url(self) -> str:
        """JDBC-style connection string handed to the translation process."""
        location = Path(self.path).resolve().as_posix()
        if not self.options:
            return f"jdbc:sqlite:{location}"
        query = "&".join(f"{key}={value}" for key, value in self.options.items())
        return f"jdbc:sqlite:{location}?{query}"


def default_candidates(project_root: Optional[Path] = None) -> List[str]:
    """
    Build the ordered list of translation executable candidates.

    The order is: the ONTOP environment variable, the project-local
    tools directory (plain, .bat and directory forms), the bare name on
    the system PATH, then common installation directories.

    Args:
        project_root: Directory holding the project-local tools, cwd if None

    Returns:
        List of candidate paths or bare command names
    """
    root = Path(project_root) if project_root else Path.cwd()
    candidates = []

    env_val = os.environ.get(ONTOP_ENV_VAR)
    if env_val:
        candidates.append(env_val)

    candidates.extend(
        [
            str(root / "tools" / "ontop" / "ontop"),
            str(root / "tools" / "ontop" / "ontop.bat"),
            str(root / "tools" / "ontop"),
            "ontop",
            "/opt/ontop/ontop",
            "/usr/local/ontop/ontop",
            str(Path("~") / "ontop" / "ontop"),
        ]
    )
    return candidates


@dataclass
class TranslationConfig:
    """Settings for driving the external translation executable."""

    ontology_path: Path = DEFAULT_ONTOLOGY
    mapping_path: Path = DEFAULT_MAPPING
    properties_path: Optional[Path] = None  # Generated in temp_dir if None
    candidates: Optional[List[str]] = None  # default_candidates() if None
    timeout: float = TRANSLATION_TIMEOUT
    probe_timeout: float = PROBE_TIMEOUT
    temp_dir: Optional[Path] = None
    preserve_temp: bool = False  # Keep query and result files for debugging
    project_root: Optional[Path] = None

    def get_candidates(self) -> List[str]:
        """Return the injected candidates or the default probe order."""
        if self.candidates is not None:
            return list(self.candidates)
        return default_candidates(self.project_root)


@dataclass
class ReasonerConfig:
    """Settings for the reasoning engine's fact base."""

    fact_base: Path = DEFAULT_FACT_BASE
    ontology_namespace: str = Namespaces.ONTOLOGY
    data_namespace: str = Namespaces.DATA


@dataclass
class PerformanceThresholds:
    """Per-layer elapsed time limits in milliseconds before a result is flagged slow."""

    relational_ms: float = 100.0
    sparql_ms: float = 5000.0
    reasoning_ms: float = 10000.0

    def for_layer(self, layer: Layer) -> float:
        """Return the threshold for a layer."""
        return {
            Layer.RELATIONAL: self.relational_ms,
            Layer.ONTOLOGY_MEDIATED: self.sparql_ms,
            Layer.REASONING: self.reasoning_ms,
        }[layer]


@dataclass
class FrameworkConfig:
    """Complete configuration for one validation session."""

    database: DatabaseConfig = field(default_factory=DatabaseConfig)
    translation: TranslationConfig = field(default_factory=TranslationConfig)
    reasoner: ReasonerConfig = field(default_factory=ReasonerConfig)
    thresholds: PerformanceThresholds = field(default_factory=PerformanceThresholds)
    suites: List[str] = field(default_factory=list)

    @classmethod
    def from_args(cls, args: argparse.Namespace) -> "FrameworkConfig":
        """Build a configuration from parsed command-line arguments."""
        config = cls()

        if getattr(args, "database", None):
            config.database.path = args.database
        if getattr(args, "ontology", None):
            config.translation.ontology_path = args.ontology
        if getattr(args, "mapping", None):
            config.translation.mapping_path = args.mapping
        if getattr(args, "fact_base", None):
            config.reasoner.fact_base = args.fact_base
        if getattr(args, "timeout", None) is not None:
            config.translation.timeout = args.timeout
        if getattr(args, "preserve_temp", False):
            config.translation.preserve_temp = True
        if getattr(args, "ontop", None):
            config.translation.candidates = [str(args.ontop)] + default_candidates(
                config.translation.project_root
            )
        if getattr(args, "suite", None):
            config.suites = list(args.suite)

        return config
