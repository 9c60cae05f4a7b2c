"""
Reasoning engine adapter for the cross-layer test framework.

This module loads an ontology plus individuals with rdflib, computes
the OWL 2 RL inference closure with owlrl, refuses to go further on an
inconsistent fact base, and answers class-membership questions against
the inferred closure.

The engine moves through an explicit lifecycle:

    UNLOADED -> LOADED -> CONSISTENT -> READY

and every query rejects calls made before READY with NotReadyError.

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
from pathlib import Path
from typing import List, Optional, Set, Union

import owlrl
from rdflib import Graph, Namespace, URIRef
from rdflib.namespace import OWL, RDF, RDFS
from rdflib.util import guess_format

from ..config import ReasonerConfig
from ..test_types import Namespaces, ReasonerState
from ..utils import ArtifactNotFoundError, InconsistencyError, NotReadyError

logger = logging.getLogger(__name__)

# owlrl records rule violations as error-message nodes in the closure
OWLRL_ERRORS = Namespace("http://www.daml.org/2002/03/agents/agent-ont#")

# Vocabulary classes that are never reported as an individual's type
_VOCABULARY_PREFIXES = (str(OWL), str(RDF), str(RDFS))


class ReasoningEngine:
    """Open-world layer answering questions over an OWL RL inference closure."""

    def __init__(self, config: Optional[ReasonerConfig] = None):
        self.config = config or ReasonerConfig()
        self.ontology_ns = Namespace(self.config.ontology_namespace)
        self.data_ns = Namespace(self.config.data_namespace)
        self.state = ReasonerState.UNLOADED
        self._asserted: Optional[Graph] = None
        self._closure: Optional[Graph] = None

    # Lifecycle

    def setup(self) -> None:
        """
        Load the fact base, infer, and check consistency.

        Leaves the engine READY, or UNLOADED with InconsistencyError
        raised when the fact base is contradictory.
        """
        if self.state is not ReasonerState.UNLOADED:
            logger.warning(f"Reasoning engine setup() called in state {self.state}")
            return

        fact_base = Path(self.config.fact_base)
        if not fact_base.is_file():
            raise ArtifactNotFoundError(f"Fact base not found: {fact_base}", path=fact_base)

        graph = Graph()
        graph.parse(str(fact_base), format=guess_format(str(fact_base)) or "turtle")
        self._asserted = graph
        self.state = ReasonerState.LOADED
        logger.info(f"Loaded {len(graph)} asserted triples from {fact_base}")

        try:
            self._infer()
        except InconsistencyError:
            self.cleanup()
            raise

    def add_facts(self, source: Union[Graph, Path, str]) -> None:
        """
        Add individuals to the asserted graph.

        The closure is discarded until the next trigger_inference().

        Args:
            source: An rdflib Graph or a path to an RDF document
        """
        if self._asserted is None:
            raise NotReadyError("Reasoning engine has no fact base loaded", self.state)

        if isinstance(source, Graph):
            self._asserted += source
        else:
            self._asserted.parse(str(source), format=guess_format(str(source)) or "turtle")

        self._closure = None
        self.state = ReasonerState.LOADED
        logger.debug(f"Asserted graph now holds {len(self._asserted)} triples")

    def trigger_inference(self) -> None:
        """Recompute the closure from the asserted facts; idempotent."""
        if self._asserted is None:
            raise NotReadyError("Reasoning engine has no fact base loaded", self.state)
        self._infer()

    def _infer(self) -> None:
        closure = Graph()
        closure += self._asserted
        owlrl.DeductiveClosure(owlrl.OWLRL_Semantics).expand(closure)
        logger.debug(
            f"Inference closure: {len(closure)} triples from {len(self._asserted)} asserted"
        )

        reasons = self.find_inconsistencies(closure)
        if reasons:
            self._closure = None
            self.state = ReasonerState.LOADED
            for reason in reasons:
                logger.error(f"Inconsistent fact base: {reason}")
            raise InconsistencyError(
                f"Fact base is inconsistent ({len(reasons)} problems)", reasons=reasons
            )

        self.state = ReasonerState.CONSISTENT
        self._closure = closure
        self.state = ReasonerState.READY

    @staticmethod
    def find_inconsistencies(closure: Graph) -> List[str]:
        """
        Collect reasons a closure is inconsistent.

        Args:
            closure: A graph already expanded by owlrl

        Returns:
            Human readable problems; empty if the closure is consistent
        """
        reasons = []

        for individual in set(closure.subjects(RDF.type, OWL.Nothing)):
            reasons.append(f"{individual} is an instance of owl:Nothing")

        for class_a, class_b in closure.subject_objects(OWL.disjointWith):
            members_a = set(closure.subjects(RDF.type, class_a))
            for individual in members_a.intersection(closure.subjects(RDF.type, class_b)):
                reasons.append(
                    f"{individual} is in disjoint classes {class_a} and {class_b}"
                )

        for error_node in closure.subjects(RDF.type, OWLRL_ERRORS.ErrorMessage):
            for message in closure.objects(error_node, OWLRL_ERRORS.error):
                reasons.append(str(message))

        return reasons

    def cleanup(self) -> None:
        """Release the graphs; safe to call multiple times."""
        self._asserted = None
        self._closure = None
        self.state = ReasonerState.UNLOADED

    # Queries

    def _require_ready(self) -> Graph:
        if self.state is not ReasonerState.READY or self._closure is None:
            raise NotReadyError(
                f"Reasoning engine is not ready (state {self.state})", self.state
            )
        return self._closure

    def _class_uri(self, name: str) -> URIRef:
        return URIRef(name) if "://" in name else self.ontology_ns[name]

    def _individual_uri(self, name: str) -> URIRef:
        return URIRef(name) if "://" in name else self.data_ns[name]

    def instances_of(self, class_name: str) -> Set[URIRef]:
        """Return the named individuals inferred to be members of a class."""
        closure = self._require_ready()
        return {
            s
            for s in closure.subjects(RDF.type, self._class_uri(class_name))
            if isinstance(s, URIRef)
        }

    def count_instances_of(self, class_name: str) -> int:
        count = len(self.instances_of(class_name))
        logger.debug(f"{class_name}: {count} inferred instances")
        return count

    def count_instances_of_both(self, class_a: str, class_b: str) -> int:
        """Size of the intersection of two classes' inferred members."""
        both = self.instances_of(class_a) & self.instances_of(class_b)
        logger.debug(f"{class_a} AND {class_b}: {len(both)} inferred instances")
        return len(both)

    def is_instance_of(self, individual: str, class_name: str) -> bool:
        closure = self._require_ready()
        return (
            self._individual_uri(individual),
            RDF.type,
            self._class_uri(class_name),
        ) in closure

    def classes_of(self, individual: str) -> List[str]:
        """Return sorted local names of every named class inferred for an individual."""
        closure = self._require_ready()
        names = set()
        for cls in closure.objects(self._individual_uri(individual), RDF.type):
            if not isinstance(cls, URIRef):
                continue
            if str(cls).startswith(_VOCABULARY_PREFIXES):
                continue
            names.add(Namespaces.local_name(str(cls)))
        return sorted(names)
