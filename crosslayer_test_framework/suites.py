"""
Built-in test suites for the sports domain.

Each suite builder returns TestCases whose per-layer expectations are
hand-authored ground truth: a layer may legitimately expect a different
count from another layer when the world assumption explains the gap.

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

from typing import Callable, Dict, List, Optional

from .data.data_models import ReasoningQuery, TestCase
from .queries import QueryLoader
from .test_types import WorldAssumption


def integrity_suite(loader: QueryLoader) -> List[TestCase]:
    """SQL and SPARQL must agree on the counts of mapped entities."""
    teams_sql, teams_sparql = loader.load_pair("integrity", "count_all_teams")
    players_sql, players_sparql = loader.load_pair("integrity", "count_unique_players")
    coaches_sql, coaches_sparql = loader.load_pair("integrity", "count_all_coaches")
    return [
        TestCase(
            test_id="INT-01",
            name="count all teams",
            category="INTEGRITY",
            description="Team count matches across SQL and SPARQL",
            relational_query=teams_sql,
            sparql_query=teams_sparql,
            expected_relational=7,
            expected_sparql=7,
            world_assumption=WorldAssumption.CLOSED_WORLD,
        ),
        TestCase(
            test_id="INT-02",
            name="count unique players",
            category="INTEGRITY",
            description="Player count matches across SQL and SPARQL",
            relational_query=players_sql,
            sparql_query=players_sparql,
            expected_relational=12,
            expected_sparql=12,
            world_assumption=WorldAssumption.CLOSED_WORLD,
        ),
        TestCase(
            test_id="INT-03",
            name="count all coaches",
            category="INTEGRITY",
            description="Coach count matches across SQL and SPARQL",
            relational_query=coaches_sql,
            sparql_query=coaches_sparql,
            expected_relational=7,
            expected_sparql=7,
            world_assumption=WorldAssumption.CLOSED_WORLD,
        ),
    ]


def assumptions_suite(loader: QueryLoader) -> List[TestCase]:
    """Closed-world and open-world layers read the same facts differently."""
    contracts_sql, contracts_sparql = loader.load_pair(
        "assumptions", "active_contract_holders"
    )
    roster_sql, roster_sparql = loader.load_pair("assumptions", "manchester_city_roster")
    return [
        TestCase(
            test_id="OWA-03",
            name="players with unknown market value",
            category="ASSUMPTIONS",
            description="NULL market value: absent in SQL, open in OWL",
            relational_query=loader.load_sql(
                "assumptions", "players_with_null_market_value"
            ),
            sparql_query=loader.load_sparql("assumptions", "all_players"),
            reasoning_query=ReasoningQuery.instances_of("Player"),
            expected_relational=0,
            expected_sparql=12,
            expected_reasoning=8,
            world_assumption=WorldAssumption.OPEN_WORLD,
        ),
        # The fact base knows fewer contracts than the database holds
        TestCase(
            test_id="OWA-04",
            name="incomplete contract information",
            category="ASSUMPTIONS",
            description="Active contracts: mapped in SPARQL, partial in OWL",
            relational_query=contracts_sql,
            sparql_query=contracts_sparql,
            reasoning_query=ReasoningQuery.instances_of("ContractHolder"),
            expected_relational=9,
            expected_sparql=9,
            expected_reasoning=8,
            world_assumption=WorldAssumption.OPEN_WORLD,
        ),
        TestCase(
            test_id="CWA-02",
            name="complete team roster",
            category="ASSUMPTIONS",
            description="Exact Manchester City roster vs all known players",
            relational_query=roster_sql,
            sparql_query=roster_sparql,
            reasoning_query=ReasoningQuery.instances_of("Player"),
            expected_relational=3,
            expected_sparql=3,
            expected_reasoning=8,
            world_assumption=WorldAssumption.CLOSED_WORLD,
        ),
    ]


def reasoning_suite(loader: QueryLoader) -> List[TestCase]:
    """Defined classes inferred by the reasoner match their relational forms."""
    young_sql, young_sparql = loader.load_pair("reasoning", "young_players")
    top_sql, top_sparql = loader.load_pair("reasoning", "top_players")
    both_sql, both_sparql = loader.load_pair("reasoning", "young_top_players")
    return [
        TestCase(
            test_id="REA-01",
            name="young players",
            category="REASONING",
            description="YoungPlayer inferred from the U23 age group",
            relational_query=young_sql,
            sparql_query=young_sparql,
            reasoning_query=ReasoningQuery.instances_of("YoungPlayer"),
            expected_relational=3,
            expected_sparql=3,
            expected_reasoning=3,
            world_assumption=WorldAssumption.MIXED,
        ),
        TestCase(
            test_id="REA-02",
            name="top players",
            category="REASONING",
            description="TopPlayer inferred from the Elite value tier",
            relational_query=top_sql,
            sparql_query=top_sparql,
            reasoning_query=ReasoningQuery.instances_of("TopPlayer"),
            expected_relational=5,
            expected_sparql=5,
            expected_reasoning=5,
            world_assumption=WorldAssumption.MIXED,
        ),
        TestCase(
            test_id="REA-03",
            name="young top players",
            category="REASONING",
            description="Intersection of YoungPlayer and TopPlayer",
            relational_query=both_sql,
            sparql_query=both_sparql,
            reasoning_query=ReasoningQuery.instances_of_both("TopPlayer", "YoungPlayer"),
            expected_relational=1,
            expected_sparql=1,
            expected_reasoning=1,
            world_assumption=WorldAssumption.REASONING_ONLY,
        ),
    ]


def validation_suite(loader: QueryLoader) -> List[TestCase]:
    """Cross-system consistency of the facts, the mapping and the axioms."""
    entities_sql, entities_sparql = loader.load_pair("validation", "entity_counts")
    young_sql, young_sparql = loader.load_pair("validation", "manual_young_player_count")
    valued_sql, valued_sparql = loader.load_pair("validation", "players_with_market_value")
    overlap_sql, overlap_sparql = loader.load_pair("validation", "player_coach_overlap")
    return [
        TestCase(
            test_id="CON-01",
            name="entity counts",
            category="VALIDATION",
            description="Players, teams and coaches survive the mapping",
            relational_query=entities_sql,
            sparql_query=entities_sparql,
            expected_relational=26,
            expected_sparql=26,
            world_assumption=WorldAssumption.MIXED,
        ),
        TestCase(
            test_id="CON-02",
            name="reasoning accuracy",
            category="VALIDATION",
            description="Manual young player count matches inference",
            relational_query=young_sql,
            sparql_query=young_sparql,
            reasoning_query=ReasoningQuery.instances_of("YoungPlayer"),
            expected_relational=3,
            expected_sparql=3,
            expected_reasoning=3,
            world_assumption=WorldAssumption.MIXED,
        ),
        TestCase(
            test_id="CON-03",
            name="mapping correctness",
            category="VALIDATION",
            description="Every market value is mapped",
            relational_query=valued_sql,
            sparql_query=valued_sparql,
            expected_relational=12,
            expected_sparql=12,
            world_assumption=WorldAssumption.CLOSED_WORLD,
        ),
        TestCase(
            test_id="CON-04",
            name="ontology logical consistency",
            category="VALIDATION",
            description="No individual is both Player and Coach",
            relational_query=overlap_sql,
            sparql_query=overlap_sparql,
            reasoning_query=ReasoningQuery.instances_of_both("Player", "Coach"),
            expected_relational=0,
            expected_sparql=0,
            expected_reasoning=0,
            world_assumption=WorldAssumption.REASONING_ONLY,
        ),
    ]


KNOWN_SUITES: Dict[str, Callable[[QueryLoader], List[TestCase]]] = {
    "INTEGRITY": integrity_suite,
    "ASSUMPTIONS": assumptions_suite,
    "REASONING": reasoning_suite,
    "VALIDATION": validation_suite,
}


def get_available_suites() -> List[str]:
    return list(KNOWN_SUITES)


def build_suite(name: str, loader: Optional[QueryLoader] = None) -> List[TestCase]:
    """
    Build the test cases of a named suite.

    Args:
        name: Suite name, matched case-insensitively
        loader: Query loader, the packaged queries if None

    Returns:
        The suite's test cases
    """
    builder = KNOWN_SUITES.get(name.upper())
    if builder is None:
        raise ValueError(
            f"Unknown suite '{name}'. Available suites: {', '.join(KNOWN_SUITES)}"
        )
    return builder(loader or QueryLoader())
