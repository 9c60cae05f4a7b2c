"""
Baseline sports-domain schema and facts for the relational store.

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

logger = logging.getLogger(__name__)

# Drop order respects foreign keys
SEEDED_TABLES = ("contract", "coach_role", "player_role", "person", "team")

SCHEMA = [
    """CREATE TABLE team (
        team_id INTEGER PRIMARY KEY,
        name VARCHAR(100) NOT NULL,
        city VARCHAR(100),
        founded_year INTEGER,
        stadium_capacity INTEGER,
        team_type VARCHAR(50))""",
    """CREATE TABLE person (
        person_id INTEGER PRIMARY KEY,
        full_name VARCHAR(100) NOT NULL,
        birth_date DATE,
        nationality VARCHAR(50),
        height FLOAT,
        weight FLOAT)""",
    """CREATE TABLE player_role (
        role_id INTEGER PRIMARY KEY,
        person_id INTEGER NOT NULL REFERENCES person(person_id),
        team_id INTEGER NOT NULL REFERENCES team(team_id),
        position VARCHAR(50),
        jersey_number INTEGER,
        market_value FLOAT,
        start_date DATE,
        end_date DATE)""",
    """CREATE TABLE coach_role (
        role_id INTEGER PRIMARY KEY,
        person_id INTEGER NOT NULL REFERENCES person(person_id),
        team_id INTEGER NOT NULL REFERENCES team(team_id),
        role_type VARCHAR(50),
        license_level VARCHAR(50),
        start_date DATE,
        end_date DATE)""",
    """CREATE TABLE contract (
        contract_id INTEGER PRIMARY KEY,
        person_id INTEGER NOT NULL REFERENCES person(person_id),
        team_id INTEGER NOT NULL REFERENCES team(team_id),
        contract_type VARCHAR(50),
        start_date DATE,
        end_date DATE,
        salary FLOAT,
        is_active BOOLEAN)""",
]

TEAMS = [
    (1, "Manchester City", "Manchester", 1880, 55000, "SeniorTeam"),
    (2, "Real Madrid", "Madrid", 1902, 81000, "SeniorTeam"),
    (3, "Bayern Munich", "Munich", 1900, 75000, "SeniorTeam"),
    (4, "Paris Saint-Germain", "Paris", 1970, 48000, "SeniorTeam"),
    (5, "Barcelona", "Barcelona", 1899, 99000, "SeniorTeam"),
    (6, "Manchester City U21", "Manchester", 1880, 7000, "YouthTeam"),
    (7, "Real Madrid Castilla", "Madrid", 1902, 6000, "YouthTeam"),
]

PERSONS = [
    # Players
    (1, "Erling Haaland", "2000-07-21", "Norway", 1.95, 88.0),
    (2, "Kevin De Bruyne", "1991-06-28", "Belgium", 1.81, 70.0),
    (3, "Vinicius Junior", "2000-07-12", "Brazil", 1.76, 73.0),
    (4, "Jude Bellingham", "2003-06-29", "England", 1.86, 75.0),
    (5, "Kylian Mbappe", "1998-12-20", "France", 1.78, 73.0),
    (6, "Harry Kane", "1993-07-28", "England", 1.88, 86.0),
    (7, "Ederson Moraes", "1993-08-17", "Brazil", 1.88, 86.0),
    (8, "Thibaut Courtois", "1992-05-11", "Belgium", 1.99, 96.0),
    (9, "Robert Lewandowski", "1988-08-21", "Poland", 1.85, 81.0),
    (10, "Pedri Gonzalez", "2002-11-25", "Spain", 1.74, 60.0),
    (11, "Rico Lewis", "2004-11-21", "England", 1.69, 65.0),
    (12, "Nico Paz", "2004-09-14", "Argentina", 1.81, 73.0),
    # Coaches
    (20, "Pep Guardiola", "1971-01-18", "Spain", 1.80, 76.0),
    (21, "Carlo Ancelotti", "1959-06-10", "Italy", 1.79, 78.0),
    (22, "Thomas Tuchel", "1973-08-29", "Germany", 1.93, 85.0),
    (23, "Luis Enrique", "1970-05-08", "Spain", 1.82, 75.0),
    (24, "Xavi Hernandez", "1980-01-25", "Spain", 1.70, 68.0),
    (25, "Juanma Lillo", "1965-11-03", "Spain", 1.75, 70.0),
    (26, "Davide Ancelotti", "1989-07-22", "Italy", 1.78, 73.0),
]

PLAYER_ROLES = [
    (1, 1, 1, "Forward", 9, 180000000, "2022-07-01", None),
    (2, 2, 1, "Midfielder", 17, 85000000, "2015-08-30", None),
    (3, 7, 1, "Goalkeeper", 31, 40000000, "2017-07-01", None),
    (4, 3, 2, "Forward", 7, 150000000, "2018-07-01", None),
    (5, 4, 2, "Midfielder", 5, 180000000, "2023-07-01", None),
    (6, 8, 2, "Goalkeeper", 1, 60000000, "2018-08-09", None),
    (7, 6, 3, "Forward", 9, 100000000, "2023-08-12", None),
    (8, 5, 4, "Forward", 7, 180000000, "2017-08-31", None),
    (9, 9, 5, "Forward", 9, 45000000, "2022-07-01", None),
    (10, 10, 5, "Midfielder", 8, 80000000, "2020-09-02", None),
    (11, 11, 6, "Defender", 82, 15000000, "2022-07-01", None),
    (12, 12, 7, "Midfielder", 27, 8000000, "2023-07-01", None),
    # Player who moved
    (13, 5, 2, "Forward", 10, 160000000, "2024-07-01", None),
]

COACH_ROLES = [
    (101, 20, 1, "HeadCoach", "UEFA Pro", "2016-07-01", None),
    (102, 21, 2, "HeadCoach", "UEFA Pro", "2021-06-01", None),
    (103, 22, 3, "HeadCoach", "UEFA Pro", "2024-07-01", None),
    (104, 23, 4, "HeadCoach", "UEFA Pro", "2023-07-05", None),
    (105, 24, 5, "HeadCoach", "UEFA Pro", "2021-11-08", None),
    (106, 25, 1, "AssistantCoach", "UEFA Pro", "2016-07-01", None),
    (107, 26, 2, "AssistantCoach", "UEFA A", "2021-06-01", None),
    # Historical coaching role
    (108, 20, 5, "HeadCoach", "UEFA Pro", "2008-06-01", "2012-06-30"),
]

CONTRACTS = [
    (1, 1, 1, "PermanentContract", "2022-07-01", "2027-06-30", 20000000, True),
    (2, 2, 1, "PermanentContract", "2021-04-01", "2025-06-30", 18000000, True),
    (3, 3, 2, "PermanentContract", "2018-07-01", "2027-06-30", 15000000, True),
    (4, 4, 2, "PermanentContract", "2023-07-01", "2029-06-30", 16000000, True),
    (5, 5, 4, "PermanentContract", "2022-05-01", "2025-06-30", 25000000, True),
    (6, 6, 3, "PermanentContract", "2023-08-12", "2027-06-30", 18000000, True),
    (7, 11, 1, "LoanContract", "2024-01-01", "2024-06-30", 1000000, False),
    (10, 20, 1, "PermanentContract", "2023-07-01", "2025-06-30", 22000000, True),
    (11, 21, 2, "PermanentContract", "2024-01-01", "2026-06-30", 12000000, True),
    (12, 22, 3, "PermanentContract", "2024-07-01", "2026-06-30", 10000000, True),
]


def seed_sports_database(connection: sqlite3.Connection) -> None:
    """
    Recreate the sports schema and insert the baseline facts.

    The caller owns the transaction; a failure part way through leaves
    nothing committed as long as the caller rolls back.

    Args:
        connection: Open sqlite3 connection inside a transaction
    """
    for table in SEEDED_TABLES:
        connection.execute(f"DROP TABLE IF EXISTS {table}")
    for statement in SCHEMA:
        connection.execute(statement)

    connection.executemany("INSERT INTO team VALUES (?, ?, ?, ?, ?, ?)", TEAMS)
    connection.executemany("INSERT INTO person VALUES (?, ?, ?, ?, ?, ?)", PERSONS)
    connection.executemany(
        "INSERT INTO player_role VALUES (?, ?, ?, ?, ?, ?, ?, ?)", PLAYER_ROLES
    )
    connection.executemany(
        "INSERT INTO coach_role VALUES (?, ?, ?, ?, ?, ?, ?)", COACH_ROLES
    )
    connection.executemany(
        "INSERT INTO contract VALUES (?, ?, ?, ?, ?, ?, ?, ?)", CONTRACTS
    )

    logger.debug(
        f"Seeded {len(TEAMS)} teams, {len(PERSONS)} persons, "
        f"{len(PLAYER_ROLES)} player roles, {len(COACH_ROLES)} coach roles, "
        f"{len(CONTRACTS)} contracts"
    )
