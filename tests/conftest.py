"""
Pytest configuration and fixtures.

This file is automatically loaded by pytest and provides
shared fixtures for all tests: an in-memory rating database and
builders for point logs and match records.
"""

import logging

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from rally.db.models import Base
from rally.rating.models import MatchRecord, PlayerSnapshot, PointEvent

MATCH_START_MS = 1_760_000_000_000


def build_point_log(sets, durations=10.0, start_ms=MATCH_START_MS):
    """
    Build a point log from one scorer string per set.

    "AABBA" means A, A, B, B, A scored in that order. Scores accumulate
    within each set and restart at 0 for the next. `durations` is either one
    rally length for every point or a list with one entry per point.
    """
    total_points = sum(len(s) for s in sets)
    if isinstance(durations, (int, float)):
        durations = [float(durations)] * total_points
    assert len(durations) == total_points, "need one duration per point"

    events = []
    now = start_ms
    i = 0
    for set_index, scorers in enumerate(sets, start=1):
        score_a = score_b = 0
        for scorer in scorers:
            if scorer == "A":
                score_a += 1
            else:
                score_b += 1
            now += int(durations[i] * 1000)
            events.append(
                PointEvent(
                    scorer=scorer,
                    score_a=score_a,
                    score_b=score_b,
                    set_index=set_index,
                    timestamp=now,
                    rally_duration_seconds=durations[i],
                )
            )
            i += 1
    return tuple(events)


def build_record(
    sets,
    set_wins_a,
    set_wins_b,
    rating_a=1000.0,
    deviation_a=300.0,
    rating_b=1000.0,
    deviation_b=300.0,
    forced=False,
    durations=10.0,
):
    """MatchRecord from per-set scorer strings (see build_point_log)."""
    return MatchRecord(
        side_a=PlayerSnapshot(rating=rating_a, deviation=deviation_a, display_name="Kim"),
        side_b=PlayerSnapshot(rating=rating_b, deviation=deviation_b, display_name="Lee"),
        set_wins_a=set_wins_a,
        set_wins_b=set_wins_b,
        point_log=build_point_log(sets, durations),
        was_forcibly_terminated=forced,
    )


@pytest.fixture
def point_log():
    """Factory fixture: point_log(["AB...", "BB..."], durations=10.0)."""
    return build_point_log


@pytest.fixture
def match_record():
    """Factory fixture: match_record(sets, set_wins_a, set_wins_b, **overrides)."""
    return build_record


@pytest.fixture
def sweep_record():
    """
    B sweeps 2-0, 15-21 in both sets.

    No deuce points, every rally 10s, identical set-by-set form.
    Totals: A 30, B 42.
    """
    one_set = "AB" * 15 + "B" * 6
    return build_record([one_set, one_set], set_wins_a=0, set_wins_b=2)


@pytest.fixture
def restore_root_logging():
    """Put the root logger back the way it was after a logging-config test."""
    root = logging.getLogger()
    handlers = root.handlers[:]
    level = root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.fixture(scope="session")
def test_engine():
    """
    Create a test database engine.

    Uses SQLite in-memory; FOR UPDATE is a no-op there, which is fine
    for single-threaded tests.
    """
    engine = create_engine(
        "sqlite:///:memory:",
        echo=False,
    )
    return engine


@pytest.fixture(scope="session")
def tables(test_engine):
    """
    Create all tables for testing.

    This fixture runs once per test session.
    """
    Base.metadata.create_all(test_engine)
    yield
    Base.metadata.drop_all(test_engine)


@pytest.fixture
def db_session(test_engine, tables):
    """
    Create a database session for a test.

    Each test gets its own session with automatic rollback,
    ensuring tests don't affect each other.
    """
    connection = test_engine.connect()
    transaction = connection.begin()

    Session = sessionmaker(bind=connection)
    session = Session()

    yield session

    session.close()
    transaction.rollback()
    connection.close()
