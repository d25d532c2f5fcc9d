from __future__ import annotations

import pytest
from pathlib import Path
import sys

import numpy as np

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from speicher_sim.db.session import Base, build_engine, build_session_factory, init_db  # noqa: E402
from speicher_sim.persistence import PersistenceService  # noqa: E402
from speicher_sim.scenario_setup import build_demo_pv_rows, build_demo_reference_weights  # noqa: E402

HOURS = 8760


@pytest.fixture()
def sqlite_session_factory():
    """Provide a session factory bound to an in-memory SQLite database."""
    engine = build_engine("sqlite+pysqlite:///:memory:")
    init_db(engine)
    yield build_session_factory(engine)
    Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture()
def persistence(sqlite_session_factory):
    """Provide a PersistenceService bound to the temporary SQLite DB."""
    return PersistenceService(session_factory=sqlite_session_factory)


@pytest.fixture()
def flat_load() -> np.ndarray:
    """1 kWh consumption in every hour of the year."""
    return np.ones(HOURS)


@pytest.fixture()
def first_day_pv() -> np.ndarray:
    """2 kWh PV production from 08:00 to 16:00 on January 1 only."""
    pv = np.zeros(HOURS)
    pv[8:16] = 2.0
    return pv


@pytest.fixture()
def daily_pv() -> np.ndarray:
    """2 kWh PV production from 08:00 to 16:00 on every day of the year."""
    day = np.zeros(24)
    day[8:16] = 2.0
    return np.tile(day, 365)


@pytest.fixture()
def demo_weights() -> np.ndarray:
    return build_demo_reference_weights()


@pytest.fixture()
def demo_pv_rows() -> list:
    return build_demo_pv_rows(system_size_kwp=8.0, year=2018)
