"""
Pytest configuration and shared fixtures for the garden test suite.

This file provides:
- Fresh and pre-built economy states
- A deterministic random source
- Database isolation with a temporary SQLite file
- An engine and API test client wired to that database
"""

import os
import sys
import pytest
from datetime import datetime, timezone


# Add backend to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from app.core.config import settings

# Point the default database at the test file before anything opens it
settings.database_path = settings.test_database_path
settings.tick_enabled = False

from app.db.database import Database
from app.models.schemas import Animal, EconomyState, Plant, Progression
from app.services.engine import GardenEngine


FIXED_NOW = datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)


class ScriptedRandom:
    """Random source returning queued values in order, then a fallback."""

    def __init__(self, *values, fallback=0.0):
        self.values = list(values)
        self.fallback = fallback
        self.calls = 0

    def __call__(self):
        self.calls += 1
        if self.values:
            return self.values.pop(0)
        return self.fallback

    # Lets the same object stand in for random.Random in GardenEngine
    def random(self):
        return self()


# =============================================================================
# STATE FIXTURES
# =============================================================================

@pytest.fixture
def fresh_state():
    """Starting state: 15 coins, level 1, nothing owned."""
    return EconomyState()


@pytest.fixture
def make_plant():
    def _make(plant_id=1, kind="Tomato", growth_stage=0, water_level=0):
        return Plant(
            id=plant_id,
            kind=kind,
            growth_stage=growth_stage,
            water_level=water_level,
            planted_at=FIXED_NOW,
        )
    return _make


@pytest.fixture
def make_animal():
    def _make(animal_id=1, kind="Rabbit", hunger=50, happiness=50):
        return Animal(id=animal_id, kind=kind, hunger=hunger, happiness=happiness)
    return _make


@pytest.fixture
def make_state():
    def _make(currency=15, level=1, experience=0, plants=(), animals=(), next_id=None):
        if next_id is None:
            ids = [p.id for p in plants] + [a.id for a in animals]
            next_id = max(ids, default=0) + 1
        return EconomyState(
            currency=currency,
            next_id=next_id,
            progression=Progression(level=level, experience=experience),
            plants=tuple(plants),
            animals=tuple(animals),
        )
    return _make


# =============================================================================
# DATABASE / ENGINE FIXTURES
# =============================================================================

@pytest.fixture
def test_db(tmp_path):
    """Database backed by a throwaway SQLite file."""
    return Database(str(tmp_path / "garden_test.db"))


@pytest.fixture
def scripted_random():
    return ScriptedRandom


@pytest.fixture
def engine(test_db):
    """Engine on a fresh state, saving to the test database."""
    return GardenEngine(
        database=test_db,
        rng=ScriptedRandom(fallback=0.0),
        clock=lambda: FIXED_NOW,
        save_key="testGame",
    )


# =============================================================================
# API TEST CLIENT FIXTURE
# =============================================================================

@pytest.fixture
def test_client(engine):
    """FastAPI TestClient with the engine dependency pointed at the test engine."""
    from fastapi.testclient import TestClient
    from main import app
    from app.services.engine import get_engine

    app.dependency_overrides[get_engine] = lambda: engine
    # No context manager: startup events (load + tick driver) stay off
    client = TestClient(app)
    yield client
    app.dependency_overrides.pop(get_engine, None)


@pytest.fixture
def fixed_now():
    return FIXED_NOW
