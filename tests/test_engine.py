"""
Garden Engine Tests.

Tests the serialized state owner:
- Actions committing and saving state
- Purchase atomicity, including concurrent submissions
- Level-up detection and acknowledgement
- Loading a save
- The scheduled tick driver
"""
import asyncio
import random
import pytest
from concurrent.futures import ThreadPoolExecutor

from app.services.engine import GardenEngine, TickDriver


@pytest.mark.integration
class TestEngineActions:
    """Test actions applied through the engine."""

    def test_action_commits_and_saves(self, engine, test_db):
        outcome = engine.purchase_plant(0)

        assert outcome.applied is True
        assert engine.state.currency == 5
        assert test_db.load_game_state("testGame") == engine.state

    def test_noop_action_keeps_same_state(self, engine):
        before = engine.state

        outcome = engine.water_plant(123)

        assert outcome.applied is False
        assert engine.state is before

    def test_planted_at_comes_from_clock(self, engine, fixed_now):
        engine.purchase_plant(0)

        assert engine.state.plants[0].planted_at == fixed_now

    def test_each_transform_sees_previous_result(self, make_state):
        """Two purchases of 30 against 50 coins: only the first succeeds."""
        engine = GardenEngine(state=make_state(currency=50))

        first = engine.purchase_plant(4)
        second = engine.purchase_plant(4)

        assert first.applied is True
        assert second.applied is False
        assert engine.state.currency == 20
        assert len(engine.state.plants) == 1

    def test_concurrent_purchases_cannot_both_pass(self, make_state):
        """Purchases racing from many threads never overspend."""
        for _ in range(20):
            engine = GardenEngine(state=make_state(currency=50))

            with ThreadPoolExecutor(max_workers=2) as pool:
                results = list(pool.map(lambda _: engine.purchase_plant(4), range(2)))

            assert sum(r.applied for r in results) == 1
            assert engine.state.currency == 20

    def test_engine_without_database_works_in_memory(self, make_state, make_animal):
        engine = GardenEngine(state=make_state(animals=[make_animal()]))

        engine.feed_animal(1)

        assert engine.state.animals[0].hunger == 30

    def test_tick_uses_engine_random_source(self, make_state, make_animal, scripted_random):
        engine = GardenEngine(
            state=make_state(currency=0, animals=[make_animal(happiness=90)]),
            rng=scripted_random(0.99),
        )

        outcome = engine.tick()

        assert outcome.bonus == 2
        assert engine.state.currency == 2

    def test_seeded_engines_tick_identically(self, make_state, make_animal):
        animals = [make_animal(animal_id=i, happiness=100) for i in range(1, 6)]
        a = GardenEngine(state=make_state(animals=animals), rng=random.Random(7))
        b = GardenEngine(state=make_state(animals=animals), rng=random.Random(7))

        for _ in range(10):
            a.tick()
            b.tick()

        assert a.state == b.state

    def test_save_failure_keeps_in_memory_state(self, engine, monkeypatch):
        def broken_save(state, key=None):
            raise RuntimeError("disk full")

        monkeypatch.setattr(engine.database, "save_game_state", broken_save)

        outcome = engine.purchase_plant(0)

        assert outcome.applied is True
        assert engine.state.currency == 5


@pytest.mark.integration
class TestLevelUpDetection:
    """Test pending level-up notifications."""

    def test_level_up_is_recorded(self, make_state, make_plant):
        engine = GardenEngine(state=make_state(experience=98, plants=[make_plant()]))

        engine.water_plant(1)

        assert engine.state.progression.level == 2
        assert engine.pending_level_up == 2

    def test_acknowledge_clears_notification(self, make_state, make_plant):
        engine = GardenEngine(state=make_state(experience=98, plants=[make_plant()]))
        engine.water_plant(1)

        assert engine.acknowledge_level_up() == 2
        assert engine.pending_level_up is None
        assert engine.acknowledge_level_up() is None

    def test_no_notification_without_level_change(self, engine):
        engine.purchase_plant(0)
        engine.water_plant(1)

        assert engine.pending_level_up is None

    def test_loading_higher_level_is_not_a_level_up(self, engine, test_db, make_state):
        test_db.save_game_state(make_state(currency=10, level=5), "testGame")

        engine.load()

        assert engine.state.progression.level == 5
        assert engine.pending_level_up is None

    def test_load_applies_zero_state_recovery(self, engine, test_db, make_state):
        test_db.save_game_state(make_state(currency=0), "testGame")

        assert engine.load().currency == 15

    def test_load_malformed_save_gives_fresh_state(self, engine, test_db):
        test_db.set("testGame", "garbage")

        state = engine.load()

        assert state.currency == 15
        assert state.plants == ()


@pytest.mark.integration
class TestTickDriver:
    """Test the scheduled tick driver."""

    async def test_driver_ticks_on_interval(self, make_state, make_animal):
        engine = GardenEngine(state=make_state(animals=[make_animal(hunger=0)]))
        driver = TickDriver(engine, interval=0.05)

        driver.start()
        assert driver.running is True
        await asyncio.sleep(0.5)
        driver.stop()

        assert driver.running is False
        assert engine.state.animals[0].hunger >= 1

    async def test_stop_halts_ticking(self, make_state, make_animal):
        engine = GardenEngine(state=make_state(animals=[make_animal(hunger=0)]))
        driver = TickDriver(engine, interval=0.05)

        driver.start()
        await asyncio.sleep(0.3)
        driver.stop()
        await asyncio.sleep(0.01)  # let an already dispatched tick finish
        hunger_after_stop = engine.state.animals[0].hunger
        await asyncio.sleep(0.3)

        assert engine.state.animals[0].hunger == hunger_after_stop

    async def test_start_and_stop_are_idempotent(self, engine):
        driver = TickDriver(engine, interval=10)

        driver.start()
        driver.start()
        driver.stop()
        driver.stop()

        assert driver.running is False


@pytest.mark.integration
class TestIdleTick:
    """Test ticks that change nothing."""

    def test_tick_without_animals_does_not_save(self, engine, test_db):
        before = engine.state

        engine.tick()

        assert engine.state is before
        assert test_db.get("testGame") is None

    def test_tick_with_animals_saves(self, make_state, make_animal, test_db):
        engine = GardenEngine(database=test_db, save_key="testGame",
                              state=make_state(animals=[make_animal()]))

        engine.tick()

        assert test_db.load_game_state("testGame").animals[0].hunger == 51
