"""
Garden Engine

Owns the one canonical EconomyState. Player actions and ticks are applied
one at a time under a lock, each committing a complete new state (and
saving it) before the next one reads it.
"""

import logging
import random
import threading
from datetime import datetime, timezone
from typing import Callable, Optional

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger

from ..core.config import settings
from ..db.database import Database, db, default_game_state
from ..models.schemas import ActionOutcome, EconomyState, TickOutcome
from . import garden, shelter, shop

logger = logging.getLogger(__name__)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class GardenEngine:
    """
    Serialized state-update queue for the garden economy.

    Every transform runs inside ``apply()``, which holds the lock across
    read, transform, commit and save.
    """

    def __init__(
        self,
        database: Optional[Database] = None,
        rng: Optional[random.Random] = None,
        clock: Callable[[], datetime] = utc_now,
        save_key: Optional[str] = None,
        state: Optional[EconomyState] = None,
    ):
        self.database = database
        self.rng = rng if rng is not None else random.Random(settings.random_seed)
        self.clock = clock
        self.save_key = save_key or settings.save_key
        self._lock = threading.Lock()
        self._state = state if state is not None else default_game_state()
        self._observed_level = self._state.progression.level
        self._pending_level_up: Optional[int] = None

    @property
    def state(self) -> EconomyState:
        return self._state

    @property
    def pending_level_up(self) -> Optional[int]:
        """Level reached since the last acknowledgement, if any."""
        return self._pending_level_up

    def acknowledge_level_up(self) -> Optional[int]:
        with self._lock:
            level, self._pending_level_up = self._pending_level_up, None
            return level

    def load(self) -> EconomyState:
        """Replace the current state with the saved one."""
        with self._lock:
            if self.database is not None:
                self._state = self.database.load_game_state(self.save_key)
            # A loaded level is not a level-up
            self._observed_level = self._state.progression.level
            self._pending_level_up = None
            logger.info(
                f"[OK] Game loaded: {self._state.currency} coins, level {self._state.progression.level}, "
                f"{len(self._state.plants)} plant(s), {len(self._state.animals)} animal(s)"
            )
            return self._state

    def apply(self, transform: Callable[[EconomyState], ActionOutcome]) -> ActionOutcome:
        """Run one transform against the current state and commit its result."""
        with self._lock:
            outcome = transform(self._state)
            self._commit(outcome.state)
            return outcome

    def _commit(self, new_state: EconomyState):
        if new_state is self._state:
            return
        self._state = new_state

        level = new_state.progression.level
        if level > self._observed_level:
            logger.info(f"Level up! Reached level {level}")
            self._pending_level_up = level
        self._observed_level = level

        if self.database is not None:
            try:
                self.database.save_game_state(new_state, self.save_key)
            except Exception as e:
                logger.error(f"[ERROR] Game state not saved, keeping in-memory state: {e}")

    # Player actions
    def water_plant(self, plant_id: int) -> ActionOutcome:
        return self.apply(lambda state: garden.water_plant(state, plant_id))

    def harvest_plant(self, plant_id: int) -> ActionOutcome:
        return self.apply(lambda state: garden.harvest_plant(state, plant_id))

    def feed_animal(self, animal_id: int) -> ActionOutcome:
        return self.apply(lambda state: shelter.feed_animal(state, animal_id))

    def play_with_animal(self, animal_id: int) -> ActionOutcome:
        return self.apply(lambda state: shelter.play_with_animal(state, animal_id))

    def purchase_plant(self, item_index: int) -> ActionOutcome:
        return self.apply(lambda state: shop.purchase_plant(state, item_index, self.clock()))

    def purchase_animal(self, item_index: int) -> ActionOutcome:
        return self.apply(lambda state: shop.purchase_animal(state, item_index))

    # Periodic
    def tick(self) -> TickOutcome:
        with self._lock:
            outcome = shelter.tick(self._state, self.rng.random)
            self._commit(outcome.state)
            return outcome


class TickDriver:
    """Runs engine.tick() on a fixed interval with APScheduler."""

    JOB_ID = "shelter_tick"

    def __init__(self, engine: GardenEngine, interval: Optional[float] = None):
        self.engine = engine
        self.interval = interval if interval is not None else settings.tick_interval_seconds
        self._scheduler: Optional[AsyncIOScheduler] = None

    @property
    def running(self) -> bool:
        return self._scheduler is not None and self._scheduler.running

    def start(self):
        """Start ticking. Must be called with an event loop running."""
        if self.running:
            return
        self._scheduler = AsyncIOScheduler()
        self._scheduler.add_job(
            self._run_tick,
            IntervalTrigger(seconds=self.interval),
            id=self.JOB_ID,
            name="Shelter animal tick",
            replace_existing=True,
            coalesce=True,
            max_instances=1,
        )
        self._scheduler.start()
        logger.info(f"[SCHEDULER] Tick driver started - every {self.interval}s")

    def stop(self):
        if not self.running:
            return
        self._scheduler.shutdown(wait=False)
        self._scheduler = None
        logger.info("[SCHEDULER] Tick driver stopped")

    async def _run_tick(self):
        try:
            self.engine.tick()
        except Exception as e:
            logger.error(f"[SCHEDULER] Tick error: {e}")


# Global engine instance
engine = GardenEngine(database=db)


def get_engine() -> GardenEngine:
    """FastAPI dependency returning the shared engine."""
    return engine


# Global tick driver, started and stopped with the app
tick_driver = TickDriver(engine)
