"""
Shelter Subsystem

Adopted animals get hungrier and less happy on every tick. Feeding and
playing push the stats back; happy animals occasionally earn coins.
"""

import logging
from typing import Callable, Optional

from ..config.game_constants import (
    FEED_EXP,
    FEED_HUNGER_REDUCTION,
    PASSIVE_INCOME_BONUS,
    PASSIVE_INCOME_DRAW,
    PASSIVE_INCOME_HAPPINESS,
    PLAY_EXP,
    PLAY_HAPPINESS_GAIN,
    STAT_MAX,
    TICK_HAPPINESS_LOSS,
    TICK_HUNGER_GAIN,
)
from ..models.schemas import ActionOutcome, Animal, EconomyState, TickOutcome
from .progression import award_experience

logger = logging.getLogger(__name__)

# Zero-argument callable returning a float in [0, 1), e.g. random.Random().random
RandomSource = Callable[[], float]


def find_animal(state: EconomyState, animal_id: int) -> Optional[Animal]:
    for animal in state.animals:
        if animal.id == animal_id:
            return animal
    return None


def _replace_animal(state: EconomyState, updated: Animal) -> EconomyState:
    animals = tuple(updated if a.id == updated.id else a for a in state.animals)
    return state.model_copy(update={"animals": animals})


def feed_animal(state: EconomyState, animal_id: int) -> ActionOutcome:
    """Lower hunger by 20 (floored at 0) and award 5 experience."""
    animal = find_animal(state, animal_id)
    if animal is None:
        return ActionOutcome(state=state, applied=False, message="Animal not found")

    fed = animal.model_copy(update={"hunger": max(animal.hunger - FEED_HUNGER_REDUCTION, 0)})
    new_state = award_experience(_replace_animal(state, fed), FEED_EXP)
    return ActionOutcome(
        state=new_state,
        applied=True,
        message=f"Fed {animal.kind.value}",
        experience_gained=FEED_EXP,
        entity_id=animal_id,
    )


def play_with_animal(state: EconomyState, animal_id: int) -> ActionOutcome:
    """Raise happiness by 15 (capped at 100) and award 10 experience."""
    animal = find_animal(state, animal_id)
    if animal is None:
        return ActionOutcome(state=state, applied=False, message="Animal not found")

    played = animal.model_copy(
        update={"happiness": min(animal.happiness + PLAY_HAPPINESS_GAIN, STAT_MAX)}
    )
    new_state = award_experience(_replace_animal(state, played), PLAY_EXP)
    return ActionOutcome(
        state=new_state,
        applied=True,
        message=f"Played with {animal.kind.value}",
        experience_gained=PLAY_EXP,
        entity_id=animal_id,
    )


def _decayed(animal: Animal) -> Animal:
    return animal.model_copy(
        update={
            "hunger": min(animal.hunger + TICK_HUNGER_GAIN, STAT_MAX),
            "happiness": max(animal.happiness - TICK_HAPPINESS_LOSS, 0),
        }
    )


def tick(state: EconomyState, random: RandomSource) -> TickOutcome:
    """
    Advance every animal by one tick, then pay passive income.

    Decay is applied first. Each animal still happier than 70 afterwards
    draws once from ``random``; a draw above 0.7 earns 2 coins. Only
    eligible animals draw, in collection order.
    """
    animals = tuple(_decayed(a) for a in state.animals)

    successes = 0
    for animal in animals:
        if animal.happiness > PASSIVE_INCOME_HAPPINESS and random() > PASSIVE_INCOME_DRAW:
            successes += 1
    bonus = successes * PASSIVE_INCOME_BONUS

    if bonus:
        logger.info(f"Passive income: {successes} happy animal(s) earned {bonus} coins")

    if not bonus and animals == state.animals:
        # Nothing moved (no animals, or every stat already at its bound)
        return TickOutcome(state=state, bonus=0)

    new_state = state.model_copy(
        update={"animals": animals, "currency": state.currency + bonus}
    )
    return TickOutcome(state=new_state, bonus=bonus)
