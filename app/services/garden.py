"""
Garden Subsystem

Watering raises a plant's water level; filling it advances the growth
stage. A plant at the final stage can be harvested once for coins and
experience, which removes it from the garden.
"""

import logging
from typing import Optional

from ..config.game_constants import (
    HARVEST_BASE_COINS,
    HARVEST_COINS_PER_LEVEL,
    HARVEST_EXP,
    HARVESTABLE_STAGE,
    MAX_WATER,
    PLANT_ITEMS,
    STAGE_ICONS,
    STAGE_NAMES,
    WATER_EXP,
    WATER_PER_ACTION,
)
from ..models.schemas import ActionOutcome, EconomyState, Plant
from .progression import award_experience

logger = logging.getLogger(__name__)

_PLANT_INFO = {item["kind"]: item for item in PLANT_ITEMS}


def find_plant(state: EconomyState, plant_id: int) -> Optional[Plant]:
    for plant in state.plants:
        if plant.id == plant_id:
            return plant
    return None


def is_harvestable(plant: Plant) -> bool:
    return plant.growth_stage >= HARVESTABLE_STAGE


def stage_name(plant: Plant) -> str:
    return STAGE_NAMES[plant.growth_stage]


def stage_icon(plant: Plant) -> str:
    if is_harvestable(plant):
        return _PLANT_INFO[plant.kind.value]["icon"]
    return STAGE_ICONS[plant.growth_stage]


def harvest_reward(level: int) -> int:
    """Coins paid for a harvest at the given player level."""
    return HARVEST_BASE_COINS + level * HARVEST_COINS_PER_LEVEL


def _watered(plant: Plant) -> Plant:
    water_level = min(plant.water_level + WATER_PER_ACTION, MAX_WATER)
    growth_stage = plant.growth_stage
    if water_level >= MAX_WATER and growth_stage < HARVESTABLE_STAGE:
        growth_stage += 1
        water_level = 0
    return plant.model_copy(update={"water_level": water_level, "growth_stage": growth_stage})


def water_plant(state: EconomyState, plant_id: int) -> ActionOutcome:
    """
    Water a plant.

    Unknown ids and harvestable plants are left alone and earn nothing.
    Otherwise water rises by 25 (capped at 100); reaching the cap advances
    the stage and empties the water in the same step. Awards 5 experience.
    """
    plant = find_plant(state, plant_id)
    if plant is None:
        return ActionOutcome(state=state, applied=False, message="Plant not found")
    if is_harvestable(plant):
        return ActionOutcome(state=state, applied=False, message="Plant is ready to harvest")

    updated = _watered(plant)
    plants = tuple(updated if p.id == plant_id else p for p in state.plants)
    new_state = award_experience(state.model_copy(update={"plants": plants}), WATER_EXP)

    if updated.growth_stage != plant.growth_stage:
        logger.info(f"Plant {plant_id} grew to stage {updated.growth_stage} ({stage_name(updated)})")

    return ActionOutcome(
        state=new_state,
        applied=True,
        message=f"Watered {plant.kind.value}",
        experience_gained=WATER_EXP,
        entity_id=plant_id,
    )


def harvest_plant(state: EconomyState, plant_id: int) -> ActionOutcome:
    """
    Harvest a plant at the final stage.

    The coin reward uses the level held before the harvest; the 25
    experience is applied after the coins, so a level-up caused by this
    harvest never inflates its own reward.
    """
    plant = find_plant(state, plant_id)
    if plant is None:
        return ActionOutcome(state=state, applied=False, message="Plant not found")
    if not is_harvestable(plant):
        return ActionOutcome(state=state, applied=False, message="Plant is not ready to harvest")

    coins = harvest_reward(state.progression.level)
    plants = tuple(p for p in state.plants if p.id != plant_id)
    harvested = state.model_copy(update={"plants": plants, "currency": state.currency + coins})
    new_state = award_experience(harvested, HARVEST_EXP)

    logger.info(f"Harvested {plant.kind.value} (id={plant_id}) for {coins} coins")

    return ActionOutcome(
        state=new_state,
        applied=True,
        message=f"Harvested {plant.kind.value}",
        coins_earned=coins,
        experience_gained=HARVEST_EXP,
        entity_id=plant_id,
    )
