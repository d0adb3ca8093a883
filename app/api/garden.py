"""
Garden API Endpoints

Player actions, shop and state for the garden and shelter. Actions on
unknown ids or without enough coins are not errors: they answer with
success=False and the unchanged state.
"""

from fastapi import APIRouter, Depends, HTTPException, status
import logging
from typing import Optional

from ..models.schemas import (
    ActionOutcome,
    AnimalView,
    APIResponse,
    EconomyState,
    GameStateView,
    PlantView,
    ShopResponse,
)
from ..config.game_constants import ANIMAL_ITEMS, PLANT_ITEMS
from ..services import garden
from ..services.engine import GardenEngine, get_engine
from ..services.progression import experience_to_next, level_progress_percent
from ..services.shop import shop_listing

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/v1",
    tags=["garden"]
)

_PLANT_NAMES = {item["kind"]: item["name"] for item in PLANT_ITEMS}
_ANIMAL_ICONS = {item["kind"]: item["icon"] for item in ANIMAL_ITEMS}


def build_state_view(state: EconomyState, pending_level_up: Optional[int] = None) -> GameStateView:
    """Display values for a state."""
    progression = state.progression
    return GameStateView(
        currency=state.currency,
        level=progression.level,
        experience=progression.experience,
        experience_to_next=experience_to_next(progression.level),
        experience_percent=level_progress_percent(progression),
        plants=[
            PlantView(
                id=plant.id,
                kind=plant.kind,
                name=_PLANT_NAMES[plant.kind.value],
                icon=garden.stage_icon(plant),
                growth_stage=plant.growth_stage,
                stage_name=garden.stage_name(plant),
                water_level=plant.water_level,
                harvestable=garden.is_harvestable(plant),
                planted_at=plant.planted_at,
            )
            for plant in state.plants
        ],
        animals=[
            AnimalView(
                id=animal.id,
                kind=animal.kind,
                icon=_ANIMAL_ICONS[animal.kind.value],
                hunger=animal.hunger,
                happiness=animal.happiness,
            )
            for animal in state.animals
        ],
        pending_level_up=pending_level_up,
    )


def _action_response(engine: GardenEngine, outcome: ActionOutcome) -> APIResponse:
    return APIResponse(
        success=outcome.applied,
        message=outcome.message,
        data={
            "coins_earned": outcome.coins_earned,
            "coins_spent": outcome.coins_spent,
            "experience_gained": outcome.experience_gained,
            "entity_id": outcome.entity_id,
            "state": build_state_view(outcome.state, engine.pending_level_up).model_dump(mode="json"),
        }
    )


def _run_action(engine: GardenEngine, action, *args) -> APIResponse:
    try:
        outcome = action(*args)
    except Exception as e:
        logger.error(f"Error applying {action.__name__}: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=str(e)
        )
    return _action_response(engine, outcome)


# State
@router.get("/state", response_model=GameStateView)
async def get_state(engine: GardenEngine = Depends(get_engine)):
    """Current currency, progression, plants and animals."""
    return build_state_view(engine.state, engine.pending_level_up)


@router.post("/level-up/acknowledge", response_model=APIResponse)
async def acknowledge_level_up(engine: GardenEngine = Depends(get_engine)):
    """Clear the pending level-up notification."""
    level = engine.acknowledge_level_up()
    return APIResponse(
        success=level is not None,
        message=f"Reached level {level}" if level is not None else "No level-up pending",
        data={"level": level}
    )


# Garden
@router.post("/garden/{plant_id}/water", response_model=APIResponse)
async def water_plant(plant_id: int, engine: GardenEngine = Depends(get_engine)):
    return _run_action(engine, engine.water_plant, plant_id)


@router.post("/garden/{plant_id}/harvest", response_model=APIResponse)
async def harvest_plant(plant_id: int, engine: GardenEngine = Depends(get_engine)):
    return _run_action(engine, engine.harvest_plant, plant_id)


# Shelter
@router.post("/shelter/{animal_id}/feed", response_model=APIResponse)
async def feed_animal(animal_id: int, engine: GardenEngine = Depends(get_engine)):
    return _run_action(engine, engine.feed_animal, animal_id)


@router.post("/shelter/{animal_id}/play", response_model=APIResponse)
async def play_with_animal(animal_id: int, engine: GardenEngine = Depends(get_engine)):
    return _run_action(engine, engine.play_with_animal, animal_id)


# Shop
@router.get("/shop", response_model=ShopResponse)
async def get_shop(engine: GardenEngine = Depends(get_engine)):
    """Catalog with prices and what the player can currently afford."""
    return shop_listing(engine.state)


@router.post("/shop/plants/{item_index}", response_model=APIResponse)
async def buy_plant(item_index: int, engine: GardenEngine = Depends(get_engine)):
    return _run_action(engine, engine.purchase_plant, item_index)


@router.post("/shop/animals/{item_index}", response_model=APIResponse)
async def buy_animal(item_index: int, engine: GardenEngine = Depends(get_engine)):
    return _run_action(engine, engine.purchase_animal, item_index)


# Simulation
@router.post("/tick", response_model=APIResponse)
async def run_tick(engine: GardenEngine = Depends(get_engine)):
    """Advance the shelter by one tick on demand."""
    try:
        outcome = engine.tick()
    except Exception as e:
        logger.error(f"Error running tick: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=str(e)
        )
    return APIResponse(
        success=True,
        message=f"Tick complete, {outcome.bonus} bonus coins",
        data={
            "bonus": outcome.bonus,
            "state": build_state_view(outcome.state, engine.pending_level_up).model_dump(mode="json"),
        }
    )
