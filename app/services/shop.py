"""
Economy / Shop Driver

Turns currency into new plants and animals. The affordability check and
the deduction happen inside one transform.
"""

import logging
from datetime import datetime
from typing import List, Optional

from ..config.game_constants import (
    ANIMAL_ITEMS,
    ANIMAL_START_HAPPINESS,
    ANIMAL_START_HUNGER,
    PLANT_ITEMS,
)
from ..models.schemas import (
    ActionOutcome,
    Animal,
    AnimalOffer,
    EconomyState,
    Plant,
    PlantOffer,
    ShopItem,
    ShopResponse,
)

logger = logging.getLogger(__name__)

PLANT_OFFERS = tuple(PlantOffer(**item) for item in PLANT_ITEMS)
ANIMAL_OFFERS = tuple(AnimalOffer(**item) for item in ANIMAL_ITEMS)


def plant_offer(item_index: int) -> Optional[PlantOffer]:
    if 0 <= item_index < len(PLANT_OFFERS):
        return PLANT_OFFERS[item_index]
    return None


def animal_offer(item_index: int) -> Optional[AnimalOffer]:
    if 0 <= item_index < len(ANIMAL_OFFERS):
        return ANIMAL_OFFERS[item_index]
    return None


def can_afford(state: EconomyState, price: int) -> bool:
    return state.currency >= price


def purchase_plant(state: EconomyState, item_index: int, now: datetime) -> ActionOutcome:
    """Buy seeds from the catalog and plant them at stage 0 with no water."""
    offer = plant_offer(item_index)
    if offer is None:
        return ActionOutcome(state=state, applied=False, message="Unknown plant item")
    if not can_afford(state, offer.price):
        return ActionOutcome(state=state, applied=False, message="Not enough coins")

    plant = Plant(id=state.next_id, kind=offer.kind, growth_stage=0, water_level=0, planted_at=now)
    new_state = state.model_copy(
        update={
            "currency": state.currency - offer.price,
            "plants": state.plants + (plant,),
            "next_id": state.next_id + 1,
        }
    )
    logger.info(f"Purchased {offer.name} for {offer.price} coins (plant id={plant.id})")
    return ActionOutcome(
        state=new_state,
        applied=True,
        message=f"{offer.name} purchased",
        coins_spent=offer.price,
        entity_id=plant.id,
    )


def purchase_animal(state: EconomyState, item_index: int) -> ActionOutcome:
    """Adopt an animal from the catalog; every animal starts at 50 hunger / 50 happiness."""
    offer = animal_offer(item_index)
    if offer is None:
        return ActionOutcome(state=state, applied=False, message="Unknown animal item")
    if not can_afford(state, offer.price):
        return ActionOutcome(state=state, applied=False, message="Not enough coins")

    animal = Animal(
        id=state.next_id,
        kind=offer.kind,
        hunger=ANIMAL_START_HUNGER,
        happiness=ANIMAL_START_HAPPINESS,
    )
    new_state = state.model_copy(
        update={
            "currency": state.currency - offer.price,
            "animals": state.animals + (animal,),
            "next_id": state.next_id + 1,
        }
    )
    logger.info(f"Adopted {offer.name} for {offer.price} coins (animal id={animal.id})")
    return ActionOutcome(
        state=new_state,
        applied=True,
        message=f"{offer.name} adopted",
        coins_spent=offer.price,
        entity_id=animal.id,
    )


def shop_listing(state: EconomyState) -> ShopResponse:
    """Catalog with affordability against the given state."""
    plants: List[ShopItem] = [
        ShopItem(
            index=index,
            kind=offer.kind.value,
            name=offer.name,
            icon=offer.icon,
            price=offer.price,
            affordable=can_afford(state, offer.price),
            growth_duration_hint_ms=offer.growth_duration_hint_ms,
        )
        for index, offer in enumerate(PLANT_OFFERS)
    ]
    animals: List[ShopItem] = [
        ShopItem(
            index=index,
            kind=offer.kind.value,
            name=offer.name,
            icon=offer.icon,
            price=offer.price,
            affordable=can_afford(state, offer.price),
        )
        for index, offer in enumerate(ANIMAL_OFFERS)
    ]
    return ShopResponse(plants=plants, animals=animals, currency=state.currency)
