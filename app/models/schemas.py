from pydantic import BaseModel, ConfigDict, Field
from typing import List, Dict, Optional, Any, Tuple
from datetime import datetime
from enum import Enum

from app.config.game_constants import (
    FIRST_ENTITY_ID,
    MAX_WATER,
    STARTING_COINS,
    STARTING_LEVEL,
    STAT_MAX,
)


class PlantKind(str, Enum):
    TOMATO = "Tomato"
    CARROT = "Carrot"
    SUNFLOWER = "Sunflower"
    STRAWBERRY = "Strawberry"
    PUMPKIN = "Pumpkin"
    ROSE = "Rose"


class AnimalKind(str, Enum):
    RABBIT = "Rabbit"
    CAT = "Cat"
    DOG = "Dog"
    CHICKEN = "Chicken"
    PIG = "Pig"
    DUCK = "Duck"


# Base Models
class FrozenModel(BaseModel):
    """Immutable value; transforms build new instances with model_copy()."""
    model_config = ConfigDict(frozen=True)


# Economy State Models
class Progression(FrozenModel):
    level: int = Field(STARTING_LEVEL, ge=1)
    experience: int = Field(0, ge=0)


class Plant(FrozenModel):
    id: int
    kind: PlantKind
    growth_stage: int = Field(0, ge=0, le=3)
    water_level: int = Field(0, ge=0, le=MAX_WATER)
    planted_at: datetime


class Animal(FrozenModel):
    id: int
    kind: AnimalKind
    hunger: float = Field(..., ge=0, le=STAT_MAX)
    happiness: float = Field(..., ge=0, le=STAT_MAX)


class EconomyState(FrozenModel):
    currency: int = Field(STARTING_COINS, ge=0)
    next_id: int = Field(FIRST_ENTITY_ID, ge=1)
    progression: Progression = Progression()
    plants: Tuple[Plant, ...] = ()
    animals: Tuple[Animal, ...] = ()


# Transform Results
class ActionOutcome(FrozenModel):
    """Result of a player action. Rewards are reported beside the state, not in it."""
    state: EconomyState
    applied: bool
    message: str
    coins_earned: int = 0
    coins_spent: int = 0
    experience_gained: int = 0
    entity_id: Optional[int] = None


class TickOutcome(FrozenModel):
    state: EconomyState
    bonus: int = 0


# Catalog Models
class PlantOffer(FrozenModel):
    kind: PlantKind
    name: str
    icon: str
    price: int = Field(..., ge=0)
    growth_duration_hint_ms: int  # not consulted by any transition


class AnimalOffer(FrozenModel):
    kind: AnimalKind
    name: str
    icon: str
    price: int = Field(..., ge=0)


class ShopItem(BaseModel):
    index: int
    kind: str
    name: str
    icon: str
    price: int
    affordable: bool
    growth_duration_hint_ms: Optional[int] = None


class ShopResponse(BaseModel):
    plants: List[ShopItem]
    animals: List[ShopItem]
    currency: int


# Display Models
class PlantView(BaseModel):
    id: int
    kind: PlantKind
    name: str
    icon: str
    growth_stage: int
    stage_name: str
    water_level: int
    harvestable: bool
    planted_at: datetime


class AnimalView(BaseModel):
    id: int
    kind: AnimalKind
    icon: str
    hunger: float
    happiness: float


class GameStateView(BaseModel):
    currency: int
    level: int
    experience: int
    experience_to_next: int
    experience_percent: float
    plants: List[PlantView]
    animals: List[AnimalView]
    pending_level_up: Optional[int] = None


# Response Models
class APIResponse(BaseModel):
    success: bool
    message: str
    data: Optional[Dict[str, Any]] = None
