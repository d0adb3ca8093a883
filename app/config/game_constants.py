"""
Game constants for the garden and animal shelter.
Growth is driven by watering, animal care by a periodic tick.
"""

# Plant catalog, in shop order. growth_duration_hint_ms is kept for display
# only: no transition reads it, plants grow by watering alone.
PLANT_ITEMS = [
    {"kind": "Tomato", "name": "Tomato Seeds", "icon": "🍅", "price": 10, "growth_duration_hint_ms": 30000},
    {"kind": "Carrot", "name": "Carrot Seeds", "icon": "🥕", "price": 15, "growth_duration_hint_ms": 25000},
    {"kind": "Sunflower", "name": "Sunflower Seeds", "icon": "🌻", "price": 20, "growth_duration_hint_ms": 40000},
    {"kind": "Strawberry", "name": "Strawberry Seeds", "icon": "🍓", "price": 25, "growth_duration_hint_ms": 35000},
    {"kind": "Pumpkin", "name": "Pumpkin Seeds", "icon": "🎃", "price": 30, "growth_duration_hint_ms": 50000},
    {"kind": "Rose", "name": "Rose Seeds", "icon": "🌹", "price": 40, "growth_duration_hint_ms": 45000},
]

# Animal catalog, in shop order
ANIMAL_ITEMS = [
    {"kind": "Rabbit", "name": "Rabbit", "icon": "🐰", "price": 50},
    {"kind": "Cat", "name": "Cat", "icon": "🐱", "price": 60},
    {"kind": "Dog", "name": "Dog", "icon": "🐶", "price": 70},
    {"kind": "Chicken", "name": "Chicken", "icon": "🐔", "price": 40},
    {"kind": "Pig", "name": "Pig", "icon": "🐷", "price": 80},
    {"kind": "Duck", "name": "Duck", "icon": "🦆", "price": 45},
]

# Growth stages
STAGE_NAMES = ["Seed", "Sprout", "Growing", "Harvestable"]
STAGE_ICONS = ["🌱", "🌿", "🌾"]  # stage 3 shows the plant's own icon
HARVESTABLE_STAGE = 3

# Watering
MAX_WATER = 100
WATER_PER_ACTION = 25

# Harvest: coins = HARVEST_BASE_COINS + level * HARVEST_COINS_PER_LEVEL
HARVEST_BASE_COINS = 20
HARVEST_COINS_PER_LEVEL = 5

# Experience awards
WATER_EXP = 5
HARVEST_EXP = 25
FEED_EXP = 5
PLAY_EXP = 10
EXP_PER_LEVEL = 100  # experience to next level = level * EXP_PER_LEVEL

# Animal care
ANIMAL_START_HUNGER = 50
ANIMAL_START_HAPPINESS = 50
STAT_MAX = 100
FEED_HUNGER_REDUCTION = 20
PLAY_HAPPINESS_GAIN = 15

# Per-tick decay
TICK_HUNGER_GAIN = 1
TICK_HAPPINESS_LOSS = 0.5

# Passive income: each animal happier than the threshold earns the bonus
# when its draw exceeds PASSIVE_INCOME_DRAW (a 30% chance per tick)
PASSIVE_INCOME_HAPPINESS = 70
PASSIVE_INCOME_DRAW = 0.7
PASSIVE_INCOME_BONUS = 2

# Starting state
STARTING_COINS = 15
STARTING_LEVEL = 1
FIRST_ENTITY_ID = 1
