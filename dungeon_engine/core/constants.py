"""Dungeon Engine Game Constants."""

from typing import Final

# =============================================================================
# FLOOR SCALING
# =============================================================================
# Floors beyond this value scale exactly like the cap
MAX_SCALING_FLOOR: Final[int] = 500

# Monsters and weapons only start scaling after this floor
SCALING_START_FLOOR: Final[int] = 20
SCALING_STEP: Final[float] = 0.1  # +10% per 20-floor cycle

GOLD_PER_FLOOR: Final[int] = 3
DROP_RATE_FLOOR_STEP: Final[int] = 25
DEFAULT_DROP_RATE_FACTOR: Final[float] = 0.05

# =============================================================================
# RARITY TABLE
# =============================================================================
# Format: tier -> (base chance, increment per effective floor, hard cap)
# Legendary and mythical increments are near zero: long tail, not linear
RARITY_RATES: Final[dict[str, tuple[float, float, float]]] = {
    "common": (0.45, 0.001, 0.60),
    "uncommon": (0.25, 0.0015, 0.40),
    "rare": (0.15, 0.002, 0.30),
    "epic": (0.08, 0.0025, 0.20),
    "legendary": (0.00001, 0.0000009, 0.0001),
    "mythical": (0.000001, 0.0000001, 0.00001),
}

# =============================================================================
# DIVISIONS
# =============================================================================
DIVISION_MULTIPLIERS: Final[dict[str, float]] = {
    "free": 0.8,
    "base": 0.9,
    "premium": 1.1,
}

DIVISION_ALIASES: Final[dict[str, str]] = {
    "gold": "base",
    "eth": "premium",
}

# =============================================================================
# DROP GATES
# =============================================================================
WEAPON_DROP_BASE: Final[float] = 0.20

# Battle type -> bonus added to the weapon drop chance
WEAPON_BATTLE_BONUS: Final[dict[str, float]] = {
    "floor_boss": 0.4,
    "mimic": 0.3,
    "detected": 0.15,
    "explore": 0.0,
    "pvp": 0.0,
}

# Performance tier -> bonus added to the weapon drop chance
WEAPON_RATING_BONUS: Final[dict[str, float]] = {
    "LEGENDARY": 0.2,
    "MASTERFUL": 0.2,
    "EXCELLENT": 0.15,
    "GOOD": 0.1,
}

ITEM_DROP_BY_BATTLE: Final[dict[str, float]] = {
    "floor_boss": 1.0,
    "mimic": 0.8,
}

ITEM_RATING_BONUS: Final[dict[str, float]] = {
    "LEGENDARY": 0.3,
    "MASTERFUL": 0.3,
    "EXCELLENT": 0.2,
}

ITEM_POTION_PENALTY: Final[float] = 0.15
ITEM_MIN_CHANCE: Final[float] = 0.1

FLOOR_KEY_INTERVAL: Final[int] = 5
RARE_GEM_INTERVAL: Final[int] = 10
FLOOR_KEY_ITEM: Final[str] = "floor_key"
RARE_GEM_ITEM: Final[str] = "rare_gem"

# =============================================================================
# GOLD AND EXPERIENCE
# =============================================================================
GOLD_RATING_MULTIPLIER: Final[dict[str, float]] = {
    "LEGENDARY": 2.0,
    "MASTERFUL": 1.8,
    "EXCELLENT": 1.5,
    "GOOD": 1.3,
    "AVERAGE": 1.0,
    "BELOW AVERAGE": 0.8,
    "BARELY SURVIVED": 0.6,
}

GOLD_BATTLE_MULTIPLIER: Final[dict[str, float]] = {
    "floor_boss": 2.5,
    "mimic": 1.8,
    "detected": 1.2,
}

SPEED_BONUS_TURNS: Final[int] = 3
SPEED_BONUS_MULTIPLIER: Final[float] = 1.5
CRITICAL_BONUS_HITS: Final[int] = 3
CRITICAL_BONUS_MULTIPLIER: Final[float] = 1.3

# =============================================================================
# POTIONS
# =============================================================================
POTION_TIER_FLOORS: Final[int] = 40

# (name, potency multiplier), one tier per 40 floors
POTION_TIERS: Final[list[tuple[str, float]]] = [
    ("Small", 1.0),
    ("Medium", 1.5),
    ("Large", 2.0),
    ("Great", 2.5),
    ("Superior", 3.0),
    ("Master", 3.5),
    ("Legendary", 4.0),
    ("Mythical", 4.5),
    ("Divine", 5.0),
    ("Ultimate", 6.0),
]

# kind -> (base restore value, minimum floor)
POTION_KINDS: Final[dict[str, tuple[int, int]]] = {
    "health": (5, 1),
    "mana": (3, 1),
    "healing": (8, 20),
    "energy": (4, 40),
}

POTION_DROP_BASE: Final[float] = 0.25
POTION_DROP_FACTOR: Final[float] = 0.04

POTION_BATTLE_BONUS: Final[dict[str, float]] = {
    "floor_boss": 0.3,
    "mimic": 0.2,
    "detected": 0.1,
}

POTION_RATING_BONUS: Final[dict[str, float]] = {
    "LEGENDARY": 0.15,
    "MASTERFUL": 0.15,
    "EXCELLENT": 0.1,
    "GOOD": 0.05,
}

# =============================================================================
# COMBAT
# =============================================================================
BASIC_ATTACK_ID: Final[str] = "basic_attack"
BASIC_ATTACK_DAMAGE: Final[int] = 1

COUNTER_DAMAGE: Final[int] = 2
SILENCE_DAMAGE: Final[int] = 3
DODGE_HEAL: Final[dict[str, int]] = {
    "melee": 2,
    "ranged": 3,
}

ACCEPTING_FATE_MANA: Final[int] = 4

# =============================================================================
# PERFORMANCE RATING
# =============================================================================
# (minimum percentage, grade, label)
RATING_THRESHOLDS: Final[list[tuple[int, str, str]]] = [
    (90, "S+", "LEGENDARY"),
    (80, "S", "MASTERFUL"),
    (70, "A", "EXCELLENT"),
    (60, "B", "GOOD"),
    (50, "C", "AVERAGE"),
    (40, "D", "BELOW AVERAGE"),
    (0, "F", "BARELY SURVIVED"),
]

TURN_SCORE_MAX: Final[int] = 5
TURN_SCORE_BASELINE: Final[int] = 10
DAMAGE_RATIO_MAX: Final[int] = 3
CRIT_SCORE_MAX: Final[int] = 2
ABILITY_VARIETY_MAX: Final[int] = 2
SPELL_VARIETY_MAX: Final[int] = 2
HEALTH_SCORE_MAX: Final[int] = 2
