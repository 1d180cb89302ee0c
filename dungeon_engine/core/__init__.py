# Core calculations: scaling, rarity, economy, rating and rewards
from .config import EngineSettings, settings, configure_logging
from .exceptions import (
    EngineError,
    DataNotFoundError,
    InvalidStateError,
    ExhaustedResourceError,
)
from .floor_scaling import (
    ScalingInfo,
    effective_floor,
    is_beyond_scaling_limit,
    scale_by_floor,
    monster_scaling_factor,
    weapon_damage_scaling,
    gold_scaling,
    drop_rate_scaling,
    scaling_info,
)
from .economy import Division, division_multiplier, apply_division_scaling, scale_drop_chance
from .probability import (
    RarityTier,
    RARITY_ORDER,
    RarityStatistic,
    calculate_rarity_chance,
    rarity_distribution,
    determine_rarity,
    rarity_statistics,
)
from .rating import Rating, RatingTier, MAX_SCORE, score_axes, rate_battle
from .potions import PotionReward, scaled_potion, potion_drop_chance, generate_potion_rewards
from .rewards import WeaponInstance, RewardBundle, RewardGenerator

__all__ = [
    # Configuration
    "EngineSettings",
    "settings",
    "configure_logging",
    # Errors
    "EngineError",
    "DataNotFoundError",
    "InvalidStateError",
    "ExhaustedResourceError",
    # Floor scaling
    "ScalingInfo",
    "effective_floor",
    "is_beyond_scaling_limit",
    "scale_by_floor",
    "monster_scaling_factor",
    "weapon_damage_scaling",
    "gold_scaling",
    "drop_rate_scaling",
    "scaling_info",
    # Economy
    "Division",
    "division_multiplier",
    "apply_division_scaling",
    "scale_drop_chance",
    # Rarity
    "RarityTier",
    "RARITY_ORDER",
    "RarityStatistic",
    "calculate_rarity_chance",
    "rarity_distribution",
    "determine_rarity",
    "rarity_statistics",
    # Rating
    "Rating",
    "RatingTier",
    "MAX_SCORE",
    "score_axes",
    "rate_battle",
    # Rewards
    "PotionReward",
    "scaled_potion",
    "potion_drop_chance",
    "generate_potion_rewards",
    "WeaponInstance",
    "RewardBundle",
    "RewardGenerator",
]
