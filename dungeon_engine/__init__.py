"""Dungeon Engine: combat resolution and procedural rewards for a dungeon crawler."""

__version__ = "0.1.0"

from .api import resolve_turn, rate_battle, generate_rewards, scale_by_floor
from .combat import (
    Action,
    ActionType,
    BattleOutcome,
    BattleSession,
    BattleStats,
    BattleType,
    Combatant,
    TurnResolver,
    TurnResult,
    select_opponent_action,
)
from .core import Division, Rating, RatingTier, RarityTier, RewardBundle, WeaponInstance
from .data import GameCatalog, default_catalog

__all__ = [
    "__version__",
    # Entry points
    "resolve_turn",
    "rate_battle",
    "generate_rewards",
    "scale_by_floor",
    # Combat
    "Action",
    "ActionType",
    "BattleOutcome",
    "BattleSession",
    "BattleStats",
    "BattleType",
    "Combatant",
    "TurnResolver",
    "TurnResult",
    "select_opponent_action",
    # Rewards
    "Division",
    "Rating",
    "RatingTier",
    "RarityTier",
    "RewardBundle",
    "WeaponInstance",
    # Data
    "GameCatalog",
    "default_catalog",
]
