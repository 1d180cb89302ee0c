"""
Engine entry points.

Thin functions over the resolver, rating calculator, reward generator and
floor scaling so presentation and persistence layers need a single import.
"""

import random
from typing import Any, Optional, Tuple, Union

from .combat.actions import Action
from .combat.combatant import Combatant
from .combat.session import BattleSession, BattleStats
from .combat.special_abilities import SpecialAbilityRegistry
from .combat.turn_resolver import TurnResolver, TurnResult
from .core import floor_scaling
from .core.economy import Division
from .core.rating import Rating, RatingTier
from .core.rating import rate_battle as _rate_battle
from .core.rewards import RewardBundle, RewardGenerator
from .data.catalog import GameCatalog
from .data.models import Monster


def resolve_turn(
    session: BattleSession,
    player_action: Union[Action, dict],
    opponent_action: Union[Action, dict],
    rng: Optional[random.Random] = None,
    catalog: Optional[GameCatalog] = None,
    registry: Optional[SpecialAbilityRegistry] = None,
) -> Tuple[BattleSession, TurnResult]:
    """
    Resolve one simultaneous turn.

    Args:
        session: Current session (left untouched).
        player_action: Player's action, or a {"type", "id"} dict.
        opponent_action: Opponent's action, or a {"type", "id"} dict.
        rng: Random source for crits and effect rolls.
        catalog: Catalog override (default catalog if omitted).
        registry: Special-ability registry override.

    Returns:
        (next session, turn result)
    """
    if isinstance(player_action, dict):
        player_action = Action.from_dict(player_action)
    if isinstance(opponent_action, dict):
        opponent_action = Action.from_dict(opponent_action)
    resolver = TurnResolver(catalog=catalog, registry=registry, rng=rng)
    return resolver.resolve(session, player_action, opponent_action)


def rate_battle(stats: BattleStats, combatant: Combatant) -> Rating:
    """Score a finished battle for one combatant."""
    return _rate_battle(stats, combatant)


def generate_rewards(
    floor: int,
    battle_type: str,
    rating: Union[Rating, RatingTier, str, None],
    division: Union[Division, str, None] = Division.BASE,
    rng: Optional[random.Random] = None,
    monster: Optional[Monster] = None,
    stats: Optional[BattleStats] = None,
    player: Optional[Combatant] = None,
    catalog: Optional[GameCatalog] = None,
) -> RewardBundle:
    """Build the reward bundle for a finished battle."""
    generator = RewardGenerator(catalog=catalog, rng=rng)
    return generator.generate(
        floor, battle_type, rating, division,
        monster=monster, stats=stats, player=player,
    )


def scale_by_floor(base: Any, floor: Any, rate: Any) -> int:
    return floor_scaling.scale_by_floor(base, floor, rate)
