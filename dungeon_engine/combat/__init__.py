"""Combat resolution module.

This module provides the turn-based combat system including:
- Combatants built from hero and monster definitions
- Status effects with ticking, stacking and control rules
- Special ability interactions and death prevention
- Simultaneous turn resolution and battle sessions
- Monte Carlo loot simulation
"""

# Actions
from .actions import Action, ActionType, select_opponent_action

# Combatants
from .combatant import Combatant

# Status Effects
from .status_effects import (
    StatusEffectSystem,
    ActiveEffect,
    EffectKind,
    TickSummary,
    REFRESHING_EFFECTS,
)

# Special Abilities
from .special_abilities import (
    SpecialAbilityRegistry,
    SpecialAbilityHandlers,
    SpecialEvent,
    default_registry,
)

# Sessions
from .session import (
    BattleSession,
    BattleType,
    BattleOutcome,
    BattleStats,
    SideStats,
    FleeResult,
)

# Turn Resolution
from .turn_resolver import TurnResolver, TurnResult, SideResult

# Simulation
from .simulation import LootSimulator, LootSimulationResult, RarityConvergence

__all__ = [
    # Actions
    "Action",
    "ActionType",
    "select_opponent_action",
    # Combatants
    "Combatant",
    # Status Effects
    "StatusEffectSystem",
    "ActiveEffect",
    "EffectKind",
    "TickSummary",
    "REFRESHING_EFFECTS",
    # Special Abilities
    "SpecialAbilityRegistry",
    "SpecialAbilityHandlers",
    "SpecialEvent",
    "default_registry",
    # Sessions
    "BattleSession",
    "BattleType",
    "BattleOutcome",
    "BattleStats",
    "SideStats",
    "FleeResult",
    # Turn Resolution
    "TurnResolver",
    "TurnResult",
    "SideResult",
    # Simulation
    "LootSimulator",
    "LootSimulationResult",
    "RarityConvergence",
]
