"""Battle Session State.

A BattleSession holds everything one encounter needs between turns: both
combatants, the turn counter and accumulated statistics. Sessions are plain
values owned by the caller; transitions (resolve a turn, flee) return a new
session and leave the input untouched.
"""

import copy
import logging
import math
import random
import uuid
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any, Dict, Optional, Set, Tuple

from ..core.config import settings
from ..core.exceptions import InvalidStateError
from .combatant import Combatant

logger = logging.getLogger(__name__)


class BattleType(StrEnum):
    """Encounter classification (drives reward multipliers and flee rules)."""

    FLOOR_BOSS = "floor_boss"
    EXPLORE = "explore"
    MIMIC = "mimic"
    DETECTED = "detected"
    PVP = "pvp"


class BattleOutcome(StrEnum):
    """Session state from the player's point of view."""

    ONGOING = "ongoing"
    PLAYER_WON = "player_won"
    OPPONENT_WON = "opponent_won"
    DRAW = "draw"
    FLED = "fled"


@dataclass
class SideStats:
    """Counters for one combatant. Values only ever grow."""

    damage_dealt: int = 0
    damage_received: int = 0
    mana_used: int = 0
    healing_done: int = 0
    critical_hits: int = 0
    abilities_used: Set[str] = field(default_factory=set)
    spells_used: Set[str] = field(default_factory=set)

    def record(
        self,
        damage_dealt: int = 0,
        damage_received: int = 0,
        mana_used: int = 0,
        healing_done: int = 0,
        critical_hits: int = 0,
        ability: Optional[str] = None,
        spell: Optional[str] = None,
    ) -> None:
        self.damage_dealt += max(0, damage_dealt)
        self.damage_received += max(0, damage_received)
        self.mana_used += max(0, mana_used)
        self.healing_done += max(0, healing_done)
        self.critical_hits += max(0, critical_hits)
        if ability:
            self.abilities_used.add(ability)
        if spell:
            self.spells_used.add(spell)


@dataclass
class BattleStats:
    """Battle-wide counters: turn count plus per-combatant SideStats."""

    turns: int = 0
    sides: Dict[str, SideStats] = field(default_factory=dict)

    def side(self, combatant_id: str) -> SideStats:
        if combatant_id not in self.sides:
            self.sides[combatant_id] = SideStats()
        return self.sides[combatant_id]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "turns": self.turns,
            "sides": {
                cid: {
                    "damage_dealt": s.damage_dealt,
                    "damage_received": s.damage_received,
                    "mana_used": s.mana_used,
                    "healing_done": s.healing_done,
                    "critical_hits": s.critical_hits,
                    "abilities_used": sorted(s.abilities_used),
                    "spells_used": sorted(s.spells_used),
                }
                for cid, s in self.sides.items()
            },
        }


@dataclass
class FleeResult:
    """Penalties applied (or to be applied by the caller) when fleeing."""

    health_lost: int
    mana_lost: int
    stronger_monster: bool
    gold_penalty: float = 0.0  # Fraction of carried gold the caller should remove
    item_lost: bool = False

    def apply_gold_penalty(self, gold: int) -> int:
        """Gold left after the penalty."""
        return gold - math.floor(gold * self.gold_penalty)


@dataclass
class BattleSession:
    """
    One encounter between the player and an opponent.

    battle_type is fixed at creation; assigning it again raises
    InvalidStateError.
    """

    player: Combatant
    opponent: Combatant
    battle_type: BattleType = BattleType.EXPLORE
    floor: int = 1
    session_id: str = field(default_factory=lambda: uuid.uuid4().hex[:12])
    turn_number: int = 0
    stats: BattleStats = field(default_factory=BattleStats)
    outcome: BattleOutcome = BattleOutcome.ONGOING

    def __post_init__(self):
        if self.player.id == self.opponent.id:
            raise InvalidStateError(
                f"combatants need distinct ids (both are {self.player.id!r})",
                self.session_id,
            )
        self.stats.side(self.player.id)
        self.stats.side(self.opponent.id)

    def __setattr__(self, name: str, value: Any) -> None:
        if name == "battle_type":
            if "battle_type" in self.__dict__:
                raise InvalidStateError("battle_type cannot change during a session")
            value = BattleType(value)
        super().__setattr__(name, value)

    @classmethod
    def start(
        cls,
        player: Combatant,
        opponent: Combatant,
        battle_type: BattleType = BattleType.EXPLORE,
        floor: int = 1,
        session_id: Optional[str] = None,
    ) -> "BattleSession":
        session = cls(
            player=player,
            opponent=opponent,
            battle_type=battle_type,
            floor=floor,
            session_id=session_id or uuid.uuid4().hex[:12],
        )
        logger.info(
            "Battle %s started: %s vs %s (%s, floor %d)",
            session.session_id, player.name, opponent.name, session.battle_type.value, floor,
        )
        return session

    @property
    def is_terminal(self) -> bool:
        return self.outcome != BattleOutcome.ONGOING

    @property
    def player_stats(self) -> SideStats:
        return self.stats.side(self.player.id)

    @property
    def opponent_stats(self) -> SideStats:
        return self.stats.side(self.opponent.id)

    @property
    def can_flee(self) -> bool:
        return not self.is_terminal and self.battle_type != BattleType.FLOOR_BOSS

    def copy(self) -> "BattleSession":
        return copy.deepcopy(self)

    def update_outcome(self) -> BattleOutcome:
        """Terminal check: one or both sides at zero health."""
        player_down = not self.player.is_alive
        opponent_down = not self.opponent.is_alive
        if player_down and opponent_down:
            self.outcome = BattleOutcome.DRAW
        elif opponent_down:
            self.outcome = BattleOutcome.PLAYER_WON
        elif player_down:
            self.outcome = BattleOutcome.OPPONENT_WON
        return self.outcome

    def is_stronger_opponent(self) -> bool:
        """Flee heuristic: deep floor, tough opponent or a large ability kit."""
        return (
            self.floor >= settings.FLEE_STRONGER_FLOOR
            or self.opponent.max_health > settings.FLEE_STRONGER_HEALTH
            or len(self.opponent.abilities) > settings.FLEE_STRONGER_ABILITIES
        )

    def flee(self, rng: Optional[random.Random] = None) -> Tuple["BattleSession", FleeResult]:
        """
        Leave the battle, paying the flee penalties.

        Args:
            rng: Random source for the item-loss roll.

        Returns:
            (terminal session with outcome FLED, penalties)

        Raises:
            InvalidStateError: The session is already over or is a floor boss fight.
        """
        if self.is_terminal:
            raise InvalidStateError("cannot flee a finished battle", self.session_id)
        if self.battle_type == BattleType.FLOOR_BOSS:
            raise InvalidStateError("cannot flee from a floor boss", self.session_id)

        rng = rng or random.Random()
        session = self.copy()
        player = session.player

        health_lost = min(
            math.floor(player.health * settings.FLEE_HEALTH_PENALTY),
            max(0, player.health - 1),
        )
        mana_lost = math.floor(player.mana * settings.FLEE_MANA_PENALTY)
        player.change_health(-health_lost)
        player.change_mana(-mana_lost)

        stronger = session.is_stronger_opponent()
        result = FleeResult(
            health_lost=health_lost,
            mana_lost=mana_lost,
            stronger_monster=stronger,
        )
        if stronger:
            result.gold_penalty = settings.FLEE_GOLD_PENALTY
            result.item_lost = rng.random() < settings.FLEE_ITEM_LOSS_CHANCE

        session.outcome = BattleOutcome.FLED
        logger.info(
            "Battle %s: player fled on floor %d (stronger=%s)",
            session.session_id, session.floor, stronger,
        )
        return session, result
