"""Rarity & Reward Generator.

Decides whether each reward category drops, which rarity tier it comes
from, and assembles the concrete rewards for a finished battle.
"""

import logging
import math
import random
from dataclasses import dataclass, field
from typing import List, Optional, Tuple, Union, TYPE_CHECKING

from .config import settings
from .constants import (
    CRITICAL_BONUS_HITS,
    CRITICAL_BONUS_MULTIPLIER,
    FLOOR_KEY_INTERVAL,
    FLOOR_KEY_ITEM,
    GOLD_BATTLE_MULTIPLIER,
    ITEM_DROP_BY_BATTLE,
    ITEM_MIN_CHANCE,
    ITEM_POTION_PENALTY,
    ITEM_RATING_BONUS,
    RARE_GEM_INTERVAL,
    RARE_GEM_ITEM,
    SPEED_BONUS_MULTIPLIER,
    SPEED_BONUS_TURNS,
    WEAPON_BATTLE_BONUS,
    WEAPON_DROP_BASE,
    WEAPON_RATING_BONUS,
)
from .economy import Division, apply_division_scaling, scale_drop_chance
from .floor_scaling import drop_rate_scaling, gold_scaling, weapon_damage_scaling
from .potions import PotionReward, generate_potion_rewards
from .probability import RarityTier, determine_rarity
from .rating import Rating, RatingTier
from ..data.catalog import GameCatalog, default_catalog

if TYPE_CHECKING:
    from ..combat.combatant import Combatant
    from ..combat.session import BattleStats
    from ..data.models import Monster

logger = logging.getLogger(__name__)

RatingLike = Union[Rating, RatingTier, str, None]
DivisionLike = Union[Division, str, None]


@dataclass
class WeaponInstance:
    """A dropped weapon. Provenance fields are informational only."""

    weapon_id: str
    name: str
    rarity: str
    weapon_type: str
    damage: int
    found_on_floor: int
    drop_source: str


@dataclass
class RewardBundle:
    """Rewards for one finished battle; ownership passes to the caller."""

    gold: int = 0
    weapons: List[WeaponInstance] = field(default_factory=list)
    items: List[str] = field(default_factory=list)
    experience: int = 0
    special_rewards: List[str] = field(default_factory=list)
    potions: List[PotionReward] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not (self.gold or self.weapons or self.items or self.potions or self.experience)


class RewardGenerator:
    """
    Generates procedural battle rewards.

    Usage:
        generator = RewardGenerator(rng=random.Random(42))
        bundle = generator.generate(floor=12, battle_type="mimic", rating="GOOD (B)")
    """

    def __init__(
        self,
        catalog: Optional[GameCatalog] = None,
        rng: Optional[random.Random] = None,
    ):
        self.catalog = catalog or default_catalog()
        self.rng = rng or random.Random()

    # ------------------------------------------------------------------
    # Drop gates
    # ------------------------------------------------------------------

    def weapon_drop_chance(
        self,
        floor: int,
        battle_type: str,
        rating: RatingLike,
        division: DivisionLike = Division.BASE,
    ) -> float:
        """
        Probability that a weapon drops at all.

        Base rate plus floor scaling, battle-type bonus and rating bonus,
        then division-scaled and capped.
        """
        chance = drop_rate_scaling(WEAPON_DROP_BASE, floor)
        chance += WEAPON_BATTLE_BONUS.get(str(battle_type), 0.0)
        chance += WEAPON_RATING_BONUS.get(RatingTier.parse(rating).value, 0.0)
        return scale_drop_chance(chance, division, settings.WEAPON_DROP_CAP)

    def item_drop_chance(
        self,
        floor: int,
        battle_type: str,
        rating: RatingLike,
        division: DivisionLike = Division.BASE,
        potion_dropped: bool = False,
    ) -> float:
        """
        Probability that an item drops at all.

        Battle base rate plus floor scaling and rating bonus, less the potion
        penalty, then division-scaled and capped like the weapon gate.
        """
        base = ITEM_DROP_BY_BATTLE.get(str(battle_type), settings.ITEM_DROP_BASE)
        chance = drop_rate_scaling(base, floor)
        chance += ITEM_RATING_BONUS.get(RatingTier.parse(rating).value, 0.0)
        if potion_dropped:
            chance = max(ITEM_MIN_CHANCE, chance - ITEM_POTION_PENALTY)
        return scale_drop_chance(chance, division, settings.ITEM_DROP_CAP)

    # ------------------------------------------------------------------
    # Categories
    # ------------------------------------------------------------------

    def roll_weapon(
        self,
        floor: int,
        battle_type: str,
        rating: RatingLike,
        division: DivisionLike = Division.BASE,
        rng: Optional[random.Random] = None,
    ) -> Optional[WeaponInstance]:
        """
        Roll the weapon gate, then a rarity tier, then a weapon in that tier.

        Returns:
            The dropped weapon, or None if the gate failed or the tier is empty.
        """
        rng = rng or self.rng
        if rng.random() >= self.weapon_drop_chance(floor, battle_type, rating, division):
            return None
        tier = determine_rarity(floor, division, rng)
        return self.weapon_from_tier(tier, floor, battle_type, rng)

    def weapon_from_tier(
        self,
        tier: Union[RarityTier, str],
        floor: int,
        battle_type: str,
        rng: Optional[random.Random] = None,
    ) -> Optional[WeaponInstance]:
        rng = rng or self.rng
        candidates = self.catalog.weapons_of_rarity(str(tier))
        if not candidates:
            logger.warning("No %s weapons in catalog (floor %d); no weapon reward", tier, floor)
            return None
        weapon = rng.choice(candidates)
        return WeaponInstance(
            weapon_id=weapon.id,
            name=weapon.name,
            rarity=weapon.rarity,
            weapon_type=weapon.weapon_type,
            damage=weapon_damage_scaling(weapon.damage, floor),
            found_on_floor=floor,
            drop_source=str(battle_type),
        )

    def roll_items(
        self,
        floor: int,
        battle_type: str,
        rating: RatingLike,
        division: DivisionLike = Division.BASE,
        potion_dropped: bool = False,
        rng: Optional[random.Random] = None,
    ) -> List[str]:
        """One gated draw from the floor's pool; empty when the gate fails."""
        rng = rng or self.rng
        pool = self.catalog.item_pool(floor)
        if not pool:
            return []
        if rng.random() >= self.item_drop_chance(floor, battle_type, rating, division, potion_dropped):
            return []
        return [rng.choice(pool).id]

    def milestone_items(self, floor: int) -> List[str]:
        """Floor Key every 5 floors and Rare Gem every 10."""
        items = []
        if floor > 0 and floor % FLOOR_KEY_INTERVAL == 0 and self.catalog.has_item(FLOOR_KEY_ITEM):
            items.append(FLOOR_KEY_ITEM)
        if floor > 0 and floor % RARE_GEM_INTERVAL == 0 and self.catalog.has_item(RARE_GEM_ITEM):
            items.append(RARE_GEM_ITEM)
        return items

    def calculate_gold(
        self,
        floor: int,
        battle_type: str,
        rating: RatingLike,
        division: DivisionLike = Division.BASE,
        monster: Optional["Monster"] = None,
        turns: Optional[int] = None,
        critical_hits: int = 0,
        rng: Optional[random.Random] = None,
    ) -> Tuple[int, List[str]]:
        """
        Gold for a battle plus any special bonus labels earned.

        Returns:
            (gold, special rewards)
        """
        rng = rng or self.rng
        specials: List[str] = []

        if monster is not None:
            gold = gold_scaling(math.floor(monster.health * 3), floor)
        else:
            gold = math.floor(10 + floor * 2 + rng.random() * 20)

        gold = math.floor(gold * RatingTier.parse(rating).gold_multiplier)
        gold *= GOLD_BATTLE_MULTIPLIER.get(str(battle_type), 1.0)

        if turns is not None and 0 < turns <= SPEED_BONUS_TURNS:
            gold *= SPEED_BONUS_MULTIPLIER
            specials.append("Speed Bonus")
        if critical_hits >= CRITICAL_BONUS_HITS:
            gold *= CRITICAL_BONUS_MULTIPLIER
            specials.append("Critical Master")

        total = apply_division_scaling(math.floor(gold), division)
        if monster is not None and monster.reward_gold:
            total += monster.reward_gold
        if monster is not None and monster.reward_description:
            specials.append(monster.reward_description)
        return total, specials

    def calculate_experience(self, floor: int, monster: Optional["Monster"] = None) -> int:
        if monster is not None:
            return math.floor(monster.health * 2) + math.floor(floor * 1.5)
        return 5 + math.floor(floor * 1.5)

    # ------------------------------------------------------------------
    # Assembly
    # ------------------------------------------------------------------

    def generate(
        self,
        floor: int,
        battle_type: str,
        rating: RatingLike,
        division: DivisionLike = Division.BASE,
        rng: Optional[random.Random] = None,
        monster: Optional["Monster"] = None,
        stats: Optional["BattleStats"] = None,
        player: Optional["Combatant"] = None,
    ) -> RewardBundle:
        """
        Build the reward bundle for a finished battle.

        Args:
            floor: Floor the battle took place on.
            battle_type: Encounter type.
            rating: Performance rating (tier, Rating or display string).
            division: Player's division.
            rng: Random source.
            monster: Defeated monster definition (gold and experience base).
            stats: Battle statistics (speed and critical bonuses).
            player: Player combatant (selects its stats; low resources steer potions).

        Returns:
            A new RewardBundle.
        """
        rng = rng or self.rng
        division = Division.parse(division)
        floor = max(0, int(floor))

        turns = stats.turns if stats is not None else None
        critical_hits = 0
        if stats is not None and player is not None and player.id in stats.sides:
            critical_hits = stats.sides[player.id].critical_hits

        bundle = RewardBundle()
        bundle.gold, bundle.special_rewards = self.calculate_gold(
            floor, battle_type, rating, division, monster, turns, critical_hits, rng
        )

        weapon = self.roll_weapon(floor, battle_type, rating, division, rng)
        if weapon is not None:
            bundle.weapons.append(weapon)

        low_health = player is not None and player.health_fraction < 0.5
        low_mana = player is not None and player.max_mana > 0 and player.mana < player.max_mana * 0.5
        bundle.potions = generate_potion_rewards(
            floor, battle_type, rating, division, rng, low_health, low_mana
        )
        bundle.items = self.roll_items(
            floor, battle_type, rating, division, bool(bundle.potions), rng
        )
        for milestone in self.milestone_items(floor):
            if milestone not in bundle.items:
                bundle.items.append(milestone)

        bundle.experience = self.calculate_experience(floor, monster)

        logger.debug(
            "Rewards floor=%d type=%s rating=%s division=%s: gold=%d weapons=%d items=%d",
            floor, battle_type, RatingTier.parse(rating).value, division.value,
            bundle.gold, len(bundle.weapons), len(bundle.items),
        )
        return bundle
