# Data Models
from .weapon import Weapon, WeaponType, EffectChance
from .action import Ability, AppliedEffect, Spell
from .effect import EffectDefinition, EffectCategory
from .creature import CreatureBase, Monster, Hero
from .item import Item

__all__ = [
    "Weapon",
    "WeaponType",
    "EffectChance",
    "Ability",
    "AppliedEffect",
    "Spell",
    "EffectDefinition",
    "EffectCategory",
    "CreatureBase",
    "Monster",
    "Hero",
    "Item",
]
