"""Ability and spell data loader."""

from functools import lru_cache
from typing import Optional

from ..models.action import Ability, Spell
from ._files import read_catalog

ABILITIES_FILE = "abilities.json"
SPELLS_FILE = "spells.json"


@lru_cache(maxsize=1)
def load_abilities() -> list[Ability]:
    """Load all abilities."""
    return [Ability(**data) for data in read_catalog(ABILITIES_FILE)]


@lru_cache(maxsize=1)
def load_spells() -> list[Spell]:
    """Load all spells."""
    return [Spell(**data) for data in read_catalog(SPELLS_FILE)]


def get_ability_by_id(ability_id: str) -> Optional[Ability]:
    for ability in load_abilities():
        if ability.id == ability_id:
            return ability
    return None


def get_spell_by_id(spell_id: str) -> Optional[Spell]:
    for spell in load_spells():
        if spell.id == spell_id:
            return spell
    return None


def clear_cache() -> None:
    load_abilities.cache_clear()
    load_spells.cache_clear()
