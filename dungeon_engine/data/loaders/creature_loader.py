"""Monster and hero data loader."""

from functools import lru_cache
from typing import Optional

from ..models.creature import Hero, Monster
from ._files import read_catalog

MONSTERS_FILE = "monsters.json"
HEROES_FILE = "heroes.json"

STARTING_HERO_ID = "grim_stonebeard"


@lru_cache(maxsize=1)
def load_monsters() -> list[Monster]:
    """Load all monsters, ordered by the floor they guard."""
    return [Monster(**data) for data in read_catalog(MONSTERS_FILE)]


@lru_cache(maxsize=1)
def load_heroes() -> list[Hero]:
    """Load all playable heroes."""
    return [Hero(**data) for data in read_catalog(HEROES_FILE)]


def get_monster_by_id(monster_id: str) -> Optional[Monster]:
    for monster in load_monsters():
        if monster.id == monster_id:
            return monster
    return None


def get_monster_for_floor(floor: int) -> Optional[Monster]:
    """Get the monster guarding a floor.

    Floors past the last guarded floor cycle through the floor monsters.

    Args:
        floor: Floor number (1-based).

    Returns:
        The floor's monster, or None if no floor monsters exist.
    """
    floor_monsters = [m for m in load_monsters() if m.floor_number is not None]
    if not floor_monsters:
        return None
    for monster in floor_monsters:
        if monster.floor_number == floor:
            return monster
    index = (max(floor, 1) - 1) % len(floor_monsters)
    return floor_monsters[index]


def get_mimic() -> Optional[Monster]:
    for monster in load_monsters():
        if monster.is_mimic:
            return monster
    return None


def get_hero_by_id(hero_id: str) -> Optional[Hero]:
    for hero in load_heroes():
        if hero.id == hero_id:
            return hero
    return None


def get_starting_hero() -> Optional[Hero]:
    return get_hero_by_id(STARTING_HERO_ID)


def get_unlocked_heroes(highest_floor: int) -> list[Hero]:
    """Heroes whose unlock floor has been reached."""
    return [h for h in load_heroes() if h.unlock_floor <= highest_floor]


def clear_cache() -> None:
    load_monsters.cache_clear()
    load_heroes.cache_clear()
