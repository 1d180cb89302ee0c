"""Loot item data loader."""

from functools import lru_cache
from typing import Optional

from ..models.item import Item
from ._files import read_catalog

ITEMS_FILE = "items.json"


@lru_cache(maxsize=1)
def load_items() -> list[Item]:
    """Load all loot items."""
    return [Item(**data) for data in read_catalog(ITEMS_FILE)]


def get_item_by_id(item_id: str) -> Optional[Item]:
    for item in load_items():
        if item.id == item_id:
            return item
    return None


def get_item_pool(floor: int) -> list[Item]:
    """Items that can drop on a floor (milestone items excluded).

    The pool only grows with depth: common from floor 1, uncommon from 5,
    rare from 10, epic from 15.
    """
    return [i for i in load_items() if not i.milestone and i.min_floor <= floor]


def clear_cache() -> None:
    load_items.cache_clear()
