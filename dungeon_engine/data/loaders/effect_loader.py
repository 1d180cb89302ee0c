"""Status effect data loader."""

from functools import lru_cache
from typing import Optional

from ..models.effect import EffectDefinition
from ._files import read_catalog

EFFECTS_FILE = "effects.json"


@lru_cache(maxsize=1)
def load_effects() -> dict[str, EffectDefinition]:
    """Load all effect definitions keyed by id."""
    effects = [EffectDefinition(**data) for data in read_catalog(EFFECTS_FILE)]
    return {effect.id: effect for effect in effects}


def get_effect_by_id(effect_id: str) -> Optional[EffectDefinition]:
    return load_effects().get(effect_id)


def clear_cache() -> None:
    load_effects.cache_clear()
