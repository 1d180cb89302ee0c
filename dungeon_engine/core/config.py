"""
Engine configuration settings.
"""

import logging
from pathlib import Path
from typing import Optional

from pydantic_settings import BaseSettings

from .constants import MAX_SCALING_FLOOR


class EngineSettings(BaseSettings):
    """Engine tunables, overridable through DUNGEON_* environment variables."""

    # Scaling
    MAX_SCALING_FLOOR: int = MAX_SCALING_FLOOR

    # Critical hits
    BASE_CRIT_CHANCE: int = 5  # Percent
    CRIT_MULTIPLIER: int = 2

    # Drop gates
    WEAPON_DROP_CAP: float = 0.85
    ITEM_DROP_BASE: float = 0.3
    ITEM_DROP_CAP: float = 0.85
    POTION_DROP_CAP: float = 0.8

    # Flee: a monster counts as "stronger" if any threshold is met
    FLEE_STRONGER_FLOOR: int = 5
    FLEE_STRONGER_HEALTH: int = 50
    FLEE_STRONGER_ABILITIES: int = 2

    # Flee penalties
    FLEE_HEALTH_PENALTY: float = 0.1
    FLEE_MANA_PENALTY: float = 0.1
    FLEE_GOLD_PENALTY: float = 0.1
    FLEE_ITEM_LOSS_CHANCE: float = 0.1

    # Catalogs
    DATA_DIR: Optional[Path] = None

    LOG_LEVEL: str = "INFO"

    class Config:
        env_file = ".env"
        env_prefix = "DUNGEON_"


settings = EngineSettings()


def configure_logging(level: Optional[str] = None) -> None:
    """Attach a basic stream handler for scripts and interactive use."""
    logging.basicConfig(
        level=(level or settings.LOG_LEVEL).upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
