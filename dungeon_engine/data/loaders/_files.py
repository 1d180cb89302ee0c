"""Catalog file locations."""

import json
from pathlib import Path
from typing import Any

from ...core.config import settings

# Bundled catalogs live next to the loaders
DEFAULT_DATA_DIR = Path(__file__).parent.parent / "json"


def data_dir() -> Path:
    return settings.DATA_DIR or DEFAULT_DATA_DIR


def read_catalog(filename: str) -> list[dict[str, Any]]:
    """Read one JSON catalog (a list of records)."""
    with open(data_dir() / filename, "r", encoding="utf-8") as f:
        return json.load(f)
