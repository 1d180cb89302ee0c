"""Static data: catalog models, JSON loaders and the injectable GameCatalog."""

from .catalog import GameCatalog, default_catalog, reset_default_catalog

__all__ = ["GameCatalog", "default_catalog", "reset_default_catalog"]
