"""Configuration system for Relkit."""

from relkit.config.loader import apply_overrides, load_config, require_settings
from relkit.config.schema import RelkitConfig

__all__ = ["apply_overrides", "load_config", "require_settings", "RelkitConfig"]
