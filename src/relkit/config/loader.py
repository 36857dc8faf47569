"""Configuration loader for Relkit."""

from __future__ import annotations

from pathlib import Path
from typing import Any, TypeVar

import yaml
from pydantic import BaseModel

from relkit.config.schema import RelkitConfig

SectionT = TypeVar("SectionT", bound=BaseModel)


def load_config(path: Path | str | None = None) -> RelkitConfig:
    """Load configuration from a YAML file.

    If path is None or the file doesn't exist, returns defaults.
    Raises ValueError for malformed YAML.
    """
    if path is None:
        return RelkitConfig()

    path = Path(path).expanduser().resolve()
    if not path.is_file():
        return RelkitConfig()

    text = path.read_text()
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise ValueError(f"Malformed YAML in {path}: {e}") from e

    if data is None or not isinstance(data, dict):
        return RelkitConfig()

    return RelkitConfig(**data)


def apply_overrides(section: SectionT, overrides: dict[str, Any]) -> SectionT:
    """Return a copy of a config section with the non-None overrides applied."""
    updates = {k: v for k, v in overrides.items() if v is not None}
    return section.model_copy(update=updates)


def require_settings(section: BaseModel, env_vars: dict[str, str]) -> None:
    """Raise ValueError naming the first required setting that is empty."""
    for field_name, env_var in env_vars.items():
        if not getattr(section, field_name):
            raise ValueError(
                f"Error: {env_var} environment variable is not defined. "
                "See the script comments."
            )
