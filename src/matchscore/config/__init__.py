"""Configuration management utilities."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml

from ..schemas.config import AppConfig, load_config


def load_settings(path: str | Path) -> dict[str, Any]:
    """Load and validate a YAML settings file into container settings."""
    with Path(path).open("r", encoding="utf-8") as handle:
        raw = yaml.safe_load(handle)
    return load_config(raw).to_settings()


__all__ = ["AppConfig", "load_config", "load_settings"]
