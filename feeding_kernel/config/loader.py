"""Config file loading with CLI override precedence."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml

from feeding_kernel.exceptions import ConfigError
from feeding_kernel.schema.fit_config import FitConfig
from feeding_kernel.utils.logging import get_logger

log = get_logger(__name__, component="config")


def _load_yaml(path: Path) -> Dict[str, Any]:
    try:
        with path.open("r", encoding="utf-8") as fh:
            data = yaml.safe_load(fh) or {}
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid YAML in {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"Config root must be a mapping: {path}")
    return data


def _load_json(path: Path) -> Dict[str, Any]:
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise ConfigError(f"Invalid JSON in {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"Config root must be a mapping: {path}")
    return data


def load_config_file(path: Path) -> Dict[str, Any]:
    """Read a YAML or JSON config file into a plain dict.

    A top-level ``fit`` section is unwrapped when present so the same file can
    hold settings for other tools.
    """

    if not path.exists():
        raise ConfigError(f"Config file not found: {path}")
    if path.suffix.lower() == ".json":
        data = _load_json(path)
    else:
        data = _load_yaml(path)
    section = data.get("fit", data)
    if not isinstance(section, dict):
        raise ConfigError(f"'fit' section must be a mapping: {path}")
    return section


def load_fit_config(
    path: Optional[Path] = None,
    overrides: Optional[Mapping[str, Any]] = None,
) -> FitConfig:
    """Build a FitConfig with precedence overrides > file > defaults."""

    merged: Dict[str, Any] = {}
    if path is not None:
        merged.update(load_config_file(path))
    for key, value in (overrides or {}).items():
        if value is not None:
            merged[key] = value
    config = FitConfig.from_dict(merged)
    log.debug("Fit config loaded", extra={"source": str(path) if path else "defaults"})
    return config


__all__ = ["load_config_file", "load_fit_config"]
