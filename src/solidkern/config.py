"""Kernel configuration.

Settings come from, in increasing priority: the defaults below, a YAML
file (given explicitly or through ``SOLIDKERN_CONFIG``), and the
``SOLIDKERN_TOLERANCE`` / ``SOLIDKERN_LOG_LEVEL`` environment
variables.  A YAML file looks like::

    tolerance: 0.01
    color: [0, 128, 255, 255]
    log_level: DEBUG
    log_json: false
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml

from solidkern.geom import Tolerance
from solidkern.geometry_utils import DEFAULT_COLOR, Color, as_color

CONFIG_ENV = "SOLIDKERN_CONFIG"
TOLERANCE_ENV = "SOLIDKERN_TOLERANCE"
LOG_LEVEL_ENV = "SOLIDKERN_LOG_LEVEL"

DEFAULT_TOLERANCE = 0.001
_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass(frozen=True)
class KernelConfig:
    tolerance: Tolerance = field(default_factory=lambda: Tolerance(DEFAULT_TOLERANCE))
    color: Color = DEFAULT_COLOR
    log_level: str = "INFO"
    log_json: bool = False

    def __post_init__(self) -> None:
        if not isinstance(self.tolerance, Tolerance):
            object.__setattr__(self, "tolerance", Tolerance(self.tolerance))
        object.__setattr__(self, "color", as_color(self.color))
        level = str(self.log_level).upper()
        if level not in _LEVELS:
            raise ValueError(f"unknown log level: {self.log_level!r}")
        object.__setattr__(self, "log_level", level)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "KernelConfig":
        known = {"tolerance", "color", "log_level", "log_json"}
        unknown = set(data) - known
        if unknown:
            raise ValueError(f"unknown configuration keys: {sorted(unknown)}")
        kwargs: Dict[str, Any] = dict(data)
        if "color" in kwargs:
            kwargs["color"] = tuple(kwargs["color"])
        if "log_json" in kwargs:
            kwargs["log_json"] = bool(kwargs["log_json"])
        return cls(**kwargs)


def load_config(path: Path | str | None = None,
                environ: Optional[Mapping[str, str]] = None) -> KernelConfig:
    """Load configuration from YAML and the environment."""
    env = os.environ if environ is None else environ
    if path is None:
        path = env.get(CONFIG_ENV) or None

    data: Dict[str, Any] = {}
    if path is not None:
        config_path = Path(path)
        if not config_path.exists():
            raise FileNotFoundError(f"configuration not found: {config_path}")
        with config_path.open("r", encoding="utf-8") as fp:
            data = yaml.safe_load(fp) or {}
        if not isinstance(data, dict):
            raise ValueError(f"configuration must be a mapping: {config_path}")

    config = KernelConfig.from_mapping(data)

    if env.get(TOLERANCE_ENV):
        config = replace(config, tolerance=Tolerance(float(env[TOLERANCE_ENV])))
    if env.get(LOG_LEVEL_ENV):
        config = replace(config, log_level=env[LOG_LEVEL_ENV])
    return config


_config: Optional[KernelConfig] = None


def get_config() -> KernelConfig:
    global _config
    if _config is None:
        _config = load_config()
    return _config


def reset_config() -> None:
    global _config
    _config = None


__all__ = [
    "KernelConfig",
    "load_config",
    "get_config",
    "reset_config",
    "DEFAULT_TOLERANCE",
]
