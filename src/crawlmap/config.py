from __future__ import annotations

import dataclasses
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Union

import yaml
from jsonschema import Draft202012Validator

from .errors import InvalidSettings

logger = logging.getLogger(__name__)

DEGREE_POLICIES = ("inclusion", "final")

# Environment variable pointing at a YAML settings file
CONFIG_ENV = "CRAWLMAP_CONFIG"

SETTINGS_SCHEMA: Dict[str, Any] = {
    "$schema": "https://json-schema.org/draft/2020-12/schema",
    "type": "object",
    "properties": {
        "min_rooms": {"type": "integer", "minimum": 1},
        "max_rooms": {"type": "integer", "minimum": 1},
        "room_inclusion_probability": {"type": "number", "minimum": 0, "maximum": 1},
        "grid_width": {"type": "integer", "minimum": 1},
        "grid_height": {"type": "integer", "minimum": 1},
        "generation_attempt_cap": {"type": "integer", "minimum": 1},
        "max_neighbors": {"type": "integer", "minimum": 0, "maximum": 4},
        "degree_policy": {"enum": list(DEGREE_POLICIES)},
        "seed": {"type": ["integer", "null"]},
    },
    "additionalProperties": False,
}


def validate_settings_dict(data: Mapping[str, Any]) -> None:
    """
    Validate a raw settings mapping against SETTINGS_SCHEMA.

    Raises:
        InvalidSettings if the data is invalid.
    """
    validator = Draft202012Validator(SETTINGS_SCHEMA)
    errors = sorted(validator.iter_errors(dict(data)), key=lambda e: list(e.path))
    if errors:
        for err in errors:
            logger.error("Settings schema validation error at %s: %s", list(err.path), err.message)
        first = errors[0]
        where = ".".join(str(p) for p in first.path) or "<root>"
        raise InvalidSettings(f"{where}: {first.message}") from first


@dataclass
class GenerationSettings:
    """Settings for dungeon graph generation.

    The settings can be constructed/overridden from:
    - A YAML file (explicit path or env CRAWLMAP_CONFIG)
    - Environment variables (prefix: CRAWLMAP_)
    - CLI flags (see crawlmap.__main__)

    degree_policy:
      "inclusion" rejects a candidate with more than max_neighbors included neighbors.
      "final" also rejects a candidate that would push an included neighbor past
      max_neighbors, so every room in the result has at most max_neighbors neighbors.
    """

    min_rooms: int = 8
    max_rooms: int = 12
    room_inclusion_probability: float = 0.4
    grid_width: int = 9
    grid_height: int = 9
    generation_attempt_cap: int = 1000
    max_neighbors: int = 2
    degree_policy: str = "inclusion"
    seed: Optional[int] = None

    def validate(self) -> None:
        """Validate field ranges and cross-field constraints."""
        validate_settings_dict(self.as_dict())
        if self.min_rooms > self.max_rooms:
            raise InvalidSettings(
                f"min_rooms ({self.min_rooms}) must not exceed max_rooms ({self.max_rooms})"
            )
        cells = self.grid_width * self.grid_height
        if self.min_rooms > cells:
            raise InvalidSettings(
                f"min_rooms ({self.min_rooms}) exceeds grid capacity of {cells} cells"
            )

    def as_dict(self) -> Dict[str, Any]:
        return dataclasses.asdict(self)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "GenerationSettings":
        validate_settings_dict(data)
        obj = cls(**dict(data))
        obj.validate()
        return obj


def env_overrides(env: Optional[Mapping[str, str]] = None) -> Dict[str, Any]:
    """Collect overrides from CRAWLMAP_* environment variables."""
    env = os.environ if env is None else env
    mapping = {
        "CRAWLMAP_MIN_ROOMS": ("min_rooms", int),
        "CRAWLMAP_MAX_ROOMS": ("max_rooms", int),
        "CRAWLMAP_ROOM_INCLUSION_PROBABILITY": ("room_inclusion_probability", float),
        "CRAWLMAP_GRID_WIDTH": ("grid_width", int),
        "CRAWLMAP_GRID_HEIGHT": ("grid_height", int),
        "CRAWLMAP_GENERATION_ATTEMPT_CAP": ("generation_attempt_cap", int),
        "CRAWLMAP_MAX_NEIGHBORS": ("max_neighbors", int),
        "CRAWLMAP_DEGREE_POLICY": ("degree_policy", str),
        "CRAWLMAP_SEED": ("seed", int),
    }
    out: Dict[str, Any] = {}
    for env_key, (field_name, caster) in mapping.items():
        raw = env.get(env_key)
        if raw is None or raw == "":
            continue
        try:
            out[field_name] = caster(raw)
        except ValueError as exc:
            raise InvalidSettings(f"Invalid value for {env_key}={raw!r}: {exc}") from exc
    return out


def read_yaml(path: Union[str, Path]) -> Dict[str, Any]:
    """Read a YAML mapping of settings. Missing file is a configuration error."""
    path = Path(path)
    if not path.exists():
        raise InvalidSettings(f"Settings file not found: {path}")
    with path.open("r", encoding="utf-8") as f:
        raw = yaml.safe_load(f) or {}
    if not isinstance(raw, dict):
        raise InvalidSettings(f"Settings file {path} must contain a mapping")
    # Allow the settings to be nested under a "generation" key
    if "generation" in raw and isinstance(raw["generation"], dict):
        raw = raw["generation"]
    logger.debug("Loaded settings from %s: %s", path, raw)
    return raw


def load_settings(
    path: Optional[Union[str, Path]] = None,
    env: Optional[Mapping[str, str]] = None,
    overrides: Optional[Mapping[str, Any]] = None,
) -> GenerationSettings:
    """Build settings from defaults, YAML file, environment and explicit overrides.

    Later layers win. ``overrides`` entries set to None are ignored so CLI
    arguments can be passed through unconditionally.
    """
    env = os.environ if env is None else env
    data: Dict[str, Any] = {}

    file_path = path or env.get(CONFIG_ENV)
    if file_path:
        data.update(read_yaml(file_path))

    data.update(env_overrides(env))
    if overrides:
        data.update({k: v for k, v in overrides.items() if v is not None})

    settings = GenerationSettings.from_dict(data)
    logger.info(
        "Generation settings: rooms %d..%d, p=%.2f, grid %dx%d, cap=%d, policy=%s",
        settings.min_rooms,
        settings.max_rooms,
        settings.room_inclusion_probability,
        settings.grid_width,
        settings.grid_height,
        settings.generation_attempt_cap,
        settings.degree_policy,
    )
    return settings


__all__ = ["GenerationSettings", "load_settings", "env_overrides", "read_yaml", "validate_settings_dict", "SETTINGS_SCHEMA"]
