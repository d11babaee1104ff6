"""Beam configuration with JSON persistence and atomic reload."""

from __future__ import annotations

import json
import logging
import math
from dataclasses import dataclass, fields
from enum import Enum
from pathlib import Path
from typing import Any, Mapping, Optional

from DISTB.src.core.types import CueKind, MarkerKind

logger = logging.getLogger(__name__)

# Key names used by the plugin's original config.yml layout.
LEGACY_KEYS = {
    "beam-size": "BEAM_SIZE",
    "rotation-speed": "ROTATION_SPEED",
    "particle-count": "PARTICLE_COUNT",
    "particle-spacing": "PARTICLE_SPACING",
    "center-distance": "CENTER_DISTANCE",
    "beam-x": "BEAM_X",
    "beam-z": "BEAM_Z",
    "particle-type": "PARTICLE_TYPE",
    "ambient-sound": "AMBIENT_SOUND",
    "ambient-volume": "AMBIENT_VOLUME",
    "ambient-pitch": "AMBIENT_PITCH",
}

_TRUE_WORDS = {"true", "yes", "on", "1"}
_FALSE_WORDS = {"false", "no", "off", "0"}


class ConfigError(ValueError):
    """Raised when a configuration document cannot be turned into a Config."""


@dataclass(frozen=True)
class Config:
    # Beam shape
    BEAM_SIZE: float = 1.0  # full width of the square cross-section
    ROTATION_SPEED: float = math.pi / 60  # radians per tick
    PARTICLE_COUNT: int = 300  # cross-sections stacked upwards
    PARTICLE_SPACING: float = 0.5

    # Target
    CENTER_DISTANCE: float = 100.0
    BEAM_X: float = 0.0
    BEAM_Z: float = 0.0

    # Host identifiers
    PARTICLE_TYPE: MarkerKind = MarkerKind.END_ROD
    AMBIENT_SOUND: CueKind = CueKind.BLOCK_CONDUIT_AMBIENT
    AMBIENT_VOLUME: float = 1.0
    AMBIENT_PITCH: float = 1.0

    # Ambient cue throttle
    AMBIENT_SOUND_DELAY_MS: int = 1000
    SHARED_AMBIENT_THROTTLE: bool = False

    def __post_init__(self) -> None:
        if not self.PARTICLE_SPACING > 0:
            raise ConfigError(f"PARTICLE_SPACING must be > 0 (got {self.PARTICLE_SPACING})")
        if self.PARTICLE_COUNT < 0:
            raise ConfigError(f"PARTICLE_COUNT must be >= 0 (got {self.PARTICLE_COUNT})")
        if self.BEAM_SIZE < 0:
            raise ConfigError(f"BEAM_SIZE must be >= 0 (got {self.BEAM_SIZE})")
        if self.CENTER_DISTANCE < 0:
            raise ConfigError(f"CENTER_DISTANCE must be >= 0 (got {self.CENTER_DISTANCE})")
        if self.AMBIENT_SOUND_DELAY_MS < 0:
            raise ConfigError(f"AMBIENT_SOUND_DELAY_MS must be >= 0 (got {self.AMBIENT_SOUND_DELAY_MS})")

    @property
    def half_width(self) -> float:
        return self.BEAM_SIZE / 2.0

    @property
    def target_xz(self) -> tuple[float, float]:
        return (self.BEAM_X, self.BEAM_Z)

    @staticmethod
    def default_path() -> Path:
        return Path.home() / ".distb_config.json"

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Config":
        """Build a Config from a key-value document; missing keys keep their defaults."""
        known = {f.name: f for f in fields(cls)}
        values: dict[str, Any] = {}
        sources: dict[str, str] = {}
        for key, raw in data.items():
            name = LEGACY_KEYS.get(key, key)
            f = known.get(name)
            if f is None:
                logger.warning("Ignoring unknown config key: %s", key)
                continue
            if name in sources:
                logger.warning("Config keys %s and %s both set %s; using %s", sources[name], key, name, key)
            sources[name] = key
            values[name] = _coerce(name, _type_name(f.type), raw)
        return cls(**values)

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {}
        for f in fields(self):
            val = getattr(self, f.name)
            out[f.name] = val.value if isinstance(val, Enum) else val
        return out

    def save(self, path: Optional[Path] = None) -> None:
        cfg_path = path or self.default_path()
        cfg_path.write_text(json.dumps(self.to_dict(), indent=2, sort_keys=True))


def _type_name(tp: Any) -> str:
    return tp if isinstance(tp, str) else tp.__name__


def _coerce(name: str, type_name: str, raw: Any) -> Any:
    try:
        if type_name == "bool":
            if isinstance(raw, bool):
                return raw
            word = str(raw).strip().lower()
            if word in _TRUE_WORDS:
                return True
            if word in _FALSE_WORDS:
                return False
            raise ValueError(f"not a boolean: {raw!r}")
        if type_name == "int":
            if isinstance(raw, bool):
                raise ValueError(f"not a number: {raw!r}")
            return int(float(raw))
        if type_name == "float":
            if isinstance(raw, bool):
                raise ValueError(f"not a number: {raw!r}")
            val = float(raw)
            if not math.isfinite(val):
                raise ValueError(f"not finite: {raw!r}")
            return val
    except (TypeError, ValueError, OverflowError) as exc:
        raise ConfigError(f"Invalid value for {name}: {exc}") from exc

    if type_name == "MarkerKind":
        return _lookup(MarkerKind, name, raw)
    if type_name == "CueKind":
        return _lookup(CueKind, name, raw)
    raise ConfigError(f"Unsupported config field type for {name}: {type_name}")


def _lookup(enum_cls: type[Enum], name: str, raw: Any) -> Any:
    key = str(raw).strip().upper()
    try:
        return enum_cls[key]
    except KeyError:
        raise ConfigError(f"Unknown {enum_cls.__name__} for {name}: {raw!r}") from None


def load_config(path: Optional[Path] = None) -> Config:
    """Read and validate a config file. A missing file yields the defaults."""
    cfg_path = path or Config.default_path()
    if not cfg_path.exists():
        logger.info("No config file at %s, using defaults", cfg_path)
        return Config()

    try:
        data = json.loads(cfg_path.read_text())
    except (OSError, ValueError) as exc:
        raise ConfigError(f"Failed to read config file {cfg_path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"Config file {cfg_path} must contain a JSON object")

    return Config.from_dict(data)


class ConfigStore:
    """Owns the live Config. Readers grab ``current`` once and keep that reference."""

    def __init__(self, path: Optional[Path] = None, config: Optional[Config] = None):
        self.path = path or Config.default_path()
        self._config = config if config is not None else Config()

    @property
    def current(self) -> Config:
        return self._config

    def load(self) -> Config:
        return self.reload()

    def reload(self) -> Config:
        """Re-read the file; on ConfigError the previous config stays live."""
        new_config = load_config(self.path)
        self._config = new_config
        logger.info("Configuration loaded from %s", self.path)
        return new_config

    def save_default(self) -> bool:
        """Write the default document unless a config file already exists."""
        if self.path.exists():
            return False
        self.path.parent.mkdir(parents=True, exist_ok=True)
        Config().save(self.path)
        logger.info("Wrote default config to %s", self.path)
        return True
