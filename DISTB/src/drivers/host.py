import logging
import threading
from collections import deque
from abc import ABC, abstractmethod
from typing import Iterable, Optional

import numpy as np

from DISTB.config import Config
from DISTB.src.core.types import CueKind, Environment, MarkerKind, Observer, Vec3

logger = logging.getLogger(__name__)

class HostPlatform(ABC):
    @abstractmethod
    def online_observers(self) -> Iterable[Observer]: pass
    @abstractmethod
    def observer_position(self, observer: Observer) -> Vec3: pass
    @abstractmethod
    def observer_world(self, observer: Observer) -> str: pass
    @abstractmethod
    def world_environment(self, world: str) -> Environment: pass
    @abstractmethod
    def highest_block_y(self, world: str, x: float, z: float) -> int: pass
    @abstractmethod
    def spawn_particle(self, observer: Observer, kind: MarkerKind, point: Vec3,
                       count: int = 1, offset: tuple = (0.0, 0.0, 0.0), speed: float = 0.0) -> None: pass
    @abstractmethod
    def play_sound(self, observer: Observer, point: Vec3, cue: CueKind, volume: float, pitch: float) -> None: pass

    def is_location_outside(self, world: str, position: Vec3) -> bool:
        """True when nothing solid sits above the position (no roof, no cave)."""
        return position.y >= self.highest_block_y(world, position.x, position.z)

class SimulatedHost(HostPlatform):
    """Observers wandering around the target over a procedural height field.

    A few fixed canopy patches act as roofs and one observer lives in the
    nether so every eligibility branch gets exercised.
    """

    OVERWORLD = "world"
    NETHER = "world_nether"

    def __init__(self, config: Config = Config(), observer_count: int = 4, seed: int = 0):
        logger.info("Initializing simulated host with %d observers", observer_count)
        self.config = config
        self.rng = np.random.default_rng(seed)
        self._lock = threading.Lock()

        self.observers = [Observer(f"sim-{i}", f"Walker{i}") for i in range(observer_count)]
        self.worlds = {self.OVERWORLD: Environment.NORMAL, self.NETHER: Environment.NETHER}

        # Polar walk around the target; radii straddle the proximity threshold.
        radius_scale = max(config.CENTER_DISTANCE, 1.0)
        self.radius = self.rng.uniform(0.5, 2.5, observer_count) * radius_scale
        self.bearing = self.rng.uniform(0.0, 2 * np.pi, observer_count)
        self.angular_speed = self.rng.uniform(0.002, 0.01, observer_count)
        self.radial_speed = self.rng.uniform(-0.4, 0.4, observer_count)
        self.radius_limits = (0.25 * radius_scale, 3.0 * radius_scale)

        self.canopies = [
            (config.BEAM_X + 1.5 * radius_scale, config.BEAM_Z, 0.3 * radius_scale),
            (config.BEAM_X - radius_scale, config.BEAM_Z + 1.2 * radius_scale, 0.25 * radius_scale),
        ]
        self.canopy_height = 6

        self._frame: dict[str, list[Vec3]] = {}
        self._last_frame: dict[str, np.ndarray] = {}
        self.particles_spawned = 0
        self.sounds: deque[tuple[str, CueKind, float, float]] = deque(maxlen=256)

    def terrain_height(self, x: float, z: float) -> int:
        return int(np.floor(64.0 + 4.0 * np.sin(x / 16.0) * np.cos(z / 16.0)))

    def step(self) -> None:
        """Advance every walker and publish the markers collected since the last step."""
        with self._lock:
            self.bearing = (self.bearing + self.angular_speed) % (2 * np.pi)
            self.radius = self.radius + self.radial_speed
            lo, hi = self.radius_limits
            bounce = (self.radius < lo) | (self.radius > hi)
            self.radial_speed[bounce] *= -1
            self.radius = np.clip(self.radius, lo, hi)

            self._last_frame = {k: np.array(v, dtype=float).reshape(-1, 3) for k, v in self._frame.items()}
            self._frame = {}

    def last_frame(self) -> dict[str, np.ndarray]:
        with self._lock:
            return dict(self._last_frame)

    def online_observers(self) -> Iterable[Observer]:
        return list(self.observers)

    def _index(self, observer: Observer) -> int:
        return self.observers.index(observer)

    def observer_position(self, observer: Observer) -> Vec3:
        i = self._index(observer)
        with self._lock:
            x = self.config.BEAM_X + float(self.radius[i] * np.cos(self.bearing[i]))
            z = self.config.BEAM_Z + float(self.radius[i] * np.sin(self.bearing[i]))
        return Vec3(x, float(self.terrain_height(x, z)), z)

    def observer_world(self, observer: Observer) -> str:
        if len(self.observers) > 1 and self._index(observer) == len(self.observers) - 1:
            return self.NETHER
        return self.OVERWORLD

    def world_environment(self, world: str) -> Environment:
        return self.worlds.get(world, Environment.CUSTOM)

    def highest_block_y(self, world: str, x: float, z: float) -> int:
        ground = self.terrain_height(x, z)
        for cx, cz, r in self.canopies:
            if (x - cx) ** 2 + (z - cz) ** 2 <= r * r:
                return ground + self.canopy_height
        return ground

    def spawn_particle(self, observer: Observer, kind: MarkerKind, point: Vec3,
                       count: int = 1, offset: tuple = (0.0, 0.0, 0.0), speed: float = 0.0) -> None:
        with self._lock:
            self._frame.setdefault(observer.observer_id, []).append(point)
            self.particles_spawned += count

    def play_sound(self, observer: Observer, point: Vec3, cue: CueKind, volume: float, pitch: float) -> None:
        with self._lock:
            self.sounds.append((observer.observer_id, cue, volume, pitch))
        logger.debug("Cue %s for %s at %s", cue.name, observer.name, point)

    def observer_positions(self, observers: Optional[Iterable[Observer]] = None) -> np.ndarray:
        obs = list(observers) if observers is not None else self.observers
        return np.array([tuple(self.observer_position(o)) for o in obs], dtype=float).reshape(-1, 3)
