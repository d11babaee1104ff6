"""One pass of the beam/cue pipeline per host tick."""

from __future__ import annotations

import logging
import math
import time
from typing import Callable, Optional

from DISTB.config import Config, ConfigStore
from DISTB.src.core.eligibility import build_snapshot, classify
from DISTB.src.core.geometry import generate_beam
from DISTB.src.core.throttle import SHARED_KEY, AmbientThrottle
from DISTB.src.core.types import Classification, Observer, ObserverSnapshot, TickReport, Vec3
from DISTB.src.drivers.host import HostPlatform

logger = logging.getLogger(__name__)

TAU = 2.0 * math.pi
TICK_PERIOD_S = 0.05  # 20 ticks per second


def _monotonic_ms() -> float:
    return time.monotonic() * 1000.0


class TickScheduler:
    """Owns the rotation angle and cue throttle; holds no timer of its own."""

    def __init__(
        self,
        host: HostPlatform,
        store: ConfigStore,
        clock: Optional[Callable[[], float]] = None,
    ):
        self.host = host
        self.store = store
        self.clock = clock or _monotonic_ms
        self.rotation_angle = 0.0
        self.tick_count = 0
        self.throttle = AmbientThrottle(store.current.AMBIENT_SOUND_DELAY_MS)

    def advance_rotation(self, speed: float) -> float:
        self.rotation_angle = (self.rotation_angle + speed) % TAU
        return self.rotation_angle

    def tick(self, now: Optional[float] = None) -> TickReport:
        # Read once so a concurrent reload is seen entirely or not at all.
        cfg = self.store.current
        angle = self.advance_rotation(cfg.ROTATION_SPEED)
        now = self.clock() if now is None else now
        self.tick_count += 1

        visited = beams = markers = cues = failures = 0
        for observer in list(self.host.online_observers()):
            visited += 1
            try:
                outcome, spawned = self._process_observer(observer, cfg, angle, now)
            except Exception:
                failures += 1
                logger.exception("Tick %d: failed to process observer %s", self.tick_count, observer.name)
                continue
            if outcome is Classification.DRAW_BEAM:
                beams += 1
                markers += spawned
            elif outcome is Classification.AMBIENT_CUE:
                cues += spawned

        return TickReport(self.tick_count, angle, visited, beams, markers, cues, failures)

    def _process_observer(
        self, observer: Observer, cfg: Config, angle: float, now: float
    ) -> tuple[Classification, int]:
        snapshot = build_snapshot(self.host, observer, cfg)
        outcome = classify(snapshot, cfg)

        if outcome is Classification.AMBIENT_CUE:
            return outcome, int(self._play_cue(observer, snapshot, cfg, now))
        if outcome is Classification.DRAW_BEAM:
            return outcome, self._draw_beam(observer, snapshot, cfg, angle)
        return outcome, 0

    def _play_cue(self, observer: Observer, snapshot: ObserverSnapshot, cfg: Config, now: float) -> bool:
        key = SHARED_KEY if cfg.SHARED_AMBIENT_THROTTLE else snapshot.observer_id
        if not self.throttle.should_play(key, cfg.AMBIENT_SOUND, now, cfg.AMBIENT_SOUND_DELAY_MS):
            return False
        self.host.play_sound(observer, snapshot.position, cfg.AMBIENT_SOUND, cfg.AMBIENT_VOLUME, cfg.AMBIENT_PITCH)
        return True

    def _draw_beam(self, observer: Observer, snapshot: ObserverSnapshot, cfg: Config, angle: float) -> int:
        points = generate_beam(cfg.target_xz, snapshot.position, angle, cfg)
        for x, y, z in points.tolist():
            self.host.spawn_particle(observer, cfg.PARTICLE_TYPE, Vec3(x, y, z))
        return len(points)
