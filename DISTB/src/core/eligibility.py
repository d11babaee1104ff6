"""Per-observer decision: skip, play the ambient cue, or draw the beam."""

from __future__ import annotations

import math

from DISTB.config import Config
from DISTB.src.core.types import Classification, Environment, Observer, ObserverSnapshot, Vec3
from DISTB.src.drivers.host import HostPlatform


def distance_to_target(position: Vec3, config: Config) -> float:
    """3-D distance to the target point at height 0."""
    return math.dist(tuple(position), (config.BEAM_X, 0.0, config.BEAM_Z))


def build_snapshot(host: HostPlatform, observer: Observer, config: Config) -> ObserverSnapshot:
    position = host.observer_position(observer)
    world = host.observer_world(observer)
    environment = host.world_environment(world)
    # The terrain query is only meaningful in worlds where the beam can show.
    outside = environment is Environment.NORMAL and host.is_location_outside(world, position)
    return ObserverSnapshot(
        observer_id=observer.observer_id,
        position=position,
        world=world,
        environment=environment,
        outside=outside,
        distance=distance_to_target(position, config),
    )


def classify(snapshot: ObserverSnapshot, config: Config) -> Classification:
    if snapshot.environment is not Environment.NORMAL:
        return Classification.SKIP
    if not snapshot.outside:
        return Classification.SKIP
    if snapshot.distance <= config.CENTER_DISTANCE:
        return Classification.AMBIENT_CUE
    return Classification.DRAW_BEAM
