"""Rotating square beam geometry.

The target is treated as an infinite vertical line at (BEAM_X, BEAM_Z). A beam
starts ``CENTER_DISTANCE`` blocks from the observer, toward that line, and is
drawn as a stack of square cross-sections rising from the observer's height.
"""

from __future__ import annotations

import numpy as np

from DISTB.config import Config
from DISTB.src.core.types import Vec3

# Absorbs rounding in 2 * half_width / spacing so exact multiples keep their last step.
_GRID_EPS = 1e-9


class GeometryDegenerate(ValueError):
    """Observer stands exactly on the target line; direction is undefined."""


def direction_to_target(target_xz: tuple[float, float], observer_position: Vec3) -> np.ndarray:
    """Unit vector from the observer toward the target line, in the horizontal plane."""
    ox, _, oz = observer_position
    delta = np.array([target_xz[0] - ox, 0.0, target_xz[1] - oz], dtype=float)
    norm = float(np.hypot(delta[0], delta[2]))
    if norm == 0.0:
        raise GeometryDegenerate(
            f"Observer at {tuple(observer_position)} coincides with target {tuple(target_xz)}"
        )
    return delta / norm


def beam_origin(target_xz: tuple[float, float], observer_position: Vec3, distance: float) -> np.ndarray:
    direction = direction_to_target(target_xz, observer_position)
    return np.asarray(observer_position, dtype=float) + direction * distance


def grid_offsets(half_width: float, spacing: float) -> np.ndarray:
    """Offsets -half_width, -half_width + spacing, ... up to +half_width inclusive."""
    if spacing <= 0:
        raise ValueError(f"spacing must be > 0 (got {spacing})")
    if half_width < 0:
        raise ValueError(f"half_width must be >= 0 (got {half_width})")
    steps = int(np.floor(2.0 * half_width / spacing + _GRID_EPS))
    return -half_width + np.arange(steps + 1, dtype=float) * spacing


def rotate_offsets(x: np.ndarray, z: np.ndarray, angle: float) -> tuple[np.ndarray, np.ndarray]:
    cos_a, sin_a = np.cos(angle), np.sin(angle)
    return x * cos_a - z * sin_a, x * sin_a + z * cos_a


def generate_beam(
    target_xz: tuple[float, float],
    observer_position: Vec3,
    rotation_angle: float,
    config: Config,
) -> np.ndarray:
    """Return an (N, 3) array of marker positions.

    Rows are ordered by cross-section (bottom first), then grid x, then grid z.
    Raises GeometryDegenerate when the observer is on the target line.
    """
    origin = beam_origin(target_xz, observer_position, config.CENTER_DISTANCE)
    spacing = float(config.PARTICLE_SPACING)

    offsets = grid_offsets(config.half_width, spacing)
    gx, gz = np.meshgrid(offsets, offsets, indexing="ij")
    rx, rz = rotate_offsets(gx.ravel(), gz.ravel(), rotation_angle)

    count = int(config.PARTICLE_COUNT)
    ys = origin[1] + np.arange(count, dtype=float) * spacing

    points = np.empty((count, rx.size, 3), dtype=float)
    points[:, :, 0] = origin[0] + rx
    points[:, :, 1] = ys[:, None]
    points[:, :, 2] = origin[2] + rz
    return points.reshape(-1, 3)
