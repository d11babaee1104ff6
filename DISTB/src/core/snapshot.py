"""Export one beam frame as CSV plus a top/side view plot."""

from __future__ import annotations

import csv
from datetime import datetime
from pathlib import Path
from typing import Optional

import matplotlib
import matplotlib.pyplot as plt
import numpy as np

from DISTB.config import Config
from DISTB.src.core.geometry import generate_beam
from DISTB.src.core.types import Vec3

matplotlib.use("Agg")


def default_snapshot_dir() -> Path:
    project_root = Path(__file__).resolve().parents[2]
    return project_root / "snapshots"


def export_beam_snapshot(
    config: Config,
    observer_position: Vec3,
    rotation_angle: float = 0.0,
    out_dir: Optional[Path] = None,
) -> tuple[Path, Path]:
    """Write ``beam_<ts>.csv`` and ``beam_<ts>.png``; returns both paths."""
    points = generate_beam(config.target_xz, observer_position, rotation_angle, config)

    out_dir = out_dir or default_snapshot_dir()
    out_dir.mkdir(parents=True, exist_ok=True)
    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")

    csv_path = out_dir / f"beam_{timestamp}.csv"
    with csv_path.open("w", newline="") as f:
        writer = csv.writer(f)
        writer.writerow(["X", "Y", "Z"])
        writer.writerows(points.tolist())

    ox, oy, oz = observer_position
    tx, tz = config.target_xz
    per_section = len(points) // config.PARTICLE_COUNT if config.PARTICLE_COUNT else 0
    section = points[:per_section]

    fig, (ax1, ax2) = plt.subplots(1, 2, figsize=(14, 6))
    ax1.plot([ox], [oz], "bo", ms=8, label="Observer")
    ax1.plot([tx], [tz], "r*", ms=12, label="Target")
    if len(section):
        ax1.plot(section[:, 0], section[:, 2], "k.", ms=4, label="Cross-section")
    ax1.set_title(f"Top View (angle {np.degrees(rotation_angle):.1f}°)")
    ax1.set_xlabel("X")
    ax1.set_ylabel("Z")
    ax1.set_aspect("equal", adjustable="datalim")
    ax1.grid(True, linestyle="-", alpha=0.6)
    ax1.legend()

    if len(points):
        horizontal = np.hypot(points[:, 0] - ox, points[:, 2] - oz)
        ax2.plot(horizontal, points[:, 1], "g.", ms=2, label="Markers")
    ax2.axvline(config.CENTER_DISTANCE, color="r", linestyle="--", lw=1, label="Proximity threshold")
    ax2.set_title("Side View")
    ax2.set_xlabel("Horizontal distance from observer")
    ax2.set_ylabel("Y")
    ax2.grid(True, linestyle="-", alpha=0.6)
    ax2.legend()

    plt.tight_layout()
    plot_path = out_dir / f"beam_{timestamp}.png"
    plt.savefig(plot_path)
    plt.close(fig)

    return csv_path, plot_path
