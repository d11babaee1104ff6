"""Shared core data structures used across the tick pipeline and host drivers."""

from __future__ import annotations

from enum import Enum
from typing import NamedTuple


class Vec3(NamedTuple):
    x: float
    y: float
    z: float


class Observer(NamedTuple):
    """Handle for one connected observer as reported by the host."""

    observer_id: str
    name: str


class Environment(Enum):
    NORMAL = "NORMAL"
    NETHER = "NETHER"
    THE_END = "THE_END"
    CUSTOM = "CUSTOM"


class MarkerKind(Enum):
    """Particle kinds the host can render for a beam marker."""

    END_ROD = "END_ROD"
    FLAME = "FLAME"
    SOUL_FIRE_FLAME = "SOUL_FIRE_FLAME"
    CLOUD = "CLOUD"
    CRIT = "CRIT"
    DRAGON_BREATH = "DRAGON_BREATH"
    ELECTRIC_SPARK = "ELECTRIC_SPARK"
    FIREWORKS_SPARK = "FIREWORKS_SPARK"
    GLOW = "GLOW"
    HEART = "HEART"
    NOTE = "NOTE"
    PORTAL = "PORTAL"
    SMOKE_NORMAL = "SMOKE_NORMAL"
    SPELL_WITCH = "SPELL_WITCH"
    TOTEM = "TOTEM"
    VILLAGER_HAPPY = "VILLAGER_HAPPY"
    WAX_ON = "WAX_ON"
    WHITE_ASH = "WHITE_ASH"


class CueKind(Enum):
    """Ambient sounds the host can play near the target."""

    BLOCK_CONDUIT_AMBIENT = "BLOCK_CONDUIT_AMBIENT"
    BLOCK_CONDUIT_AMBIENT_SHORT = "BLOCK_CONDUIT_AMBIENT_SHORT"
    BLOCK_BEACON_AMBIENT = "BLOCK_BEACON_AMBIENT"
    BLOCK_BEACON_ACTIVATE = "BLOCK_BEACON_ACTIVATE"
    BLOCK_PORTAL_AMBIENT = "BLOCK_PORTAL_AMBIENT"
    BLOCK_AMETHYST_BLOCK_CHIME = "BLOCK_AMETHYST_BLOCK_CHIME"
    BLOCK_NOTE_BLOCK_CHIME = "BLOCK_NOTE_BLOCK_CHIME"
    AMBIENT_CAVE = "AMBIENT_CAVE"
    AMBIENT_UNDERWATER_LOOP = "AMBIENT_UNDERWATER_LOOP"
    ENTITY_EXPERIENCE_ORB_PICKUP = "ENTITY_EXPERIENCE_ORB_PICKUP"


class Classification(Enum):
    SKIP = "skip"
    AMBIENT_CUE = "ambient_cue"
    DRAW_BEAM = "draw_beam"


class ObserverSnapshot(NamedTuple):
    """Per-tick view of one observer, built from host queries."""

    observer_id: str
    position: Vec3
    world: str
    environment: Environment
    outside: bool
    distance: float


class TickReport(NamedTuple):
    tick: int
    angle: float
    observers: int
    beams: int
    markers: int
    cues: int
    failures: int
