"""Debounce for the ambient cue played near the target."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Hashable, Optional

from DISTB.src.core.types import CueKind

AMBIENT_SOUND_DELAY_MS = 1000

# Key used when every observer shares one throttle entry.
SHARED_KEY = "*"


@dataclass
class ThrottleEntry:
    last_cue: CueKind
    last_time: float


class AmbientThrottle:
    """A changed cue always fires; a repeated cue fires once ``delay_ms`` has elapsed."""

    def __init__(self, delay_ms: float = AMBIENT_SOUND_DELAY_MS):
        self.delay_ms = float(delay_ms)
        self._entries: dict[Hashable, ThrottleEntry] = {}

    def __len__(self) -> int:
        return len(self._entries)

    def entry(self, key: Hashable) -> Optional[ThrottleEntry]:
        return self._entries.get(key)

    def should_play(self, key: Hashable, cue: CueKind, now: float, delay_ms: Optional[float] = None) -> bool:
        delay = self.delay_ms if delay_ms is None else float(delay_ms)
        entry = self._entries.get(key)
        if entry is None:
            self._entries[key] = ThrottleEntry(cue, now)
            return True
        if cue != entry.last_cue or now - entry.last_time >= delay:
            entry.last_cue = cue
            entry.last_time = now
            return True
        return False
