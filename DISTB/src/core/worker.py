"""Background thread that drives the tick scheduler at the host tick rate."""

from __future__ import annotations

import logging
import queue
import time
from typing import Any, Callable, Optional

from PyQt5 import QtCore

from DISTB.config import ConfigStore
from DISTB.src.core.commands import COMMAND_NAME, handle_command
from DISTB.src.core.scheduler import TICK_PERIOD_S, TickScheduler

logger = logging.getLogger(__name__)


class WorkerState:
    RUNNING = "RUNNING"
    PAUSED = "PAUSED"
    STOPPING = "STOPPING"
    ERROR = "ERROR"


class TickWorker(QtCore.QThread):
    tick_finished = QtCore.pyqtSignal(object)
    status_msg = QtCore.pyqtSignal(str)
    state_changed = QtCore.pyqtSignal(str)

    def __init__(
        self,
        scheduler: TickScheduler,
        store: ConfigStore,
        pre_tick: Optional[Callable[[], None]] = None,
        period_s: float = TICK_PERIOD_S,
    ):
        super().__init__()
        self.scheduler = scheduler
        self.store = store
        self.pre_tick = pre_tick
        self.period_s = period_s
        self.running = True
        self.paused = False
        self.state = WorkerState.RUNNING

        self.command_queue: queue.Queue[tuple[str, Any]] = queue.Queue()

    def _set_state(self, state: str) -> None:
        if self.state != state:
            self.state = state
            self.state_changed.emit(state)

    def request_reload(self) -> None:
        self.command_queue.put(("RELOAD", None))

    def set_paused(self, paused: bool) -> None:
        self.command_queue.put(("PAUSE", bool(paused)))

    def stop(self) -> None:
        self._set_state(WorkerState.STOPPING)
        self.running = False
        self.wait()

    def run(self) -> None:
        while self.running:
            started = time.monotonic()
            try:
                self._drain_commands()
                if not self.paused:
                    self._run_tick()
            except Exception:
                self._set_state(WorkerState.ERROR)
                self.status_msg.emit("Worker error. Check logs for details.")
                logger.exception("Tick worker crashed")
                if self.running:
                    self._set_state(WorkerState.PAUSED if self.paused else WorkerState.RUNNING)

            remaining = self.period_s - (time.monotonic() - started)
            if remaining > 0:
                time.sleep(remaining)

    def _drain_commands(self) -> None:
        while not self.command_queue.empty():
            cmd, val = self.command_queue.get_nowait()
            if cmd == "RELOAD":
                handle_command(self.store, self.status_msg.emit, COMMAND_NAME, ["reload"])
            elif cmd == "PAUSE":
                self.paused = val
                self._set_state(WorkerState.PAUSED if val else WorkerState.RUNNING)

    def _run_tick(self) -> None:
        if self.pre_tick is not None:
            self.pre_tick()
        report = self.scheduler.tick()
        if report.failures:
            logger.warning("Tick %d: %d observer(s) failed", report.tick, report.failures)
        self.tick_finished.emit(report)
