"""Preview page: top-down view of observers, target and beam markers."""

from __future__ import annotations

import logging

import numpy as np
from PyQt5 import QtCore, QtWidgets
import pyqtgraph as pg

from DISTB.config import ConfigStore
from DISTB.src.core.snapshot import export_beam_snapshot
from DISTB.src.core.types import TickReport
from DISTB.src.core.worker import TickWorker, WorkerState
from DISTB.src.drivers.host import SimulatedHost
from DISTB.src.ui.theme import get_plot_colors
from DISTB.src.ui.widgets.beam_controls import BeamControlWidget
from DISTB.src.ui.widgets.readouts import ReadoutWidget

logger = logging.getLogger(__name__)


class PreviewPage(QtWidgets.QWidget):
    def __init__(self, host: SimulatedHost, worker: TickWorker, store: ConfigStore):
        super().__init__()
        self.host = host
        self.worker = worker
        self.store = store
        self.follow_index = 0
        self.last_angle = 0.0

        self._build_ui()
        self._connect_signals()
        self._draw_target()

    def _build_ui(self) -> None:
        layout = QtWidgets.QVBoxLayout(self)
        colors = get_plot_colors()

        self.plot = pg.PlotWidget(title="Top View (X / Z)")
        self.plot.setBackground(colors["background"])
        self.plot.showGrid(x=True, y=True, alpha=0.3)
        self.plot.setAspectLocked(True)
        self.plot.setLabel("bottom", "X")
        self.plot.setLabel("left", "Z")

        self.proximity_curve = self.plot.plot(pen=pg.mkPen(colors["proximity"], width=1, style=QtCore.Qt.DashLine))
        self.target_item = pg.ScatterPlotItem(size=14, symbol="star", brush=pg.mkBrush(colors["target"]))
        self.marker_item = pg.ScatterPlotItem(size=3, pen=None, brush=pg.mkBrush(colors["marker"]))
        self.observer_item = pg.ScatterPlotItem(size=9, brush=pg.mkBrush(colors["observer"]))
        self.plot.addItem(self.marker_item)
        self.plot.addItem(self.target_item)
        self.plot.addItem(self.observer_item)

        layout.addWidget(self.plot, stretch=16)

        bottom_panel = QtWidgets.QHBoxLayout()
        layout.addLayout(bottom_panel, stretch=4)

        self.readouts = ReadoutWidget()
        self.controls = BeamControlWidget()
        bottom_panel.addWidget(self.readouts, 1)
        bottom_panel.addWidget(self.controls, 1)

    def _connect_signals(self) -> None:
        self.worker.tick_finished.connect(self.on_tick)
        self.worker.status_msg.connect(self.on_status_msg)
        self.worker.state_changed.connect(self.on_state_changed)

        self.controls.pause_toggled.connect(self.worker.set_paused)
        self.controls.reload_requested.connect(self.worker.request_reload)
        self.controls.snapshot_requested.connect(self.on_snapshot)
        self.controls.follow_changed.connect(self.on_follow_changed)

    def _draw_target(self) -> None:
        cfg = self.store.current
        self.target_item.setData([cfg.BEAM_X], [cfg.BEAM_Z])
        theta = np.linspace(0.0, 2 * np.pi, 181)
        self.proximity_curve.setData(
            cfg.BEAM_X + cfg.CENTER_DISTANCE * np.cos(theta),
            cfg.BEAM_Z + cfg.CENTER_DISTANCE * np.sin(theta),
        )

    def on_tick(self, report: TickReport) -> None:
        self.last_angle = report.angle
        self.readouts.update_stats(report)

        positions = self.host.observer_positions()
        if len(positions):
            self.observer_item.setData(positions[:, 0], positions[:, 2])

        frame = self.host.last_frame()
        if frame:
            # Only the lowest cross-sections matter in a top view.
            pts = np.concatenate([p[:400] for p in frame.values()])
            self.marker_item.setData(pts[:, 0], pts[:, 2])
        else:
            self.marker_item.clear()

    def on_status_msg(self, msg: str) -> None:
        self.readouts.update_status(msg)
        if "reloaded" in msg.lower():
            self._draw_target()

    def on_state_changed(self, state: str) -> None:
        if state == WorkerState.PAUSED:
            self.readouts.update_status("Paused")
        elif state == WorkerState.RUNNING:
            self.readouts.update_status("Running")

    def on_follow_changed(self, index: int) -> None:
        self.follow_index = max(0, min(index, len(self.host.observers) - 1))

    def on_snapshot(self) -> None:
        if not self.host.observers:
            return
        observer = self.host.observers[self.follow_index]
        position = self.host.observer_position(observer)
        try:
            csv_path, plot_path = export_beam_snapshot(self.store.current, position, self.last_angle)
        except ValueError as exc:
            logger.warning("Snapshot export failed: %s", exc)
            self.readouts.update_status(f"Snapshot failed: {exc}")
            return
        self.readouts.update_status(f"Snapshot saved to {plot_path.name}")
        logger.info("Snapshot written: %s, %s", csv_path, plot_path)
