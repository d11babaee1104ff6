import math

from PyQt5 import QtWidgets
from DISTB.src.core.types import TickReport
from DISTB.src.ui.theme import HEX_ACCENT, HEX_DANGER, HEX_WARNING, HEX_SUCCESS, HEX_TEXT_DIM, HEX_TEXT

class ReadoutWidget(QtWidgets.QGroupBox):
    def __init__(self, parent=None):
        super().__init__("Readouts", parent)
        self.layout = QtWidgets.QGridLayout(self)

        self.lbl_tick = QtWidgets.QLabel("0")
        self.lbl_tick.setStyleSheet("font-size: 18px; font-weight: bold;")
        self.layout.addWidget(QtWidgets.QLabel("Tick:"), 0, 0)
        self.layout.addWidget(self.lbl_tick, 0, 1)

        self.lbl_angle = QtWidgets.QLabel("0.0°")
        self.lbl_angle.setStyleSheet("font-size: 18px; font-weight: bold;")
        self.layout.addWidget(QtWidgets.QLabel("Rotation:"), 1, 0)
        self.layout.addWidget(self.lbl_angle, 1, 1)

        self.lbl_observers = QtWidgets.QLabel("---")
        self.layout.addWidget(QtWidgets.QLabel("Observers / Beams:"), 2, 0)
        self.layout.addWidget(self.lbl_observers, 2, 1)

        self.lbl_markers = QtWidgets.QLabel("---")
        self.layout.addWidget(QtWidgets.QLabel("Markers / Cues:"), 3, 0)
        self.layout.addWidget(self.lbl_markers, 3, 1)

        self.lbl_status = QtWidgets.QLabel("Ready")
        self.lbl_status.setStyleSheet(f"color: {HEX_SUCCESS}; font-weight: bold;")
        self.layout.addWidget(QtWidgets.QLabel("Status:"), 4, 0)
        self.layout.addWidget(self.lbl_status, 4, 1)

    def update_stats(self, report: TickReport):
        self.lbl_tick.setText(str(report.tick))
        self.lbl_angle.setText(f"{math.degrees(report.angle):.1f}°")
        self.lbl_angle.setStyleSheet(f"font-size: 18px; font-weight: bold; color: {HEX_ACCENT};")
        self.lbl_observers.setText(f"{report.observers} / {report.beams}")
        self.lbl_markers.setText(f"{report.markers} / {report.cues}")

        if report.failures:
            self.lbl_markers.setText(f"{report.markers} / {report.cues} ({report.failures} FAILED)")
            self.lbl_markers.setStyleSheet(f"font-size: 14px; font-weight: bold; color: {HEX_DANGER};")
        elif report.beams:
            self.lbl_markers.setStyleSheet(f"font-size: 14px; color: {HEX_TEXT};")
        else:
            self.lbl_markers.setStyleSheet(f"font-size: 14px; color: {HEX_TEXT_DIM};")

    def update_status(self, msg):
        self.lbl_status.setText(msg)
        m = msg.lower()
        if "error" in m or "fail" in m:
            self.lbl_status.setStyleSheet(f"color: {HEX_DANGER}; font-weight: bold;")
        elif "paused" in m:
            self.lbl_status.setStyleSheet(f"color: {HEX_WARNING}; font-weight: bold;")
        else:
            self.lbl_status.setStyleSheet(f"color: {HEX_SUCCESS}; font-weight: bold;")
