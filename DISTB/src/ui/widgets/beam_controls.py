from PyQt5 import QtWidgets, QtCore, QtGui

class BeamControlWidget(QtWidgets.QGroupBox):
    # Signals for parent to handle
    pause_toggled = QtCore.pyqtSignal(bool)
    reload_requested = QtCore.pyqtSignal()
    snapshot_requested = QtCore.pyqtSignal()
    follow_changed = QtCore.pyqtSignal(int)  # index into the observer list

    def __init__(self, parent=None):
        super().__init__("Controls", parent)
        self.layout = QtWidgets.QGridLayout(self)
        self.layout.setHorizontalSpacing(10)
        self.layout.setVerticalSpacing(8)

        self.btn_pause = QtWidgets.QPushButton("Pause")
        self.btn_pause.setCheckable(True)
        self.btn_pause.toggled.connect(self._on_pause_toggled)
        self.btn_pause.setToolTip("Stop advancing ticks")
        self.layout.addWidget(self.btn_pause, 0, 0)

        self.btn_reload = QtWidgets.QPushButton("Reload Config")
        self.btn_reload.setProperty("class", "accent")
        self.btn_reload.clicked.connect(lambda: self.reload_requested.emit())
        self.btn_reload.setToolTip("Same as '/distb reload'")
        self.layout.addWidget(self.btn_reload, 0, 1)

        self.btn_snapshot = QtWidgets.QPushButton("Export Snapshot")
        self.btn_snapshot.clicked.connect(lambda: self.snapshot_requested.emit())
        self.btn_snapshot.setToolTip("Save the followed observer's beam as CSV + PNG")
        self.layout.addWidget(self.btn_snapshot, 0, 2)

        self.layout.addWidget(QtWidgets.QLabel("Follow:"), 1, 0)
        self.txt_follow = QtWidgets.QLineEdit("0")
        self.txt_follow.setFixedWidth(48)
        self.txt_follow.setValidator(QtGui.QIntValidator(0, 999))
        self.txt_follow.setToolTip("Observer index used for snapshots")
        self.txt_follow.returnPressed.connect(self._emit_follow)
        self.layout.addWidget(self.txt_follow, 1, 1)

    def _on_pause_toggled(self, checked: bool):
        self.btn_pause.setText("Resume" if checked else "Pause")
        self.pause_toggled.emit(checked)

    def _emit_follow(self):
        text = self.txt_follow.text().strip()
        if text.isdigit():
            self.follow_changed.emit(int(text))
