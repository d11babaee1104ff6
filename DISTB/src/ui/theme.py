import sys

from PyQt5 import QtWidgets

# Dark theme palette
COLOR_BG_DARK = "#1e1e1e"        # Main Background
COLOR_BG_LIGHT = "#2b2b2b"       # Panels, Inputs
COLOR_BORDER = "#3d3d3d"
COLOR_TEXT = "#e0e0e0"
COLOR_TEXT_DIM = "#888888"

# Accents
COLOR_ACCENT = "#b48cff"         # End-rod violet (beam markers)
COLOR_TARGET = "#ff5555"         # Target line
COLOR_OBSERVER = "#4fc3f7"       # Observers
COLOR_SUCCESS = "#2ea043"
COLOR_DANGER = "#da3633"
COLOR_WARNING = "#bb8800"

HEX_BG_DARK = COLOR_BG_DARK
HEX_TEXT = COLOR_TEXT
HEX_TEXT_DIM = COLOR_TEXT_DIM
HEX_ACCENT = COLOR_ACCENT
HEX_SUCCESS = COLOR_SUCCESS
HEX_DANGER = COLOR_DANGER
HEX_WARNING = COLOR_WARNING

def get_plot_colors():
    """Colors for the pyqtgraph preview."""
    return {
        'background': COLOR_BG_DARK,
        'axis': COLOR_TEXT,
        'grid': (255, 255, 255, 40),
        'marker': COLOR_ACCENT,
        'target': COLOR_TARGET,
        'observer': COLOR_OBSERVER,
        'proximity': (255, 85, 85, 90),
    }

def apply_theme(app: QtWidgets.QApplication):
    """Applies the global QSS stylesheet to the application."""

    if sys.platform.startswith("win"):
        font_stack = '"Segoe UI", "Arial", sans-serif'
    elif sys.platform == "darwin":
        font_stack = '"SF Pro Text", "Helvetica Neue", "Arial", sans-serif'
    else:
        font_stack = '"DejaVu Sans", "Liberation Sans", "Arial", sans-serif'

    qss = f"""
    QMainWindow, QWidget {{
        background-color: {COLOR_BG_DARK};
        color: {COLOR_TEXT};
        font-family: {font_stack};
        font-size: 13px;
    }}

    QGroupBox {{
        border: 1px solid {COLOR_BORDER};
        border-radius: 4px;
        margin-top: 1.2em;
        padding-top: 10px;
    }}
    QGroupBox::title {{
        subcontrol-origin: margin;
        left: 10px;
        color: {COLOR_TEXT_DIM};
        font-weight: bold;
        padding: 0 3px;
    }}

    QLabel {{
        color: {COLOR_TEXT};
        border: none;
    }}

    QPushButton {{
        background-color: {COLOR_BG_LIGHT};
        border: 1px solid {COLOR_BORDER};
        color: {COLOR_TEXT};
        padding: 5px 12px;
        border-radius: 4px;
    }}
    QPushButton:hover {{
        background-color: #3e3e3e;
    }}
    QPushButton:checked {{
        background-color: {COLOR_WARNING};
        color: white;
    }}
    QPushButton[class="accent"] {{
        background-color: {COLOR_ACCENT};
        border: 1px solid #8a63d2;
        color: white;
    }}

    QLineEdit {{
        background-color: {COLOR_BG_LIGHT};
        border: 1px solid {COLOR_BORDER};
        color: {COLOR_TEXT};
        border-radius: 3px;
        padding: 3px;
    }}
    QLineEdit:focus {{
        border: 1px solid {COLOR_ACCENT};
    }}
    """

    app.setStyleSheet(qss)
