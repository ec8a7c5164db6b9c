"""Custom widgets for the HaptiKnit console."""

from .actuator_grid import ActuatorGrid
from .cell_widget import CellWidget
from .pressure_panel import PressurePanel
from .roster_bar import ActuatorChip, RosterBar
from .status_bar import StatusBar

__all__ = [
    "ActuatorChip",
    "ActuatorGrid",
    "CellWidget",
    "PressurePanel",
    "RosterBar",
    "StatusBar",
]
