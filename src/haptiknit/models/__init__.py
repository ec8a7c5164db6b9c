"""Data models for the HaptiKnit console."""

from .actuator import ROSTER, ROSTER_SIZE, Actuator, get_actuator
from .config import AppConfig, BleConfig, CommandConfig
from .enums import Channel, CommandKind, ConnectionState, DropPolicy, EncodingMode
from .grid import Cell, Grid
from .placement import DragIntent, PlacementState
from .pressure import MAX_PRESSURE_KPA, PressureRegister

__all__ = [
    # Models
    "Actuator",
    "AppConfig",
    "BleConfig",
    "Cell",
    "CommandConfig",
    "DragIntent",
    "Grid",
    "PlacementState",
    "PressureRegister",
    # Enums
    "Channel",
    "CommandKind",
    "ConnectionState",
    "DropPolicy",
    "EncodingMode",
    # Constants
    "MAX_PRESSURE_KPA",
    "ROSTER",
    "ROSTER_SIZE",
    "get_actuator",
]
