"""CLI commands for haptiknit."""

from .ble import ble_group
from .config import config

__all__ = ["ble_group", "config"]
