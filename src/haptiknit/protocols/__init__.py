"""Domain events and observer protocols."""

from .events import ConnectionEvent, DispatchEvent, PlacementEvent, PressureEvent
from .observers import ConnectionObserver, DispatchObserver, PlacementObserver, PressureObserver

__all__ = [
    # Events
    "ConnectionEvent",
    "DispatchEvent",
    "PlacementEvent",
    "PressureEvent",
    # Observers
    "ConnectionObserver",
    "DispatchObserver",
    "PlacementObserver",
    "PressureObserver",
]
