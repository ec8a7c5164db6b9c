"""Domain events for observer pattern.

This module defines events that can occur within the console:
- Placement events: Actuator count, drag/drop and reset
- Pressure events: Setpoint edits in the pressure register
- Connection events: Transport session lifecycle
- Dispatch events: Commands sent to (or failing to reach) the device
"""

from enum import Enum


class PlacementEvent(Enum):
    """Events from the placement model."""

    COUNT_SELECTED = "count_selected"          # Number of actuators chosen
    RESET = "reset"                            # Count, placements and grid wiped
    DRAG_STARTED = "drag_started"              # Drag provenance captured
    ACTUATOR_PLACED = "actuator_placed"        # Roster actuator dropped onto a cell
    ACTUATOR_DISPLACED = "actuator_displaced"  # Occupant replaced by a drop
    CELLS_SWAPPED = "cells_swapped"            # Two cells exchanged occupants


class PressureEvent(Enum):
    """Events from the pressure register."""

    VALUE_CHANGED = "value_changed"  # A slot was set or unset
    CLEARED = "cleared"              # All slots unset (count changed or reset)


class ConnectionEvent(Enum):
    """Events from the transport session."""

    CONNECTING = "connecting"          # Device selection started
    CONNECTED = "connected"            # Link open and channels resolved
    CONNECT_FAILED = "connect_failed"  # Attempt failed, back to disconnected
    DISCONNECTED = "disconnected"      # Link closed on request
    LINK_LOST = "link_lost"            # Link dropped by the transport


class DispatchEvent(Enum):
    """Events from the dispatch façade."""

    SENT = "sent"      # Command written to the device
    FAILED = "failed"  # Command could not be encoded or written
