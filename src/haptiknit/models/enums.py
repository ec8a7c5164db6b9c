"""Enumerations for the HaptiKnit console."""

from enum import Enum


class Channel(str, Enum):
    """Named wire endpoints on the PortFlow8 board."""

    COMMAND = "command"            # Actuator select, setpoints, bulk commands
    BATTERY = "battery"            # Battery level (read)
    MIN_PRESSURE = "min_pressure"  # Reserved by firmware, inactive by default
    MAX_PRESSURE = "max_pressure"  # Reserved by firmware, inactive by default
    PRESSURE = "pressure"          # Reserved by firmware, inactive by default


class ConnectionState(str, Enum):
    """Lifecycle of the link to the device."""

    DISCONNECTED = "disconnected"
    CONNECTING = "connecting"
    CONNECTED = "connected"


class EncodingMode(str, Enum):
    """How a logical value becomes a wire byte."""

    DIRECT = "direct"  # Payload is the value unmodified
    OFFSET = "offset"  # Payload is value + 1 (0 is reserved on the wire)


class CommandKind(str, Enum):
    """Dispatch sites, each with its own encoding mode."""

    SELECT = "select"            # Fire a single actuator by id
    PRESSURE = "pressure"        # Pressure setpoint from the register
    STOP_ALL = "stop_all"        # Deflate every actuator
    INFLATE_ALL = "inflate_all"  # Inflate every actuator


class DropPolicy(str, Enum):
    """What happens when an unplaced actuator is dropped onto an occupied cell."""

    OVERWRITE = "overwrite"  # Replace occupant; occupant stays marked as placed
    EVICT = "evict"          # Replace occupant; occupant returns to the pool
    REJECT = "reject"        # Refuse the drop
