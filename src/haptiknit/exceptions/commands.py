"""Exceptions for command encoding, placement and pressure input.

- EncodingRangeError: A payload does not fit in one byte
- PlacementError: Base class for placement model rejections
- AlreadyConfiguredError: Actuator count selected twice without reset
- CellOccupiedError: Drop target is occupied and the policy rejects it
- OutOfRangeError: Pressure setpoint outside the accepted range
"""

from typing import Any, Optional

from .base import HaptiKnitError


class EncodingRangeError(HaptiKnitError):
    """Encoded payload falls outside the representable byte range."""

    def __init__(self, value: Any, payload: Optional[int] = None):
        """
        Initialize encoding range error.

        Args:
            value: The logical value that was encoded
            payload: The payload it produced, if it could be computed
        """
        detail = f"value {value!r}"
        if payload is not None:
            detail += f" encodes to {payload}"
        super().__init__(
            user_message=f"Command value {value!r} cannot be sent",
            technical_message=f"Encoding out of byte range (0-255): {detail}",
            recoverable=False,
            recovery_hint="Check the command values in your configuration.",
        )
        self.value = value
        self.payload = payload


class PlacementError(HaptiKnitError):
    """A placement operation was rejected."""
    pass


class AlreadyConfiguredError(PlacementError):
    """The number of actuators is already set for this session."""

    def __init__(self, selected_count: int):
        """
        Initialize already configured error.

        Args:
            selected_count: The count that is currently in effect
        """
        super().__init__(
            user_message=(
                f"You already have {selected_count} actuators selected. "
                "Reset to choose a different number."
            ),
            technical_message=f"select_count rejected, selected_count={selected_count}",
            recoverable=True,
            recovery_hint="Press RESET to clear the layout and pick again.",
        )
        self.selected_count = selected_count


class CellOccupiedError(PlacementError):
    """The drop target already holds an actuator."""

    def __init__(self, position: tuple[int, int], occupant_label: str):
        """
        Initialize cell occupied error.

        Args:
            position: (row, col) of the target cell
            occupant_label: Label of the actuator already in the cell
        """
        super().__init__(
            user_message=f"Cell {position} already holds actuator {occupant_label}",
            technical_message=f"Drop rejected at {position}: occupied by {occupant_label}",
            recoverable=True,
            recovery_hint="Drop onto an empty cell, or drag the placed actuator to swap.",
        )
        self.position = position
        self.occupant_label = occupant_label


class OutOfRangeError(HaptiKnitError):
    """Pressure setpoint is outside the accepted range."""

    def __init__(self, index: int, value: int, maximum: int = 255):
        """
        Initialize out of range error.

        Args:
            index: Pressure slot index
            value: The rejected value
            maximum: Largest accepted value in kPa
        """
        if value > maximum:
            user_msg = f"Value cannot exceed {maximum} kPa"
        else:
            user_msg = "Value cannot be negative"
        super().__init__(
            user_message=user_msg,
            technical_message=f"Pressure slot {index} rejected value {value} (0-{maximum})",
            recoverable=True,
            recovery_hint=f"Enter a pressure between 0 and {maximum} kPa.",
        )
        self.index = index
        self.value = value
        self.maximum = maximum
