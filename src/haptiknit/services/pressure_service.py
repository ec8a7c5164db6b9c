"""Pressure service: staged setpoints for the selected actuators."""

import logging
from typing import TYPE_CHECKING, Optional

from haptiknit.exceptions import OutOfRangeError
from haptiknit.model_manager import ObserverManager
from haptiknit.models import MAX_PRESSURE_KPA, Cell, PressureRegister
from haptiknit.protocols import PlacementEvent, PressureEvent, PressureObserver

if TYPE_CHECKING:
    from .placement_service import PlacementService

logger = logging.getLogger(__name__)


class PressureService:
    """
    Holds one optional setpoint per selected actuator.

    The register follows the placement model: choosing a count or
    resetting resizes it and unsets every slot. Register this service as a
    placement observer to keep the two in step.
    """

    def __init__(self, max_pressure: int = MAX_PRESSURE_KPA):
        """
        Initialize the pressure service.

        Args:
            max_pressure: Largest accepted setpoint in kPa
        """
        self.max_pressure = max_pressure
        self._register = PressureRegister()
        self._placement: Optional["PlacementService"] = None
        self._observers = ObserverManager[PressureObserver](observer_type_name="pressure")

    @property
    def register(self) -> PressureRegister:
        """Get the pressure register."""
        return self._register

    @property
    def slots(self) -> list[Optional[int]]:
        """Get a copy of the slot values."""
        return list(self._register.slots)

    def register_observer(self, observer: PressureObserver) -> None:
        """Register an observer to receive pressure events."""
        self._observers.register(observer)

    def unregister_observer(self, observer: PressureObserver) -> None:
        """Unregister an observer."""
        self._observers.unregister(observer)

    # =================================================================
    # Operations
    # =================================================================

    def set_value(self, index: int, raw: str) -> Optional[int]:
        """
        Parse and store a setpoint from user text.

        Empty text unsets the slot. Text that is not an integer is ignored.

        Args:
            index: Slot index (actuator id)
            raw: Text typed by the user

        Returns:
            The slot value after the call

        Raises:
            IndexError: If index is outside the active slots
            OutOfRangeError: If the value is outside 0 to max_pressure
        """
        if not 0 <= index < len(self._register):
            raise IndexError(f"Pressure slot {index} out of range (0-{len(self._register) - 1})")

        text = raw.strip()
        if not text:
            self._store(index, None)
            return None

        try:
            value = int(text)
        except ValueError:
            logger.debug(f"Ignoring non-numeric input for slot {index}: {raw!r}")
            return self._register.slots[index]

        if not 0 <= value <= self.max_pressure:
            logger.warning(f"Pressure {value} for slot {index} rejected (0-{self.max_pressure})")
            raise OutOfRangeError(index, value, self.max_pressure)

        self._store(index, value)
        return value

    def _store(self, index: int, value: Optional[int]) -> None:
        if self._register.slots[index] == value:
            return
        self._register.slots[index] = value
        logger.debug(f"Pressure slot {index} = {value}")
        self._observers.notify("on_pressure_event", PressureEvent.VALUE_CHANGED, index, value)

    def clear(self) -> None:
        """Unset every slot."""
        self._register.clear()
        self._observers.notify("on_pressure_event", PressureEvent.CLEARED, None, None)

    def resize(self, count: int) -> None:
        """Resize to `count` unset slots."""
        self._register.resize(count)
        logger.debug(f"Pressure register resized to {count}")
        self._observers.notify("on_pressure_event", PressureEvent.CLEARED, None, None)

    def staged_values(self, include_first_slot: bool = False) -> list[tuple[int, int]]:
        """
        Get the setpoints to submit.

        Args:
            include_first_slot: Include index 0

        Returns:
            (index, value) pairs for set slots, ascending
        """
        return self._register.values(start=0 if include_first_slot else 1)

    # =================================================================
    # PlacementObserver
    # =================================================================

    def attach_to(self, placement: "PlacementService") -> None:
        """Follow a placement service's count, starting from its current one."""
        self._placement = placement
        self.resize(placement.selected_count)
        placement.register_observer(self)

    def on_placement_event(self, event: PlacementEvent, cells: list[Cell]) -> None:
        """Resize on count selection, clear on reset."""
        if event == PlacementEvent.COUNT_SELECTED and self._placement is not None:
            self.resize(self._placement.selected_count)
        elif event == PlacementEvent.RESET:
            self.resize(0)
