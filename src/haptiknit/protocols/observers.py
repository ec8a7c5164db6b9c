"""Observer protocol definitions for domain-specific events.

- Placement observers: React to count selection, drops and resets
- Pressure observers: React to setpoint edits
- Connection observers: React to transport lifecycle changes
- Dispatch observers: React to commands sent to the device
"""

from typing import TYPE_CHECKING, Optional, Protocol, runtime_checkable

from .events import ConnectionEvent, DispatchEvent, PlacementEvent, PressureEvent

if TYPE_CHECKING:
    from haptiknit.models import Cell, ConnectionState
    from haptiknit.orchestration.dispatcher import DispatchResult


@runtime_checkable
class PlacementObserver(Protocol):
    """
    Observer that receives placement events.

    This protocol allows loose coupling between the placement service
    and components that need to react to layout changes (pressure
    register, UI, etc.).
    """

    def on_placement_event(self, event: PlacementEvent, cells: list["Cell"]) -> None:
        """
        Handle placement changes.

        Args:
            event: The type of placement event
            cells: Affected cells (post-change); empty for count/reset events
        """
        ...


@runtime_checkable
class PressureObserver(Protocol):
    """Observer that receives pressure register events."""

    def on_pressure_event(
        self, event: PressureEvent, index: Optional[int], value: Optional[int]
    ) -> None:
        """
        Handle setpoint changes.

        Args:
            event: The type of pressure event
            index: Slot index, or None for CLEARED
            value: New slot value, or None when unset
        """
        ...


@runtime_checkable
class ConnectionObserver(Protocol):
    """
    Observer that receives transport session events.

    Link loss reported by the backend is delivered on the event loop,
    never from a background poller.
    """

    def on_connection_event(
        self, event: ConnectionEvent, state: "ConnectionState", device_name: Optional[str]
    ) -> None:
        """
        Handle connection lifecycle changes.

        Args:
            event: The type of connection event
            state: Connection state after the event
            device_name: Name of the device, if known
        """
        ...


@runtime_checkable
class DispatchObserver(Protocol):
    """Observer that receives the outcome of every dispatched command."""

    def on_dispatch_event(self, event: DispatchEvent, result: "DispatchResult") -> None:
        """
        Handle a dispatch outcome.

        Args:
            event: SENT or FAILED
            result: Outcome of the dispatch
        """
        ...
