"""Service for keeping the console widgets in sync with the models."""

import logging
from typing import TYPE_CHECKING, Optional

from haptiknit.models import Cell, CommandKind, ConnectionState
from haptiknit.protocols import ConnectionEvent, DispatchEvent, PlacementEvent, PressureEvent
from haptiknit.tui.widgets import ActuatorGrid, PressurePanel, RosterBar, StatusBar

if TYPE_CHECKING:
    from haptiknit.orchestration import DispatchResult
    from haptiknit.tui.app import HaptiKnitConsole

logger = logging.getLogger(__name__)


class TUIService:
    """
    Synchronizes the Terminal UI with console state.

    Observes every service event and redraws from an orchestrator
    snapshot, so widgets never read models directly.

    Implements (structurally):
    - PlacementObserver: count, drag/drop and reset
    - PressureObserver: register resized or cleared
    - ConnectionObserver: link lifecycle
    - DispatchObserver: command outcomes
    """

    def __init__(self, app: "HaptiKnitConsole"):
        """
        Initialize the TUI service.

        Args:
            app: The console application instance
        """
        self.app = app
        logger.info("TUIService initialized")

    # =================================================================
    # Sync
    # =================================================================

    def sync(self) -> None:
        """Redraw every widget from a fresh snapshot."""
        snapshot = self.app.orchestrator.snapshot()
        self.app.query_one(ActuatorGrid).update_grid(snapshot.grid)
        self.app.query_one(RosterBar).update_roster(snapshot.selected_count, snapshot.available)
        self.app.query_one(PressurePanel).update_slots(snapshot.pressures)
        self.sync_picks()
        self.sync_status()

    def sync_status(self) -> None:
        """Redraw the status bar."""
        snapshot = self.app.orchestrator.snapshot()
        self.app.query_one(StatusBar).update_state(
            mode=self.app.console_mode,
            state=snapshot.connection_state,
            device_name=snapshot.device_name,
            battery=snapshot.battery,
            placed=len(snapshot.placed),
            selected=snapshot.selected_count,
        )

    def sync_picks(self) -> None:
        intent = self.app.orchestrator.placement.pending_drag
        origin = intent.origin if intent else None
        roster_pick = intent.actuator_id if intent and not intent.from_grid else None
        self.app.query_one(ActuatorGrid).mark_picked(origin)
        self.app.query_one(RosterBar).mark_picked(roster_pick)

    # =================================================================
    # PlacementObserver
    # =================================================================

    def on_placement_event(self, event: PlacementEvent, cells: list[Cell]) -> None:
        try:
            if event == PlacementEvent.DRAG_STARTED:
                self.sync_picks()
                return

            snapshot = self.app.orchestrator.snapshot()
            self.app.query_one(ActuatorGrid).update_grid(snapshot.grid)
            self.app.query_one(RosterBar).update_roster(snapshot.selected_count, snapshot.available)
            self.sync_picks()
            self.sync_status()
        except Exception as e:
            logger.error(f"Error handling placement event {event}: {e}")

    # =================================================================
    # PressureObserver
    # =================================================================

    def on_pressure_event(self, event: PressureEvent, index: Optional[int], value: Optional[int]) -> None:
        # Single edits come from the input itself; only redraw on resize/clear
        if event != PressureEvent.CLEARED:
            return
        try:
            self.app.query_one(PressurePanel).update_slots(self.app.orchestrator.pressure.slots)
        except Exception as e:
            logger.error(f"Error handling pressure event {event}: {e}")

    # =================================================================
    # ConnectionObserver
    # =================================================================

    def on_connection_event(
        self, event: ConnectionEvent, state: ConnectionState, device_name: Optional[str]
    ) -> None:
        try:
            self.sync_status()
            if event == ConnectionEvent.CONNECTED:
                self.app.notify(f"Connected to {device_name}")
            elif event == ConnectionEvent.LINK_LOST:
                self.app.notify(
                    f"Connection to {device_name or 'the device'} was lost. Press C to reconnect.",
                    severity="warning",
                    timeout=5,
                )
            elif event == ConnectionEvent.DISCONNECTED:
                self.app.notify("Disconnected")
        except Exception as e:
            logger.error(f"Error handling connection event {event}: {e}")

    # =================================================================
    # DispatchObserver
    # =================================================================

    def on_dispatch_event(self, event: DispatchEvent, result: "DispatchResult") -> None:
        try:
            if event == DispatchEvent.SENT:
                if result.kind == CommandKind.SELECT and result.value is not None:
                    self.app.query_one(ActuatorGrid).flash_actuator(result.value)
            elif result.kind != CommandKind.PRESSURE and result.error is not None:
                # Pressure failures are reported once, in the submit summary
                self.app.notify(result.error.get_full_message(), severity="error", timeout=5)
        except Exception as e:
            logger.error(f"Error handling dispatch event {event}: {e}")
