"""
Console orchestrator: composition root and user-intent boundary.

Every user interface (the Textual console, the CLI one-shots, tests) talks
to the Orchestrator only. It owns the placement and pressure services, the
transport session and the dispatcher, and exposes a read-only snapshot
for rendering.

Architecture:
    Orchestrator (this class)
    ├── PlacementService  (count, drag/drop, grid)
    ├── PressureService   (staged setpoints, follows placement)
    ├── TransportSession  (link lifecycle, channel I/O)
    └── Dispatcher        (encoding and writes)
"""

import logging
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from haptiknit.models import AppConfig, Channel, ConnectionState, DragIntent
from haptiknit.protocols import (
    ConnectionObserver,
    DispatchObserver,
    PlacementObserver,
    PressureObserver,
)
from haptiknit.services import PlacementService, PressureService
from haptiknit.transport import ConnectedSession, TransportBackend, TransportSession

from .dispatcher import Dispatcher, DispatchResult, SubmitReport

logger = logging.getLogger(__name__)


class ConsoleSnapshot(BaseModel):
    """Everything a UI needs to draw the console, at one point in time."""

    model_config = ConfigDict(frozen=True)

    connection_state: ConnectionState = Field(description="Transport state")
    device_name: Optional[str] = Field(default=None, description="Connected device")
    selected_count: int = Field(description="Actuators in use (0 = not chosen)")
    placed: list[int] = Field(default_factory=list, description="Placed actuator ids, ascending")
    grid: list[list[Optional[int]]] = Field(default_factory=list, description="Actuator id per cell, by row")
    available: list[int] = Field(default_factory=list, description="Ids still in the roster basket")
    pressures: list[Optional[int]] = Field(default_factory=list, description="Staged setpoint per actuator")
    battery: Optional[int] = Field(default=None, description="Last battery reading")
    pending_drag: Optional[DragIntent] = Field(default=None, description="Drag waiting for a drop")

    @property
    def is_connected(self) -> bool:
        return self.connection_state == ConnectionState.CONNECTED


class Orchestrator:
    """
    Top-level coordinator for the console.

    Placement and pressure intents are synchronous and raise user-facing
    errors (AlreadyConfiguredError, OutOfRangeError, CellOccupiedError).
    Device intents are coroutines; they return results and never raise
    for transport failures, except connect() which raises
    DeviceConnectionError so the UI can report why.
    """

    def __init__(self, config: AppConfig, backend: Optional[TransportBackend] = None):
        """
        Initialize the orchestrator.

        Args:
            config: Application configuration
            backend: Link backend. Defaults to BLE.
        """
        self.config = config

        self.placement = PlacementService.from_config(config)
        self.pressure = PressureService(max_pressure=config.max_pressure_kpa)
        self.pressure.attach_to(self.placement)

        self.session = TransportSession.from_config(config, backend)
        self.dispatcher = Dispatcher(
            self.session,
            config.commands,
            self.pressure,
            include_first_slot=config.include_first_slot,
        )
        logger.info("Orchestrator initialized")

    def register_observer(self, observer: object) -> None:
        """
        Register an observer with every service whose protocol it implements.

        Args:
            observer: Any mix of Placement/Pressure/Connection/Dispatch observer
        """
        registered = False
        if isinstance(observer, PlacementObserver):
            self.placement.register_observer(observer)
            registered = True
        if isinstance(observer, PressureObserver):
            self.pressure.register_observer(observer)
            registered = True
        if isinstance(observer, ConnectionObserver):
            self.session.register_observer(observer)
            registered = True
        if isinstance(observer, DispatchObserver):
            self.dispatcher.register_observer(observer)
            registered = True
        if not registered:
            logger.warning(f"{observer} implements no console observer protocol")

    def unregister_observer(self, observer: object) -> None:
        """Unregister an observer from every service it was registered with."""
        if isinstance(observer, PlacementObserver):
            self.placement.unregister_observer(observer)
        if isinstance(observer, PressureObserver):
            self.pressure.unregister_observer(observer)
        if isinstance(observer, ConnectionObserver):
            self.session.unregister_observer(observer)
        if isinstance(observer, DispatchObserver):
            self.dispatcher.unregister_observer(observer)

    # =================================================================
    # Layout intents
    # =================================================================

    def select_count(self, n: int) -> None:
        self.placement.select_count(n)

    def reset(self) -> None:
        self.placement.reset()

    def begin_drag(self, actuator_id: int, origin: Optional[tuple[int, int]] = None) -> DragIntent:
        return self.placement.begin_drag(actuator_id, origin)

    def cancel_drag(self) -> None:
        self.placement.cancel_drag()

    def drop(
        self,
        target: tuple[int, int],
        actuator_id: Optional[int] = None,
        origin: Optional[tuple[int, int]] = None,
    ) -> bool:
        """
        Drop an actuator on a cell.

        Without an actuator id, completes the pending drag.

        Returns:
            False if there was nothing to drop
        """
        if actuator_id is None:
            return self.placement.drop_pending(target)
        self.placement.drop(target, actuator_id, origin)
        return True

    def set_pressure(self, index: int, raw: str) -> Optional[int]:
        return self.pressure.set_value(index, raw)

    # =================================================================
    # Device intents
    # =================================================================

    async def connect(self) -> ConnectedSession:
        """
        Connect to the device.

        Raises:
            DeviceConnectionError: If no device could be opened
        """
        return await self.session.connect()

    async def disconnect(self) -> None:
        await self.session.disconnect()

    async def fire(self, actuator_id: int) -> DispatchResult:
        return await self.dispatcher.dispatch_action(actuator_id)

    async def stop_all(self) -> DispatchResult:
        return await self.dispatcher.dispatch_all_stop()

    async def inflate_all(self) -> DispatchResult:
        return await self.dispatcher.dispatch_all_start()

    async def submit_pressures(self) -> SubmitReport:
        return await self.dispatcher.submit_pressures()

    async def read_battery(self) -> DispatchResult:
        return await self.dispatcher.read_battery()

    async def shutdown(self) -> None:
        """Release the link before exit."""
        logger.info("Shutting down orchestrator")
        await self.session.disconnect()

    # =================================================================
    # Presentation
    # =================================================================

    def snapshot(self) -> ConsoleSnapshot:
        """Capture the current console state."""
        grid = self.placement.grid
        return ConsoleSnapshot(
            connection_state=self.session.state,
            device_name=self.session.device_name,
            selected_count=self.placement.selected_count,
            placed=sorted(self.placement.placed),
            grid=[[a.id if a else None for a in row] for row in grid.as_rows()],
            available=self.placement.available_for_drag().ids(),
            pressures=self.pressure.slots,
            battery=self.session.last_values.get(Channel.BATTERY),
            pending_drag=self.placement.pending_drag,
        )
