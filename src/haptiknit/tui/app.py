"""Main TUI application with arrange and fire modes."""

import logging
from typing import TYPE_CHECKING, Optional

from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal
from textual.widgets import Button, Footer, Header

from haptiknit.exceptions import ErrorContext, OutOfRangeError
from haptiknit.models import ConnectionState

from .decorators import handle_action_errors
from .services import TUIService
from .widgets import ActuatorChip, ActuatorGrid, PressurePanel, RosterBar, StatusBar

if TYPE_CHECKING:
    from haptiknit.orchestration import Orchestrator

logger = logging.getLogger(__name__)

MODES = ("arrange", "fire")


class HaptiKnitConsole(App):
    """
    Textual TUI for the HaptiKnit console.

    This is a PURE UI layer that delegates all business logic to the
    orchestrator, which owns the placement, pressure and transport state.

    Responsibilities:
    - Textual framework integration (widgets, layouts, bindings)
    - UI event handling (keyboard, mouse)
    - Visual presentation and updates via TUIService

    Modes:
    - Arrange Mode: pick an actuator (basket chip or placed cell), then
      click a cell to drop it there. Dropping a placed actuator swaps cells.
    - Fire Mode: clicking an actuator inflates it.

    Switch modes anytime with A (arrange) or F (fire).
    """

    TITLE = "HaptiKnit"

    CSS = """
    #workspace {
        height: 1fr;
    }
    """

    BINDINGS = [
        Binding("a", "set_console_mode('arrange')", "Arrange", show=True),
        Binding("f", "set_console_mode('fire')", "Fire", show=True),
        Binding("c", "connect", "Connect", show=True),
        Binding("d", "disconnect", "Disconnect", show=True),
        Binding("escape", "stop_all", "Stop All", show=True),
        Binding("i", "inflate_all", "Inflate All", show=True),
        Binding("b", "read_battery", "Battery", show=True),
        Binding("r", "reset", "Reset", show=True),
        Binding("ctrl+q", "quit", "Quit", show=True),
    ]

    # =================================================================
    # Initialization & Lifecycle
    # =================================================================

    def __init__(self, orchestrator: "Orchestrator", start_mode: str = "arrange"):
        """
        Initialize the Textual UI application.

        Args:
            orchestrator: The console orchestrator
            start_mode: Mode to start in ("arrange" or "fire")
        """
        super().__init__()
        self.orchestrator = orchestrator
        self.config = orchestrator.config
        self.console_mode = start_mode if start_mode in MODES else "arrange"
        self.tui_service: Optional[TUIService] = None
        logger.info("HaptiKnitConsole TUI created")

    def compose(self) -> ComposeResult:
        """Create the main layout."""
        yield Header(show_clock=True)
        yield StatusBar()
        yield RosterBar()
        with Horizontal(id="workspace"):
            yield ActuatorGrid(self.config.grid_rows, self.config.grid_cols)
            yield PressurePanel()
        yield Footer()

    def on_mount(self) -> None:
        """Register the TUI service once widgets exist, then draw."""
        self.tui_service = TUIService(self)
        self.orchestrator.register_observer(self.tui_service)
        self.tui_service.sync()
        self.sub_title = self.console_mode.title()
        logger.info("TUI mount complete")

    async def on_unmount(self) -> None:
        """Detach from the services and release the link."""
        if self.tui_service:
            self.orchestrator.unregister_observer(self.tui_service)
        with ErrorContext("shut down console", logger_instance=logger, re_raise=False):
            await self.orchestrator.shutdown()
        logger.info("TUI unmounted")

    # =================================================================
    # Mode Management
    # =================================================================

    def action_set_console_mode(self, mode: str) -> None:
        """
        Switch between arrange and fire modes.

        Args:
            mode: Target mode ("arrange" or "fire")
        """
        if mode not in MODES:
            logger.error(f"Invalid mode: {mode}")
            return

        self.console_mode = mode
        self.orchestrator.cancel_drag()
        self.sub_title = mode.title()
        if self.tui_service:
            self.tui_service.sync_picks()
            self.tui_service.sync_status()
        logger.info(f"Console mode: {mode}")

    # =================================================================
    # Widget Message Handlers
    # =================================================================

    async def on_button_pressed(self, event: Button.Pressed) -> None:
        """Handle button presses from the roster bar and pressure panel."""
        button = event.button

        if isinstance(button, ActuatorChip):
            await self._on_actuator_picked(button.actuator_id)
            return

        button_id = button.id or ""
        if button_id.startswith("count-"):
            self._select_count(int(button_id.removeprefix("count-")))
        elif button_id == "reset-btn":
            self.action_reset()
        elif button_id == "submit-btn":
            await self.action_submit()
        elif button_id == "stop-btn":
            await self.action_stop_all()
        elif button_id == "inflate-btn":
            await self.action_inflate_all()

    async def on_actuator_grid_cell_selected(self, message: ActuatorGrid.CellSelected) -> None:
        """Handle cell clicks: drop/pick in arrange mode, fire in fire mode."""
        occupant = self.orchestrator.snapshot().grid[message.row][message.col]

        if self.console_mode == "fire":
            if occupant is not None:
                await self.orchestrator.fire(occupant)
            return

        self._arrange_cell(message.position, occupant)

    @handle_action_errors("set pressure")
    def on_pressure_panel_pressure_edited(self, message: PressurePanel.PressureEdited) -> None:
        """Stage a pressure edit. The field always shows what is staged."""
        if message.index >= self.orchestrator.placement.selected_count:
            return
        try:
            stored = self.orchestrator.set_pressure(message.index, message.raw)
        except OutOfRangeError:
            self._redraw_pressures()
            raise
        if ("" if stored is None else str(stored)) != message.raw.strip():
            self._redraw_pressures()

    def _redraw_pressures(self) -> None:
        self.query_one(PressurePanel).update_slots(self.orchestrator.pressure.slots)

    async def _on_actuator_picked(self, actuator_id: int) -> None:
        if self.console_mode == "fire":
            await self.orchestrator.fire(actuator_id)
            return
        self._pick_from_basket(actuator_id)

    @handle_action_errors("select count")
    def _select_count(self, n: int) -> None:
        self.orchestrator.select_count(n)
        self.notify(f"{n} actuators selected")

    @handle_action_errors("pick actuator")
    def _pick_from_basket(self, actuator_id: int) -> None:
        pending = self.orchestrator.placement.pending_drag
        if pending is not None and pending.actuator_id == actuator_id and not pending.from_grid:
            self._cancel_pick()
            return
        self.orchestrator.begin_drag(actuator_id)

    @handle_action_errors("place actuator")
    def _arrange_cell(self, position: tuple[int, int], occupant: Optional[int]) -> None:
        pending = self.orchestrator.placement.pending_drag

        if pending is None:
            if occupant is not None:
                self.orchestrator.begin_drag(occupant, origin=position)
            return

        if pending.origin == position:
            self._cancel_pick()
            return

        self.orchestrator.drop(position)

    def _cancel_pick(self) -> None:
        self.orchestrator.cancel_drag()
        if self.tui_service:
            self.tui_service.sync_picks()

    # =================================================================
    # Layout actions
    # =================================================================

    def action_reset(self) -> None:
        """Clear the count and the grid."""
        self.orchestrator.reset()
        self.notify("Layout reset")

    # =================================================================
    # Device actions
    # =================================================================

    def action_connect(self) -> None:
        """Connect in the background; scanning may take a while."""
        session = self.orchestrator.session
        if session.is_connected:
            self.notify(f"Already connected to {session.device_name}")
            return
        if session.state == ConnectionState.CONNECTING:
            self.notify("Connecting…")
            return
        self.run_worker(self._connect(), exclusive=True, group="connect")

    @handle_action_errors("connect")
    async def _connect(self) -> None:
        await self.orchestrator.connect()

    async def action_disconnect(self) -> None:
        await self.orchestrator.disconnect()

    async def action_stop_all(self) -> None:
        await self.orchestrator.stop_all()

    async def action_inflate_all(self) -> None:
        await self.orchestrator.inflate_all()

    async def action_submit(self) -> None:
        """Send every staged pressure value."""
        report = await self.orchestrator.submit_pressures()
        if report.is_empty:
            self.notify(report.summary, severity="warning")
        elif report.ok:
            self.notify(f"Sent {len(report.sent)} pressure values")
        else:
            self.notify(report.summary, severity="error", timeout=8)

    async def action_read_battery(self) -> None:
        result = await self.orchestrator.read_battery()
        if result.ok:
            self.notify(f"Battery: {result.value}")
        elif result.error is not None:
            self.notify(result.error.get_full_message(), severity="error", timeout=5)
        if self.tui_service:
            self.tui_service.sync_status()
