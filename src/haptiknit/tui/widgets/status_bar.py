"""Status bar widget showing mode, connection, battery and actuator count."""

from textual.widgets import Static

from haptiknit.models import ConnectionState


class StatusBar(Static):
    """
    Status bar displaying current console state.

    Shows:
    - Current mode (Arrange or Fire)
    - Connection state and device name
    - Last battery reading
    - Placed / selected actuators
    """

    DEFAULT_CSS = """
    StatusBar {
        height: 1;
        background: $panel;
        color: $text;
        padding: 0 1;
    }

    StatusBar.arrange_mode {
        background: $accent;
    }

    StatusBar.fire_mode {
        background: $success;
    }
    """

    def __init__(self) -> None:
        """Initialize status bar."""
        super().__init__()
        self._mode = "arrange"
        self._state = ConnectionState.DISCONNECTED
        self._device_name: str | None = None
        self._battery: int | None = None
        self._placed = 0
        self._selected = 0
        self._update_display()

    def update_state(
        self,
        mode: str,
        state: ConnectionState,
        device_name: str | None = None,
        battery: int | None = None,
        placed: int = 0,
        selected: int = 0,
    ) -> None:
        """
        Update all status information.

        Args:
            mode: Current mode ("arrange" or "fire")
            state: Transport connection state
            device_name: Connected device, if any
            battery: Last battery reading
            placed: Number of actuators on the grid
            selected: Number of actuators in use
        """
        self._mode = mode
        self._state = state
        self._device_name = device_name
        self._battery = battery
        self._placed = placed
        self._selected = selected
        self._update_display()

    @property
    def text(self) -> str:
        """Get the rendered status line."""
        return self._compose_text()

    def _compose_text(self) -> str:
        mode_text = "✥ ARRANGE" if self._mode == "arrange" else "▶ FIRE"

        if self._state == ConnectionState.CONNECTED:
            link_text = f"📶 {self._device_name}"
        elif self._state == ConnectionState.CONNECTING:
            link_text = "📶 Connecting..."
        else:
            link_text = "📶 Not connected"

        parts = [mode_text, link_text]
        if self._battery is not None:
            parts.append(f"🔋 {self._battery}")
        if self._selected:
            parts.append(f"Placed {self._placed}/{self._selected}")
        else:
            parts.append("Choose how many actuators")
        return " | ".join(parts)

    def _update_display(self) -> None:
        """Update the status bar display."""
        if self._mode == "arrange":
            self.remove_class("fire_mode")
            self.add_class("arrange_mode")
        else:
            self.remove_class("arrange_mode")
            self.add_class("fire_mode")

        self.update(self._compose_text())
