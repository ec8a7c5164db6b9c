"""Pressure setpoint panel with the global command buttons."""

from typing import Optional

from textual.app import ComposeResult
from textual.containers import Horizontal, Vertical
from textual.message import Message
from textual.widgets import Button, Input, Label

from haptiknit.models import MAX_PRESSURE_KPA, ROSTER_SIZE


class PressurePanel(Vertical):
    """
    One input per selected actuator, plus Submit, STOP and INFLATE ALL.

    Rows for all eight actuators are composed once and hidden beyond the
    selected count. Edits are posted as PressureEdited; buttons bubble up.
    """

    DEFAULT_CSS = """
    PressurePanel {
        width: 1fr;
        height: 100%;
        border: solid $primary;
        padding: 0 1;
    }

    PressurePanel .pressure-row {
        height: 3;
    }

    PressurePanel .pressure-row Label {
        width: 14;
        padding: 1 0 0 0;
    }

    PressurePanel .pressure-row Input {
        width: 1fr;
    }

    PressurePanel #command-row {
        height: auto;
        margin-top: 1;
    }

    PressurePanel #command-row Button {
        margin: 0 1 0 0;
    }
    """

    class PressureEdited(Message):
        """Posted when a pressure input changes."""

        def __init__(self, index: int, raw: str):
            super().__init__()
            self.index = index
            self.raw = raw

    def __init__(self) -> None:
        super().__init__()
        self.border_title = "Pressure (kPa)"

    def compose(self) -> ComposeResult:
        for index in range(ROSTER_SIZE):
            with Horizontal(classes="pressure-row", id=f"pressure-row-{index}"):
                yield Label(f"Actuator {index + 1}")
                yield Input(
                    placeholder=f"0-{MAX_PRESSURE_KPA}",
                    id=f"pressure-{index}",
                    max_length=5,
                )
        with Horizontal(id="command-row"):
            yield Button("Submit", id="submit-btn", variant="primary")
            yield Button("STOP", id="stop-btn", variant="error")
            yield Button("INFLATE ALL", id="inflate-btn", variant="success")

    def update_slots(self, pressures: list[Optional[int]]) -> None:
        """
        Show one row per slot and load the stored values.

        Args:
            pressures: Staged setpoint per actuator
        """
        for index in range(ROSTER_SIZE):
            row = self.query_one(f"#pressure-row-{index}")
            row.display = index < len(pressures)
            field = self.query_one(f"#pressure-{index}", Input)
            value = pressures[index] if index < len(pressures) else None
            text = "" if value is None else str(value)
            if field.value != text:
                # Programmatic updates are not user edits
                with field.prevent(Input.Changed):
                    field.value = text

    def on_input_changed(self, event: Input.Changed) -> None:
        """Forward user edits as PressureEdited."""
        if not event.input.id or not event.input.id.startswith("pressure-"):
            return
        event.stop()
        index = int(event.input.id.removeprefix("pressure-"))
        self.post_message(self.PressureEdited(index, event.value))
