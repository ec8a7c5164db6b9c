"""Count selector and roster basket."""

from textual.app import ComposeResult
from textual.containers import Horizontal, Vertical
from textual.widgets import Button, Label

from haptiknit.models import ROSTER_SIZE


class ActuatorChip(Button):
    """Button for one actuator waiting in the basket."""

    def __init__(self, actuator_id: int) -> None:
        super().__init__(str(actuator_id + 1), classes="chip")
        self.actuator_id = actuator_id


class RosterBar(Vertical):
    """
    Top panel: count buttons 1-8 with RESET, and the basket of
    actuators not yet placed.

    All eight chips exist from the start; unavailable ones are hidden.
    Button presses bubble up to the app.
    """

    DEFAULT_CSS = """
    RosterBar {
        height: auto;
        padding: 0 1;
    }

    RosterBar Horizontal {
        height: auto;
    }

    RosterBar Button {
        min-width: 5;
        margin: 0 1 0 0;
    }

    RosterBar Button.count.chosen {
        background: $accent;
    }

    RosterBar ActuatorChip {
        background: $primary 40%;
    }

    RosterBar ActuatorChip.picked {
        border: tall $warning;
    }

    RosterBar Label {
        padding: 1 1 0 0;
    }
    """

    def __init__(self) -> None:
        super().__init__()
        self.chips: dict[int, ActuatorChip] = {}

    def compose(self) -> ComposeResult:
        with Horizontal(id="count-row"):
            yield Label("Actuators:")
            for n in range(1, ROSTER_SIZE + 1):
                yield Button(str(n), id=f"count-{n}", classes="count")
            yield Button("RESET", id="reset-btn", variant="error")
        with Horizontal(id="basket"):
            yield Label("Basket:")
            for actuator_id in range(ROSTER_SIZE):
                chip = ActuatorChip(actuator_id)
                chip.display = False
                self.chips[actuator_id] = chip
                yield chip

    def update_roster(self, selected_count: int, available: list[int]) -> None:
        """
        Show the chosen count and the actuators still in the basket.

        Args:
            selected_count: Actuators in use (0 = none chosen)
            available: Ids not yet placed
        """
        for n in range(1, ROSTER_SIZE + 1):
            button = self.query_one(f"#count-{n}", Button)
            button.set_class(n == selected_count, "chosen")

        for actuator_id, chip in self.chips.items():
            chip.display = actuator_id in available

    def mark_picked(self, actuator_id: int | None) -> None:
        """Highlight the chip being dragged, or clear the highlight."""
        for chip_id, chip in self.chips.items():
            chip.set_class(chip_id == actuator_id, "picked")
