"""Widget representing a single cell of the placement grid."""

from typing import Optional

from textual.message import Message
from textual.widgets import Static


class CellWidget(Static):
    """
    Widget representing one grid cell (presentation only).

    Shows the occupying actuator's label. Posts a message when clicked,
    leaving drag/drop and firing to the app.
    """

    DEFAULT_CSS = """
    CellWidget {
        width: 100%;
        height: 100%;
        border: solid $surface;
        content-align: center middle;
        background: $surface 10%;
    }

    CellWidget.occupied {
        background: $accent 25%;
        border: solid $accent;
        text-style: bold;
    }

    CellWidget.picked {
        border: double $warning 80%;
    }

    CellWidget.fired {
        background: $success 60%;
        border: solid $success;
    }
    """

    class Selected(Message):
        """Message posted when the cell is clicked."""

        def __init__(self, row: int, col: int):
            super().__init__()
            self.row = row
            self.col = col

    def __init__(self, row: int, col: int) -> None:
        super().__init__()
        self.row = row
        self.col = col
        self.actuator_id: Optional[int] = None
        self.update_display()

    @property
    def position(self) -> tuple[int, int]:
        return (self.row, self.col)

    def set_actuator(self, actuator_id: Optional[int]) -> None:
        """Show a new occupant (None for empty)."""
        if actuator_id != self.actuator_id:
            self.actuator_id = actuator_id
            self.update_display()

    def update_display(self) -> None:
        """Render the current occupant."""
        if self.actuator_id is None:
            self.remove_class("occupied")
            self.update("[dim]·[/dim]")
        else:
            self.add_class("occupied")
            self.update(f"[b]{self.actuator_id + 1}[/b]")

    def set_picked(self, picked: bool) -> None:
        """Mark this cell as the origin of the pending drag."""
        self.set_class(picked, "picked")

    def set_fired(self, fired: bool) -> None:
        """Flash the cell when its actuator was just fired."""
        self.set_class(fired, "fired")

    def on_click(self) -> None:
        """Handle click event - post message for parent to handle."""
        self.post_message(self.Selected(self.row, self.col))
