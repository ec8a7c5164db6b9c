"""Grid widget containing the placement cells."""

from typing import Optional

from textual.app import ComposeResult
from textual.containers import Container
from textual.message import Message

from .cell_widget import CellWidget


class ActuatorGrid(Container):
    """
    Rows x cols grid of cell widgets (layout container).

    Stateless apart from what each cell displays: occupants are pushed in
    from a console snapshot. Forwards clicks to the app as CellSelected.
    """

    DEFAULT_CSS = """
    ActuatorGrid {
        layout: grid;
        grid-gutter: 1;
        padding: 1;
        height: 100%;
        width: 2fr;
    }
    """

    class CellSelected(Message):
        """Message posted when any cell is clicked."""

        def __init__(self, row: int, col: int):
            super().__init__()
            self.row = row
            self.col = col

        @property
        def position(self) -> tuple[int, int]:
            return (self.row, self.col)

    def __init__(self, rows: int, cols: int) -> None:
        super().__init__()
        self.rows = rows
        self.cols = cols
        self.cells: dict[tuple[int, int], CellWidget] = {}
        self.styles.grid_size_columns = cols
        self.styles.grid_size_rows = rows

    def compose(self) -> ComposeResult:
        for row in range(self.rows):
            for col in range(self.cols):
                cell = CellWidget(row, col)
                self.cells[(row, col)] = cell
                yield cell

    def update_grid(self, grid: list[list[Optional[int]]]) -> None:
        """
        Show occupants from a snapshot.

        Args:
            grid: Actuator id per cell, by row
        """
        for row, occupants in enumerate(grid):
            for col, actuator_id in enumerate(occupants):
                cell = self.cells.get((row, col))
                if cell is not None:
                    cell.set_actuator(actuator_id)

    def mark_picked(self, position: Optional[tuple[int, int]]) -> None:
        """Highlight the drag origin, or clear the highlight."""
        for pos, cell in self.cells.items():
            cell.set_picked(pos == position)

    def flash_actuator(self, actuator_id: int) -> None:
        """Flash the cell holding an actuator."""
        for cell in self.cells.values():
            if cell.actuator_id == actuator_id:
                cell.set_fired(True)
                self.set_timer(0.3, lambda c=cell: c.set_fired(False))

    def on_cell_widget_selected(self, message: CellWidget.Selected) -> None:
        """Forward cell clicks to the app."""
        message.stop()
        self.post_message(self.CellSelected(message.row, message.col))
