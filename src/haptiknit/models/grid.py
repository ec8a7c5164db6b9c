"""Grid model representing the placement layout."""

from pydantic import BaseModel, Field, model_validator

from .actuator import Actuator

# Cell layout of the PortFlow8 sleeve
DEFAULT_ROWS = 4
DEFAULT_COLS = 5


class Cell(BaseModel):
    """A single slot in the grid, holding at most one actuator."""

    row: int = Field(ge=0, description="Row index")
    col: int = Field(ge=0, description="Column index")
    actuator: Actuator | None = Field(default=None, description="Occupying actuator")

    @property
    def is_empty(self) -> bool:
        """Check if no actuator occupies this cell."""
        return self.actuator is None

    @property
    def position(self) -> tuple[int, int]:
        """Get (row, col) position as tuple."""
        return (self.row, self.col)

    def clear(self) -> None:
        """Remove the occupant."""
        self.actuator = None


class Grid(BaseModel):
    """Fixed-size 2D arrangement of cells, stored row-major."""

    rows: int = Field(default=DEFAULT_ROWS, ge=1, description="Number of rows")
    cols: int = Field(default=DEFAULT_COLS, ge=1, description="Number of columns")
    cells: list[Cell] = Field(default_factory=list, description="Row-major cells")

    @model_validator(mode="after")
    def _fill_cells(self) -> "Grid":
        """Create empty cells when none were given, and check the count."""
        if not self.cells:
            self.cells = [Cell(row=r, col=c) for r in range(self.rows) for c in range(self.cols)]
        elif len(self.cells) != self.rows * self.cols:
            raise ValueError(
                f"Grid must have exactly {self.rows * self.cols} cells ({self.rows}x{self.cols})"
            )
        return self

    @classmethod
    def create_empty(cls, rows: int = DEFAULT_ROWS, cols: int = DEFAULT_COLS) -> "Grid":
        """Create a new empty grid."""
        return cls(rows=rows, cols=cols)

    def contains(self, row: int, col: int) -> bool:
        """Check whether (row, col) is within bounds."""
        return 0 <= row < self.rows and 0 <= col < self.cols

    def get_cell(self, row: int, col: int) -> Cell:
        """
        Get cell at specific coordinates.

        Raises:
            IndexError: If the coordinates are out of bounds
        """
        if not self.contains(row, col):
            raise IndexError(
                f"Invalid cell: ({row}, {col}). Grid is {self.rows}x{self.cols}."
            )
        return self.cells[row * self.cols + col]

    def find(self, actuator_id: int) -> Cell | None:
        """Get the cell holding an actuator, if any."""
        for cell in self.cells:
            if cell.actuator is not None and cell.actuator.id == actuator_id:
                return cell
        return None

    def clear_all(self) -> None:
        """Empty every cell."""
        for cell in self.cells:
            cell.clear()

    @property
    def occupied_cells(self) -> list[Cell]:
        """Get all cells that hold an actuator."""
        return [cell for cell in self.cells if not cell.is_empty]

    def as_rows(self) -> list[list[Actuator | None]]:
        """Get the occupants as a list of rows."""
        return [
            [self.cells[r * self.cols + c].actuator for c in range(self.cols)]
            for r in range(self.rows)
        ]
