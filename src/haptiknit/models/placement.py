"""Placement state and drag provenance."""

from pydantic import BaseModel, ConfigDict, Field

from .actuator import ROSTER_SIZE
from .grid import Grid


class PlacementState(BaseModel):
    """Selected actuator count, placed actuators and the grid."""

    selected_count: int = Field(
        default=0, ge=0, le=ROSTER_SIZE, description="Actuators in use (0 = not chosen yet)"
    )
    placed: set[int] = Field(default_factory=set, description="Ids assigned to some cell")
    grid: Grid = Field(default_factory=Grid, description="Placement layout")

    @property
    def is_configured(self) -> bool:
        """Check if an actuator count has been chosen."""
        return self.selected_count > 0

    @classmethod
    def create_empty(cls, rows: int, cols: int) -> "PlacementState":
        """Create an unconfigured state with an empty grid."""
        return cls(grid=Grid.create_empty(rows, cols))


class DragIntent(BaseModel):
    """Provenance of an in-progress drag, captured on drag start."""

    model_config = ConfigDict(frozen=True)

    actuator_id: int = Field(ge=0, lt=ROSTER_SIZE, description="Actuator being dragged")
    origin: tuple[int, int] | None = Field(
        default=None, description="(row, col) when dragged from the grid, None from the roster"
    )

    @property
    def from_grid(self) -> bool:
        """Check if the drag started on a grid cell."""
        return self.origin is not None
