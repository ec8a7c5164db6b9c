"""Placement service: actuator count, drag provenance and grid layout."""

import logging
from collections.abc import Iterator
from typing import Optional

from haptiknit.exceptions import AlreadyConfiguredError, CellOccupiedError
from haptiknit.model_manager import ObserverManager
from haptiknit.models import (
    ROSTER,
    ROSTER_SIZE,
    Actuator,
    AppConfig,
    Cell,
    DragIntent,
    DropPolicy,
    Grid,
    PlacementState,
    get_actuator,
)
from haptiknit.models.grid import DEFAULT_COLS, DEFAULT_ROWS
from haptiknit.protocols import PlacementEvent, PlacementObserver

logger = logging.getLogger(__name__)


class AvailablePool:
    """
    Actuators that can still be dragged onto the grid.

    A view over the placement state, not a copy: every ``iter()`` walks the
    current state lazily in ascending id order, so the pool can be iterated
    any number of times.
    """

    def __init__(self, state: PlacementState):
        self._state = state

    def __iter__(self) -> Iterator[Actuator]:
        for actuator in ROSTER[: self._state.selected_count]:
            if actuator.id not in self._state.placed:
                yield actuator

    def __len__(self) -> int:
        return sum(1 for _ in self)

    def __contains__(self, actuator: object) -> bool:
        if isinstance(actuator, Actuator):
            actuator = actuator.id
        return any(a.id == actuator for a in self)

    def ids(self) -> list[int]:
        """Get the ids currently in the pool."""
        return [a.id for a in self]


class PlacementService:
    """
    Manages the actuator count and the placement grid.

    Rules:
        - The count can be chosen once; reset() is the only way back.
        - An actuator sits in at most one cell.
        - Dropping an actuator dragged from a cell swaps the two cells.
        - Dropping a roster actuator that is already placed does nothing.
        - Dropping a roster actuator on an occupied cell follows the
          configured DropPolicy.

    Threading:
        All methods are called from the event loop. Observer notifications
        are dispatched synchronously on the same loop.
    """

    def __init__(
        self,
        rows: int = DEFAULT_ROWS,
        cols: int = DEFAULT_COLS,
        drop_policy: DropPolicy = DropPolicy.OVERWRITE,
    ):
        """
        Initialize the placement service.

        Args:
            rows: Grid rows
            cols: Grid columns
            drop_policy: How a roster drop onto an occupied cell is resolved
        """
        self._state = PlacementState.create_empty(rows, cols)
        self.drop_policy = drop_policy
        self._pending_drag: Optional[DragIntent] = None
        self._pool = AvailablePool(self._state)

        self._observers = ObserverManager[PlacementObserver](observer_type_name="placement")
        logger.info(f"PlacementService initialized ({rows}x{cols}, policy={drop_policy.value})")

    @classmethod
    def from_config(cls, config: AppConfig) -> "PlacementService":
        """Create a placement service from the application config."""
        return cls(rows=config.grid_rows, cols=config.grid_cols, drop_policy=config.drop_policy)

    @property
    def state(self) -> PlacementState:
        """Get the placement state."""
        return self._state

    @property
    def grid(self) -> Grid:
        """Get the placement grid."""
        return self._state.grid

    @property
    def selected_count(self) -> int:
        return self._state.selected_count

    @property
    def placed(self) -> frozenset[int]:
        """Get the ids assigned to some cell."""
        return frozenset(self._state.placed)

    @property
    def pending_drag(self) -> Optional[DragIntent]:
        """Get the drag waiting for a drop, if any."""
        return self._pending_drag

    # =================================================================
    # Event System
    # =================================================================

    def register_observer(self, observer: PlacementObserver) -> None:
        """
        Register an observer to receive placement events.

        Args:
            observer: Object implementing PlacementObserver protocol
        """
        self._observers.register(observer)

    def unregister_observer(self, observer: PlacementObserver) -> None:
        """Unregister an observer."""
        self._observers.unregister(observer)

    def _notify_observers(self, event: PlacementEvent, cells: list[Cell]) -> None:
        self._observers.notify("on_placement_event", event, cells)

    # =================================================================
    # Validation
    # =================================================================

    def _validate_position(self, position: tuple[int, int], label: str = "Cell") -> Cell:
        """
        Get the cell at a position.

        Raises:
            IndexError: If the position is outside the grid
        """
        row, col = position
        if not self.grid.contains(row, col):
            raise IndexError(
                f"{label} ({row}, {col}) out of range (grid is {self.grid.rows}x{self.grid.cols})"
            )
        return self.grid.get_cell(row, col)

    def _validate_actuator(self, actuator_id: int) -> Actuator:
        """
        Get a selected actuator.

        Raises:
            ValueError: If the id is not among the selected actuators
        """
        if not 0 <= actuator_id < self._state.selected_count:
            raise ValueError(
                f"Actuator {actuator_id} is not selected "
                f"(selected count is {self._state.selected_count})"
            )
        return get_actuator(actuator_id)

    # =================================================================
    # Operations
    # =================================================================

    def select_count(self, n: int) -> None:
        """
        Choose how many actuators are in use.

        The grid is left untouched; only reset() clears it.

        Args:
            n: Number of actuators (1-8)

        Raises:
            AlreadyConfiguredError: If a count was already chosen
            ValueError: If n is outside 1-8
        """
        if self._state.is_configured:
            logger.warning(f"select_count({n}) rejected: {self._state.selected_count} already selected")
            raise AlreadyConfiguredError(self._state.selected_count)
        if not 1 <= n <= ROSTER_SIZE:
            raise ValueError(f"Actuator count must be 1-{ROSTER_SIZE}, got {n}")

        self._state.selected_count = n
        self._state.placed.clear()
        logger.info(f"Selected {n} actuators")
        self._notify_observers(PlacementEvent.COUNT_SELECTED, [])

    def reset(self) -> None:
        """Clear the count, every placement and the grid."""
        self._state.selected_count = 0
        self._state.placed.clear()
        self._state.grid.clear_all()
        self._pending_drag = None
        logger.info("Placement reset")
        self._notify_observers(PlacementEvent.RESET, [])

    def begin_drag(self, actuator_id: int, origin: Optional[tuple[int, int]] = None) -> DragIntent:
        """
        Capture where a drag started.

        Nothing in the layout changes. The intent is also kept as
        ``pending_drag`` until a drop or cancel_drag().

        Args:
            actuator_id: Actuator being dragged
            origin: (row, col) when dragged from the grid, None from the roster

        Raises:
            IndexError: If origin is outside the grid
            ValueError: If the actuator is not selected
        """
        self._validate_actuator(actuator_id)
        if origin is not None:
            self._validate_position(origin, "Origin")

        intent = DragIntent(actuator_id=actuator_id, origin=origin)
        self._pending_drag = intent
        logger.debug(f"Drag started: actuator {actuator_id} from {origin or 'roster'}")
        self._notify_observers(PlacementEvent.DRAG_STARTED, [])
        return intent

    def cancel_drag(self) -> None:
        """Forget the pending drag."""
        self._pending_drag = None

    def drop(
        self,
        target: tuple[int, int],
        actuator_id: int,
        origin: Optional[tuple[int, int]] = None,
    ) -> None:
        """
        Complete a drag onto a cell.

        Args:
            target: (row, col) of the drop
            actuator_id: Actuator being dropped
            origin: (row, col) the drag started from, None from the roster

        Raises:
            IndexError: If target or origin is outside the grid
            ValueError: If the actuator is not selected
            CellOccupiedError: REJECT policy and the target is occupied
        """
        target_cell = self._validate_position(target, "Target")
        self._validate_actuator(actuator_id)
        self._pending_drag = None

        if origin is not None:
            origin_cell = self._validate_position(origin, "Origin")
            self._swap(origin_cell, target_cell)
            return

        if actuator_id in self._state.placed:
            logger.debug(f"Actuator {actuator_id} already placed, drop ignored")
            return

        self._place(target_cell, get_actuator(actuator_id))

    def drop_pending(self, target: tuple[int, int]) -> bool:
        """
        Complete the pending drag onto a cell.

        Returns:
            False if there was no pending drag
        """
        intent = self._pending_drag
        if intent is None:
            return False
        self.drop(target, intent.actuator_id, intent.origin)
        return True

    def available_for_drag(self) -> AvailablePool:
        """Get the selected actuators not yet placed, ascending by id."""
        return self._pool

    def _swap(self, origin: Cell, target: Cell) -> None:
        if origin is target:
            return
        origin.actuator, target.actuator = target.actuator, origin.actuator
        logger.info(f"Swapped cells {origin.position} <-> {target.position}")
        self._notify_observers(PlacementEvent.CELLS_SWAPPED, [origin, target])

    def _place(self, target: Cell, actuator: Actuator) -> None:
        occupant = target.actuator
        if occupant is not None:
            if self.drop_policy == DropPolicy.REJECT:
                logger.warning(f"Drop of {actuator.label} rejected: {target.position} holds {occupant.label}")
                raise CellOccupiedError(target.position, occupant.label)
            if self.drop_policy == DropPolicy.EVICT:
                self._state.placed.discard(occupant.id)
            logger.info(
                f"Actuator {occupant.label} displaced from {target.position} ({self.drop_policy.value})"
            )

        target.actuator = actuator
        self._state.placed.add(actuator.id)
        logger.info(f"Placed actuator {actuator.label} at {target.position}")

        if occupant is not None:
            self._notify_observers(PlacementEvent.ACTUATOR_DISPLACED, [target])
        self._notify_observers(PlacementEvent.ACTUATOR_PLACED, [target])
