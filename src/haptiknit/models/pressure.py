"""Pressure register model."""

from pydantic import BaseModel, Field

# Largest setpoint that fits in one wire byte
MAX_PRESSURE_KPA = 255


class PressureRegister(BaseModel):
    """Staged pressure setpoints (kPa), one optional slot per selected actuator."""

    slots: list[int | None] = Field(default_factory=list, description="Setpoint per actuator index")

    def __len__(self) -> int:
        return len(self.slots)

    def resize(self, count: int) -> None:
        """Replace the slots with `count` unset slots."""
        self.slots = [None] * count

    def clear(self) -> None:
        """Unset every slot, keeping the size."""
        self.slots = [None] * len(self.slots)

    def is_set(self, index: int) -> bool:
        """Check if a slot holds a value."""
        return self.slots[index] is not None

    def values(self, start: int = 0) -> list[tuple[int, int]]:
        """Get (index, value) pairs for set slots from `start` on, ascending."""
        return [
            (i, value) for i, value in enumerate(self.slots)
            if i >= start and value is not None
        ]
