"""Actuator model and the fixed session roster."""

from pydantic import BaseModel, ConfigDict, Field

ROSTER_SIZE = 8


class Actuator(BaseModel):
    """One addressable pneumatic unit in the wearable array."""

    model_config = ConfigDict(frozen=True)

    id: int = Field(ge=0, lt=ROSTER_SIZE, description="Stable 0-based identity")
    label: str = Field(description="Display label (id + 1)")

    @classmethod
    def create(cls, actuator_id: int) -> "Actuator":
        """Create an actuator with its derived label."""
        return cls(id=actuator_id, label=str(actuator_id + 1))


ROSTER: tuple[Actuator, ...] = tuple(Actuator.create(i) for i in range(ROSTER_SIZE))


def get_actuator(actuator_id: int) -> Actuator:
    """
    Look up a roster actuator by id.

    Raises:
        ValueError: If the id is not part of the roster
    """
    if not 0 <= actuator_id < ROSTER_SIZE:
        raise ValueError(f"Invalid actuator id: {actuator_id}. Must be 0-{ROSTER_SIZE - 1}.")
    return ROSTER[actuator_id]
