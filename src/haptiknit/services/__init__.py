"""Application services for the console models."""

from .placement_service import AvailablePool, PlacementService
from .pressure_service import PressureService

__all__ = ["AvailablePool", "PlacementService", "PressureService"]
