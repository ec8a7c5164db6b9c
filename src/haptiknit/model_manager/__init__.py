"""Generic helpers for Pydantic models.

- **PydanticPersistence**: load/save Pydantic models to JSON with backups
  and atomic writes
- **ObserverManager**: generic observer registration and notification
"""

from haptiknit.model_manager.observer import ObserverManager
from haptiknit.model_manager.persistence import PydanticPersistence

__all__ = [
    "ObserverManager",
    "PydanticPersistence",
]
