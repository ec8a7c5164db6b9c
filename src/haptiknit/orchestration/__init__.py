"""Application orchestration: dispatch façade and composition root."""

from .dispatcher import Dispatcher, DispatchResult, SubmitReport
from .orchestrator import ConsoleSnapshot, Orchestrator

__all__ = ["ConsoleSnapshot", "DispatchResult", "Dispatcher", "Orchestrator", "SubmitReport"]
