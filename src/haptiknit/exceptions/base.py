"""Base exception class for HaptiKnit.

Every console failure renders two ways: a short line for the status
area and notifications, and a detailed line for the log file. Errors are
raised deep in the transport or the services, where the console action
that triggered them ("connect", "submit pressures") is unknown, so the
error handlers stamp that action onto the error on the way up.
"""

from typing import Optional


class HaptiKnitError(Exception):
    """
    Base exception for all HaptiKnit errors.

    Attributes:
        user_message: Short message for the console
        technical_message: Detailed message for logging
        recoverable: True if the user can retry (reconnect, re-enter a value)
        recovery_hint: What the user can do about it
        operation: Console action that failed, once a handler has seen it
    """

    def __init__(
        self,
        user_message: str,
        technical_message: Optional[str] = None,
        recoverable: bool = False,
        recovery_hint: Optional[str] = None,
        operation: Optional[str] = None,
    ):
        super().__init__(user_message)
        self.user_message = user_message
        self.technical_message = technical_message or user_message
        self.recoverable = recoverable
        self.recovery_hint = recovery_hint
        self.operation = operation

    def __str__(self) -> str:
        return self.user_message

    def during(self, operation: str) -> "HaptiKnitError":
        """Record the failing console action; the innermost one wins."""
        if self.operation is None:
            self.operation = operation
        return self

    @property
    def log_message(self) -> str:
        """Technical message prefixed with the failing action, for log files."""
        if self.operation is None:
            return self.technical_message
        return f"Failed to {self.operation}: {self.technical_message}"

    def get_full_message(self) -> str:
        """Get the console message with its recovery hint."""
        msg = self.user_message
        if self.recovery_hint:
            msg += f"\n\nSuggestion: {self.recovery_hint}"
        return msg
