"""
Centralized error handling utilities.

Each layer translates errors to be more useful at the next level up:

```
USER LAYER (CLI/TUI)         formats user_message, shows recovery_hint
        ^ HaptiKnitError
APPLICATION LAYER (services) converts low-level errors, adds context
        ^ BleakError, OSError, ValidationError
LOW LEVEL (bleak, I/O)       raises library exceptions
```

### Handling Patterns

| Pattern | Code |
|---------|------|
| Show error to user, continue | `@handle_errors(operation_name="reset", user_notification=self.notify, re_raise=False)` |
| Log and re-raise | `@handle_errors(operation_name="connect", re_raise=True)` |
| Try multiple ops, collect errors | `collector = collect_errors("submit pressures"); with collector.try_operation(...): ...` |
| Critical section with auto-logging | `with ErrorContext("open link"): ...` |

`handle_errors` works on plain functions and on coroutine functions alike.
"""

import inspect
import logging
from functools import wraps
from typing import Callable, Optional, TypeVar

from .base import HaptiKnitError
from .config import ConfigFileInvalidError, ConfigValidationError
from .transport import DeviceConnectionError, LinkLostError, TransportError

logger = logging.getLogger(__name__)

T = TypeVar('T')


def handle_errors(
    *,
    operation_name: str,
    user_notification: Optional[Callable[[str], None]] = None,
    fallback_value: Optional[T] = None,
    re_raise: bool = True,
    log_level: int = logging.ERROR
) -> Callable:
    """
    Decorator for consistent error handling.

    This provides a standard pattern for:
    - Logging errors with context
    - Showing user notifications
    - Returning fallback values
    - Re-raising or swallowing exceptions

    Args:
        operation_name: Name of the operation for logging (e.g., "select count")
        user_notification: Optional callback to notify user (e.g., self.notify)
        fallback_value: Value to return if error occurs and re_raise=False
        re_raise: Whether to re-raise the exception after handling
        log_level: Logging level for the error (default: ERROR)

    Returns:
        Decorated function
    """
    def _handle(e: Exception):
        if isinstance(e, HaptiKnitError):
            logger.log(log_level, e.during(operation_name).log_message)
            if user_notification:
                user_notification(e.get_full_message())
        else:
            logger.log(
                log_level,
                f"Unexpected error during {operation_name}: {e}",
                exc_info=True
            )
            if user_notification:
                user_notification(f"Error: {e}")

    def decorator(func: Callable[..., T]) -> Callable[..., T]:
        if inspect.iscoroutinefunction(func):
            @wraps(func)
            async def async_wrapper(*args, **kwargs):
                try:
                    return await func(*args, **kwargs)
                except Exception as e:
                    _handle(e)
                    if re_raise:
                        raise
                    return fallback_value

            return async_wrapper

        @wraps(func)
        def wrapper(*args, **kwargs) -> T:
            try:
                return func(*args, **kwargs)
            except Exception as e:
                _handle(e)
                if re_raise:
                    raise
                return fallback_value

        return wrapper
    return decorator


class ErrorContext:
    """
    Context manager for error handling with automatic logging.

    Use this for critical sections where you want consistent error handling.

    Example:
        ```python
        with ErrorContext("open link", re_raise=False) as ctx:
            await backend.close()

        if ctx.error:
            print(f"Failed: {ctx.error}")
        ```
    """

    def __init__(
        self,
        operation: str,
        logger_instance: Optional[logging.Logger] = None,
        re_raise: bool = True
    ):
        """
        Initialize error context.

        Args:
            operation: Description of the operation
            logger_instance: Logger to use (defaults to module logger)
            re_raise: Whether to re-raise exceptions
        """
        self.operation = operation
        self.logger = logger_instance or logger
        self.re_raise = re_raise
        self.error: Optional[Exception] = None

    def __enter__(self):
        """Enter the context."""
        self.logger.debug(f"Starting: {self.operation}")
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """
        Exit the context and handle any exceptions.

        Returns:
            True if exception should be suppressed, False otherwise
        """
        if exc_type is None:
            self.logger.debug(f"Completed: {self.operation}")
            return False

        self.error = exc_val

        if isinstance(exc_val, HaptiKnitError):
            self.logger.error(exc_val.during(self.operation).log_message)
        else:
            self.logger.error(f"Failed to {self.operation}: {exc_val}", exc_info=True)

        return not self.re_raise


def wrap_pydantic_error(error: Exception, file_path: str) -> HaptiKnitError:
    """
    Convert Pydantic validation errors to HaptiKnit exceptions.

    Args:
        error: The Pydantic ValidationError
        file_path: Path to the config file that failed validation

    Returns:
        A ConfigurationError with appropriate type and message
    """
    from pydantic import ValidationError

    error_msg = str(error)

    if "Invalid JSON" in error_msg or "json_invalid" in error_msg:
        # Format: "Invalid JSON: <actual error> [type=json_invalid, ..."
        if "Invalid JSON:" in error_msg:
            parse_error = error_msg.split("Invalid JSON:")[1].split("[type=")[0].strip()
        else:
            parse_error = error_msg

        return ConfigFileInvalidError(file_path, parse_error)

    if isinstance(error, ValidationError):
        errors = error.errors()
        if len(errors) == 1:
            first_error = errors[0]
            field = ".".join(str(loc) for loc in first_error.get('loc', ('unknown',)))
            return ConfigValidationError(
                field=field,
                value=first_error.get('input', None),
                error_msg=first_error.get('msg', 'validation failed'),
                file_path=file_path
            )
        if errors:
            error_lines = []
            for err in errors:
                field = ".".join(str(loc) for loc in err.get('loc', ('unknown',)))
                error_lines.append(f"  - {field}: {err.get('msg', 'validation failed')}")

            combined_msg = f"{len(errors)} validation errors:\n" + "\n".join(error_lines)
            return ConfigValidationError(
                field="multiple fields",
                value=None,
                error_msg=combined_msg,
                file_path=file_path
            )

    return ConfigValidationError(
        field="unknown",
        value=None,
        error_msg=error_msg,
        file_path=file_path
    )


def wrap_ble_error(
    error: Exception,
    *,
    channel: Optional[str] = None,
    connected: bool = True,
    connecting: bool = False,
    device_name: Optional[str] = None,
) -> TransportError:
    """
    Convert low-level Bluetooth errors to HaptiKnit exceptions.

    Args:
        error: The original exception from the BLE stack
        channel: Channel the operation targeted
        connected: Whether the backend still reports a live link
        connecting: True when the error happened while opening the link
        device_name: Device being connected to

    Returns:
        A TransportError subclass with appropriate type and message
    """
    if isinstance(error, TransportError):
        return error

    error_msg = str(error) or type(error).__name__

    if connecting:
        return DeviceConnectionError(error_msg, device_name=device_name)

    lowered = error_msg.lower()
    if not connected or "not connected" in lowered or "disconnected" in lowered:
        return LinkLostError(channel=channel, original_error=error_msg)

    return TransportError(
        user_message=f"Could not send to the device: {error_msg}",
        technical_message=f"BLE operation on channel '{channel}' failed: {error_msg}",
        channel=channel,
    )


def format_error_for_display(error: Exception) -> tuple[str, Optional[str]]:
    """
    Format an exception for user display.

    Args:
        error: The exception to format

    Returns:
        Tuple of (user_message, recovery_hint or None)
    """
    if isinstance(error, HaptiKnitError):
        return error.user_message, error.recovery_hint

    error_type = type(error).__name__
    return f"{error_type}: {error}", None


def collect_errors(operation: str) -> "ErrorCollector":
    """
    Create an error collector for batch operations.

    Use this when you want to attempt multiple operations and collect
    all errors before reporting them.

    Example:
        ```python
        collector = collect_errors("submit pressures")

        for index, value in staged:
            with collector.try_operation(f"send slot {index}"):
                await session.write(Channel.COMMAND, value)

        if collector.has_errors:
            logger.warning(collector.get_summary())
        ```

    Args:
        operation: Description of the overall operation

    Returns:
        ErrorCollector instance
    """
    return ErrorCollector(operation)


class ErrorCollector:
    """
    Collects multiple errors during batch operations.

    Allows operations to continue even if some fail, then
    report all failures at once.
    """

    def __init__(self, operation: str):
        """
        Initialize error collector.

        Args:
            operation: Description of the overall operation
        """
        self.operation = operation
        self.errors: list[tuple[str, Exception]] = []
        self.success_count = 0

    @property
    def has_errors(self) -> bool:
        """Check if any errors were collected."""
        return len(self.errors) > 0

    @property
    def error_count(self) -> int:
        """Get the number of errors collected."""
        return len(self.errors)

    def try_operation(self, sub_operation: str):
        """
        Context manager for a single operation within the batch.

        Args:
            sub_operation: Description of this specific operation

        Returns:
            Context manager that catches and stores errors
        """
        return self._OperationContext(self, sub_operation)

    def get_summary(self) -> str:
        """
        Get a summary of collected errors.

        Returns:
            Multi-line summary string
        """
        if not self.has_errors:
            return f"All operations completed successfully ({self.success_count} total)"

        summary = f"Failed {self.error_count} of {self.error_count + self.success_count} operations:\n"
        for sub_op, error in self.errors:
            if isinstance(error, HaptiKnitError):
                summary += f"  - {sub_op}: {error.user_message}\n"
            else:
                summary += f"  - {sub_op}: {error}\n"

        return summary.rstrip()

    class _OperationContext:
        """Internal context manager for individual operations."""

        def __init__(self, collector: "ErrorCollector", sub_operation: str):
            self.collector = collector
            self.sub_operation = sub_operation

        def __enter__(self):
            return self

        def __exit__(self, exc_type, exc_val, exc_tb):
            if exc_type is None:
                self.collector.success_count += 1
                return False

            # Only application errors are collected; defects propagate
            if not isinstance(exc_val, HaptiKnitError):
                return False

            self.collector.errors.append((self.sub_operation, exc_val.during(self.sub_operation)))
            return True
