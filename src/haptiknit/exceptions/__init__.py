"""
Custom exception hierarchy for HaptiKnit.

This module defines application-specific exceptions that provide:
- Clear error categories (transport, placement, encoding, configuration)
- User-friendly messages
- Context preservation
- Recovery hints

## Exception Hierarchy

```
HaptiKnitError (base)
├── TransportError
│   ├── DeviceConnectionError
│   ├── ChannelNotFoundError
│   └── LinkLostError
├── EncodingRangeError
├── PlacementError
│   ├── AlreadyConfiguredError
│   └── CellOccupiedError
├── OutOfRangeError
└── ConfigurationError
    ├── ConfigFileInvalidError
    └── ConfigValidationError
```

## Usage

### Example: Actuator count already chosen

```python
from haptiknit.exceptions import AlreadyConfiguredError

raise AlreadyConfiguredError(selected_count=3)

# User sees: "You already have 3 actuators selected. Reset to choose a different number."
# Recovery hint: "Press RESET to clear the layout and pick again."
```

### Example: Pressure out of range

```python
from haptiknit.exceptions import OutOfRangeError

raise OutOfRangeError(index=2, value=300)

# User sees: "Value cannot exceed 255 kPa"
```

See `haptiknit.exceptions.handlers` for utilities to handle these exceptions systematically.
"""

from .base import HaptiKnitError
from .commands import (
    AlreadyConfiguredError,
    CellOccupiedError,
    EncodingRangeError,
    OutOfRangeError,
    PlacementError,
)
from .config import ConfigFileInvalidError, ConfigurationError, ConfigValidationError
from .handlers import (
    ErrorCollector,
    ErrorContext,
    collect_errors,
    format_error_for_display,
    handle_errors,
    wrap_ble_error,
    wrap_pydantic_error,
)
from .transport import ChannelNotFoundError, DeviceConnectionError, LinkLostError, TransportError

__all__ = [
    # Commands
    "AlreadyConfiguredError",
    "CellOccupiedError",
    "EncodingRangeError",
    "OutOfRangeError",
    "PlacementError",
    # Config
    "ConfigFileInvalidError",
    "ConfigValidationError",
    "ConfigurationError",
    # Base
    "HaptiKnitError",
    # Handlers
    "ErrorCollector",
    "ErrorContext",
    "collect_errors",
    "format_error_for_display",
    "handle_errors",
    "wrap_ble_error",
    "wrap_pydantic_error",
    # Transport
    "ChannelNotFoundError",
    "DeviceConnectionError",
    "LinkLostError",
    "TransportError",
]
