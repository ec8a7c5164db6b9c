"""Transport backend protocol.

A backend is the concrete link (BLE, simulator) underneath a
TransportSession. It knows how to pick a device, open the link, turn a
characteristic UUID into a handle and move bytes. It knows nothing about
channels, connection state or encoding.
"""

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Optional, Protocol, runtime_checkable


@dataclass(slots=True, frozen=True)
class DeviceInfo:
    """Identity of the device a backend opened."""

    name: Optional[str]
    address: str

    @property
    def display_name(self) -> str:
        """Name if advertised, otherwise the address."""
        return self.name or self.address


@runtime_checkable
class TransportBackend(Protocol):
    """
    Low-level link to one remote device.

    All I/O methods are coroutines. Implementations raise their own
    library exceptions; the session translates them.
    """

    @property
    def is_connected(self) -> bool:
        """Whether the link is currently up."""
        ...

    async def open(self) -> DeviceInfo:
        """Select a device and open the link to it."""
        ...

    async def resolve(self, uuid: str) -> Any:
        """
        Resolve a characteristic UUID into a handle usable by write/read.

        Raises:
            LookupError: If the device does not expose the characteristic
        """
        ...

    async def write(self, handle: Any, data: bytes) -> None:
        """Write raw bytes to a resolved handle."""
        ...

    async def read(self, handle: Any) -> bytes:
        """Read the current value of a resolved handle."""
        ...

    async def close(self) -> None:
        """Close the link."""
        ...

    def set_link_lost_callback(self, callback: Optional[Callable[[], None]]) -> None:
        """Register a callback fired when the link drops without a close()."""
        ...
