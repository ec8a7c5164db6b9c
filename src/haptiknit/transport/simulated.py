"""In-memory stand-in for a PortFlow8 unit.

Used by ``haptiknit --simulate`` and by the test suite. Every write is
recorded, reads come from a per-characteristic value table, and failures
can be injected on demand.
"""

import asyncio
import logging
from collections.abc import Callable, Iterable
from typing import Any, Optional

from haptiknit.models import BleConfig, Channel

from .backend import DeviceInfo

logger = logging.getLogger(__name__)

DEFAULT_BATTERY_LEVEL = 87


class SimulatedLinkError(OSError):
    """Raised by the simulator for injected failures."""


class SimulatedBackend:
    """
    Transport backend with no hardware behind it.

    Attributes:
        writes: Every successful write as (uuid, payload)
        values: Value returned by read() per characteristic uuid
        open_count: Number of open() calls
        max_in_flight: Highest number of overlapping writes observed
    """

    def __init__(
        self,
        device_name: Optional[str] = "PortFlow8 (simulated)",
        address: str = "00:00:00:00:00:00",
        characteristics: Optional[Iterable[str]] = None,
        latency: float = 0.0,
    ):
        """
        Initialize the simulator.

        Args:
            device_name: Name the simulated device advertises
            address: Simulated device address
            characteristics: UUIDs the device exposes. None exposes any uuid.
            latency: Seconds each write and read takes
        """
        self.device_name = device_name
        self.address = address
        self.characteristics = set(characteristics) if characteristics is not None else None
        self.latency = latency

        self.writes: list[tuple[str, bytes]] = []
        self.values: dict[str, bytes] = {}
        self.open_count = 0
        self.max_in_flight = 0

        self.fail_open: Optional[Exception] = None
        self._fail_next_write: Optional[Exception] = None
        self._in_flight = 0
        self._connected = False
        self._on_link_lost: Optional[Callable[[], None]] = None

    @classmethod
    def from_config(cls, config: BleConfig, **kwargs) -> "SimulatedBackend":
        """Simulate a device exposing exactly the configured characteristics."""
        backend = cls(characteristics=config.active_channels.values(), **kwargs)
        battery_uuid = config.channels.get(Channel.BATTERY)
        if battery_uuid:
            backend.set_value(battery_uuid, DEFAULT_BATTERY_LEVEL)
        return backend

    # =================================================================
    # Test controls
    # =================================================================

    def set_value(self, uuid: str, value: int) -> None:
        """Set the byte returned when reading a characteristic."""
        self.values[uuid] = bytes([value])

    def fail_next_write(self, error: Optional[Exception] = None) -> None:
        """Make the next write raise."""
        self._fail_next_write = error or SimulatedLinkError("Simulated write failure")

    def drop_link(self) -> None:
        """Drop the link as if the device went out of range."""
        self._connected = False
        logger.warning("Simulated link dropped")
        if self._on_link_lost:
            self._on_link_lost()

    @property
    def payloads(self) -> list[int]:
        """First byte of every recorded write, in order."""
        return [data[0] for _, data in self.writes]

    # =================================================================
    # Backend interface
    # =================================================================

    @property
    def is_connected(self) -> bool:
        return self._connected

    def set_link_lost_callback(self, callback: Optional[Callable[[], None]]) -> None:
        self._on_link_lost = callback

    async def open(self) -> DeviceInfo:
        self.open_count += 1
        await asyncio.sleep(self.latency)
        if self.fail_open is not None:
            raise self.fail_open
        self._connected = True
        logger.info(f"Simulated device opened: {self.device_name or self.address}")
        return DeviceInfo(name=self.device_name, address=self.address)

    async def resolve(self, uuid: str) -> Any:
        if self.characteristics is not None and uuid not in self.characteristics:
            raise LookupError(f"Characteristic {uuid} not found")
        return uuid

    async def write(self, handle: Any, data: bytes) -> None:
        self._in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self._in_flight)
        try:
            await asyncio.sleep(self.latency)
            if not self._connected:
                raise SimulatedLinkError("Device disconnected")
            if self._fail_next_write is not None:
                error, self._fail_next_write = self._fail_next_write, None
                raise error
            self.writes.append((handle, bytes(data)))
        finally:
            self._in_flight -= 1

    async def read(self, handle: Any) -> bytes:
        await asyncio.sleep(self.latency)
        if not self._connected:
            raise SimulatedLinkError("Device disconnected")
        return self.values.get(handle, b"\x00")

    async def close(self) -> None:
        self._connected = False
