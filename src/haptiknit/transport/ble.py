"""Bluetooth Low Energy backend built on bleak."""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any, Optional

from bleak import BleakClient, BleakScanner
from bleak.backends.device import BLEDevice
from bleak.exc import BleakError

from haptiknit.exceptions import DeviceConnectionError
from haptiknit.models import BleConfig

from .backend import DeviceInfo

logger = logging.getLogger(__name__)


@dataclass(slots=True, frozen=True)
class ScanResult:
    """One advertising device seen during a scan."""

    device: BLEDevice
    name: Optional[str]
    address: str
    rssi: Optional[int] = None
    service_uuids: tuple[str, ...] = field(default_factory=tuple)

    def offers(self, service_uuid: str) -> bool:
        """Check if the advertisement lists a service."""
        return service_uuid.lower() in self.service_uuids


async def scan(timeout: float = 10.0) -> list[ScanResult]:
    """
    Scan for advertising devices.

    Args:
        timeout: Scan duration in seconds

    Returns:
        Results sorted by signal strength, strongest first
    """
    found = await BleakScanner.discover(timeout=timeout, return_adv=True)
    results = [
        ScanResult(
            device=device,
            name=adv.local_name or device.name,
            address=device.address,
            rssi=adv.rssi,
            service_uuids=tuple(uuid.lower() for uuid in adv.service_uuids),
        )
        for device, adv in found.values()
    ]
    results.sort(key=lambda r: r.rssi if r.rssi is not None else -999, reverse=True)
    logger.debug(f"Scan found {len(results)} devices")
    return results


def pick_device(
    results: list[ScanResult], device_name: Optional[str], service_uuid: Optional[str]
) -> Optional[ScanResult]:
    """
    Pick the device to connect to from scan results.

    A name match wins. Without a configured name, the first device
    advertising the service is chosen.
    """
    if device_name:
        wanted = device_name.lower()
        for result in results:
            if result.name and result.name.lower() == wanted:
                return result
        return None

    if service_uuid:
        for result in results:
            if result.offers(service_uuid):
                return result
    return None


class BleBackend:
    """
    BLE link to a single peripheral.

    Device selection order:
        1. ``device_address`` from config, looked up directly
        2. ``device_selector`` callback over scan results, if provided
        3. First device whose advertised name equals ``device_name``
        4. First device advertising ``service_uuid`` when no name is set

    Characteristic handles are resolved inside the configured service.
    """

    def __init__(
        self,
        config: BleConfig,
        device_selector: Optional[Callable[[list[ScanResult]], Optional[ScanResult]]] = None,
    ):
        """
        Initialize the backend.

        Args:
            config: BLE configuration
            device_selector: Optional function to choose a device from scan
                results. If None, selection follows the config.
        """
        self._config = config
        self._device_selector = device_selector
        self._client: Optional[BleakClient] = None
        self._closing = False
        self._on_link_lost: Optional[Callable[[], None]] = None

    @property
    def is_connected(self) -> bool:
        return self._client is not None and self._client.is_connected

    def set_link_lost_callback(self, callback: Optional[Callable[[], None]]) -> None:
        self._on_link_lost = callback

    async def _find_device(self) -> Optional[BLEDevice]:
        config = self._config
        if config.device_address:
            logger.info(f"Looking up device at {config.device_address}")
            return await BleakScanner.find_device_by_address(config.device_address, timeout=config.scan_timeout)

        logger.info(f"Scanning for {config.device_name or config.service_uuid} ({config.scan_timeout}s)")
        results = await scan(config.scan_timeout)
        if self._device_selector:
            chosen = self._device_selector(results)
        else:
            chosen = pick_device(results, config.device_name, config.service_uuid)
        return chosen.device if chosen else None

    async def open(self) -> DeviceInfo:
        if self._client is not None:
            await self.close()

        device = await self._find_device()
        if device is None:
            target = self._config.device_address or self._config.device_name or self._config.service_uuid
            raise DeviceConnectionError("No matching device found", device_name=target)

        client = BleakClient(device, disconnected_callback=self._handle_disconnect)
        await client.connect()
        self._client = client

        if client.services.get_service(self._config.service_uuid) is None:
            await self.close()
            raise DeviceConnectionError(
                f"Service {self._config.service_uuid} not offered", device_name=device.name or device.address
            )

        logger.info(f"Connected to device: {device.name or device.address}")
        return DeviceInfo(name=device.name, address=device.address)

    async def resolve(self, uuid: str) -> Any:
        if self._client is None:
            raise BleakError("Not connected")

        service = self._client.services.get_service(self._config.service_uuid)
        characteristic = service.get_characteristic(uuid) if service else None
        if characteristic is None:
            raise LookupError(f"Characteristic {uuid} not found in service {self._config.service_uuid}")
        return characteristic

    async def write(self, handle: Any, data: bytes) -> None:
        if self._client is None:
            raise BleakError("Not connected")
        await self._client.write_gatt_char(handle, data, response=True)

    async def read(self, handle: Any) -> bytes:
        if self._client is None:
            raise BleakError("Not connected")
        return bytes(await self._client.read_gatt_char(handle))

    async def close(self) -> None:
        client = self._client
        if client is None:
            return

        self._closing = True
        try:
            await client.disconnect()
        finally:
            self._client = None
            self._closing = False

    def _handle_disconnect(self, client: BleakClient) -> None:
        """bleak callback, fired on any disconnect."""
        if self._closing:
            return
        logger.warning(f"Device {client.address} disconnected")
        if self._on_link_lost:
            try:
                self._on_link_lost()
            except Exception as e:
                logger.error(f"Error in link-lost callback: {e}")
