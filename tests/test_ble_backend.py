"""Tests for the bleak backend with bleak patched out."""

from types import SimpleNamespace
from unittest.mock import AsyncMock, Mock, patch

import pytest
from bleak.exc import BleakError

from haptiknit.exceptions import DeviceConnectionError
from haptiknit.models import BleConfig
from haptiknit.transport.ble import BleBackend, ScanResult, pick_device, scan

SERVICE = "00002a6a-0000-1000-8000-00805f9b34fb"
COMMAND = "00002a6b-0000-1000-8000-00805f9b34fb"


def make_device(name, address):
    device = Mock()
    device.name = name
    device.address = address
    return device


def make_result(name, address, service_uuids=(), rssi=-60):
    return ScanResult(
        device=make_device(name, address),
        name=name,
        address=address,
        rssi=rssi,
        service_uuids=tuple(service_uuids),
    )


def make_client(service_present=True):
    """BleakClient double exposing one service with the command characteristic."""
    characteristic = Mock(name="command-char")
    service = Mock()
    service.get_characteristic = Mock(side_effect=lambda uuid: characteristic if uuid == COMMAND else None)

    client = Mock()
    client.address = "AA:BB:CC:DD:EE:FF"
    client.is_connected = True
    client.connect = AsyncMock()
    client.disconnect = AsyncMock()
    client.write_gatt_char = AsyncMock()
    client.read_gatt_char = AsyncMock(return_value=bytearray([64]))
    client.services.get_service = Mock(return_value=service if service_present else None)
    client.characteristic = characteristic
    return client


@pytest.mark.unit
class TestPickDevice:
    """Test device selection from scan results."""

    def test_name_match_is_case_insensitive(self):
        results = [make_result("Other", "1"), make_result("portflow8", "2")]
        assert pick_device(results, "PortFlow8", SERVICE).address == "2"

    def test_name_set_but_absent(self):
        results = [make_result("Other", "1", [SERVICE])]
        assert pick_device(results, "PortFlow8", SERVICE) is None

    def test_service_fallback_without_name(self):
        results = [make_result(None, "1"), make_result("Sleeve", "2", [SERVICE])]
        assert pick_device(results, None, SERVICE).address == "2"

    def test_nothing_matches(self):
        assert pick_device([], None, SERVICE) is None


@pytest.mark.unit
@pytest.mark.asyncio
class TestScan:
    """Test scan() result shaping."""

    @patch("haptiknit.transport.ble.BleakScanner")
    async def test_scan_sorts_by_rssi(self, mock_scanner):
        weak = (make_device("Weak", "1"), SimpleNamespace(local_name=None, rssi=-90, service_uuids=[]))
        strong = (
            make_device(None, "2"),
            SimpleNamespace(local_name="PortFlow8", rssi=-40, service_uuids=[SERVICE.upper()]),
        )
        mock_scanner.discover = AsyncMock(return_value={"1": weak, "2": strong})

        results = await scan(3.0)

        mock_scanner.discover.assert_awaited_once_with(timeout=3.0, return_adv=True)
        assert [r.address for r in results] == ["2", "1"]
        assert results[0].name == "PortFlow8"
        assert results[0].offers(SERVICE)
        assert results[1].name == "Weak"


@pytest.mark.unit
@pytest.mark.asyncio
class TestBleBackend:
    """Test BleBackend against a mocked BleakClient."""

    @pytest.fixture
    def config(self):
        return BleConfig(device_name="PortFlow8", scan_timeout=1.0)

    @pytest.fixture
    def client(self):
        return make_client()

    @pytest.fixture
    def backend(self, config, client):
        with patch("haptiknit.transport.ble.scan", AsyncMock(return_value=[make_result("PortFlow8", "AA")])), \
             patch("haptiknit.transport.ble.BleakClient", Mock(return_value=client)):
            yield BleBackend(config)

    async def test_open_connects_to_named_device(self, backend, client):
        device = await backend.open()

        assert device.name == "PortFlow8"
        client.connect.assert_awaited_once()
        assert backend.is_connected

    async def test_open_by_address(self, client):
        config = BleConfig(device_address="AA:BB:CC:DD:EE:FF")
        with patch("haptiknit.transport.ble.BleakScanner") as mock_scanner, \
             patch("haptiknit.transport.ble.BleakClient", Mock(return_value=client)):
            mock_scanner.find_device_by_address = AsyncMock(
                return_value=make_device("PortFlow8", "AA:BB:CC:DD:EE:FF")
            )
            device = await BleBackend(config).open()

        assert device.address == "AA:BB:CC:DD:EE:FF"

    async def test_open_no_device(self, config):
        with patch("haptiknit.transport.ble.scan", AsyncMock(return_value=[])):
            with pytest.raises(DeviceConnectionError) as exc_info:
                await BleBackend(config).open()
        assert exc_info.value.reason == "No matching device found"

    async def test_open_uses_selector(self, config, client):
        results = [make_result("A", "1"), make_result("B", "2")]
        selector = Mock(side_effect=lambda found: found[1])
        with patch("haptiknit.transport.ble.scan", AsyncMock(return_value=results)), \
             patch("haptiknit.transport.ble.BleakClient", Mock(return_value=client)):
            device = await BleBackend(config, device_selector=selector).open()

        selector.assert_called_once_with(results)
        assert device.address == "2"

    async def test_open_missing_service(self, config):
        client = make_client(service_present=False)
        with patch("haptiknit.transport.ble.scan", AsyncMock(return_value=[make_result("PortFlow8", "AA")])), \
             patch("haptiknit.transport.ble.BleakClient", Mock(return_value=client)):
            backend = BleBackend(config)
            with pytest.raises(DeviceConnectionError):
                await backend.open()

        client.disconnect.assert_awaited_once()
        assert not backend.is_connected

    async def test_resolve_write_read(self, backend, client):
        await backend.open()

        handle = await backend.resolve(COMMAND)
        await backend.write(handle, b"\x03")
        value = await backend.read(handle)

        assert handle is client.characteristic
        client.write_gatt_char.assert_awaited_once_with(handle, b"\x03", response=True)
        assert value == b"\x40"

    async def test_resolve_unknown_characteristic(self, backend):
        await backend.open()
        with pytest.raises(LookupError):
            await backend.resolve("00002a6c-0000-1000-8000-00805f9b34fb")

    async def test_io_before_open(self, config):
        backend = BleBackend(config)
        with pytest.raises(BleakError):
            await backend.write(Mock(), b"\x01")
        with pytest.raises(BleakError):
            await backend.read(Mock())

    async def test_unexpected_disconnect_fires_callback(self, backend, client):
        on_lost = Mock()
        backend.set_link_lost_callback(on_lost)
        await backend.open()

        backend._handle_disconnect(client)

        on_lost.assert_called_once()

    async def test_close_does_not_report_link_loss(self, backend, client):
        on_lost = Mock()
        backend.set_link_lost_callback(on_lost)
        await backend.open()
        client.disconnect.side_effect = lambda: backend._handle_disconnect(client)

        await backend.close()

        on_lost.assert_not_called()
        assert not backend.is_connected
