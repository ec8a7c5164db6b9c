"""Shared pytest fixtures."""

import tempfile
from pathlib import Path
from unittest.mock import Mock

import pytest
import pytest_asyncio

from haptiknit.models import AppConfig, Channel
from haptiknit.orchestration import Dispatcher, Orchestrator
from haptiknit.services import PlacementService, PressureService
from haptiknit.transport import SimulatedBackend, TransportSession


@pytest.fixture
def temp_dir():
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def config():
    """Default application config."""
    return AppConfig()


@pytest.fixture
def command_uuid(config):
    return config.ble.channels[Channel.COMMAND]


@pytest.fixture
def battery_uuid(config):
    return config.ble.channels[Channel.BATTERY]


@pytest.fixture
def placement():
    """Placement service on the default 4x5 grid."""
    return PlacementService()


@pytest.fixture
def pressure(placement):
    """Pressure service following the placement fixture."""
    service = PressureService()
    service.attach_to(placement)
    return service


@pytest.fixture
def backend(config):
    """Simulated PortFlow8 exposing the configured characteristics."""
    return SimulatedBackend.from_config(config.ble)


@pytest.fixture
def session(config, backend):
    """Disconnected transport session over the simulator."""
    return TransportSession.from_config(config, backend)


@pytest_asyncio.fixture
async def connected_session(session):
    """Transport session with the link already open."""
    await session.connect()
    yield session
    await session.disconnect()


@pytest.fixture
def dispatcher(config, session, pressure):
    return Dispatcher(session, config.commands, pressure)


@pytest.fixture
def orchestrator(config, backend):
    """Orchestrator wired to the simulator."""
    return Orchestrator(config, backend=backend)


@pytest.fixture
def observer():
    """Mock observer implementing every console observer protocol."""
    mock = Mock()
    mock.on_placement_event = Mock()
    mock.on_pressure_event = Mock()
    mock.on_connection_event = Mock()
    mock.on_dispatch_event = Mock()
    return mock
