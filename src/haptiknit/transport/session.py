"""Transport session: connection lifecycle and serialized channel I/O."""

import asyncio
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Optional

from haptiknit.exceptions import (
    ChannelNotFoundError,
    EncodingRangeError,
    HaptiKnitError,
    LinkLostError,
    TransportError,
    wrap_ble_error,
)
from haptiknit.model_manager import ObserverManager
from haptiknit.models import Channel, ConnectionState
from haptiknit.protocols import ConnectionEvent, ConnectionObserver

from .backend import DeviceInfo, TransportBackend

if TYPE_CHECKING:
    from haptiknit.models import AppConfig

logger = logging.getLogger(__name__)


@dataclass(slots=True, frozen=True)
class ConnectedSession:
    """Snapshot of an open session: the device and its resolved channels."""

    device: DeviceInfo
    channels: tuple[Channel, ...]

    def has_channel(self, channel: Channel) -> bool:
        return channel in self.channels


def to_channel(channel: Channel | str) -> Channel:
    """
    Coerce a channel name into the closed Channel enumeration.

    Raises:
        ChannelNotFoundError: If the name is not a known channel
    """
    if isinstance(channel, Channel):
        return channel
    try:
        return Channel(channel)
    except ValueError:
        raise ChannelNotFoundError(str(channel)) from None


class TransportSession:
    """
    Owns the connection to one remote device and its named channels.

    State machine::

        DISCONNECTED --connect()--> CONNECTING --ok--> CONNECTED
        CONNECTING --failure--> DISCONNECTED
        CONNECTED --disconnect() / link loss--> DISCONNECTED

    Concurrency:
        Everything runs on one asyncio loop. connect() is guarded by a lock
        so a second caller waits for the outstanding attempt instead of
        prompting again. Writes and reads are serialized per channel; there
        is no retry and no timeout layer above the backend's own.

    Link loss:
        Detected when an operation fails and the backend reports the link
        down, or when the backend fires its link-lost callback. Either way
        the session drops to DISCONNECTED before the error reaches the caller.
    """

    def __init__(self, backend: TransportBackend, channel_uuids: dict[Channel, str | None]):
        """
        Initialize the session.

        Args:
            backend: Concrete link implementation
            channel_uuids: Characteristic UUID per channel. Channels mapped to
                None are inactive placeholders and never resolved.
        """
        self._backend = backend
        self._channel_uuids: dict[Channel, str] = {
            to_channel(channel): uuid for channel, uuid in channel_uuids.items() if uuid
        }
        self._state = ConnectionState.DISCONNECTED
        self._handles: dict[Channel, Any] = {}
        self._session: Optional[ConnectedSession] = None

        self._connect_lock = asyncio.Lock()
        self._channel_locks: dict[Channel, asyncio.Lock] = {channel: asyncio.Lock() for channel in Channel}

        # Last value read per channel
        self.last_values: dict[Channel, int] = {}

        self._observers = ObserverManager[ConnectionObserver](observer_type_name="connection")
        self._backend.set_link_lost_callback(self._on_link_lost)

    @classmethod
    def from_config(cls, config: "AppConfig", backend: Optional[TransportBackend] = None) -> "TransportSession":
        """
        Build a session from the application config.

        Args:
            config: Application configuration
            backend: Backend to use. Defaults to a BLE backend.
        """
        if backend is None:
            from .ble import BleBackend

            backend = BleBackend(config.ble)
        return cls(backend, config.ble.channels)

    # =================================================================
    # State
    # =================================================================

    @property
    def state(self) -> ConnectionState:
        """Current connection state."""
        return self._state

    @property
    def is_connected(self) -> bool:
        """Check if the session is connected."""
        return self._state == ConnectionState.CONNECTED

    @property
    def current(self) -> Optional[ConnectedSession]:
        """The open session, or None when not connected."""
        return self._session

    @property
    def device_name(self) -> Optional[str]:
        """Display name of the connected device."""
        return self._session.device.display_name if self._session else None

    @property
    def channels(self) -> tuple[Channel, ...]:
        """Channels resolved for the current session."""
        return tuple(self._handles)

    def register_observer(self, observer: ConnectionObserver) -> None:
        """Register an observer to receive connection events."""
        self._observers.register(observer)

    def unregister_observer(self, observer: ConnectionObserver) -> None:
        """Unregister an observer."""
        self._observers.unregister(observer)

    def _set_state(self, state: ConnectionState, event: ConnectionEvent, device_name: Optional[str]) -> None:
        self._state = state
        logger.info(f"Connection {event.value}: state={state.value} device={device_name}")
        self._observers.notify("on_connection_event", event, state, device_name)

    # =================================================================
    # Lifecycle
    # =================================================================

    async def connect(self) -> ConnectedSession:
        """
        Select a device, open the link and resolve every configured channel.

        Returns:
            The connected session. When already connected, the current
            session is returned without touching the backend.

        Raises:
            DeviceConnectionError: If selection, link open or channel
                resolution failed. The session is back to DISCONNECTED.
        """
        if self._session is not None and self.is_connected:
            return self._session

        async with self._connect_lock:
            # Another caller may have connected while we waited
            if self._session is not None and self.is_connected:
                logger.debug("connect() while connected - returning current session")
                return self._session

            self._set_state(ConnectionState.CONNECTING, ConnectionEvent.CONNECTING, None)
            device: Optional[DeviceInfo] = None
            try:
                device = await self._backend.open()
                handles: dict[Channel, Any] = {}
                for channel, uuid in self._channel_uuids.items():
                    try:
                        handles[channel] = await self._backend.resolve(uuid)
                    except LookupError as e:
                        raise wrap_ble_error(
                            e, connecting=True, device_name=device.display_name
                        ) from e
                    logger.debug(f"Resolved channel '{channel.value}' -> {uuid}")
            except asyncio.CancelledError:
                await self._close_backend_quietly()
                self._set_state(ConnectionState.DISCONNECTED, ConnectionEvent.CONNECT_FAILED, None)
                raise
            except Exception as e:
                error = e if isinstance(e, HaptiKnitError) else wrap_ble_error(
                    e, connecting=True, device_name=device.display_name if device else None
                )
                logger.error(f"There was an error connecting to the device: {error.technical_message}")
                await self._close_backend_quietly()
                self._set_state(ConnectionState.DISCONNECTED, ConnectionEvent.CONNECT_FAILED, None)
                if error is e:
                    raise
                raise error from e

            self._handles = handles
            self._session = ConnectedSession(device=device, channels=tuple(handles))
            self._set_state(ConnectionState.CONNECTED, ConnectionEvent.CONNECTED, device.display_name)
            logger.info(f"Connected to device: {device.display_name}")
            return self._session

    async def disconnect(self) -> None:
        """Close the link if connected. Never raises."""
        if not self.is_connected:
            logger.info("No device is connected or the device is already disconnected.")
            return

        device_name = self.device_name
        try:
            await self._backend.close()
        except Exception as e:
            logger.error(f"Error closing link to {device_name}: {e}")
        finally:
            self._handles.clear()
            self._session = None
            self._set_state(ConnectionState.DISCONNECTED, ConnectionEvent.DISCONNECTED, device_name)
        logger.info(f"Disconnected from the device: {device_name}")

    async def _close_backend_quietly(self) -> None:
        try:
            await self._backend.close()
        except Exception as e:
            logger.debug(f"Ignoring error while closing failed link: {e}")
        self._handles.clear()
        self._session = None

    def _on_link_lost(self) -> None:
        """Backend reported the link dropped."""
        if not self.is_connected:
            return
        logger.warning(f"Link to {self.device_name} lost")
        self._drop_link()

    def _drop_link(self) -> None:
        device_name = self.device_name
        self._handles.clear()
        self._session = None
        self._set_state(ConnectionState.DISCONNECTED, ConnectionEvent.LINK_LOST, device_name)

    # =================================================================
    # Channel I/O
    # =================================================================

    def _require_connected(self, channel: Channel, operation: str) -> None:
        if not self.is_connected:
            raise TransportError(
                user_message="Not connected to a device",
                technical_message=f"{operation} on '{channel.value}' while {self._state.value}",
                channel=channel.value,
                recovery_hint="Connect to the device first.",
            )

    def _handle_for(self, channel: Channel) -> Any:
        handle = self._handles.get(channel)
        if handle is None:
            raise ChannelNotFoundError(channel.value)
        return handle

    def _failure(self, error: Exception, channel: Channel) -> TransportError:
        """Translate a backend failure, dropping the link if it is gone."""
        wrapped = wrap_ble_error(error, channel=channel.value, connected=self._backend.is_connected)
        logger.error(f"Error on characteristic {channel.value}: {wrapped.technical_message}")
        if isinstance(wrapped, LinkLostError) and self.is_connected:
            self._drop_link()
        return wrapped

    async def write(self, channel: Channel | str, value: int) -> None:
        """
        Send exactly one byte on a channel.

        Args:
            channel: Target channel
            value: Byte value (0-255)

        Raises:
            ChannelNotFoundError: Unknown channel, or not resolved for this session
            TransportError: Not connected, or the transmission failed
            LinkLostError: The link dropped (state is DISCONNECTED on return)
            EncodingRangeError: Value is not a byte
        """
        channel = to_channel(channel)
        self._require_connected(channel, "write")
        if isinstance(value, bool) or not isinstance(value, int) or not 0 <= value <= 255:
            raise EncodingRangeError(value)

        async with self._channel_locks[channel]:
            # The link may have dropped while waiting for the channel
            self._require_connected(channel, "write")
            handle = self._handle_for(channel)
            try:
                await self._backend.write(handle, bytes([value]))
            except Exception as e:
                raise self._failure(e, channel) from e

        logger.info(f"Sent value {value} to characteristic {channel.value}")

    async def read(self, channel: Channel | str) -> int:
        """
        Read one byte from a channel.

        The value is also kept in `last_values[channel]`.

        Raises:
            ChannelNotFoundError: Unknown channel, or not resolved for this session
            TransportError: Not connected, empty value, or the read failed
            LinkLostError: The link dropped (state is DISCONNECTED on return)
        """
        channel = to_channel(channel)
        self._require_connected(channel, "read")

        async with self._channel_locks[channel]:
            self._require_connected(channel, "read")
            handle = self._handle_for(channel)
            try:
                data = await self._backend.read(handle)
            except Exception as e:
                raise self._failure(e, channel) from e

        if not data:
            raise TransportError(
                user_message=f"Device returned no data for '{channel.value}'",
                technical_message=f"Empty read on characteristic {channel.value}",
                channel=channel.value,
            )

        value = data[0]
        self.last_values[channel] = value
        logger.debug(f"Read value {value} from characteristic {channel.value}")
        return value
