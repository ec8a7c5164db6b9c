"""Transport-related exceptions.

This module defines exceptions raised by the transport session:
- TransportError: Base class, a write or read failed on the link
- DeviceConnectionError: Device selection or channel open failed
- ChannelNotFoundError: A channel was never resolved for this session
- LinkLostError: The link dropped while an operation was in flight
"""

from typing import Optional

from .base import HaptiKnitError


class TransportError(HaptiKnitError):
    """A transmission on the wireless link failed."""

    def __init__(
        self,
        user_message: str = "Could not send to the device",
        technical_message: Optional[str] = None,
        channel: Optional[str] = None,
        recovery_hint: Optional[str] = None,
        **kwargs
    ):
        """
        Initialize transport error.

        Args:
            user_message: Message to show to users
            technical_message: Detailed message for logs
            channel: Name of the channel involved, if any
            recovery_hint: Suggestion for how to fix the issue
        """
        if recovery_hint is None:
            recovery_hint = "Check that the device is powered and in range, then try again."
        kwargs.setdefault("recoverable", True)
        super().__init__(
            user_message=user_message,
            technical_message=technical_message,
            recovery_hint=recovery_hint,
            **kwargs
        )
        self.channel = channel


class DeviceConnectionError(TransportError):
    """Device selection or channel negotiation failed."""

    def __init__(self, reason: str, device_name: Optional[str] = None):
        """
        Initialize device connection error.

        Args:
            reason: Why the connection attempt failed
            device_name: Name or address of the device that was tried
        """
        target = f" to {device_name}" if device_name else ""
        super().__init__(
            user_message=f"Could not connect{target}",
            technical_message=f"Connection{target} failed: {reason}",
            recovery_hint=(
                "Make sure the PortFlow8 board is powered and advertising.\n"
                "Run 'haptiknit ble scan' to see nearby devices."
            ),
        )
        self.reason = reason
        self.device_name = device_name


class ChannelNotFoundError(TransportError):
    """A channel has no resolved handle in the current session."""

    def __init__(self, channel: str):
        """
        Initialize channel not found error.

        Args:
            channel: The channel name that could not be found
        """
        super().__init__(
            user_message=f"Channel '{channel}' is not available",
            technical_message=f"No handle resolved for channel '{channel}'",
            channel=channel,
            recoverable=False,
            recovery_hint=(
                "Connect to the device first. If already connected, check the "
                "characteristic UUIDs in your configuration."
            ),
        )


class LinkLostError(TransportError):
    """The link to the device dropped."""

    def __init__(self, channel: Optional[str] = None, original_error: Optional[str] = None):
        """
        Initialize link lost error.

        Args:
            channel: Channel the failing operation targeted
            original_error: Error reported by the backend
        """
        technical = "Link to device lost"
        if channel:
            technical += f" while using channel '{channel}'"
        if original_error:
            technical += f": {original_error}"
        super().__init__(
            user_message="Connection to the device was lost",
            technical_message=technical,
            channel=channel,
            recovery_hint="Reconnect to the device and repeat the command.",
        )
        self.original_error = original_error
