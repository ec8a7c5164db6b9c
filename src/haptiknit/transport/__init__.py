"""Wireless transport: session state machine and link backends."""

from .backend import DeviceInfo, TransportBackend
from .session import ConnectedSession, TransportSession, to_channel
from .simulated import SimulatedBackend, SimulatedLinkError

__all__ = [
    "ConnectedSession",
    "DeviceInfo",
    "SimulatedBackend",
    "SimulatedLinkError",
    "TransportBackend",
    "TransportSession",
    "to_channel",
]
