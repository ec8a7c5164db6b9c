"""Wire encoding for PortFlow8 commands."""

from .encoder import BYTE_MAX, BYTE_MIN, CommandEncoder

__all__ = ["BYTE_MAX", "BYTE_MIN", "CommandEncoder"]
