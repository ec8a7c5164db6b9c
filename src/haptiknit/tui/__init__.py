"""Textual console for HaptiKnit."""

from .app import HaptiKnitConsole

__all__ = ["HaptiKnitConsole"]
