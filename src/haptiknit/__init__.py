"""HaptiKnit: control console for PortFlow8 pneumatic actuator sleeves."""

__version__ = "0.1.0"
