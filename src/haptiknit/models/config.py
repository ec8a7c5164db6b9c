"""Application configuration model."""

from pathlib import Path

from pydantic import BaseModel, Field, field_validator

from haptiknit.model_manager.persistence import PydanticPersistence

from .enums import Channel, CommandKind, DropPolicy, EncodingMode
from .grid import DEFAULT_COLS, DEFAULT_ROWS
from .pressure import MAX_PRESSURE_KPA

DEFAULT_CONFIG_DIR = Path.home() / ".haptiknit"


def _default_channels() -> dict[Channel, str | None]:
    """Characteristic UUIDs flashed on the PortFlow8 firmware."""
    return {
        Channel.COMMAND: "00002a6b-0000-1000-8000-00805f9b34fb",
        Channel.BATTERY: "00002a6f-0000-1000-8000-00805f9b34fb",
        # Present in firmware but not wired up yet
        Channel.MIN_PRESSURE: None,
        Channel.MAX_PRESSURE: None,
        Channel.PRESSURE: None,
    }


def _default_encodings() -> dict[CommandKind, EncodingMode]:
    return {
        CommandKind.SELECT: EncodingMode.OFFSET,
        CommandKind.PRESSURE: EncodingMode.DIRECT,
        CommandKind.STOP_ALL: EncodingMode.DIRECT,
        CommandKind.INFLATE_ALL: EncodingMode.DIRECT,
    }


class BleConfig(BaseModel):
    """Bluetooth Low Energy discovery and GATT settings."""

    device_name: str | None = Field(
        default="PortFlow8",
        description="Advertised name to connect to (None = first device offering the service)",
    )
    device_address: str | None = Field(
        default=None, description="Device address; takes precedence over device_name"
    )
    scan_timeout: float = Field(default=10.0, gt=0, description="Discovery timeout in seconds")
    service_uuid: str = Field(
        default="00002a6a-0000-1000-8000-00805f9b34fb", description="Primary GATT service UUID"
    )
    channels: dict[Channel, str | None] = Field(
        default_factory=_default_channels,
        description="Characteristic UUID per channel (None = inactive placeholder)",
    )

    @property
    def active_channels(self) -> dict[Channel, str]:
        """Get the channels that have a characteristic UUID."""
        return {channel: uuid for channel, uuid in self.channels.items() if uuid}


class CommandConfig(BaseModel):
    """Reserved command values and per-site encoding modes."""

    stop_all_value: int = Field(default=100, description="Command value that deflates all actuators")
    inflate_all_value: int = Field(default=11, description="Command value that inflates all actuators")
    encodings: dict[CommandKind, EncodingMode] = Field(
        default_factory=_default_encodings, description="Encoding mode per dispatch site"
    )

    def mode_for(self, kind: CommandKind) -> EncodingMode:
        """Get the encoding mode for a dispatch site (direct if unset)."""
        return self.encodings.get(kind, EncodingMode.DIRECT)


class AppConfig(BaseModel):
    """Application configuration and settings."""

    ble: BleConfig = Field(default_factory=BleConfig, description="Bluetooth settings")
    commands: CommandConfig = Field(default_factory=CommandConfig, description="Command protocol")

    # Layout
    grid_rows: int = Field(default=DEFAULT_ROWS, ge=1, le=16, description="Placement grid rows")
    grid_cols: int = Field(default=DEFAULT_COLS, ge=1, le=16, description="Placement grid columns")
    drop_policy: DropPolicy = Field(
        default=DropPolicy.OVERWRITE,
        description="Dropping an unplaced actuator onto an occupied cell: overwrite, evict or reject",
    )

    # Pressure submission
    include_first_slot: bool = Field(
        default=False,
        description="Send the first actuator's setpoint on submit (the PortFlow8 console skips it)",
    )
    max_pressure_kpa: int = Field(
        default=MAX_PRESSURE_KPA, ge=0, le=MAX_PRESSURE_KPA, description="Largest accepted setpoint"
    )

    @field_validator("commands")
    @classmethod
    def validate_command_values(cls, v: CommandConfig) -> CommandConfig:
        """Ensure reserved command values are bytes before any encoding."""
        for name in ("stop_all_value", "inflate_all_value"):
            value = getattr(v, name)
            if not 0 <= value <= 255:
                raise ValueError(f"{name} must be 0-255, got {value}")
        return v

    @staticmethod
    def default_path() -> Path:
        """Get the default config file location."""
        return DEFAULT_CONFIG_DIR / "config.json"

    @classmethod
    def load_or_default(cls, path: Path | None = None) -> "AppConfig":
        """
        Load config from file or return default.

        Args:
            path: Path to config file. If None, uses ~/.haptiknit/config.json.

        Raises:
            ConfigFileInvalidError: If config file has invalid JSON syntax
            ConfigValidationError: If config values fail validation
        """
        if path is None:
            path = cls.default_path()
        return PydanticPersistence.load_json_or_default(path, cls)

    def save(self, path: Path | None = None) -> None:
        """Save config to file."""
        if path is None:
            path = self.default_path()
        PydanticPersistence.save_json(self, path)
