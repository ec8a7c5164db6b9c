"""Helpers shared by the CLI commands."""

from pathlib import Path
from typing import TYPE_CHECKING, Any, Optional

import click

if TYPE_CHECKING:
    from haptiknit.models import AppConfig
    from haptiknit.transport import TransportBackend


def echo_error(error: Exception, log_path: Optional[Path] = None) -> None:
    """Show an error to the user without a traceback."""
    from haptiknit.exceptions import format_error_for_display

    user_message, recovery_hint = format_error_for_display(error)

    click.echo("\n" + "=" * 70, err=True)
    click.echo(f"ERROR: {user_message}", err=True)
    click.echo("=" * 70, err=True)

    if recovery_hint:
        click.echo(f"\n{recovery_hint}", err=True)
    if log_path:
        click.echo(f"\nFor details, check the log file: {log_path}", err=True)


def config_path(obj: Optional[dict[str, Any]]) -> Path:
    """Get the config file chosen on the command line, or the default."""
    from haptiknit.models import AppConfig

    return (obj or {}).get("config_path") or AppConfig.default_path()


def load_config(obj: Optional[dict[str, Any]], create: bool = False) -> "AppConfig":
    """
    Load the config and apply --device-name / --address overrides.

    Args:
        obj: Click context object filled by the top-level group
        create: Write a default config file when none exists

    Raises:
        ConfigFileInvalidError: If the config file has invalid JSON syntax
        ConfigValidationError: If config values fail validation
    """
    from haptiknit.model_manager import PydanticPersistence
    from haptiknit.models import AppConfig

    obj = obj or {}
    path = config_path(obj)
    if create:
        config_obj = PydanticPersistence.ensure_valid_or_create(path, AppConfig)
    else:
        config_obj = AppConfig.load_or_default(path)

    updates = {}
    if obj.get("device_name"):
        updates["device_name"] = obj["device_name"]
    if obj.get("address"):
        updates["device_address"] = obj["address"]
    if not updates:
        return config_obj
    return config_obj.model_copy(update={"ble": config_obj.ble.model_copy(update=updates)})


def make_backend(obj: Optional[dict[str, Any]], config_obj: "AppConfig") -> Optional["TransportBackend"]:
    """Get the simulated backend when --simulate was given, else None (BLE)."""
    if not (obj or {}).get("simulate"):
        return None

    from haptiknit.transport import SimulatedBackend

    return SimulatedBackend.from_config(config_obj.ble)
