"""Bluetooth command implementations."""

import asyncio
import logging
import sys
from collections.abc import Awaitable, Callable

import click

from haptiknit.codec import CommandEncoder
from haptiknit.exceptions import HaptiKnitError
from haptiknit.models import Channel, EncodingMode
from haptiknit.orchestration import DispatchResult, Orchestrator

from ..context import echo_error, load_config, make_backend

logger = logging.getLogger(__name__)


def run_one_shot(obj: dict, action: Callable[[Orchestrator], Awaitable[DispatchResult]]) -> DispatchResult:
    """
    Connect, run one device action, disconnect.

    Exits with status 1 on any failure.
    """

    async def _run() -> DispatchResult:
        orchestrator = Orchestrator(config_obj, backend=make_backend(obj, config_obj))
        try:
            session = await orchestrator.connect()
            click.echo(f"Connected to {session.device.display_name}")
            return await action(orchestrator)
        finally:
            await orchestrator.shutdown()

    try:
        config_obj = load_config(obj)
        result = asyncio.run(_run())
    except HaptiKnitError as e:
        echo_error(e)
        sys.exit(1)

    if result.error is not None:
        echo_error(result.error)
        sys.exit(1)
    return result


@click.group(name="ble")
def ble_group():
    """Bluetooth device commands."""
    pass


@ble_group.command(name="scan")
@click.option("--timeout", "-t", type=float, default=5.0, show_default=True, help="Scan duration in seconds")
@click.pass_obj
def scan_devices(obj: dict, timeout: float):
    """List nearby Bluetooth devices."""
    if (obj or {}).get("simulate"):
        click.echo("Simulated devices:\n")
        click.echo("  [0] PortFlow8 (simulated)  00:00:00:00:00:00")
        return

    from haptiknit.transport.ble import scan

    config_obj = load_config(obj)
    click.echo(f"Scanning for {timeout:g}s...\n")
    try:
        results = asyncio.run(scan(timeout))
    except Exception as e:
        logger.exception("Scan failed")
        click.echo(f"Scan failed: {e}", err=True)
        sys.exit(1)

    if not results:
        click.echo("  No devices found.")
        return

    for i, result in enumerate(results):
        marker = " *" if result.offers(config_obj.ble.service_uuid) else ""
        rssi = f"{result.rssi} dBm" if result.rssi is not None else "n/a"
        click.echo(f"  [{i}] {result.name or '(unnamed)'}  {result.address}  {rssi}{marker}")

    click.echo("\n* advertises the PortFlow8 service")


@ble_group.command(name="send")
@click.argument("value", type=int)
@click.option(
    "--mode",
    type=click.Choice([m.value for m in EncodingMode], case_sensitive=False),
    default=EncodingMode.DIRECT.value,
    show_default=True,
    help="Encoding applied before sending",
)
@click.pass_obj
def send(obj: dict, value: int, mode: str):
    """Send one raw command VALUE to the device."""
    encoding = EncodingMode(mode.lower())

    async def action(orchestrator: Orchestrator) -> DispatchResult:
        try:
            payload = CommandEncoder.encode(value, encoding)
            await orchestrator.session.write(Channel.COMMAND, payload)
        except HaptiKnitError as e:
            return DispatchResult(kind=None, channel=Channel.COMMAND, value=value, error=e)
        return DispatchResult(kind=None, channel=Channel.COMMAND, value=value, payload=payload)

    result = run_one_shot(obj, action)
    click.echo(f"Sent {result.value} (payload {result.payload})")


@ble_group.command(name="stop")
@click.pass_obj
def stop(obj: dict):
    """Deflate every actuator."""
    result = run_one_shot(obj, lambda orchestrator: orchestrator.stop_all())
    click.echo(f"Stop-all sent (payload {result.payload})")


@ble_group.command(name="inflate")
@click.pass_obj
def inflate(obj: dict):
    """Inflate every actuator."""
    result = run_one_shot(obj, lambda orchestrator: orchestrator.inflate_all())
    click.echo(f"Inflate-all sent (payload {result.payload})")


@ble_group.command(name="battery")
@click.pass_obj
def battery(obj: dict):
    """Read the battery level."""
    result = run_one_shot(obj, lambda orchestrator: orchestrator.read_battery())
    click.echo(f"Battery: {result.value}")
