"""Configuration command implementations."""

import sys

import click

from haptiknit.exceptions import HaptiKnitError
from haptiknit.models import AppConfig

from ..context import config_path, echo_error, load_config


@click.group(name="config")
def config():
    """Show or create the HaptiKnit configuration."""
    pass


@config.command(name="show")
@click.option("--field", "-f", type=str, default=None, help="Show a single top-level field")
@click.pass_obj
def show(obj: dict, field: str | None):
    """Display the effective configuration."""
    try:
        config_obj = load_config(obj)
    except HaptiKnitError as e:
        echo_error(e)
        sys.exit(1)

    if field is None:
        click.echo(config_obj.model_dump_json(indent=2))
        return

    if field not in AppConfig.model_fields:
        click.echo(f"Unknown field '{field}'. Available: {', '.join(AppConfig.model_fields)}", err=True)
        sys.exit(1)

    value = getattr(config_obj, field)
    if hasattr(value, "model_dump_json"):
        click.echo(value.model_dump_json(indent=2))
    else:
        click.echo(f"{field}: {value.value if hasattr(value, 'value') else value}")


@config.command(name="path")
@click.pass_obj
def path(obj: dict):
    """Print the config file location."""
    click.echo(str(config_path(obj)))


@config.command(name="init")
@click.option("--force", is_flag=True, help="Overwrite an existing config file")
@click.pass_obj
def init(obj: dict, force: bool):
    """Write a default config file."""
    target = config_path(obj)
    if target.exists() and not force:
        click.echo(f"Config already exists: {target} (use --force to overwrite)", err=True)
        sys.exit(1)

    try:
        AppConfig().save(target)
    except HaptiKnitError as e:
        echo_error(e)
        sys.exit(1)
    click.echo(f"Wrote default config to {target}")
