"""Main CLI entry point."""

import logging
import logging.handlers
import sys
from pathlib import Path
from typing import Optional

import click

from haptiknit import __version__

from .commands import ble_group, config
from .context import echo_error, load_config, make_backend

logger = logging.getLogger(__name__)

LOG_DIR = Path.home() / ".haptiknit" / "logs"


def resolve_log_path(debug: bool, log_file: Optional[Path]) -> Path:
    """Get the file the application logs to."""
    if log_file:
        return log_file
    if debug:
        return Path.cwd() / "haptiknit-debug.log"
    return LOG_DIR / "haptiknit.log"


def setup_logging(verbose: int, debug: bool, log_file: Optional[Path], log_level: str) -> Path:
    """
    Configure logging for the application.

    Args:
        verbose: Verbosity count (0 = WARNING, 1 = INFO, 2+ = DEBUG)
        debug: If True, enable debug mode with file logging
        log_file: Custom log file path (optional)
        log_level: Log level for file logging (DEBUG/INFO/WARNING/ERROR)

    Returns:
        Path of the log file
    """
    # Determine log level based on flags
    if debug or verbose >= 2:
        level = logging.DEBUG
    elif verbose == 1:
        level = logging.INFO
    else:
        level = logging.WARNING

    # Override with explicit log level if provided
    if log_file:
        level = getattr(logging, log_level.upper())

    log_path = resolve_log_path(debug, log_file)
    log_path.parent.mkdir(parents=True, exist_ok=True)

    formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    # Create rotating file handler (keeps last 5 files, max 10MB each)
    file_handler = logging.handlers.RotatingFileHandler(
        log_path,
        maxBytes=10 * 1024 * 1024,  # 10MB
        backupCount=5
    )
    file_handler.setLevel(level)
    file_handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.addHandler(file_handler)

    logger.info(f"Logging configured: level={logging.getLevelName(level)}, file={log_path}")
    return log_path


@click.group(invoke_without_command=True)
@click.pass_context
@click.version_option(version=__version__, prog_name="haptiknit")
@click.option(
    '--config',
    'config_path',
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help='Config file (default: ~/.haptiknit/config.json)'
)
@click.option(
    '--simulate',
    is_flag=True,
    help='Use a simulated PortFlow8 instead of Bluetooth'
)
@click.option(
    '--device-name',
    type=str,
    default=None,
    help='Advertised device name to connect to (overrides config)'
)
@click.option(
    '--address',
    type=str,
    default=None,
    help='Device address to connect to (overrides config)'
)
@click.option(
    '-v', '--verbose',
    count=True,
    help='Increase verbosity (-v: INFO, -vv: DEBUG)'
)
@click.option(
    '--debug',
    is_flag=True,
    help='Enable debug mode (DEBUG level, logs to ./haptiknit-debug.log)'
)
@click.option(
    '--log-file',
    type=click.Path(path_type=Path),
    default=None,
    help='Custom log file path'
)
@click.option(
    '--log-level',
    type=click.Choice(['DEBUG', 'INFO', 'WARNING', 'ERROR'], case_sensitive=False),
    default='INFO',
    help='Log level for file logging (default: INFO)'
)
def cli(
    ctx,
    config_path: Optional[Path],
    simulate: bool,
    device_name: Optional[str],
    address: Optional[str],
    verbose: int,
    debug: bool,
    log_file: Optional[Path],
    log_level: str
):
    """
    HaptiKnit - control console for the PortFlow8 pneumatic actuator sleeve.

    The console provides two modes:

    \b
    - Arrange Mode (default): choose how many actuators, place them on the grid
    - Fire Mode: click an actuator to inflate it

    Switch modes with A (arrange) or F (fire). Press C to connect,
    ESC to stop everything.

    \b
    Examples:
      # Launch the console
      haptiknit

      # Try the console without hardware
      haptiknit --simulate

      # Connect to a specific board
      haptiknit --address AA:BB:CC:DD:EE:FF

      # List nearby devices
      haptiknit ble scan

      # Deflate everything from the shell
      haptiknit ble stop
    """
    ctx.ensure_object(dict)
    ctx.obj.update(
        config_path=config_path,
        simulate=simulate,
        device_name=device_name,
        address=address,
    )

    # If a subcommand was invoked, don't run the app
    if ctx.invoked_subcommand is not None:
        return

    # Lazy imports so subcommands don't load textual
    from haptiknit.orchestration import Orchestrator
    from haptiknit.tui import HaptiKnitConsole

    # TUI owns stdout, so we log to files
    log_path = setup_logging(verbose, debug, log_file, log_level)
    logger.info("Starting HaptiKnit console")

    try:
        config_obj = load_config(ctx.obj, create=True)
        orchestrator = Orchestrator(config=config_obj, backend=make_backend(ctx.obj, config_obj))
        HaptiKnitConsole(orchestrator=orchestrator).run()

    except KeyboardInterrupt:
        logger.info("Application interrupted by user")
        click.echo("\nShutting down...", err=True)
    except click.Abort:
        raise
    except Exception as e:
        logger.exception("Error running application")
        echo_error(e, log_path)
        click.echo("For logging options, run: haptiknit --help", err=True)
        sys.exit(1)


# Register utility commands
cli.add_command(ble_group)
cli.add_command(config)

if __name__ == "__main__":
    cli()
