"""Main entry point for haptiknit."""

from haptiknit.cli.main import cli

if __name__ == "__main__":
    cli()
