"""Command-line interface for mapcov."""

from mapcov.cli.main import cli, main

__all__ = ["cli", "main"]
