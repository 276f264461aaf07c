"""Installation validation command."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Optional

import click

from mapcov import __version__
from mapcov.cli.exit_codes import EXIT_ERROR


@click.command()
@click.option(
    "--modules-only",
    is_flag=True,
    help="Only check Python modules, not the external tools",
)
@click.option(
    "-c",
    "--config",
    type=click.Path(exists=True, path_type=Path),
    help="Configuration file whose Picard command is checked",
)
def validate(modules_only: bool, config: Optional[Path]) -> None:
    """Validate mapcov installation and dependencies."""
    from mapcov.config import Config, load_config
    from mapcov.utils.validators import validate_installation

    click.echo("Validating mapcov installation...")

    cfg = load_config(config) if config else Config()
    issues = validate_installation(
        check_tools=not modules_only,
        picard_command=cfg.tools.picard.get("command"),
    )

    if not issues:
        click.echo("✓ All checks passed!")
        click.echo(f"  mapcov version: {__version__}")
    else:
        click.echo("✗ Issues found:")
        for issue in issues:
            click.echo(f"  - {issue}")
        sys.exit(EXIT_ERROR)
