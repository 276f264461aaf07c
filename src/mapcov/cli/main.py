"""Click application entrypoint for mapcov."""

from __future__ import annotations

import signal
import sys
from types import FrameType
from typing import Any, Optional

import click

from mapcov import __version__
from mapcov.cli.exit_codes import (
    EXIT_SUCCESS,
    EXIT_ERROR,
    EXIT_SIGINT,
    EXIT_SIGTERM,
)
from mapcov.exceptions import MapCovError
from mapcov.utils.logging import get_logger, setup_logging

from .commands.config import init_config
from .commands.validate import validate
from .common_options import common_pipeline_options
from .pipeline import PipelineOptions, execute_pipeline


class Terminated(KeyboardInterrupt):
    """SIGTERM received."""


def _handle_signal(signum: int, frame: Optional[FrameType]) -> None:
    """Handle interrupt signals for graceful shutdown."""
    sig_name = "SIGINT" if signum == signal.SIGINT else "SIGTERM"
    click.echo(f"\n{sig_name} received, initiating graceful shutdown...", err=True)
    # Unwinds through Pipeline.run, whose finally block cleans up
    if signum == signal.SIGTERM:
        raise Terminated(f"{sig_name} received")
    raise KeyboardInterrupt(f"{sig_name} received")


def _print_version(ctx: click.Context, _param: click.Parameter, value: bool) -> None:
    if value and not ctx.resilient_parsing:
        click.echo(f"mapcov {__version__}")
        ctx.exit()


def _run(params: dict[str, Any]) -> None:
    """Run the pipeline and turn failures into exit codes."""
    setup_logging()
    logger = get_logger("cli")
    try:
        execute_pipeline(PipelineOptions.from_params(params), logger)
    except Terminated:
        logger.info("Pipeline terminated")
        sys.exit(EXIT_SIGTERM)
    except KeyboardInterrupt:
        logger.info("Pipeline interrupted by user")
        sys.exit(EXIT_SIGINT)
    except MapCovError as exc:
        logger.error(f"Pipeline error: {exc}")
        sys.exit(EXIT_ERROR)
    except Exception as exc:
        logger.exception(f"Unexpected error: {exc}")
        sys.exit(EXIT_ERROR)


@click.group(
    context_settings=dict(help_option_names=["-h", "--help"]),
    invoke_without_command=True,
)
# Version option (use -V to avoid conflict with -v/--verbose)
@click.option(
    "-V",
    "--version",
    is_flag=True,
    is_eager=True,
    expose_value=False,
    callback=_print_version,
    help="Show the version and exit.",
)
@common_pipeline_options
@click.pass_context
def cli(ctx: click.Context, **params: Any) -> None:
    """mapcov: map reads, clean alignments and estimate coverage and redundancy.

    Run directly as: mapcov -r <ref.fa> -1 <R1.fq> -2 <R2.fq> [options]
    """
    # If a subcommand was invoked, do not run the pipeline here
    if ctx.invoked_subcommand:
        return
    _run(params)


@cli.command(name="run")
@common_pipeline_options
def run(**params: Any) -> None:
    """Run the pipeline (same options as the top-level command)."""
    _run(params)


cli.add_command(init_config)
cli.add_command(validate)


def main(argv: list[str] | None = None) -> int:
    """Main entry point with signal handling."""
    # Set up signal handlers for graceful shutdown
    signal.signal(signal.SIGINT, _handle_signal)
    signal.signal(signal.SIGTERM, _handle_signal)

    try:
        cli(argv)
        return EXIT_SUCCESS
    except Terminated:
        return EXIT_SIGTERM
    except KeyboardInterrupt:
        return EXIT_SIGINT
    except SystemExit as exc:
        # Preserve explicit exit codes from cli()
        if exc.code is None:
            return EXIT_SUCCESS
        return exc.code if isinstance(exc.code, int) else EXIT_ERROR
    except Exception as exc:
        click.echo(f"Error: {exc}", err=True)
        return EXIT_ERROR


if __name__ == "__main__":
    sys.exit(main())
