"""Shared Click options for mapcov CLI commands.

This module defines reusable Click option decorators to ensure consistency
between the main CLI command and the `run` subcommand.
"""

from __future__ import annotations

from pathlib import Path
from typing import Callable, TypeVar

import click

F = TypeVar("F", bound=Callable[..., None])


def reads_options(func: F) -> F:
    """Read input options: mate files and/or unpaired reads."""
    func = click.option(
        "-s",
        "--single",
        type=click.Path(exists=True, dir_okay=False, path_type=Path),
        help="Single-end reads (FASTQ)",
    )(func)
    func = click.option(
        "-2",
        "--reverse",
        type=click.Path(exists=True, dir_okay=False, path_type=Path),
        help="Reverse reads of a paired-end run (FASTQ)",
    )(func)
    func = click.option(
        "-1",
        "--forward",
        type=click.Path(exists=True, dir_okay=False, path_type=Path),
        help="Forward reads of a paired-end run (FASTQ)",
    )(func)
    return func


def reference_option(func: F) -> F:
    """Reference genome option."""
    return click.option(
        "-r",
        "--reference",
        type=click.Path(exists=True, dir_okay=False, path_type=Path),
        help="Reference genome FASTA file",
    )(func)


def output_option(func: F) -> F:
    """Output directory option."""
    return click.option(
        "-o",
        "--output",
        type=click.Path(file_okay=False, path_type=Path),
        default=None,
        help="Output directory [default: current directory]",
    )(func)


def config_option(func: F) -> F:
    """Configuration file option."""
    return click.option(
        "-c",
        "--config",
        type=click.Path(exists=True, path_type=Path),
        help="Configuration file (YAML)",
    )(func)


def threads_option(func: F) -> F:
    """Threads option."""
    return click.option(
        "-t",
        "--threads",
        type=click.IntRange(min=1),
        default=None,
        help="Number of threads [default: 1]",
    )(func)


def keep_tmp_option(func: F) -> F:
    """Keep temporary files option."""
    return click.option(
        "-k",
        "--keep-tmp",
        is_flag=True,
        help="Move temporary files into a tmp* directory instead of deleting them",
    )(func)


def analysis_options(func: F) -> F:
    """Optional analyses."""
    decorators = [
        click.option(
            "-f",
            "--filter-qual",
            type=click.IntRange(min=0),
            default=None,
            help="Remove alignments with mapping quality below this value",
        ),
        click.option(
            "-d",
            "--redundancy",
            is_flag=True,
            help="Extract redundant alignments and report redundancy statistics",
        ),
        click.option(
            "-m",
            "--mean-cov",
            is_flag=True,
            help="Report the mean coverage of every reference sequence",
        ),
        click.option(
            "--cov-map",
            is_flag=True,
            help="Report the per-base coverage map",
        ),
        click.option(
            "-g",
            "--gc-count",
            is_flag=True,
            help="Report the GC content of every reference sequence",
        ),
    ]
    for decorator in reversed(decorators):
        func = decorator(func)
    return func


def verbose_option(func: F) -> F:
    """Verbosity option (unified: use -v/--verbose everywhere)."""
    return click.option(
        "-v",
        "--verbose",
        count=True,
        help="Echo external tool output (-v); also log debug messages (-vv)",
    )(func)


def log_file_option(func: F) -> F:
    return click.option(
        "--log-file",
        type=click.Path(dir_okay=False, path_type=Path),
        help="Path for log file output",
    )(func)


def show_steps_option(func: F) -> F:
    return click.option(
        "--show-steps",
        is_flag=True,
        help="Show pipeline steps and exit",
    )(func)


def common_pipeline_options(func: F) -> F:
    """Apply all common pipeline options to a command.

    This decorator applies the standard set of options used by both
    the main CLI command and the `run` subcommand.
    """
    # Apply options in reverse order (Click applies them bottom-up)
    decorators = [
        reads_options,
        reference_option,
        output_option,
        config_option,
        threads_option,
        keep_tmp_option,
        analysis_options,
        verbose_option,
        log_file_option,
        show_steps_option,
    ]
    for decorator in reversed(decorators):
        func = decorator(func)
    return func
