"""Shared pipeline execution helpers for the CLI."""

from __future__ import annotations

import logging
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

import click

from mapcov.config import Config, load_config, save_config
from mapcov.cli.exit_codes import EXIT_ERROR, EXIT_USAGE
from mapcov.exceptions import ConfigurationError
from mapcov.utils.logging import setup_logging

LOG_LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
}


@dataclass
class PipelineOptions:
    """Container for pipeline execution options.

    ``None`` (or ``False`` for flags) means "not given on the command line",
    so the configuration file or the default applies.
    """

    forward: Optional[Path] = None
    reverse: Optional[Path] = None
    single: Optional[Path] = None
    reference: Optional[Path] = None
    output: Optional[Path] = None
    config_path: Optional[Path] = None
    threads: Optional[int] = None
    keep_tmp: bool = False
    filter_qual: Optional[int] = None
    redundancy: bool = False
    mean_cov: bool = False
    cov_map: bool = False
    gc_count: bool = False
    verbose: int = 0
    log_file: Optional[Path] = None
    show_steps: bool = False

    @classmethod
    def from_params(cls, params: dict[str, Any]) -> "PipelineOptions":
        """Build from click parameters (``config`` maps to ``config_path``)."""
        values = dict(params)
        values["config_path"] = values.pop("config", None)
        return cls(**values)


def show_pipeline_steps() -> None:
    """Show pipeline steps without creating directories (lightweight mode)."""
    from mapcov.core.pipeline import Pipeline

    # Use Pipeline's class-level STEPS directly to avoid instantiation side effects
    click.echo("\nmapcov pipeline steps:")
    click.echo("-" * 40)
    for i, step in enumerate(Pipeline.STEPS, 1):
        display_name = step.display_name or step.name
        optional = "" if step.enabled_by is None else f" (--{_FLAG_OPTIONS[step.enabled_by]})"
        click.echo(f"  {i:2d}. {display_name:<20} - {step.description}{optional}")
    click.echo("-" * 40)
    click.echo(f"Total: {len(Pipeline.STEPS)} steps\n")


# RunFlags attribute -> command line option enabling it
_FLAG_OPTIONS = {
    "gc_content": "gc-count",
    "quality_filter": "filter-qual",
    "redundancy": "redundancy",
    "coverage": "mean-cov/--cov-map",
}


def build_config(opts: PipelineOptions) -> Config:
    """Merge defaults, the configuration file and command line options."""
    cfg = load_config(opts.config_path) if opts.config_path else Config()

    for name in ("forward", "reverse", "single", "reference"):
        value = getattr(opts, name)
        if value is not None:
            setattr(cfg, name, value)

    if opts.output is not None:
        cfg.output_dir = opts.output
    if opts.threads is not None:
        cfg.threads = opts.threads
    if opts.keep_tmp:
        cfg.keep_tmp = True
    if opts.log_file is not None:
        cfg.runtime.log_file = opts.log_file
    if opts.verbose >= 1:
        cfg.runtime.verbose = True
    if opts.verbose >= 2:
        cfg.runtime.log_level = "DEBUG"

    analysis = cfg.analysis
    if opts.filter_qual is not None:
        analysis.quality_cutoff = opts.filter_qual
    if opts.redundancy:
        analysis.redundancy = True
    if opts.mean_cov:
        analysis.mean_coverage = True
    if opts.cov_map:
        analysis.coverage_map = True
    if opts.gc_count:
        analysis.gc_content = True

    return cfg


def execute_pipeline(
    opts: PipelineOptions,
    logger: logging.Logger,
) -> dict[str, Any]:
    """
    Execute the mapcov pipeline with given options.

    This is the unified execution function used by both the top-level command and `run`.
    Returns the pipeline results; fatal stage failures propagate as
    ``PipelineError``.
    """
    # Handle show_steps early - no side effects
    if opts.show_steps:
        show_pipeline_steps()
        return {}

    try:
        cfg = build_config(opts)
    except ConfigurationError as exc:
        click.echo(f"Error: {exc}", err=True)
        sys.exit(EXIT_ERROR)

    level = LOG_LEVELS.get(str(cfg.runtime.log_level).upper(), logging.INFO)
    setup_logging(level=level, log_file=cfg.runtime.log_file)

    if cfg.reference is None:
        click.echo("Error: a reference (-r) is required to run the pipeline", err=True)
        click.echo("It can be given on the command line or in a config file (-c)", err=True)
        sys.exit(EXIT_USAGE)

    # Validate configuration FIRST (fail fast on user errors like missing files)
    try:
        cfg.validate()
    except ConfigurationError as exc:
        click.echo(f"Error: {exc}", err=True)
        sys.exit(EXIT_USAGE)

    # Import pipeline here to avoid circular imports
    from mapcov.core.pipeline import Pipeline

    pipeline = Pipeline(cfg)

    try:
        save_config(cfg, pipeline.output_dir / "mapcov.config.yaml")
    except OSError as exc:
        logger.warning(f"Could not save config: {exc}")

    logger.info(f"Reference: {cfg.reference}")
    logger.info(f"Reads: {cfg.read_layout()}")
    logger.info(f"Output directory: {pipeline.output_dir.absolute()}")
    logger.info(f"Using {cfg.threads} threads")

    results = pipeline.run()

    for name, path in sorted(results.get("published", {}).items()):
        logger.info(f"Result: {name} -> {path}")
    return results
