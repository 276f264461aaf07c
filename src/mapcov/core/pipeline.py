"""Main pipeline orchestrator for mapcov"""

from __future__ import annotations

import time
from pathlib import Path
from typing import Any, Optional

from mapcov.config import Config
from mapcov.exceptions import MapCovError, PipelineError
from mapcov.external import BedTools, Bowtie2, Picard, Samtools
from mapcov.utils.logging import LogTemplates, get_logger
from mapcov.core.ledger import ArtifactLedger
from mapcov.core.pipeline_types import (
    PipelineState,
    PipelineStep,
    ResultKeys,
    RunFlags,
)
from mapcov.core.steps.definitions import PIPELINE_STEPS

# Step execution lives in `mapcov.core.steps.*` and is imported lazily by
# wrapper methods on `Pipeline` to keep imports light.


class Pipeline:
    """Runs the mapping and coverage stages for one set of reads.

    Tool wrappers are created from the configuration unless given; a missing
    executable raises ``DependencyError`` here, before anything runs.
    """

    # Canonical step ordering and user-facing metadata.
    STEPS = PIPELINE_STEPS

    state: PipelineState
    ledger: ArtifactLedger
    flags: RunFlags

    def __init__(
        self,
        config: Config,
        bowtie2: Optional[Bowtie2] = None,
        samtools: Optional[Samtools] = None,
        picard: Optional[Picard] = None,
        bedtools: Optional[BedTools] = None,
    ):
        self.config = config
        self.logger = get_logger(self.__class__.__name__)
        self.flags = config.run_flags()
        self.output_dir = Path(config.output_dir)
        self.output_dir.mkdir(parents=True, exist_ok=True)

        self.state = PipelineState()
        self.ledger = ArtifactLedger(self.output_dir)

        tools = config.tools
        common: dict[str, Any] = {
            "output_dir": self.output_dir,
            "verbose": self.flags.verbose,
            "threads": config.threads,
        }
        self.bowtie2 = bowtie2 or Bowtie2(
            force_rebuild=bool(tools.bowtie2.get("force_rebuild", False)), **common
        )
        self.samtools = samtools or Samtools(**common)
        self.picard = picard or Picard(command=tools.picard.get("command"), **common)
        if bedtools is None and self.flags.coverage:
            bedtools = BedTools(**common)
        self.bedtools = bedtools

    @property
    def map_options(self) -> list[str]:
        return [str(o) for o in self.config.tools.bowtie2.get("map_options", [])]

    def _set_result(self, key: str, value: Any) -> None:
        self.state.results[key] = value

    def _get_result(self, key: str, default: Any = None) -> Any:
        return self.state.results.get(key, default)

    def _is_enabled(self, step: PipelineStep) -> bool:
        return step.enabled_by is None or bool(getattr(self.flags, step.enabled_by))

    def show_steps(self, detailed: bool = False) -> None:
        """Print the step list with the status of this run."""
        import click

        click.echo("mapcov pipeline steps:")
        click.echo("=" * 70)

        name_width = max(
            (len(s.display_name or s.name) for s in self.STEPS),
            default=0,
        )
        name_width = max(name_width, 16)
        idx_width = len(str(len(self.STEPS)))

        for i, step in enumerate(self.STEPS, 1):
            step_label = step.display_name or step.name
            if step.name in self.state.completed_steps:
                status = "✓"
            elif step.name == self.state.current_step:
                status = "◉"
            elif step.name == self.state.failed_step:
                status = "✗"
            elif not self._is_enabled(step):
                status = "-"
            else:
                status = "○"

            click.echo(
                f"{status} Step {i:{idx_width}d}: {step_label:<{name_width}} - {step.description}"
            )

            if detailed and step.name in self.state.step_metadata:
                meta = self.state.step_metadata[step.name]
                if meta.duration:
                    click.echo(f"    Duration: {meta.duration:.1f}s")
                if meta.error_message:
                    click.echo(f"    Error: {meta.error_message}")
                if meta.output_files:
                    click.echo(f"    Output files: {len(meta.output_files)} files")

        click.echo("=" * 70)

        if detailed and self.state.pipeline_start_time:
            total_time = self.state.get_total_runtime()
            if total_time:
                click.echo(f"Total runtime: {total_time:.1f}s")

    def run(self) -> dict[str, Any]:
        """Run every enabled step, then settle the artifact ledger.

        The ledger is finalized exactly once whatever happens; a fatal stage
        surfaces as ``PipelineError`` after cleanup.
        """
        self.state.pipeline_start_time = time.time()
        total_steps = len(self.STEPS)

        try:
            for step_number, step in enumerate(self.STEPS, 1):
                step_label = step.display_name or step.name

                if not self._is_enabled(step):
                    self.logger.debug(
                        LogTemplates.STEP_SKIPPED.format(step_name=step_label, reason="not requested")
                    )
                    self.state.skip_step(step.name)
                    continue

                self.logger.info(
                    LogTemplates.STEP_START.format(
                        step_number=step_number, total=total_steps, step_name=step_label
                    )
                )
                self.state.current_step = step.name
                self.state.add_step_metadata(step.name)

                step_start_time = time.time()
                try:
                    output_files = self._execute_step(step)
                except Exception as e:
                    error_msg = str(e)
                    self.state.fail_step(step.name, error_msg)
                    self.state.current_step = None
                    self.logger.critical(
                        LogTemplates.STEP_FAILURE.format(step_name=step_label, error=error_msg)
                    )
                    if isinstance(e, MapCovError):
                        raise
                    raise PipelineError(f"Pipeline failed at step {step.name}: {error_msg}") from e

                self.state.complete_step(step.name, output_files or [])
                self.state.current_step = None
                self.logger.info(
                    LogTemplates.STEP_SUCCESS.format(
                        step_name=step_label, duration=time.time() - step_start_time
                    )
                )
        finally:
            self._finalize_outputs()

        self.logger.info("Pipeline completed successfully")
        return self.state.results

    def _finalize_outputs(self) -> None:
        """Delete or archive temporaries and rename published results."""
        published = self.ledger.published
        archive = self.ledger.finalize(keep=self.flags.keep_tmp)
        if archive is not None:
            self._set_result(ResultKeys.ARCHIVE_DIR, str(archive))
        self._set_result(
            "published",
            {name: str(path.parent / name) for path, name in published.items()},
        )

    def _execute_step(self, step: PipelineStep) -> Optional[list[str]]:
        """Execute a pipeline step and return output files."""
        method_name = f"_step_{step.name}"
        if not hasattr(self, method_name):
            raise PipelineError(f"Step implementation not found: {method_name}")

        result = getattr(self, method_name)()
        if isinstance(result, list):
            return result
        return None

    # ===================== STEP IMPLEMENTATIONS =====================

    def _step_build_index(self) -> None:
        from mapcov.core.steps.reference import build_index

        build_index(self)

    def _step_faidx(self) -> Optional[list[str]]:
        from mapcov.core.steps.reference import faidx

        return faidx(self)

    def _step_gc_content(self) -> Optional[list[str]]:
        from mapcov.core.steps.reference import gc_content

        return gc_content(self)

    def _step_map_reads(self) -> list[str]:
        from mapcov.core.steps.mapping import map_reads

        return map_reads(self)

    def _step_quality_filter(self) -> Optional[list[str]]:
        from mapcov.core.steps.alignment import quality_filter

        return quality_filter(self)

    def _step_remove_duplicates(self) -> Optional[list[str]]:
        from mapcov.core.steps.alignment import remove_duplicates

        return remove_duplicates(self)

    def _step_redundancy(self) -> Optional[list[str]]:
        """Redundancy analysis of the deduplicated alignment."""
        from mapcov.core.steps.redundancy import redundancy

        return redundancy(self)

    def _step_sort_and_index(self) -> list[str]:
        from mapcov.core.steps.alignment import sort_and_index

        return sort_and_index(self)

    def _step_coverage(self) -> list[str]:
        from mapcov.core.steps.coverage import coverage

        return coverage(self)
