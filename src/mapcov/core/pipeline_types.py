"""Shared pipeline types.

This module intentionally contains only lightweight dataclasses/constants so it can
be imported by step definitions and the artifact ledger without pulling in the
full pipeline implementation (and the tool wrappers).
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional


class ResultKeys:
    """Canonical keys for pipeline step results to avoid typos."""

    REFERENCE_INDEX = "reference_index"
    REFERENCE_FAI = "reference_fai"
    GC_CONTENT = "gc_content"
    MAPPED_ALIGNMENT = "mapped_alignment"
    READ_LAYOUT = "read_layout"
    FILTERED_ALIGNMENT = "filtered_alignment"
    DEDUP_ALIGNMENT = "dedup_alignment"
    DUPLICATE_METRICS = "duplicate_metrics"
    REDUNDANT_ALIGNMENT = "redundant_alignment"
    REDUNDANT_RECORDS = "redundant_records"
    REDUNDANT_READS = "redundant_reads"
    REDUNDANCY_STATS = "redundancy_stats"
    SORTED_ALIGNMENT = "sorted_alignment"
    ALIGNMENT_INDEX = "alignment_index"
    MEAN_COVERAGE = "mean_coverage"
    COVERAGE_MAP = "coverage_map"
    ARCHIVE_DIR = "archive_dir"


class Lifecycle(str, Enum):
    """What happens to an artifact when the run ends."""

    TEMPORARY = "temporary"
    FINAL = "final"


@dataclass
class Artifact:
    """A file produced by a stage and owned by the artifact ledger."""

    path: Path
    lifecycle: Lifecycle = Lifecycle.TEMPORARY
    published_name: Optional[str] = None
    producer: Optional[str] = None


@dataclass(frozen=True)
class RunFlags:
    """Run switches derived once from the configuration."""

    keep_tmp: bool = False
    quality_cutoff: int = -1
    redundancy: bool = False
    mean_coverage: bool = False
    coverage_map: bool = False
    gc_content: bool = False
    verbose: bool = False

    @property
    def quality_filter(self) -> bool:
        return self.quality_cutoff >= 0

    @property
    def coverage(self) -> bool:
        return self.mean_coverage or self.coverage_map


@dataclass
class PipelineStep:
    """Represents a pipeline step."""

    name: str
    description: str
    display_name: Optional[str] = None
    # RunFlags attribute that must be true for the step to run
    enabled_by: Optional[str] = None


@dataclass
class StepMetadata:
    """Metadata for a pipeline step execution."""

    step_name: str
    start_time: float
    end_time: Optional[float] = None
    duration: Optional[float] = None
    status: str = "running"  # running, completed, failed, skipped
    error_message: Optional[str] = None
    output_files: List[str] = field(default_factory=list)


@dataclass
class PipelineState:
    """Per-run execution state; nothing survives the run."""

    completed_steps: List[str] = field(default_factory=list)
    current_step: Optional[str] = None
    failed_step: Optional[str] = None
    current_alignment: Optional[Path] = None
    reference_fai: Optional[Path] = None
    results: Dict[str, Any] = field(default_factory=dict)
    step_metadata: Dict[str, StepMetadata] = field(default_factory=dict)
    pipeline_start_time: Optional[float] = None

    def add_step_metadata(self, step_name: str, **kwargs) -> None:
        """Add or update step metadata."""
        if step_name not in self.step_metadata:
            self.step_metadata[step_name] = StepMetadata(
                step_name=step_name, start_time=time.time()
            )

        metadata = self.step_metadata[step_name]
        for key, value in kwargs.items():
            if hasattr(metadata, key):
                setattr(metadata, key, value)

    def complete_step(self, step_name: str, output_files: List[str] | None = None) -> None:
        """Mark step as completed and calculate duration."""
        if step_name in self.step_metadata:
            metadata = self.step_metadata[step_name]
            metadata.end_time = time.time()
            metadata.duration = metadata.end_time - metadata.start_time
            metadata.status = "completed"
            if output_files:
                metadata.output_files = output_files

        if step_name not in self.completed_steps:
            self.completed_steps.append(step_name)

    def skip_step(self, step_name: str) -> None:
        self.add_step_metadata(step_name, status="skipped")

    def fail_step(self, step_name: str, error_message: str) -> None:
        """Mark step as failed."""
        if step_name in self.step_metadata:
            metadata = self.step_metadata[step_name]
            metadata.end_time = time.time()
            metadata.duration = metadata.end_time - metadata.start_time
            metadata.status = "failed"
            metadata.error_message = error_message

        self.failed_step = step_name

    def get_total_runtime(self) -> Optional[float]:
        """Get total pipeline runtime so far."""
        if not self.pipeline_start_time:
            return None
        return time.time() - self.pipeline_start_time
