"""Tests for pipeline_types module."""

from pathlib import Path
import dataclasses
import sys

import pytest

ROOT = Path(__file__).resolve().parents[2]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from mapcov.core.pipeline_types import (
    Lifecycle,
    PipelineState,
    ResultKeys,
    RunFlags,
)
from mapcov.core.steps.definitions import PIPELINE_STEPS


class TestResultKeys:

    def test_no_duplicate_values(self):
        values = [getattr(ResultKeys, attr) for attr in dir(ResultKeys) if not attr.startswith("_")]
        assert all(isinstance(v, str) for v in values)
        assert len(values) == len(set(values))


class TestRunFlags:

    def test_frozen(self):
        flags = RunFlags()
        with pytest.raises(dataclasses.FrozenInstanceError):
            flags.redundancy = True

    def test_quality_filter_threshold(self):
        assert not RunFlags(quality_cutoff=-1).quality_filter
        assert RunFlags(quality_cutoff=0).quality_filter

    def test_coverage_needs_either_output(self):
        assert not RunFlags().coverage
        assert RunFlags(mean_coverage=True).coverage
        assert RunFlags(coverage_map=True).coverage


class TestStepDefinitions:

    def test_order(self):
        names = [step.name for step in PIPELINE_STEPS]
        assert names == [
            "build_index",
            "faidx",
            "gc_content",
            "map_reads",
            "quality_filter",
            "remove_duplicates",
            "redundancy",
            "sort_and_index",
            "coverage",
        ]

    def test_enabled_by_names_a_run_flag(self):
        flags = RunFlags()
        for step in PIPELINE_STEPS:
            if step.enabled_by is not None:
                assert isinstance(getattr(flags, step.enabled_by), bool)


class TestPipelineState:

    def test_step_lifecycle(self):
        state = PipelineState()
        state.add_step_metadata("map_reads")
        state.complete_step("map_reads", ["mapped.sam"])
        assert state.completed_steps == ["map_reads"]
        meta = state.step_metadata["map_reads"]
        assert meta.status == "completed"
        assert meta.output_files == ["mapped.sam"]
        assert meta.duration is not None and meta.duration >= 0

    def test_failed_step(self):
        state = PipelineState()
        state.add_step_metadata("sort_and_index")
        state.fail_step("sort_and_index", "Cannot sort")
        assert state.failed_step == "sort_and_index"
        meta = state.step_metadata["sort_and_index"]
        assert meta.status == "failed"
        assert meta.error_message == "Cannot sort"

    def test_skipped_step(self):
        state = PipelineState()
        state.skip_step("coverage")
        assert state.step_metadata["coverage"].status == "skipped"
        assert "coverage" not in state.completed_steps

    def test_runtime_needs_start(self):
        assert PipelineState().get_total_runtime() is None


def test_lifecycle_values():
    assert Lifecycle("temporary") is Lifecycle.TEMPORARY
    assert Lifecycle.FINAL.value == "final"
