"""Step executor for coverage estimation."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

from mapcov.constants import COVERAGE_MAP, MEAN_COVERAGE
from mapcov.core.pipeline_types import ResultKeys

if TYPE_CHECKING:
    from mapcov.core.pipeline import Pipeline


def estimate_coverage(
    pipeline: Pipeline, bam: Path, mean_name: str, map_name: str
) -> dict[str, Path]:
    """Run the enabled coverage analyses on ``bam`` and publish their results.

    Returns the produced files keyed by published name; failures are logged
    and simply missing from the result.
    """
    from mapcov.modules.coverage import mean_coverage_per_contig

    produced: dict[str, Path] = {}

    if pipeline.flags.mean_coverage:
        pipeline.logger.info(f"Estimating mean coverage of {bam.name}")
        histogram = pipeline.bedtools.genome_coverage(bam)
        mean = None
        if histogram is not None:
            pipeline.ledger.track(histogram, producer="bedtools genomecov")
            mean = mean_coverage_per_contig(histogram, pipeline.output_dir)
        if mean is None:
            pipeline.logger.warning(f"Cannot estimate mean coverage, {mean_name} will not be reported")
        else:
            pipeline.ledger.publish(mean, mean_name, producer="coverage")
            produced[mean_name] = mean

    if pipeline.flags.coverage_map:
        pipeline.logger.info(f"Estimating per-base coverage of {bam.name}")
        per_base = pipeline.bedtools.genome_coverage_per_base(bam)
        if per_base is None:
            pipeline.logger.warning(f"Cannot estimate coverage map, {map_name} will not be reported")
        else:
            pipeline.ledger.publish(per_base, map_name, producer="coverage")
            produced[map_name] = per_base

    return produced


def coverage(pipeline: Pipeline) -> list[str]:
    """Coverage of the clean alignment."""
    produced = estimate_coverage(
        pipeline, pipeline.state.current_alignment, MEAN_COVERAGE, COVERAGE_MAP
    )
    if MEAN_COVERAGE in produced:
        pipeline._set_result(ResultKeys.MEAN_COVERAGE, str(produced[MEAN_COVERAGE]))
    if COVERAGE_MAP in produced:
        pipeline._set_result(ResultKeys.COVERAGE_MAP, str(produced[COVERAGE_MAP]))
    return [str(p) for p in produced.values()]
