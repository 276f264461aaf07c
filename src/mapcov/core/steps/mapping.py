"""Step executor for read mapping."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Optional, Sequence

from mapcov.core.pipeline_types import ResultKeys
from mapcov.exceptions import PipelineError
from mapcov.utils.logging import LogTemplates

if TYPE_CHECKING:
    from mapcov.core.pipeline import Pipeline


def _map_both(pipeline: Pipeline, options: Sequence[str]) -> Optional[Path]:
    """Map single-end and paired-end reads and merge what succeeded.

    One failed mapping degrades to the other; a failed merge degrades to the
    paired-end alignment.
    """
    config = pipeline.config
    single = pipeline.bowtie2.map_single_end(config.single, options)
    paired = pipeline.bowtie2.map_paired_end(config.forward, config.reverse, options)

    if single is None and paired is None:
        return None
    if single is None:
        pipeline.logger.warning(
            LogTemplates.STAGE_DEGRADED.format(
                what="Single-end mapping failed", fallback="the paired-end alignment only"
            )
        )
        return paired
    if paired is None:
        pipeline.logger.warning(
            LogTemplates.STAGE_DEGRADED.format(
                what="Paired-end mapping failed", fallback="the single-end alignment only"
            )
        )
        return single

    pipeline.logger.info("Merging single-end and paired-end alignments")
    merged = pipeline.picard.merge_maps(single, paired)
    pipeline.ledger.track(single, producer="map_reads")
    if merged is None:
        pipeline.logger.warning(
            LogTemplates.STAGE_DEGRADED.format(
                what="Cannot merge alignments", fallback="the paired-end alignment only"
            )
        )
        return paired

    pipeline.ledger.track(paired, producer="map_reads")
    return merged


def map_reads(pipeline: Pipeline) -> list[str]:
    """Map the configured reads against the bowtie2 database."""
    config = pipeline.config
    layout = config.read_layout()
    options = pipeline.map_options
    pipeline._set_result(ResultKeys.READ_LAYOUT, layout)

    if layout == "single":
        pipeline.logger.info("Mapping single-end reads")
        alignment = pipeline.bowtie2.map_single_end(config.single, options)
    elif layout == "paired":
        pipeline.logger.info("Mapping paired-end reads")
        alignment = pipeline.bowtie2.map_paired_end(config.forward, config.reverse, options)
    else:
        pipeline.logger.info("Mapping single-end and paired-end reads")
        alignment = _map_both(pipeline, options)

    if alignment is None:
        raise PipelineError("Read mapping failed, see the bowtie2 log for details")

    pipeline.ledger.track(alignment, producer="map_reads")
    pipeline.state.current_alignment = alignment
    pipeline._set_result(ResultKeys.MAPPED_ALIGNMENT, str(alignment))
    return [str(alignment)]
