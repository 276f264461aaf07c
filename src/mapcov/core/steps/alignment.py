"""Step executors that refine the working alignment."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Optional

from mapcov.constants import CLEAN_ALIGNMENT, DUPLICATE_METRICS, NON_PRIMARY_FLAGS
from mapcov.core.pipeline_types import ResultKeys
from mapcov.exceptions import PipelineError
from mapcov.utils.logging import LogTemplates
from mapcov.utils.paths import with_extension_of

if TYPE_CHECKING:
    from mapcov.core.pipeline import Pipeline


def quality_filter(pipeline: Pipeline) -> list[str] | None:
    """Drop alignments below the mapping quality cutoff."""
    from mapcov.modules.quality_filter import filter_low_quality_records

    cutoff = pipeline.flags.quality_cutoff
    pipeline.logger.info(f"Filtering out alignments with MAPQ < {cutoff}")
    filtered = filter_low_quality_records(
        pipeline.state.current_alignment, cutoff, pipeline.output_dir
    )
    if filtered is None:
        pipeline.logger.warning(
            LogTemplates.STAGE_DEGRADED.format(
                what="Quality filtering failed", fallback="the unfiltered alignment"
            )
        )
        return None

    pipeline.ledger.track(filtered, producer="quality_filter")
    pipeline.state.current_alignment = filtered
    pipeline._set_result(ResultKeys.FILTERED_ALIGNMENT, str(filtered))
    return [str(filtered)]


def remove_duplicates(pipeline: Pipeline) -> list[str] | None:
    """Remove duplicate reads; metrics are reported only on success."""
    pipeline.logger.info("Removing duplicates")
    result = pipeline.picard.mark_duplicates(pipeline.state.current_alignment)
    if result is None:
        pipeline.logger.warning(
            LogTemplates.STAGE_DEGRADED.format(
                what="Duplicates could not be removed", fallback="the alignment with duplicates"
            )
        )
        return None

    dedup, metrics = result
    pipeline.ledger.track(dedup, producer="remove_duplicates")
    pipeline.ledger.publish(metrics, DUPLICATE_METRICS, producer="remove_duplicates")
    pipeline.state.current_alignment = dedup
    pipeline._set_result(ResultKeys.DEDUP_ALIGNMENT, str(dedup))
    pipeline._set_result(ResultKeys.DUPLICATE_METRICS, str(metrics))
    return [str(dedup), str(metrics)]


def index_and_sort(
    pipeline: Pipeline, alignment: Path, remove_non_primary: bool
) -> tuple[Optional[Path], Optional[Path]]:
    """Convert to BAM, sort by reference coordinate and index.

    Conversion and indexing failures are tolerated. Returns the sorted BAM and
    its index; the BAM is None when sorting failed and the caller decides
    whether that is fatal.
    """
    if remove_non_primary:
        pipeline.logger.info("Removing secondary and supplementary alignments")
        options = ["-F", NON_PRIMARY_FLAGS]
    else:
        options = []

    viewed = pipeline.samtools.view(
        alignment, fai_index=pipeline.state.reference_fai, options=options
    )
    if viewed is None:
        what = (
            "Cannot remove non-primary alignments, coverage could be overestimated"
            if remove_non_primary
            else "Cannot convert the alignment to BAM"
        )
        pipeline.logger.warning(
            LogTemplates.STAGE_DEGRADED.format(what=what, fallback="the unconverted alignment")
        )
        source = alignment
    else:
        pipeline.ledger.track(viewed, producer="samtools view")
        source = viewed

    pipeline.logger.info("Sorting and indexing")
    sorted_bam = pipeline.samtools.sort(source)
    if sorted_bam is None:
        return None, None

    bai = pipeline.samtools.index(sorted_bam)
    if bai is None:
        pipeline.logger.warning(
            LogTemplates.STAGE_DEGRADED.format(
                what="Cannot index the sorted alignment", fallback="an unindexed alignment"
            )
        )
    else:
        pipeline.ledger.track(bai, producer="samtools index")
    return sorted_bam, bai


def sort_and_index(pipeline: Pipeline) -> list[str]:
    """Produce the clean, coordinate-sorted alignment."""
    sorted_bam, bai = index_and_sort(pipeline, pipeline.state.current_alignment, True)
    if sorted_bam is None:
        raise PipelineError("Cannot sort alignments, see the samtools log for details")

    pipeline.ledger.publish(
        sorted_bam, with_extension_of(CLEAN_ALIGNMENT, sorted_bam), producer="sort_and_index"
    )
    pipeline.state.current_alignment = sorted_bam
    pipeline._set_result(ResultKeys.SORTED_ALIGNMENT, str(sorted_bam))
    if bai is not None:
        pipeline._set_result(ResultKeys.ALIGNMENT_INDEX, str(bai))
    return [str(sorted_bam)]
