"""Step executor for redundancy analysis.

Everything here is optional output: any failure is reported as a warning and
the main alignment is left untouched.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from mapcov.constants import (
    REDUNDANCY_ALIGNMENTS,
    REDUNDANCY_COVERAGE_MAP,
    REDUNDANCY_MEAN_COVERAGE,
    REDUNDANCY_STATS,
)
from mapcov.core.pipeline_types import ResultKeys
from mapcov.core.steps.alignment import index_and_sort
from mapcov.core.steps.coverage import estimate_coverage
from mapcov.exceptions import FileFormatError, ValidationError
from mapcov.utils.paths import new_temp_file, with_extension_of

if TYPE_CHECKING:
    from mapcov.core.pipeline import Pipeline


def redundancy(pipeline: Pipeline) -> list[str] | None:
    """Extract redundant alignments, summarize them and measure their coverage."""
    from mapcov.modules.redundancy import RedundancyClassifier
    from mapcov.modules.redundancy_stats import (
        count_mapped_reads,
        redundancy_group_sizes,
        summarize_redundancy,
    )

    alignment = pipeline.state.current_alignment
    pipeline.logger.info("Estimating redundancy")

    summary = RedundancyClassifier(pipeline.output_dir).write_redundant_alignments(alignment)
    if summary is None:
        pipeline.logger.warning("Cannot estimate redundancy, redundancy files will not be reported")
        return None

    redundant = summary.output
    pipeline.ledger.track(redundant, producer="redundancy")
    if summary.records_written == 0:
        pipeline.logger.info("No redundant alignment was found")
        return None

    pipeline._set_result(ResultKeys.REDUNDANT_ALIGNMENT, str(redundant))
    pipeline._set_result(ResultKeys.REDUNDANT_RECORDS, summary.records_written)
    pipeline._set_result(ResultKeys.REDUNDANT_READS, summary.reads_written)
    outputs: list[str] = []

    try:
        sizes = redundancy_group_sizes(redundant)
        stats = summarize_redundancy(sizes.elements(), count_mapped_reads(alignment))
    except (OSError, ValueError, FileFormatError, ValidationError) as e:
        pipeline.logger.warning(f"Cannot compute redundancy statistics: {e}")
        stats = None

    if stats is not None:
        pipeline.logger.info("Writing redundancy stats")
        report = new_temp_file(pipeline.output_dir, "redundancy_", ".stats")
        try:
            stats.write_report(report)
        except OSError as e:
            pipeline.logger.error(f"Cannot write redundancy stats: {e}")
            pipeline.ledger.track(report, producer="redundancy")
        else:
            pipeline.ledger.publish(report, REDUNDANCY_STATS, producer="redundancy")
            pipeline._set_result(ResultKeys.REDUNDANCY_STATS, str(report))
            outputs.append(str(report))

    pipeline.logger.info("Indexing and sorting redundant alignment file")
    sorted_bam, _ = index_and_sort(pipeline, redundant, remove_non_primary=False)
    if sorted_bam is None:
        pipeline.logger.warning(
            "Cannot sort the redundant alignment file, its coverage will not be reported"
        )
        return outputs

    pipeline.ledger.publish(
        sorted_bam, with_extension_of(REDUNDANCY_ALIGNMENTS, sorted_bam), producer="redundancy"
    )
    outputs.append(str(sorted_bam))

    produced = estimate_coverage(
        pipeline, sorted_bam, REDUNDANCY_MEAN_COVERAGE, REDUNDANCY_COVERAGE_MAP
    )
    outputs.extend(str(p) for p in produced.values())
    return outputs
