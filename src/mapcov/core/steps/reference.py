"""Step executors for reference preparation."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

from mapcov.constants import GC_CONTENT
from mapcov.core.pipeline_types import ResultKeys
from mapcov.exceptions import PipelineError
from mapcov.utils.logging import LogTemplates

if TYPE_CHECKING:
    from mapcov.core.pipeline import Pipeline


def build_index(pipeline: Pipeline) -> None:
    """Build the bowtie2 database; without it nothing can be mapped."""
    reference = pipeline.config.reference
    if not pipeline.bowtie2.build_reference(reference):
        raise PipelineError(f"Cannot build bowtie2 database for {reference}")
    pipeline._set_result(ResultKeys.REFERENCE_INDEX, str(reference))


def faidx(pipeline: Pipeline) -> list[str] | None:
    """Index the reference FASTA for samtools view."""
    reference = pipeline.config.reference
    preexisting = Path(f"{reference}.fai").exists()

    fai = pipeline.samtools.faidx(reference)
    if fai is None:
        pipeline.logger.warning(
            LogTemplates.STAGE_DEGRADED.format(
                what="Cannot index the reference FASTA",
                fallback="conversions without reference lengths",
            )
        )
        return None

    pipeline.state.reference_fai = fai
    # an index the user already had is not ours to delete
    if not preexisting:
        pipeline.ledger.track(fai, producer="faidx")
    pipeline._set_result(ResultKeys.REFERENCE_FAI, str(fai))
    return [str(fai)]


def gc_content(pipeline: Pipeline) -> list[str] | None:
    """Report GC content of every reference sequence."""
    from mapcov.modules.gc_content import write_gc_content

    pipeline.logger.info("Calculating GC content for reference sequences")
    output = write_gc_content(pipeline.config.reference, pipeline.output_dir)
    if output is None:
        pipeline.logger.warning("GC content could not be computed and will not be reported")
        return None

    pipeline.ledger.publish(output, GC_CONTENT, producer="gc_content")
    pipeline._set_result(ResultKeys.GC_CONTENT, str(output))
    return [str(output)]
