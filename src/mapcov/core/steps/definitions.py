"""Canonical step ordering and user-facing metadata."""

from __future__ import annotations

from mapcov.core.pipeline_types import PipelineStep


# `enabled_by` names a RunFlags attribute; the step is skipped when it is false.
# Only build_index, map_reads and sort_and_index can end a run.
PIPELINE_STEPS: list[PipelineStep] = [
    PipelineStep(
        "build_index",
        "Build or reuse the bowtie2 reference database",
    ),
    PipelineStep(
        "faidx",
        "Index the reference FASTA (samtools faidx)",
    ),
    PipelineStep(
        "gc_content",
        "Report GC content per reference sequence",
        enabled_by="gc_content",
    ),
    PipelineStep(
        "map_reads",
        "Map reads with bowtie2",
    ),
    PipelineStep(
        "quality_filter",
        "Remove alignments below the mapping quality cutoff",
        enabled_by="quality_filter",
    ),
    PipelineStep(
        "remove_duplicates",
        "Remove duplicate reads (Picard MarkDuplicates)",
    ),
    PipelineStep(
        "redundancy",
        "Extract and summarize redundant alignments",
        enabled_by="redundancy",
    ),
    PipelineStep(
        "sort_and_index",
        "Drop non-primary alignments, sort and index",
        display_name="clean_alignment",
    ),
    PipelineStep(
        "coverage",
        "Compute mean and per-base coverage (bedtools)",
        enabled_by="coverage",
    ),
]
