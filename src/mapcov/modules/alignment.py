"""Alignment record model and SAM/BAM access (pysam).

Records read here keep a reference to the ``pysam.AlignedSegment`` they came
from, so anything written back goes out with its original encoding.
"""

from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Iterator, Mapping, Optional

import pysam

from mapcov.constants import ALIGNMENT_SCORE_TAG, MATE_SCORE_TAG, NEXT_BEST_SCORE_TAG
from mapcov.exceptions import FileFormatError

SCORE_TAGS = (ALIGNMENT_SCORE_TAG, NEXT_BEST_SCORE_TAG, MATE_SCORE_TAG)


@dataclass(frozen=True)
class AlignmentRecord:
    """One alignment of a read against the reference.

    ``tags`` holds the integer score tags the redundancy classifier uses
    (``AS`` alignment score, ``XS`` next-best score, ``YS`` mate score);
    absent tags are simply missing from the mapping.
    """

    query_name: str
    is_paired: bool = False
    is_read1: bool = False
    is_secondary_or_supplementary: bool = False
    mapping_quality: int = 0
    tags: Mapping[str, Optional[int]] = field(default_factory=dict)
    segment: Any = field(default=None, compare=False, repr=False)

    @property
    def alignment_score(self) -> Optional[int]:
        return self.tags.get(ALIGNMENT_SCORE_TAG)

    @property
    def next_best_score(self) -> Optional[int]:
        return self.tags.get(NEXT_BEST_SCORE_TAG)

    @property
    def mate_score(self) -> Optional[int]:
        return self.tags.get(MATE_SCORE_TAG)

    @classmethod
    def from_segment(cls, segment: pysam.AlignedSegment) -> "AlignmentRecord":
        tags = {tag: segment.get_tag(tag) for tag in SCORE_TAGS if segment.has_tag(tag)}
        return cls(
            query_name=segment.query_name,
            is_paired=segment.is_paired,
            is_read1=segment.is_read1,
            is_secondary_or_supplementary=segment.is_secondary or segment.is_supplementary,
            mapping_quality=segment.mapping_quality,
            tags=tags,
            segment=segment,
        )


def is_bam(path: Path) -> bool:
    return Path(path).suffix.lower() == ".bam"


@contextmanager
def open_alignment(path: Path) -> Iterator[pysam.AlignmentFile]:
    """Open a SAM or BAM file for reading (format is detected from content)."""
    try:
        handle = pysam.AlignmentFile(str(path), "r", check_sq=False)
    except ValueError as e:
        raise FileFormatError(f"Cannot read alignment file {path}: {e}") from e
    try:
        yield handle
    finally:
        handle.close()


@contextmanager
def open_writer(path: Path, template: pysam.AlignmentFile) -> Iterator[pysam.AlignmentFile]:
    """Open ``path`` for writing with the header of ``template``.

    The output format follows the extension: BAM for ``.bam``, SAM with
    header otherwise.
    """
    mode = "wb" if is_bam(path) else "wh"
    handle = pysam.AlignmentFile(str(path), mode, template=template)
    try:
        yield handle
    finally:
        handle.close()


def iter_records(handle: pysam.AlignmentFile) -> Iterator[AlignmentRecord]:
    """Yield every record of an open alignment file in file order."""
    for segment in handle:
        yield AlignmentRecord.from_segment(segment)


def count_mapped_reads(path: Path) -> int:
    """Number of distinct read identifiers with at least one mapped record."""
    names: set[str] = set()
    with open_alignment(path) as handle:
        for segment in handle:
            if not segment.is_unmapped:
                names.add(segment.query_name)
    return len(names)
