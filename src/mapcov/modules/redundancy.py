"""Redundant (multi-mapped) alignment detection.

An alignment is redundant when the read has several equally good placements
on the reference. Following the bowtie2 scoring tags, for every read the
candidate alignments are ranked and the best one is used as reference:

1. records without an ``AS`` tag are ignored (unaligned or unscored);
2. records are batched by read identifier; the input must keep the records
   of one read contiguous (bowtie2 output and queryname-sorted files do);
3. a batch is split into unpaired, first-of-pair and second-of-pair groups,
   each evaluated on its own and only when it has at least two records;
4. the group is ranked best first by primary status, mapping quality, ``AS``,
   ``XS`` and ``YS``;
5. the group is redundant only if the best record has ``XS == AS``;
6. redundant records are those sharing the best ``AS`` (and the best ``YS``
   when the best record carries one). A single survivor is not redundant.
"""

from __future__ import annotations

from dataclasses import dataclass
from itertools import groupby
from pathlib import Path
from typing import Iterable, Iterator, Optional

from mapcov.exceptions import FileFormatError, ValidationError
from mapcov.modules.alignment import (
    AlignmentRecord,
    iter_records,
    open_alignment,
    open_writer,
)
from mapcov.utils.logging import get_logger
from mapcov.utils.paths import alignment_extension, new_temp_file, remove_if_exists

logger = get_logger(__name__.split(".", 1)[-1])

MIN_CANDIDATES = 2


def _tag_rank(value: Optional[int]) -> tuple[bool, int]:
    # a missing tag ranks below any present value
    return (value is not None, value if value is not None else 0)


def rank_key(record: AlignmentRecord) -> tuple:
    """Sort key; larger means a better candidate."""
    return (
        not record.is_secondary_or_supplementary,
        record.mapping_quality,
        _tag_rank(record.alignment_score),
        _tag_rank(record.next_best_score),
        _tag_rank(record.mate_score),
    )


def rank_records(records: Iterable[AlignmentRecord]) -> list[AlignmentRecord]:
    """Return records best first; full ties keep their input order."""
    return sorted(records, key=rank_key, reverse=True)


def find_multimapped(records: list[AlignmentRecord]) -> list[AlignmentRecord]:
    """Equally good placements of one read group, or [] when not redundant."""
    if len(records) < MIN_CANDIDATES:
        return []

    ranked = rank_records(records)
    best = ranked[0]

    if best.next_best_score is None or best.next_best_score != best.alignment_score:
        return []

    survivors = [r for r in ranked if r.alignment_score == best.alignment_score]
    if best.mate_score is not None:
        survivors = [r for r in survivors if r.mate_score == best.mate_score]

    return survivors if len(survivors) > 1 else []


def parse_batch(batch: list[AlignmentRecord]) -> list[AlignmentRecord]:
    """Redundant records of one read (unpaired, first mates, second mates)."""
    single = [r for r in batch if not r.is_paired]
    first = [r for r in batch if r.is_paired and r.is_read1]
    second = [r for r in batch if r.is_paired and not r.is_read1]

    redundant: list[AlignmentRecord] = []
    for group in (single, first, second):
        redundant.extend(find_multimapped(group))
    return redundant


@dataclass
class ClassificationSummary:
    """Counts collected while classifying one alignment file."""

    output: Optional[Path] = None
    records_written: int = 0
    reads_written: int = 0
    reopened_batches: int = 0


def iter_batches(
    records: Iterable[AlignmentRecord],
    summary: Optional[ClassificationSummary] = None,
    strict: bool = False,
) -> Iterator[list[AlignmentRecord]]:
    """Group contiguous records sharing a read identifier.

    A read identifier that shows up again after its batch was closed starts a
    new batch; this is logged once and counted in ``summary``. With ``strict``
    such a repeat raises ``ValidationError`` instead.
    """
    closed: set[str] = set()
    for name, group in groupby(records, key=lambda r: r.query_name):
        if name in closed:
            if strict:
                raise ValidationError(
                    f"Records of read '{name}' are not contiguous; "
                    "sort the alignment by read name first"
                )
            if summary is not None:
                if summary.reopened_batches == 0:
                    logger.warning(
                        f"Read '{name}' appears in more than one block; the input is "
                        "not grouped by read name and its blocks are classified separately"
                    )
                summary.reopened_batches += 1
        closed.add(name)
        yield list(group)


def classify(
    records: Iterable[AlignmentRecord],
    summary: Optional[ClassificationSummary] = None,
    strict: bool = False,
) -> Iterator[AlignmentRecord]:
    """Yield every redundant record of a read-grouped alignment stream."""
    scored = (r for r in records if r.alignment_score is not None)
    for batch in iter_batches(scored, summary=summary, strict=strict):
        yield from parse_batch(batch)


class RedundancyClassifier:
    """Writes the redundant subset of an alignment file."""

    def __init__(self, output_dir: Path, strict: bool = False):
        self.output_dir = Path(output_dir)
        self.strict = strict

    def write_redundant_alignments(self, alignment: Path) -> Optional[ClassificationSummary]:
        """Write redundant records of ``alignment`` to a new file.

        The output keeps the input format and header. Returns None (and leaves
        no output behind) if the alignment cannot be read or written.
        """
        output = new_temp_file(self.output_dir, "redundant_", alignment_extension(alignment))
        summary = ClassificationSummary(output=output)
        last_name: Optional[str] = None
        try:
            with open_alignment(alignment) as reader, open_writer(output, reader) as writer:
                for record in classify(iter_records(reader), summary=summary, strict=self.strict):
                    writer.write(record.segment)
                    summary.records_written += 1
                    if record.query_name != last_name:
                        summary.reads_written += 1
                        last_name = record.query_name
        except (OSError, ValueError, FileFormatError, ValidationError) as e:
            logger.error(f"Cannot write redundant alignment file: {e}")
            remove_if_exists(output)
            return None

        logger.info(
            f"Redundant alignments: {summary.records_written:,} records "
            f"from {summary.reads_written:,} reads"
        )
        return summary
