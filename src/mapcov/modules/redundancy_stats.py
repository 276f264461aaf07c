"""Summary statistics over a redundant alignment file."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Optional

from mapcov.exceptions import ValidationError
from mapcov.modules.alignment import count_mapped_reads, open_alignment
from mapcov.utils.logging import get_logger

logger = get_logger(__name__.split(".", 1)[-1])

__all__ = [
    "RedundancyStats",
    "summarize_redundancy",
    "redundancy_group_sizes",
    "count_mapped_reads",
]


@dataclass(frozen=True)
class RedundancyStats:
    """Per-read redundancy of an alignment.

    ``count`` reads have redundant placements, ``total`` is the number of
    mapped reads of the alignment the redundant subset was taken from.
    """

    count: int
    total: int
    sum: int
    min: int
    max: int

    @property
    def mean(self) -> float:
        return self.sum / self.count

    @property
    def fraction_redundant(self) -> float:
        return self.count / self.total

    @property
    def redundancy_rate(self) -> float:
        """Average number of placements per mapped read."""
        return ((self.total - self.count) + self.sum) / self.total

    def to_lines(self) -> list[str]:
        return [
            "Overall:",
            f"Redundant alignments: {self.count} ({self.fraction_redundant * 100:.2f}%)",
            f"Redundant alignment rate: {self.redundancy_rate:.2f}",
            "",
            "Redundant alignments:",
            f"Average redundancy: {self.mean:.2f}",
            f"Minimum number of redundant alignments: {self.min}",
            f"Maximum number of redundant alignments: {self.max}",
        ]

    def write_report(self, path: Path) -> Path:
        path = Path(path)
        path.write_text("\n".join(self.to_lines()) + "\n")
        return path


def summarize_redundancy(
    redundant_read_names: Iterable[str], total_mapped_reads: int
) -> Optional[RedundancyStats]:
    """Reduce the read names of redundant records to summary statistics.

    Every occurrence of a name is one redundant placement of that read.
    Returns None when there is nothing redundant.

    Raises:
        ValidationError: If redundant reads exist but ``total_mapped_reads``
            is not positive
    """
    sizes = Counter(redundant_read_names)
    if not sizes:
        return None
    if total_mapped_reads <= 0:
        raise ValidationError(
            f"Found {len(sizes)} redundant reads but {total_mapped_reads} mapped reads"
        )

    values = list(sizes.values())
    return RedundancyStats(
        count=len(values),
        total=total_mapped_reads,
        sum=sum(values),
        min=min(values),
        max=max(values),
    )


def redundancy_group_sizes(path: Path) -> Counter:
    """Number of records per read name in a redundant alignment file."""
    with open_alignment(path) as handle:
        return Counter(segment.query_name for segment in handle)
