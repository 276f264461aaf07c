"""Per-sequence GC content of the reference FASTA."""

from __future__ import annotations

from pathlib import Path
from typing import Iterator, Optional

from Bio import SeqIO
from Bio.SeqUtils import gc_fraction

from mapcov.constants import GC_PRECISION
from mapcov.utils.logging import get_logger
from mapcov.utils.paths import new_temp_file, remove_if_exists

logger = get_logger(__name__.split(".", 1)[-1])


def iter_gc_content(reference: Path) -> Iterator[tuple[str, float]]:
    """Yield ``(sequence id, GC fraction)`` for every FASTA record.

    Only G, C and S count as GC and the fraction is taken over the full
    sequence length, so ambiguous bases lower it. Empty sequences yield 0.
    """
    for record in SeqIO.parse(str(reference), "fasta"):
        yield record.id, gc_fraction(record.seq, ambiguous="ignore")


def write_gc_content(reference: Path, output_dir: Path) -> Optional[Path]:
    """Write ``id<TAB>gc`` lines for the reference to a new file."""
    output = new_temp_file(output_dir, "gc_", ".tsv")
    sequences = 0
    try:
        with open(output, "w") as handle:
            for seq_id, gc in iter_gc_content(reference):
                handle.write(f"{seq_id}\t{gc:.{GC_PRECISION}f}\n")
                sequences += 1
    except (OSError, ValueError) as e:
        logger.error(f"Cannot compute GC content of {reference}: {e}")
        remove_if_exists(output)
        return None

    logger.info(f"GC content computed for {sequences} reference sequences")
    return output
