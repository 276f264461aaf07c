"""Mapping-quality filter for alignment files."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from mapcov.exceptions import FileFormatError
from mapcov.modules.alignment import open_alignment, open_writer
from mapcov.utils.logging import get_logger
from mapcov.utils.paths import alignment_extension, new_temp_file, remove_if_exists

logger = get_logger(__name__.split(".", 1)[-1])


def filter_low_quality_records(
    alignment: Path, cutoff: int, output_dir: Path
) -> Optional[Path]:
    """Copy records with mapping quality >= ``cutoff`` to a new file.

    The header and the input format (SAM or BAM) are preserved. Returns the
    filtered file, or None when the input could not be read or the output
    could not be written; no partial output is left behind in that case.
    """
    output = new_temp_file(output_dir, "quality_", alignment_extension(alignment))
    kept = 0
    dropped = 0
    try:
        with open_alignment(alignment) as reader, open_writer(output, reader) as writer:
            for segment in reader:
                if segment.mapping_quality >= cutoff:
                    writer.write(segment)
                    kept += 1
                else:
                    dropped += 1
    except (OSError, ValueError, FileFormatError) as e:
        logger.error(f"Cannot filter {alignment} by mapping quality: {e}")
        remove_if_exists(output)
        return None

    logger.info(f"Quality filter (MAPQ >= {cutoff}): kept {kept:,}, removed {dropped:,}")
    return output
