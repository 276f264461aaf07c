"""Picard wrapper."""

from __future__ import annotations

import shlex
from pathlib import Path
from typing import Optional, Sequence, Union

from mapcov.constants import PICARD_LOG
from mapcov.external.base import ExternalTool
from mapcov.utils.paths import get_extension, new_temp_file


class Picard(ExternalTool):
    """Picard tools (merge and duplicate removal).

    ``command`` is the prefix used to launch Picard: the bioconda ``picard``
    launcher by default, or e.g. ``["java", "-jar", "/opt/picard.jar"]``.
    """

    tool_name = "picard"
    log_name = PICARD_LOG
    version_command = None

    def __init__(self, command: Union[str, Sequence[str], None] = None, **kwargs):
        if command is None:
            command = ["picard"]
        elif isinstance(command, str):
            command = shlex.split(command)
        self.command = list(command)
        super().__init__(**kwargs)

    @property
    def executable(self) -> str:
        return self.command[0]

    def merge_maps(self, first: Path, second: Path) -> Optional[Path]:
        """Merge two alignments into one sorted by read name."""
        output = new_temp_file(self.output_dir, "merged_", ".sam")
        cmd = [
            *self.command, "MergeSamFiles",
            f"I={first}",
            f"I={second}",
            f"O={output}",
            "SORT_ORDER=queryname",
            "USE_THREADING=true",
        ]
        if not self._run_stage(cmd, outputs=[output], what="MergeSamFiles"):
            return None
        return output

    def mark_duplicates(
        self, alignment: Path, sort_order: str = "queryname"
    ) -> Optional[tuple[Path, Path]]:
        """Remove duplicate reads.

        Args:
            alignment: SAM/BAM input
            sort_order: one of unsorted, queryname, coordinate, duplicate

        Returns:
            ``(deduplicated_alignment, metrics_file)`` or None on failure
        """
        extension = get_extension(alignment) or ".sam"
        output = new_temp_file(self.output_dir, "markduplicates_", extension)
        metrics = output.with_suffix(".metrics")
        cmd = [
            *self.command, "MarkDuplicates",
            f"INPUT={alignment}",
            f"OUTPUT={output}",
            f"METRICS_FILE={metrics}",
            f"ASSUME_SORT_ORDER={sort_order}",
            "VALIDATION_STRINGENCY=LENIENT",
            "MAX_FILE_HANDLES_FOR_READ_ENDS_MAP=1000",
            "REMOVE_DUPLICATES=TRUE",
        ]
        if not self._run_stage(cmd, outputs=[output, metrics], what="MarkDuplicates"):
            return None
        return output, metrics
