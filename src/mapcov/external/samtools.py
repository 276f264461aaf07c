"""Samtools wrapper."""

from __future__ import annotations

from pathlib import Path
from typing import Optional, Sequence

from mapcov.constants import SAMTOOLS_LOG
from mapcov.external.base import ExternalTool
from mapcov.utils.paths import new_temp_file


class Samtools(ExternalTool):
    """Samtools BAM/SAM manipulation."""

    tool_name = "samtools"
    log_name = SAMTOOLS_LOG

    def faidx(self, reference_fasta: Path) -> Optional[Path]:
        """Create FASTA index (.fai) for a reference."""
        output = Path(f"{reference_fasta}.fai")
        cmd = [self.tool_name, "faidx", str(reference_fasta)]
        # an index the user already had is never removed on failure
        outputs = [] if output.exists() else [output]
        if not self._run_stage(cmd, outputs=outputs, what="faidx"):
            return None
        self.logger.info(f"Reference index created: {output}")
        return output

    def view(
        self,
        alignment: Path,
        fai_index: Optional[Path] = None,
        options: Sequence[str] = (),
    ) -> Optional[Path]:
        """Convert an alignment to BAM, optionally filtering with ``options``."""
        output = new_temp_file(self.output_dir, "view_", ".bam")
        cmd = [self.tool_name, "view", *options, "-b"]
        if fai_index is not None:
            cmd += ["-t", str(fai_index)]
        cmd += ["-o", str(output), str(alignment)]
        if not self._run_stage(cmd, outputs=[output], what="view"):
            return None
        return output

    def sort(self, bam: Path) -> Optional[Path]:
        """Sort an alignment by reference coordinate."""
        output = new_temp_file(self.output_dir, "sorted_", ".bam")
        cmd = [
            self.tool_name, "sort",
            "-@", str(self.threads),
            "-o", str(output),
            str(bam),
        ]
        if not self._run_stage(cmd, outputs=[output], what="sort"):
            return None
        self.logger.debug(f"Sorted BAM saved to: {output}")
        return output

    def index(self, bam: Path) -> Optional[Path]:
        """Index a coordinate-sorted BAM file."""
        output = Path(f"{bam}.bai")
        cmd = [self.tool_name, "index", str(bam)]
        if not self._run_stage(cmd, outputs=[output], what="index"):
            return None
        self.logger.debug(f"BAM index created: {output}")
        return output
