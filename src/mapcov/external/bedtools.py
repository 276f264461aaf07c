"""BEDTools wrapper."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from mapcov.constants import BEDTOOLS_LOG
from mapcov.external.base import ExternalTool
from mapcov.utils.paths import new_temp_file


class BedTools(ExternalTool):
    """bedtools genome coverage."""

    tool_name = "bedtools"
    log_name = BEDTOOLS_LOG

    def genome_coverage(self, bam: Path) -> Optional[Path]:
        """Coverage histogram per reference (``genomecov`` default output)."""
        output = new_temp_file(self.output_dir, "hist_", ".coverage")
        cmd = [self.tool_name, "genomecov", "-ibam", str(bam)]
        if not self._run_stage(cmd, stdout_path=output, what="genomecov"):
            return None
        return output

    def genome_coverage_per_base(self, bam: Path) -> Optional[Path]:
        """Depth at every reference position (``genomecov -d``)."""
        output = new_temp_file(self.output_dir, "perbase_", ".coverage")
        cmd = [self.tool_name, "genomecov", "-d", "-ibam", str(bam)]
        if not self._run_stage(cmd, stdout_path=output, what="genomecov -d"):
            return None
        return output
