"""Bowtie2 wrapper."""

from __future__ import annotations

from pathlib import Path
from typing import Optional, Sequence

from mapcov.constants import BOWTIE2_LOG
from mapcov.external.base import ExternalTool
from mapcov.external.mapper import Mapper
from mapcov.utils.paths import new_temp_file


class Bowtie2(ExternalTool, Mapper):
    """Bowtie2 read mapper."""

    tool_name = "bowtie2"
    log_name = BOWTIE2_LOG

    def __init__(self, force_rebuild: bool = False, **kwargs):
        self.force_rebuild = force_rebuild
        self.reference: Optional[Path] = None
        super().__init__(**kwargs)

    def _get_required_tools(self) -> list[str]:
        return ["bowtie2-build"]

    @staticmethod
    def index_files(reference: Path) -> list[Path]:
        """Every file bowtie2-build may write for ``reference`` (small and large index)."""
        parts = ["1", "2", "3", "4", "rev.1", "rev.2"]
        return [Path(f"{reference}.{part}.{ext}") for ext in ("bt2", "bt2l") for part in parts]

    @staticmethod
    def index_exists(reference: Path) -> bool:
        """True when a bowtie2 database (small or large index) sits next to the reference."""
        return any(
            Path(f"{reference}.1.{ext}").exists() for ext in ("bt2", "bt2l")
        )

    def build_reference(self, reference: Path) -> bool:
        """Build the bowtie2 database next to ``reference`` unless it already exists."""
        reference = Path(reference)
        if self.index_exists(reference) and not self.force_rebuild:
            self.logger.info(f"Reusing bowtie2 database: {reference}")
            self.reference = reference
            return True

        cmd = ["bowtie2-build", "--threads", str(self.threads), str(reference), str(reference)]
        # a failed build must not leave a database that index_exists would reuse
        if not self._run_stage(cmd, outputs=self.index_files(reference), what="bowtie2-build"):
            return False

        self.reference = reference
        self.logger.info(f"bowtie2 database built: {reference}")
        return True

    def _map(self, prefix: str, read_args: list[str], options: Sequence[str]) -> Optional[Path]:
        if self.reference is None:
            self.logger.error("Reference database has not been built")
            return None

        output = new_temp_file(self.output_dir, prefix, ".sam")
        cmd = [
            self.tool_name,
            *options,
            "-p", str(self.threads),
            *read_args,
            "-x", str(self.reference),
            "-S", str(output),
        ]
        if not self._run_stage(cmd, outputs=[output], what=f"{prefix.rstrip('_')} mapping"):
            return None
        return output

    def map_single_end(self, single: Path, options: Sequence[str] = ()) -> Optional[Path]:
        """Map unpaired reads."""
        return self._map("single_", ["-U", str(single)], options)

    def map_paired_end(
        self, forward: Path, reverse: Path, options: Sequence[str] = ()
    ) -> Optional[Path]:
        """Map mate pairs."""
        return self._map("paired_", ["-1", str(forward), "-2", str(reverse)], options)
