"""Read mapper capability shared by aligner wrappers."""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional, Sequence


class Mapper(ABC):
    """Interface for aligners driven by the pipeline (bowtie2, ...)."""

    @abstractmethod
    def build_reference(self, reference: Path) -> bool:
        """Build (or reuse) the reference database used by later mappings."""

    @abstractmethod
    def map_single_end(self, single: Path, options: Sequence[str] = ()) -> Optional[Path]:
        """Map unpaired reads; returns the alignment or None on failure."""

    @abstractmethod
    def map_paired_end(
        self, forward: Path, reverse: Path, options: Sequence[str] = ()
    ) -> Optional[Path]:
        """Map mate pairs; returns the alignment or None on failure."""
