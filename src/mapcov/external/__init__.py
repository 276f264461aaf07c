"""External tool wrappers (mapcov).

This package provides Python wrappers for the external programs driven by
the pipeline:
- Bowtie2: reference database and read mapping
- Samtools: FASTA index, BAM conversion, sorting and indexing
- Picard: merging and duplicate removal
- BedTools: genome coverage
"""

from mapcov.external.base import ExternalTool
from mapcov.external.mapper import Mapper
from mapcov.external.bowtie2 import Bowtie2
from mapcov.external.samtools import Samtools
from mapcov.external.picard import Picard
from mapcov.external.bedtools import BedTools

__all__ = [
    "ExternalTool",
    "Mapper",
    "Bowtie2",
    "Samtools",
    "Picard",
    "BedTools",
]
