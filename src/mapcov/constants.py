"""Shared constants for mapcov.

Published artifact names and the per-tool log file names live here so the
orchestrator, the ledger and the tests agree on them.
"""

# ================== Published artifact names ==================
# Names without an extension are fixed; the alignment names receive the
# extension of the artifact they are published from.
CLEAN_ALIGNMENT = "clean_alignment"
MEAN_COVERAGE = "mean.coverage"
COVERAGE_MAP = "map.coverage"
REDUNDANCY_STATS = "redundancy.stats"
REDUNDANCY_ALIGNMENTS = "redundancy_alignments"
REDUNDANCY_MEAN_COVERAGE = "redundancy_mean.coverage"
REDUNDANCY_COVERAGE_MAP = "redundancy_map.coverage"
DUPLICATE_METRICS = "remove_duplicates.metrics"
GC_CONTENT = "gc_reference.tsv"


# ================== Tool log files ==================
BOWTIE2_LOG = "bowtie2.log"
SAMTOOLS_LOG = "samtools.log"
PICARD_LOG = "picard.log"
BEDTOOLS_LOG = "bedtools.log"


# ================== SAM flags / tags ==================
# samtools view -F mask dropping secondary (0x100) and supplementary (0x800)
# alignments before the reference-order sort
NON_PRIMARY_FLAGS = "0x900"

ALIGNMENT_SCORE_TAG = "AS"
NEXT_BEST_SCORE_TAG = "XS"
MATE_SCORE_TAG = "YS"


# ================== Output Constants ==================
MEAN_COVERAGE_PRECISION: int = 3
GC_PRECISION: int = 2
