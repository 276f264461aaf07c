"""Reductions over bedtools genomecov output."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import numpy as np
import pandas as pd

from mapcov.constants import MEAN_COVERAGE_PRECISION
from mapcov.utils.logging import get_logger
from mapcov.utils.paths import new_temp_file, remove_if_exists

logger = get_logger(__name__.split(".", 1)[-1])

HISTOGRAM_COLUMNS = ["contig", "depth", "bases", "length", "fraction"]
# genomecov appends a whole-genome histogram under this name
GENOME_SUMMARY = "genome"


def read_histogram(path: Path) -> pd.DataFrame:
    """Load a ``genomecov -ibam`` histogram without the trailing genome block."""
    try:
        df = pd.read_csv(
            path,
            sep="\t",
            header=None,
            names=HISTOGRAM_COLUMNS,
            dtype={
                "contig": str,
                "depth": np.int64,
                "bases": np.int64,
                "length": np.int64,
                "fraction": np.float64,
            },
        )
    except pd.errors.EmptyDataError:
        return pd.DataFrame(columns=HISTOGRAM_COLUMNS)

    if df.empty:
        return df

    block = (df["contig"] != df["contig"].shift()).cumsum()
    last = block == block.iloc[-1]
    if df.loc[last, "contig"].iloc[0] == GENOME_SUMMARY:
        df = df.loc[~last]
    return df


def mean_coverage(histogram: pd.DataFrame) -> pd.Series:
    """Mean depth per contig, in order of first appearance."""
    depth = histogram["depth"].to_numpy(dtype=np.float64)
    fraction = histogram["fraction"].to_numpy(dtype=np.float64)
    weighted = pd.Series(np.multiply(depth, fraction), index=histogram.index)
    return weighted.groupby(histogram["contig"], sort=False).sum()


def mean_coverage_per_contig(histogram_path: Path, output_dir: Path) -> Optional[Path]:
    """Write ``contig<TAB>mean depth`` for a genomecov histogram.

    Returns the written file or None if the histogram cannot be parsed.
    """
    output = new_temp_file(output_dir, "mean_", ".coverage")
    try:
        means = mean_coverage(read_histogram(histogram_path))
        with open(output, "w") as handle:
            for contig, value in means.items():
                handle.write(f"{contig}\t{value:.{MEAN_COVERAGE_PRECISION}f}\n")
    except (OSError, ValueError, KeyError, pd.errors.ParserError) as e:
        logger.error(f"Cannot compute mean coverage from {histogram_path}: {e}")
        remove_if_exists(output)
        return None

    logger.debug(f"Mean coverage computed for {len(means)} contigs")
    return output
