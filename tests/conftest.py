"""Pytest configuration for mapcov tests."""

import logging
import sys
from pathlib import Path

import pytest

# Add src directory to Python path
ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))


SAM_HEADER = (
    "@HD\tVN:1.6\tSO:queryname\n"
    "@SQ\tSN:chr1\tLN:1000\n"
    "@SQ\tSN:chr2\tLN:1000\n"
)


def sam_line(
    name,
    flag=0,
    contig="chr1",
    pos=100,
    mapq=42,
    tags=(),
):
    """One SAM record line with a 4 bp read; unmapped when flag has 0x4."""
    if flag & 0x4:
        contig, pos, cigar = "*", 0, "*"
    else:
        cigar = "4M"
    fields = [name, str(flag), contig, str(pos), str(mapq), cigar, "*", "0", "0", "ACGT", "IIII"]
    fields.extend(tags)
    return "\t".join(fields)


@pytest.fixture
def write_sam():
    """Return a helper writing a SAM file with a two-contig header."""

    def _write(path, lines):
        path = Path(path)
        path.write_text(SAM_HEADER + "".join(f"{line}\n" for line in lines))
        return path

    return _write


@pytest.fixture(autouse=True)
def reset_logging_after_test():
    """Reset mapcov logger state after each test.

    This prevents test pollution from tests that call setup_logging(),
    which sets propagate=False and breaks caplog in subsequent tests.
    """
    yield
    # Restore logger to clean state after each test
    app_logger = logging.getLogger("mapcov")
    for handler in list(app_logger.handlers):
        app_logger.removeHandler(handler)
    app_logger.setLevel(logging.NOTSET)
    app_logger.propagate = True


@pytest.fixture
def sam_record():
    """Return the SAM line builder."""
    return sam_line
