"""Tests for genomecov histogram reduction."""

from pathlib import Path
import sys

ROOT = Path(__file__).resolve().parents[2]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from mapcov.modules.coverage import mean_coverage, mean_coverage_per_contig, read_histogram

HISTOGRAM = (
    "chr1\t0\t50\t100\t0.5\n"
    "chr1\t2\t50\t100\t0.5\n"
    "chr2\t0\t10\t40\t0.25\n"
    "chr2\t4\t30\t40\t0.75\n"
    "genome\t0\t60\t140\t0.428571\n"
    "genome\t2\t50\t140\t0.357143\n"
    "genome\t4\t30\t140\t0.214286\n"
)


class TestMeanCoverage:

    def test_genome_summary_rows_are_dropped(self, tmp_path):
        path = tmp_path / "hist.coverage"
        path.write_text(HISTOGRAM)
        df = read_histogram(path)
        assert list(df["contig"].unique()) == ["chr1", "chr2"]

    def test_mean_is_depth_weighted_by_fraction(self, tmp_path):
        path = tmp_path / "hist.coverage"
        path.write_text(HISTOGRAM)
        means = mean_coverage(read_histogram(path))
        assert list(means.index) == ["chr1", "chr2"]
        assert means["chr1"] == 1.0
        assert means["chr2"] == 3.0

    def test_writes_three_decimals(self, tmp_path):
        path = tmp_path / "hist.coverage"
        path.write_text(HISTOGRAM)
        output = mean_coverage_per_contig(path, tmp_path)
        assert output.name.startswith("mean_")
        assert output.read_text() == "chr1\t1.000\nchr2\t3.000\n"

    def test_empty_histogram_gives_empty_report(self, tmp_path):
        path = tmp_path / "hist.coverage"
        path.write_text("")
        output = mean_coverage_per_contig(path, tmp_path)
        assert output.read_text() == ""

    def test_malformed_histogram_returns_none(self, tmp_path):
        path = tmp_path / "hist.coverage"
        path.write_text("chr1\tnot-a-number\t1\t1\t1\n")
        out_dir = tmp_path / "out"
        assert mean_coverage_per_contig(path, out_dir) is None
        assert list(out_dir.iterdir()) == []
