"""Tests for reference GC content."""

from pathlib import Path
import sys

ROOT = Path(__file__).resolve().parents[2]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from mapcov.modules.gc_content import iter_gc_content, write_gc_content


class TestGcContent:

    def test_fraction_per_sequence(self, tmp_path):
        reference = tmp_path / "ref.fa"
        reference.write_text(">chr1 first\nGGCCAATT\n>chr2\nGCGA\nNN\n>empty\n\n")
        values = dict(iter_gc_content(reference))
        assert values["chr1"] == 0.5
        assert values["chr2"] == 0.5
        assert values["empty"] == 0

    def test_report_uses_two_decimals(self, tmp_path):
        reference = tmp_path / "ref.fa"
        reference.write_text(">chr1\nGGGA\n>chr2\nGCA\n")
        output = write_gc_content(reference, tmp_path)
        assert output.name.startswith("gc_")
        assert output.read_text() == "chr1\t0.75\nchr2\t0.67\n"

    def test_missing_reference_returns_none(self, tmp_path):
        out_dir = tmp_path / "out"
        assert write_gc_content(tmp_path / "missing.fa", out_dir) is None
        assert list(out_dir.iterdir()) == []
