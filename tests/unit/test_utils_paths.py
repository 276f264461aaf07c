"""Tests for file name helpers and logging setup."""

from pathlib import Path
import logging
import sys

ROOT = Path(__file__).resolve().parents[2]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from mapcov.utils.logging import get_logger, setup_logging
from mapcov.utils.paths import (
    alignment_extension,
    get_extension,
    new_temp_file,
    remove_if_exists,
    with_extension_of,
)


class TestPaths:

    def test_get_extension(self):
        assert get_extension("sorted_x1.bam") == ".bam"
        assert get_extension("archive.tar.gz") == ".gz"
        assert get_extension("noext") is None

    def test_with_extension_of(self):
        assert with_extension_of("clean_alignment", "sorted_ab.bam") == "clean_alignment.bam"
        assert with_extension_of("clean_alignment", "sorted_ab") == "clean_alignment"

    def test_alignment_extension(self):
        assert alignment_extension("in.BAM") == ".bam"
        assert alignment_extension("in.sam") == ".sam"
        assert alignment_extension("in") == ".sam"

    def test_new_temp_files_are_unique(self, tmp_path):
        target = tmp_path / "nested"
        first = new_temp_file(target, "mapped_", ".sam")
        second = new_temp_file(target, "mapped_", ".sam")
        assert first != second
        assert first.exists() and first.stat().st_size == 0
        assert first.name.startswith("mapped_") and first.suffix == ".sam"

    def test_remove_if_exists(self, tmp_path):
        path = tmp_path / "partial.bam"
        path.write_text("x")
        remove_if_exists(path)
        remove_if_exists(path)
        remove_if_exists(None)
        assert not path.exists()


class TestLogging:

    def test_loggers_are_namespaced(self):
        assert get_logger("ledger").name == "mapcov.ledger"

    def test_setup_with_file(self, tmp_path):
        log_file = tmp_path / "logs" / "run.log"
        setup_logging(level=logging.WARNING, log_file=log_file)
        get_logger("test").debug("detail for the file")
        for handler in logging.getLogger("mapcov").handlers:
            handler.flush()
        assert "detail for the file" in log_file.read_text()
        assert logging.getLogger("mapcov").propagate is False

    def test_repeated_setup_does_not_duplicate_handlers(self):
        setup_logging()
        setup_logging()
        assert len(logging.getLogger("mapcov").handlers) == 1
