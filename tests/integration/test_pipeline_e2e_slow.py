"""End-to-end runs against the real external tools.

Skipped unless bowtie2, samtools, picard and bedtools are all in PATH.
"""

from __future__ import annotations

import random
import shutil
import sys
from pathlib import Path

import pytest
from click.testing import CliRunner

ROOT = Path(__file__).resolve().parents[2]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from mapcov.cli.main import cli

pytestmark = [pytest.mark.integration, pytest.mark.slow, pytest.mark.external]

TOOLS = ("bowtie2", "bowtie2-build", "samtools", "picard", "bedtools")


def _has_required_tools() -> bool:
    return all(shutil.which(tool) is not None for tool in TOOLS)


def _random_sequence(rng: random.Random, length: int) -> str:
    return "".join(rng.choice("ACGT") for _ in range(length))


def _reverse_complement(seq: str) -> str:
    return seq[::-1].translate(str.maketrans("ACGT", "TGCA"))


@pytest.fixture
def dataset(tmp_path: Path) -> dict[str, Path]:
    """Two contigs sharing a repeat, and read pairs drawn from both."""
    rng = random.Random(7)
    repeat = _random_sequence(rng, 300)
    chr1 = _random_sequence(rng, 1000) + repeat + _random_sequence(rng, 1000)
    chr2 = _random_sequence(rng, 1000) + repeat + _random_sequence(rng, 1000)

    reference = tmp_path / "ref.fa"
    reference.write_text(f">chr1\n{chr1}\n>chr2\n{chr2}\n")

    forward, reverse = tmp_path / "r1.fq", tmp_path / "r2.fq"
    with open(forward, "w") as f1, open(reverse, "w") as f2:
        for i in range(200):
            contig = chr1 if i % 2 else chr2
            start = rng.randrange(0, len(contig) - 400)
            fragment = contig[start:start + 400]
            mate1, mate2 = fragment[:100], _reverse_complement(fragment[-100:])
            f1.write(f"@pair{i}/1\n{mate1}\n+\n{'I' * 100}\n")
            f2.write(f"@pair{i}/2\n{mate2}\n+\n{'I' * 100}\n")
    return {"reference": reference, "forward": forward, "reverse": reverse}


@pytest.mark.skipif(not _has_required_tools(), reason="External toolchain not available")
def test_full_run(dataset: dict[str, Path], tmp_path: Path) -> None:
    out = tmp_path / "out"
    result = CliRunner().invoke(
        cli,
        [
            "-r", str(dataset["reference"]),
            "-1", str(dataset["forward"]),
            "-2", str(dataset["reverse"]),
            "-o", str(out),
            "-f", "0", "-d", "-m", "--cov-map", "-g",
        ],
    )
    assert result.exit_code == 0, result.output

    names = {p.name for p in out.iterdir()}
    assert {"clean_alignment.bam", "mean.coverage", "map.coverage", "gc_reference.tsv",
            "remove_duplicates.metrics", "mapcov.config.yaml"} <= names
    # nothing but published results, the config and tool logs is left behind
    leftovers = {n for n in names if not n.endswith(".log")} - {
        "clean_alignment.bam", "mean.coverage", "map.coverage", "gc_reference.tsv",
        "remove_duplicates.metrics", "mapcov.config.yaml", "redundancy.stats",
        "redundancy_alignments.bam", "redundancy_mean.coverage", "redundancy_map.coverage",
    }
    assert leftovers == set()

    contigs = [line.split("\t")[0] for line in (out / "mean.coverage").read_text().splitlines()]
    assert contigs == ["chr1", "chr2"]


@pytest.mark.skipif(not _has_required_tools(), reason="External toolchain not available")
def test_keep_tmp_archives_intermediates(dataset: dict[str, Path], tmp_path: Path) -> None:
    out = tmp_path / "out"
    result = CliRunner().invoke(
        cli,
        ["run", "-r", str(dataset["reference"]), "-1", str(dataset["forward"]),
         "-2", str(dataset["reverse"]), "-o", str(out), "-k"],
    )
    assert result.exit_code == 0, result.output
    archives = [p for p in out.iterdir() if p.is_dir() and p.name.startswith("tmp")]
    assert len(archives) == 1
    assert any(archives[0].iterdir())
