"""File name helpers shared by the tool wrappers and the artifact ledger."""

from __future__ import annotations

import os
import tempfile
from pathlib import Path
from typing import Optional, Union

PathLike = Union[str, Path]


def get_extension(name: PathLike) -> Optional[str]:
    """Return the last extension of ``name`` including the dot, or None.

    >>> get_extension("sorted_x1.bam")
    '.bam'
    """
    suffix = Path(name).suffix
    return suffix or None


def with_extension_of(name: str, artifact: PathLike) -> str:
    """Append the extension of ``artifact`` to ``name`` (if it has one)."""
    ext = get_extension(artifact)
    return f"{name}{ext}" if ext else name


def alignment_extension(path: PathLike) -> str:
    """Return ``.bam`` for BAM inputs and ``.sam`` otherwise."""
    return ".bam" if Path(path).suffix.lower() == ".bam" else ".sam"


def new_temp_file(directory: PathLike, prefix: str, suffix: str) -> Path:
    """Create a fresh, uniquely named empty file inside ``directory``.

    Every pipeline stage writes its output to one of these so that reruns or
    sibling stages never collide on a name.
    """
    directory = Path(directory)
    directory.mkdir(parents=True, exist_ok=True)
    fd, name = tempfile.mkstemp(prefix=prefix, suffix=suffix, dir=directory)
    os.close(fd)
    return Path(name)


def remove_if_exists(path: Optional[PathLike]) -> None:
    """Delete a (possibly partially written) file, ignoring missing files."""
    if path is None:
        return
    Path(path).unlink(missing_ok=True)
