"""Validation utilities for mapcov."""

from __future__ import annotations

import shlex
import shutil
import importlib
from pathlib import Path
from typing import List, Optional, Sequence, Union

# import name -> distribution name
REQUIRED_MODULES = {
    "click": "click",
    "yaml": "pyyaml",
    "pysam": "pysam",
    "pandas": "pandas",
    "numpy": "numpy",
    "Bio": "biopython",
    "packaging": "packaging",
}

EXTERNAL_TOOLS = ["bowtie2", "bowtie2-build", "samtools", "bedtools"]


def validate_installation(
    check_tools: bool = True,
    picard_command: Union[str, Sequence[str], None] = None,
) -> List[str]:
    """
    Validate mapcov installation and dependencies.

    Args:
        check_tools: Also look for the external tools in PATH
        picard_command: Picard launcher as configured (default: ``picard``)

    Returns:
        List of validation issues (empty if all good)
    """
    issues = []

    for module, distribution in REQUIRED_MODULES.items():
        try:
            importlib.import_module(module)
        except ImportError:
            issues.append(f"Missing Python module: {distribution}")

    if check_tools:
        for tool_name in EXTERNAL_TOOLS:
            if not shutil.which(tool_name):
                issues.append(f"External tool not found: {tool_name}")

        issues.extend(_check_picard(picard_command))

    try:
        from mapcov.core.pipeline import Pipeline  # noqa: F401
        from mapcov.config import Config  # noqa: F401
        from mapcov.modules.redundancy import RedundancyClassifier  # noqa: F401
    except ImportError as e:
        issues.append(f"mapcov module import error: {e}")

    return issues


def _check_picard(command: Union[str, Sequence[str], None]) -> List[str]:
    if command is None:
        command = ["picard"]
    elif isinstance(command, str):
        command = shlex.split(command)
    if not command:
        return ["Picard command is empty"]

    if not shutil.which(command[0]):
        return [f"External tool not found: {command[0]} (Picard)"]

    jar = _jar_argument(command)
    if jar is not None and not Path(jar).exists():
        return [f"Picard jar not found: {jar}"]
    return []


def _jar_argument(command: Sequence[str]) -> Optional[str]:
    args = list(command)
    if "-jar" in args:
        idx = args.index("-jar")
        if idx + 1 < len(args):
            return args[idx + 1]
    return None
