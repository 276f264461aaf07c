"""Base class for external tool execution."""

from __future__ import annotations

import logging
import re
import shutil
import subprocess
from pathlib import Path
from typing import Optional, Sequence

from packaging import version

from mapcov.exceptions import DependencyError, ExternalToolError
from mapcov.utils.logging import LogTemplates, get_logger
from mapcov.utils.paths import remove_if_exists
from mapcov.utils.process import run_process


class ExternalTool:
    """Base class for external tool wrappers.

    A wrapper turns one pipeline stage into a single subprocess invocation.
    Stage methods return the produced artifact path, or ``None`` when the tool
    failed; a failed stage never leaves a partially written output behind.
    """

    tool_name: str = ""
    log_name: str = "external.log"
    required_version: Optional[str] = None
    version_command: Optional[str] = "--version"
    version_regex: Optional[str] = r"(\d+\.\d+(?:\.\d+)*)"

    # Default timeout for external tool execution (None = no timeout)
    # Mapping a full sequencing run can take many hours
    DEFAULT_TIMEOUT: Optional[int] = None

    def __init__(
        self,
        output_dir: Path = Path("."),
        verbose: bool = False,
        logger: Optional[logging.Logger] = None,
        threads: int = 1,
        check_installation: bool = True,
    ):
        self.output_dir = Path(output_dir)
        self.verbose = verbose
        self.threads = threads
        self.timeout = self.DEFAULT_TIMEOUT
        # Namespaced under mapcov.external.<tool>
        self.logger = logger or get_logger(f"external.{self.tool_name}")
        if check_installation:
            self._check_installation()

    @property
    def log_file(self) -> Path:
        """Per-tool log file collecting the tool's own output."""
        return self.output_dir / self.log_name

    @property
    def executable(self) -> str:
        """Executable looked up in PATH by the installation check."""
        return self.tool_name

    def check_tool_availability(self, tool_name: str) -> bool:
        """Check if a tool is available in PATH."""
        return shutil.which(tool_name) is not None

    def _check_installation(self) -> None:
        """Check if the tool is installed and meets version requirements."""
        if not self.check_tool_availability(self.executable):
            raise DependencyError(
                f"{self.executable} not found in PATH. "
                f"Please install it via: conda install -c bioconda {self.tool_name}"
            )

        if self.required_version:
            current_version = self.get_tool_version(self.executable)
            if current_version and not self.check_minimum_version(
                current_version, self.required_version
            ):
                raise DependencyError(
                    f"{self.tool_name} version {current_version} is below "
                    f"required version {self.required_version}"
                )
            self.logger.debug(f"{self.tool_name} version: {current_version}")

        additional_tools: Sequence[str] = getattr(self, "_get_required_tools", lambda: [])()
        for tool in additional_tools:
            if not self.check_tool_availability(tool):
                raise DependencyError(
                    f"Required dependency '{tool}' not found for {self.tool_name}"
                )

    def get_tool_version(self, tool_name: str) -> Optional[str]:
        """Get tool version string."""
        if not self.version_command:
            return None

        version_commands = [
            [tool_name, self.version_command],
            [tool_name, "-v"],
            [tool_name, "version"],
        ]

        for cmd in version_commands:
            try:
                result = subprocess.run(
                    cmd, capture_output=True, text=True, check=False, timeout=10
                )
            except (subprocess.TimeoutExpired, OSError):
                continue

            output = result.stdout + result.stderr
            if self.version_regex:
                match = re.search(self.version_regex, output)
                if match:
                    return match.group(1)

        return None

    def check_minimum_version(self, current_version: str, required_version: str) -> bool:
        """Check if current version meets minimum requirement.

        Unparseable version strings are accepted with a warning so that
        non-standard version output never blocks a run.
        """
        current_match = re.search(r"(\d+\.\d+(?:\.\d+)*)", current_version)
        required_match = re.search(r"(\d+\.\d+(?:\.\d+)*)", required_version)

        if not current_match or not required_match:
            self.logger.warning(
                f"Could not compare versions '{current_version}' and '{required_version}'. "
                "Please verify tool version manually."
            )
            return True

        current_ver = version.parse(current_match.group(1))
        required_ver = version.parse(required_match.group(1))

        if current_ver < required_ver:
            self.logger.warning(
                f"Version {current_version} is below minimum required {required_version}"
            )
            return False

        return True

    def invoke(
        self,
        cmd: Sequence[str],
        outputs: Sequence[Optional[Path]] = (),
        stdout_path: Optional[Path] = None,
    ) -> int:
        """Run one stage command and return its exit status.

        Tool output is appended to :attr:`log_file` (and echoed when verbose).
        With ``stdout_path`` the tool's standard output becomes that file and
        only stderr is logged. On a nonzero status every path in ``outputs``
        (and ``stdout_path``) is removed before returning.
        """
        cmd_str = " ".join(str(c) for c in cmd)
        self.logger.debug(f"Running: {cmd_str}")

        try:
            status = run_process(
                cmd,
                self.log_file,
                stdout_file=stdout_path,
                echo=self.logger if self.verbose else None,
                timeout=self.timeout,
            )
        except ExternalToolError as e:
            self.logger.error(f"{e}: {e.stderr}")
            status = e.returncode if e.returncode else -1
        except OSError as e:
            # log file or output file could not be opened
            self.logger.error(f"I/O error running {self.tool_name}: {e}")
            status = -1

        if status != 0:
            for path in (*outputs, stdout_path):
                remove_if_exists(path)
        return status

    def _run_stage(
        self,
        cmd: Sequence[str],
        outputs: Sequence[Optional[Path]] = (),
        stdout_path: Optional[Path] = None,
        what: str = "",
    ) -> bool:
        """Invoke ``cmd`` and log a failure; returns True on success."""
        status = self.invoke(cmd, outputs=outputs, stdout_path=stdout_path)
        if status != 0:
            self.logger.error(
                f"{what or self.tool_name}: "
                + LogTemplates.TOOL_FAILURE.format(
                    tool_name=self.tool_name, exit_code=status, log_file=self.log_file
                )
            )
            return False
        return True
