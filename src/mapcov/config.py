"""Configuration management for mapcov."""

from __future__ import annotations

from dataclasses import dataclass, field, asdict
from pathlib import Path
from typing import Optional, Dict, Any
import yaml
from mapcov.exceptions import ConfigurationError
from mapcov.core.pipeline_types import RunFlags

READ_LAYOUTS = ("single", "paired", "both")


@dataclass
class RuntimeConfig:
    """Runtime configuration."""

    log_level: str = "INFO"
    log_file: Optional[Path] = None
    # Move temporary files into a tmp* directory instead of deleting them
    keep_tmp: bool = False
    # Echo external tool output to the console
    verbose: bool = False


@dataclass
class PerformanceConfig:
    """Performance-related configuration."""

    threads: int = 1


@dataclass
class AnalysisConfig:
    """Optional analyses; all off by default."""

    # Minimum mapping quality kept; negative disables the filter
    quality_cutoff: int = -1
    redundancy: bool = False
    mean_coverage: bool = False
    coverage_map: bool = False
    gc_content: bool = False


@dataclass
class ToolConfig:
    """External tool configuration."""

    bowtie2: Dict[str, Any] = field(
        default_factory=lambda: {
            # Report every alignment; redundancy analysis depends on it
            "map_options": ["-a"],
            "force_rebuild": False,
        }
    )
    samtools: Dict[str, Any] = field(default_factory=dict)
    # Either a picard launcher or e.g. ["java", "-jar", "/opt/picard.jar"]
    picard: Dict[str, Any] = field(default_factory=lambda: {"command": ["picard"]})
    bedtools: Dict[str, Any] = field(default_factory=dict)


@dataclass
class Config:
    """Main configuration class."""

    # Inputs (set via CLI or config file)
    forward: Optional[Path] = None
    reverse: Optional[Path] = None
    single: Optional[Path] = None
    reference: Optional[Path] = None
    output_dir: Path = Path(".")

    # Sub-configurations
    runtime: RuntimeConfig = field(default_factory=RuntimeConfig)
    performance: PerformanceConfig = field(default_factory=PerformanceConfig)
    analysis: AnalysisConfig = field(default_factory=AnalysisConfig)
    tools: ToolConfig = field(default_factory=ToolConfig)

    # Convenience properties
    @property
    def threads(self) -> int:
        return self.performance.threads

    @threads.setter
    def threads(self, value: int):
        self.performance.threads = value

    @property
    def keep_tmp(self) -> bool:
        return self.runtime.keep_tmp

    @keep_tmp.setter
    def keep_tmp(self, value: bool):
        self.runtime.keep_tmp = value

    def read_layout(self) -> str:
        """Return which reads are mapped: 'single', 'paired' or 'both'.

        Raises:
            ConfigurationError: If only one mate file is given or no reads at all
        """
        has_forward = self.forward is not None
        has_reverse = self.reverse is not None
        if has_forward != has_reverse:
            raise ConfigurationError(
                "Paired-end mapping needs both forward (-1) and reverse (-2) reads"
            )
        paired = has_forward and has_reverse
        single = self.single is not None
        if paired and single:
            return "both"
        if paired:
            return "paired"
        if single:
            return "single"
        raise ConfigurationError(
            "No reads given: provide single-end reads (-s) and/or paired-end reads (-1/-2)"
        )

    def run_flags(self) -> RunFlags:
        return RunFlags(
            keep_tmp=self.runtime.keep_tmp,
            quality_cutoff=self.analysis.quality_cutoff,
            redundancy=self.analysis.redundancy,
            mean_coverage=self.analysis.mean_coverage,
            coverage_map=self.analysis.coverage_map,
            gc_content=self.analysis.gc_content,
            verbose=self.runtime.verbose,
        )

    def validate(self) -> None:
        """Validate configuration."""
        if not self.reference:
            raise ConfigurationError("Reference genome is required")
        self.read_layout()

        for label, path in (
            ("Forward reads", self.forward),
            ("Reverse reads", self.reverse),
            ("Single-end reads", self.single),
            ("Reference", self.reference),
        ):
            if path is not None and not Path(path).exists():
                raise ConfigurationError(f"{label} file not found: {path}")

        if self.output_dir.exists() and not self.output_dir.is_dir():
            raise ConfigurationError(f"Output path is not a directory: {self.output_dir}")

        # Validate numeric ranges
        if self.performance.threads < 1:
            raise ConfigurationError("Threads must be >= 1")

        map_options = self.tools.bowtie2.get("map_options", [])
        if not isinstance(map_options, (list, tuple)):
            raise ConfigurationError("tools.bowtie2.map_options must be a list")

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""

        def path_to_str(obj):
            if isinstance(obj, Path):
                return str(obj)
            elif isinstance(obj, dict):
                return {k: path_to_str(v) for k, v in obj.items()}
            elif isinstance(obj, (list, tuple)):
                return [path_to_str(item) for item in obj]
            return obj

        return path_to_str(asdict(self))


def load_config(path: Path) -> Config:
    """Load configuration from YAML file."""
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in {path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigurationError(f"Configuration file {path} must contain a mapping")

    def build_config(data: Dict[str, Any]) -> Config:
        cfg = Config()

        # Direct attributes
        for key in ("forward", "reverse", "single", "reference", "output_dir"):
            if data.get(key) is not None:
                setattr(cfg, key, Path(data[key]))
        if data.get("threads") is not None:
            cfg.performance.threads = data["threads"]

        # Runtime config
        for key, value in (data.get("runtime") or {}).items():
            if hasattr(cfg.runtime, key):
                if key == "log_file" and value:
                    value = Path(value)
                setattr(cfg.runtime, key, value)

        # Performance config
        for key, value in (data.get("performance") or {}).items():
            if hasattr(cfg.performance, key):
                setattr(cfg.performance, key, value)

        # Analysis config
        for key, value in (data.get("analysis") or {}).items():
            if not hasattr(cfg.analysis, key):
                raise ConfigurationError(f"Unknown analysis option: {key}")
            setattr(cfg.analysis, key, value)

        # Tool config; given keys override the defaults of that tool
        for tool, params in (data.get("tools") or {}).items():
            if hasattr(cfg.tools, tool):
                if params is None:
                    continue
                if not isinstance(params, dict):
                    raise ConfigurationError(
                        f"Invalid tools.{tool} config; expected mapping, "
                        f"got {type(params).__name__}"
                    )
                merged = dict(getattr(cfg.tools, tool))
                merged.update(params)
                setattr(cfg.tools, tool, merged)

        return cfg

    return build_config(data)


def save_config(cfg: Config, path: Path) -> None:
    """Save configuration to YAML file."""
    data = cfg.to_dict()
    with open(path, "w", encoding="utf-8") as f:
        yaml.dump(data, f, default_flow_style=False, sort_keys=False)
