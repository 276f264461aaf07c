"""Ownership of the files a pipeline run produces.

Every stage output is registered here, either as a temporary (deleted, or
archived with ``--keep-tmp``) or as a published result (renamed to its final
name). The ledger is settled exactly once, at the end of the run.
"""

from __future__ import annotations

import shutil
import tempfile
from pathlib import Path
from types import MappingProxyType
from typing import Mapping, Optional

from mapcov.core.pipeline_types import Artifact, Lifecycle
from mapcov.exceptions import PipelineError
from mapcov.utils.logging import get_logger

logger = get_logger("ledger")


class ArtifactLedger:
    """Registry of temporary and published artifacts of one run.

    Not thread safe; only the orchestrating thread touches it.
    """

    def __init__(self, output_dir: Path):
        self.output_dir = Path(output_dir)
        self._artifacts: dict[Path, Artifact] = {}
        self._finalized = False

    @property
    def finalized(self) -> bool:
        return self._finalized

    @property
    def artifacts(self) -> Mapping[Path, Artifact]:
        return MappingProxyType(self._artifacts)

    @property
    def temporaries(self) -> list[Path]:
        return [
            a.path for a in self._artifacts.values() if a.lifecycle is Lifecycle.TEMPORARY
        ]

    @property
    def published(self) -> dict[Path, str]:
        return {
            a.path: a.published_name
            for a in self._artifacts.values()
            if a.lifecycle is Lifecycle.FINAL
        }

    def _check_open(self) -> None:
        if self._finalized:
            raise PipelineError("Artifact ledger has already been finalized")

    def track(self, path: Optional[Path], producer: Optional[str] = None) -> Optional[Artifact]:
        """Register ``path`` as temporary. None and known paths are ignored."""
        self._check_open()
        if path is None:
            return None
        path = Path(path)
        existing = self._artifacts.get(path)
        if existing is not None:
            return existing
        artifact = Artifact(path=path, lifecycle=Lifecycle.TEMPORARY, producer=producer)
        self._artifacts[path] = artifact
        return artifact

    def publish(self, path: Path, name: str, producer: Optional[str] = None) -> Artifact:
        """Mark ``path`` as a result to be renamed to ``name`` at the end.

        A path previously tracked as temporary is promoted.
        """
        self._check_open()
        path = Path(path)
        artifact = self._artifacts.get(path)
        if artifact is None:
            artifact = Artifact(path=path, producer=producer)
            self._artifacts[path] = artifact
        artifact.lifecycle = Lifecycle.FINAL
        artifact.published_name = name
        if producer is not None:
            artifact.producer = producer
        return artifact

    def finalize(self, keep: bool = False) -> Optional[Path]:
        """Settle every artifact; may be called once.

        Temporaries are deleted, or with ``keep`` moved into a fresh ``tmp*``
        directory in the output directory (returned). Published artifacts are
        then renamed in place. Per-file failures are logged and skipped.
        """
        self._check_open()
        self._finalized = True

        archive: Optional[Path] = None
        temporaries = self.temporaries
        if keep:
            archive = self._archive(temporaries)
        else:
            self._delete(temporaries)

        for path, name in self.published.items():
            target = path.parent / name
            try:
                path.replace(target)
                logger.debug(f"Published {path.name} as {name}")
            except OSError as e:
                logger.error(f"Cannot rename {path} to {name}: {e}")

        return archive

    def _delete(self, paths: list[Path]) -> None:
        for path in paths:
            try:
                path.unlink(missing_ok=True)
            except OSError as e:
                logger.error(f"Cannot delete temporary file {path}: {e}")

    def _archive(self, paths: list[Path]) -> Optional[Path]:
        try:
            self.output_dir.mkdir(parents=True, exist_ok=True)
            archive = Path(tempfile.mkdtemp(prefix="tmp", dir=self.output_dir))
        except OSError as e:
            logger.error(f"Cannot create temporary file directory: {e}")
            return None

        logger.info(f"Keeping temporary files in {archive}")
        for path in paths:
            if not path.exists():
                continue
            target = archive / path.name
            try:
                if target.exists():
                    target.unlink()
                shutil.move(str(path), str(target))
            except OSError as e:
                logger.error(f"Cannot move {path} to {archive}: {e}")
        return archive
