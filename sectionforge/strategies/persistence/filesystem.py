"""Write-through sinks for generated sections."""

import logging
from pathlib import Path

from sectionforge.interfaces.sink import BasePersistenceSink, GeneratedArtifact
from sectionforge.strategies.liquid import slugify

logger = logging.getLogger(__name__)


class FileSystemSink(BasePersistenceSink):
    """Writes artifacts as ``<id>.liquid`` files into the catalog directory.

    Existing files are never overwritten; a numeric suffix is appended
    instead (``hero-1.liquid``, ``hero-1-2.liquid``, ...).
    """

    def __init__(self, sections_dir: Path | str) -> None:
        self._sections_dir = Path(sections_dir)

    @property
    def sections_dir(self) -> Path:
        return self._sections_dir

    def _target_path(self, artifact_id: str) -> Path:
        stem = slugify(artifact_id)
        candidate = self._sections_dir / f"{stem}.liquid"
        suffix = 2
        while candidate.exists():
            candidate = self._sections_dir / f"{stem}-{suffix}.liquid"
            suffix += 1
        return candidate

    def save(self, artifact: GeneratedArtifact) -> Path:
        """Write one artifact.

        Args:
            artifact: The artifact to store.

        Returns:
            The path written.

        Raises:
            OSError: If the directory cannot be created or the file written.
        """
        self._sections_dir.mkdir(parents=True, exist_ok=True)
        path = self._target_path(artifact.id)
        # "x" mode fails instead of clobbering a file created meanwhile
        with path.open("x", encoding="utf-8") as f:
            f.write(artifact.body)
        logger.info(f"Saved generated section {artifact.id} to {path}")
        return path


class NullSink(BasePersistenceSink):
    """Discards every artifact."""

    def save(self, artifact: GeneratedArtifact) -> None:
        logger.debug(f"Discarding generated section {artifact.id}")
        return None
