"""Generated artifact model and persistence sink interface."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class GeneratedArtifact:
    """A section returned to the caller.

    Attributes:
        body: Section code; always holds exactly one configuration block.
        id: Sanitized identifier.
        name: Display name.
        description: Short description.
        preview_ref: Optional preview reference.
        source: "library" for catalog matches, "ai" for generated sections.
    """

    body: str
    id: str
    name: str
    description: str = ""
    preview_ref: str | None = None
    source: str = "library"


class BasePersistenceSink(ABC):
    """Abstract base class for write-through storage of generated sections."""

    @abstractmethod
    def save(self, artifact: GeneratedArtifact) -> Path | None:
        """Persist one artifact.

        Args:
            artifact: The artifact to store.

        Returns:
            Where it was written, or None if the sink discards writes.

        Raises:
            OSError: If the write fails.
        """
        ...
