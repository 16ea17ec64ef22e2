"""Abstract base class for section catalog strategies.

The Strategy Pattern allows the catalog to be read from different
storage backends while the ranking code stays unchanged.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any


@dataclass(frozen=True)
class VariableDefinition:
    """A configurable setting declared by a template.

    Attributes:
        type: Setting type (text, textarea, color, ...).
        default: Default value substituted when the caller gives none.
        label: Human-readable label shown in the theme editor.
        description: Optional help text.
    """

    type: str = "text"
    default: Any = ""
    label: str = ""
    description: str = ""


@dataclass(frozen=True)
class Template:
    """A catalog entry.

    Attributes:
        id: Unique, stable slug derived from the source file name.
        name: Display name (schema name, comment metadata or file name).
        description: Free-text description.
        tags: Ordered, de-duplicated tags.
        category: Category inferred from the identifier.
        body: Full template text, configuration block included.
        variables: Setting id -> definition.
        preview_ref: Opaque reference to a desktop preview image.
        mobile_preview_ref: Opaque reference to a mobile preview image.
        source_path: File the entry was loaded from, if any.
        has_schema: False when the body had no usable configuration block.
    """

    id: str
    name: str
    body: str
    description: str = ""
    tags: tuple[str, ...] = ()
    category: str = "custom"
    variables: dict[str, VariableDefinition] = field(default_factory=dict)
    preview_ref: str | None = None
    mobile_preview_ref: str | None = None
    source_path: Path | None = None
    has_schema: bool = False


class BaseCatalogRepository(ABC):
    """Abstract base class for catalog repositories.

    Implementations reload their source on every `load` call; no state
    is shared between calls.
    """

    @abstractmethod
    def load(self) -> list[Template]:
        """Load every template in the catalog.

        Returns:
            Templates in a deterministic iteration order. Never empty.
        """
        ...

    def get(self, template_id: str) -> Template | None:
        """Look up a template by identifier (case-insensitive).

        Args:
            template_id: The identifier to look for.

        Returns:
            The matching template, or None.
        """
        wanted = template_id.strip().lower()
        for template in self.load():
            if template.id.lower() == wanted:
                return template
        return None

    def categories(self) -> list[str]:
        """Return the sorted distinct categories present in the catalog."""
        return sorted({t.category for t in self.load()})
