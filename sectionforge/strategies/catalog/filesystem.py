"""File-system section catalog.

Reads ``.liquid`` section files from a directory and turns each one into a
normalized catalog entry. Loading is lenient: a file without a usable
configuration block still produces an entry, flagged as schema-less.
"""

import logging
import re
from pathlib import Path
from typing import Any

from sectionforge.interfaces.catalog import BaseCatalogRepository, Template, VariableDefinition
from sectionforge.strategies.catalog.categories import infer_category
from sectionforge.strategies.catalog.defaults import get_default_templates
from sectionforge.strategies.liquid import (
    clean_section_name,
    extract_comment_metadata,
    parse_schema,
)

logger = logging.getLogger(__name__)

_FILENAME_PREFIX_RE = re.compile(r"^(?:sg|ss)-", re.IGNORECASE)


def infer_name_from_filename(filename: str) -> str:
    """Infer a display name from a section file name.

    Example: ``sg-hero-banner.liquid`` -> ``Hero Banner``.
    """
    stem = re.sub(r"\.(liquid|html)$", "", filename, flags=re.IGNORECASE)
    stem = _FILENAME_PREFIX_RE.sub("", stem)
    words = [w for w in re.split(r"[-_]", stem) if w]
    return " ".join(w[:1].upper() + w[1:].lower() for w in words)


def _variables_from_schema(schema: dict[str, Any]) -> dict[str, VariableDefinition]:
    variables: dict[str, VariableDefinition] = {}
    settings = schema.get("settings")
    if not isinstance(settings, list):
        return variables
    for setting in settings:
        if not isinstance(setting, dict) or not setting.get("id"):
            continue
        setting_id = str(setting["id"])
        variables[setting_id] = VariableDefinition(
            type=str(setting.get("type", "text")),
            default=setting.get("default", ""),
            label=str(setting.get("label") or setting_id),
            description=str(setting.get("info", "")),
        )
    return variables


def _dedupe(items: list[str]) -> tuple[str, ...]:
    seen: set[str] = set()
    result: list[str] = []
    for item in items:
        tag = item.strip()
        if tag and tag.lower() not in seen:
            seen.add(tag.lower())
            result.append(tag)
    return tuple(result)


class FileSystemCatalog(BaseCatalogRepository):
    """Catalog backed by a directory of ``.liquid`` files.

    The directory is rescanned on every `load` call.

    Attributes:
        sections_dir: Directory holding the section files.
        image_route: Route prefix used to build preview references.
    """

    def __init__(
        self,
        sections_dir: Path | str,
        image_route: str = "/sections/images",
    ) -> None:
        """Initialize the catalog.

        Args:
            sections_dir: Directory holding the section files.
            image_route: Route prefix used to build preview references.
        """
        self._sections_dir = Path(sections_dir)
        self._image_route = image_route.rstrip("/")

    @property
    def sections_dir(self) -> Path:
        return self._sections_dir

    def load(self) -> list[Template]:
        """Load every section in the directory.

        Returns:
            Templates sorted by file name, or the built-in fallback catalog if
            the directory is missing, unreadable or holds no usable file.
        """
        try:
            files = sorted(
                p
                for p in self._sections_dir.iterdir()
                if p.is_file() and p.suffix.lower() == ".liquid" and not p.name.startswith(".")
            )
        except OSError as e:
            logger.warning(
                f"Section directory unavailable at {self._sections_dir} ({e}). Using default templates."
            )
            return get_default_templates()

        logger.debug(f"Found {len(files)} section files in {self._sections_dir}")

        templates: list[Template] = []
        error_count = 0
        for path in files:
            try:
                template = self.load_file(path)
            except (OSError, UnicodeDecodeError) as e:
                logger.error(f"Error loading section from {path.name}: {e}")
                error_count += 1
                continue
            if template is not None:
                templates.append(template)

        if not templates:
            logger.warning("No sections loaded, using default templates")
            return get_default_templates()

        logger.info(
            f"Loaded {len(templates)} sections"
            + (f", {error_count} errors" if error_count else "")
        )
        return templates

    def load_file(self, path: Path) -> Template | None:
        """Build a catalog entry from one file.

        Args:
            path: Path to a ``.liquid`` file.

        Returns:
            The entry, or None if the file is empty.

        Raises:
            OSError: If the file cannot be read.
        """
        content = path.read_text(encoding="utf-8")
        if not content.strip():
            logger.warning(f"Skipping empty section file: {path.name}")
            return None

        template_id = path.stem.strip().lower()
        schema = parse_schema(content)
        comments = extract_comment_metadata(content)

        if schema is None:
            logger.debug(f"{path.name} has no usable schema block; flagged schema-less")

        raw_name = (schema or {}).get("name") or comments.get("name") or infer_name_from_filename(path.name)
        name = clean_section_name(str(raw_name)) or infer_name_from_filename(path.name)

        tags: list[str] = list(comments.get("tags", []))
        schema_tags = (schema or {}).get("tags")
        if isinstance(schema_tags, list):
            tags.extend(str(t) for t in schema_tags)

        image_name = f"{path.stem}.png"
        return Template(
            id=template_id,
            name=name,
            description=comments.get("description", ""),
            tags=_dedupe(tags),
            category=infer_category(template_id),
            body=content,
            variables=_variables_from_schema(schema) if schema else {},
            preview_ref=f"{self._image_route}/{image_name}",
            mobile_preview_ref=f"{self._image_route}/mobile/{image_name}",
            source_path=path,
            has_schema=schema is not None,
        )
