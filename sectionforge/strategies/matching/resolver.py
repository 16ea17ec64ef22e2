"""Reference resolver.

Decides whether the caller's text is an explicit list of known sections
or a natural-language description, and dispatches accordingly.
"""

import logging
import random
import re
from collections.abc import Iterable, Sequence

from sectionforge.core.exceptions import NoMatchError
from sectionforge.interfaces.catalog import BaseCatalogRepository, Template
from sectionforge.interfaces.ranker import BaseRanker
from sectionforge.strategies.liquid import clean_section_name

logger = logging.getLogger(__name__)

_REFERENCE_SPLIT_RE = re.compile(r"[,\n]")


def parse_references(text: str) -> list[str]:
    """Split text on commas and newlines into trimmed, non-empty references."""
    return [ref.strip() for ref in _REFERENCE_SPLIT_RE.split(text) if ref.strip()]


def find_template(reference: str, catalog: Sequence[Template]) -> Template | None:
    """Resolve one reference against the catalog.

    Priority: exact identifier, exact name (raw or cleaned), then the
    reference as a substring of a name. Matching is case-insensitive.

    Args:
        reference: An identifier or name.
        catalog: Templates in catalog order.

    Returns:
        The first matching template, or None.
    """
    wanted = reference.strip().lower()
    if not wanted:
        return None

    for template in catalog:
        if template.id.lower() == wanted:
            return template

    for template in catalog:
        if wanted in (template.name.lower(), clean_section_name(template.name).lower()):
            return template

    for template in catalog:
        if wanted in template.name.lower():
            return template

    return None


class ReferenceResolver:
    """Resolves free text to an ordered list of templates.

    Short comma/newline separated identifier lists are honored verbatim;
    prose is always ranked.
    """

    def __init__(self, catalog: BaseCatalogRepository, ranker: BaseRanker) -> None:
        """Initialize the resolver.

        Args:
            catalog: Catalog repository, reloaded on every call.
            ranker: Ranker used on the natural-language path.
        """
        self._catalog = catalog
        self._ranker = ranker

    def resolve(
        self,
        free_text: str,
        max_results: int = 10,
        exclude_ids: Iterable[str] = (),
        catalog: Sequence[Template] | None = None,
    ) -> list[Template]:
        """Resolve free text to templates.

        Args:
            free_text: Identifier list or natural-language description.
            max_results: Maximum number of templates returned.
            exclude_ids: Identifiers never returned.
            catalog: Pre-loaded catalog; loaded from the repository if None.

        Returns:
            Templates in the order given (explicit path) or by rank.
        """
        templates = list(catalog) if catalog is not None else self._catalog.load()
        excluded = {i.lower() for i in exclude_ids}
        references = parse_references(free_text)

        resolved = [find_template(ref, templates) for ref in references]
        all_resolved = bool(references) and all(t is not None for t in resolved)
        looks_like_prose = len(references) == 1 and len(references[0].split()) > 2

        if all_resolved and not looks_like_prose:
            logger.info(f"Resolved {len(references)} explicit section reference(s)")
            seen: set[str] = set()
            explicit: list[Template] = []
            for template in resolved:
                if template is None or template.id in seen or template.id.lower() in excluded:
                    continue
                seen.add(template.id)
                explicit.append(template)
            return explicit[:max_results]

        logger.info(f"Ranking natural-language request: {free_text!r}")
        candidates = self._ranker.rank(
            free_text,
            templates,
            exclude_ids=excluded,
            max_results=max_results,
        )
        return [c.template for c in candidates]

    def pick(
        self,
        free_text: str,
        exclude_ids: Iterable[str] = (),
        rng: random.Random | None = None,
    ) -> Template:
        """Pick one template at random among the resolved candidates.

        Previously returned templates are passed as `exclude_ids`; once every
        candidate has been excluded the exclusions are ignored so the caller
        always gets a section.

        Args:
            free_text: Identifier list or description.
            exclude_ids: Identifiers to avoid if possible.
            rng: Random source, for reproducible picks.

        Returns:
            One template.

        Raises:
            NoMatchError: If nothing resolves at all.
        """
        rng = rng or random.Random()
        candidates = self.resolve(free_text, max_results=10)
        if not candidates:
            raise NoMatchError(free_text)

        excluded = {i.lower() for i in exclude_ids}
        available = [t for t in candidates if t.id.lower() not in excluded]
        if not available:
            logger.info("All candidate sections excluded; ignoring exclusions")
            available = candidates

        return rng.choice(available)
