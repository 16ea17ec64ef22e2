"""Section service.

Orchestrates catalog matching and AI generation behind one facade used
by the HTTP API and the tests. The catalog is reloaded on every call.
"""

import asyncio
import logging
import random
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from sectionforge.core.config import Settings, get_settings
from sectionforge.core.exceptions import (
    AllProvidersFailedError,
    ConfigurationError,
    NoMatchError,
    PersistenceWarning,
    ProviderAttempt,
)
from sectionforge.interfaces.catalog import BaseCatalogRepository, Template
from sectionforge.interfaces.ranker import BaseRanker, ScoredCandidate
from sectionforge.interfaces.sink import BasePersistenceSink, GeneratedArtifact
from sectionforge.strategies.generation.assembler import SectionAssembler
from sectionforge.strategies.generation.client import ResilientGenerationClient
from sectionforge.strategies.generation.prompts import build_system_prompt, build_user_prompt
from sectionforge.strategies.generation.splitter import ResponseSplitter
from sectionforge.strategies.matching.resolver import ReferenceResolver

logger = logging.getLogger(__name__)


class GenerationMode(str, Enum):
    LIBRARY = "library"
    AI = "ai"
    AUTO = "auto"


@dataclass(frozen=True)
class GenerationRequest:
    """A caller's request for sections.

    Attributes:
        prompt: Identifier list or natural-language description.
        excluded_ids: Sections the caller has already seen.
        max_results: Maximum number of artifacts returned.
        base_template_id: Catalog section embedded in the AI prompt as a
            starting point.
        customizations: Variable values substituted into catalog templates
            that use ``{{name}}`` placeholders.
    """

    prompt: str
    excluded_ids: tuple[str, ...] = ()
    max_results: int = 1
    base_template_id: str | None = None
    customizations: Mapping[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class GenerationResult:
    """Artifacts returned by `SectionService.generate`.

    Attributes:
        artifacts: Ordered artifacts, at most the requested count.
        source: "ai" or "library".
        attempts: Provider attempts made, including failed ones before a
            library fallback.
    """

    artifacts: list[GeneratedArtifact]
    source: str
    attempts: tuple[ProviderAttempt, ...] = field(default_factory=tuple)


class SectionService:
    """Facade over catalog, ranking, generation and persistence."""

    def __init__(
        self,
        catalog: BaseCatalogRepository,
        ranker: BaseRanker,
        resolver: ReferenceResolver,
        client: ResilientGenerationClient,
        splitter: ResponseSplitter,
        assembler: SectionAssembler,
        sink: BasePersistenceSink,
        settings: Settings | None = None,
        rng: random.Random | None = None,
    ) -> None:
        self._catalog = catalog
        self._ranker = ranker
        self._resolver = resolver
        self._client = client
        self._splitter = splitter
        self._assembler = assembler
        self._sink = sink
        self._settings = settings or get_settings()
        self._rng = rng or random.Random()
        self._pending: set[asyncio.Task] = set()

    @property
    def assembler(self) -> SectionAssembler:
        return self._assembler

    # =========================================================================
    # Catalog
    # =========================================================================

    def list_templates(self, category: str | None = None) -> list[Template]:
        templates = self._catalog.load()
        if category:
            templates = [t for t in templates if t.category == category.strip().lower()]
        return templates

    def get_template(self, template_id: str) -> Template | None:
        return self._catalog.get(template_id)

    def categories(self) -> list[str]:
        return self._catalog.categories()

    def search(
        self,
        query: str,
        max_results: int | None = None,
        exclude_ids: Iterable[str] = (),
    ) -> list[ScoredCandidate]:
        """Rank the catalog against a query.

        An empty query returns the catalog itself, unscored, in catalog order.
        """
        limit = max_results or self._settings.default_max_results
        templates = self._catalog.load()

        if not query or not query.strip():
            excluded = {i.lower() for i in exclude_ids}
            return [
                ScoredCandidate(template=t, score=0, match_reason="catalog order")
                for t in templates
                if t.id.lower() not in excluded
            ][:limit]

        return self._ranker.rank(query, templates, exclude_ids=exclude_ids, max_results=limit)

    def from_library(self, request: GenerationRequest) -> list[GeneratedArtifact]:
        """Answer a request from the catalog.

        A single requested section is picked at random among the matches,
        avoiding `excluded_ids` while alternatives remain. Several requested
        sections are returned in resolution order.

        Raises:
            NoMatchError: If nothing in the catalog matches.
        """
        if request.max_results <= 1:
            template = self._resolver.pick(request.prompt, exclude_ids=request.excluded_ids, rng=self._rng)
            templates = [template]
        else:
            templates = self._resolver.resolve(
                request.prompt,
                max_results=request.max_results,
                exclude_ids=request.excluded_ids,
            )
            if not templates:
                raise NoMatchError(request.prompt)

        logger.info(f"Library match for {request.prompt!r}: {[t.id for t in templates]}")
        return [self._assembler.to_artifact(t, request.customizations) for t in templates]

    # =========================================================================
    # Generation
    # =========================================================================

    async def generate(
        self,
        request: GenerationRequest,
        mode: GenerationMode | str = GenerationMode.AUTO,
    ) -> GenerationResult:
        """Produce sections for a request.

        Args:
            request: The caller's request.
            mode: "library", "ai" or "auto". Auto tries AI generation and
                falls back to the catalog.

        Returns:
            The artifacts with their source and provider attempts.

        Raises:
            NoMatchError: If neither path produced anything.
            ConfigurationError: In "ai" mode, if no provider has a credential.
            AllProvidersFailedError: In "ai" mode, if every provider failed.
        """
        mode = GenerationMode(mode)

        if mode is GenerationMode.LIBRARY:
            artifacts = await asyncio.to_thread(self.from_library, request)
            return GenerationResult(artifacts=artifacts, source="library")

        try:
            return await self._generate_ai(request)
        except (ConfigurationError, AllProvidersFailedError, NoMatchError) as e:
            if mode is GenerationMode.AI:
                raise
            attempts = e.attempts
            logger.warning(f"AI generation unavailable, falling back to library: {e}")

        try:
            artifacts = await asyncio.to_thread(self.from_library, request)
        except NoMatchError:
            raise NoMatchError(request.prompt, attempts=attempts) from None

        return GenerationResult(artifacts=artifacts, source="library", attempts=attempts)

    async def _generate_ai(self, request: GenerationRequest) -> GenerationResult:
        base_body = None
        if request.base_template_id:
            base = await asyncio.to_thread(self._catalog.get, request.base_template_id)
            if base is None:
                raise NoMatchError(
                    request.base_template_id,
                    f"Unknown base template: {request.base_template_id}",
                )
            base_body = self._assembler.assemble(base, request.customizations)

        outcome = await self._client.generate(
            build_user_prompt(request.prompt, request.max_results),
            build_system_prompt(base_body),
        )

        artifacts = self._splitter.split(outcome.text, request.prompt, request.max_results)
        if not artifacts:
            raise NoMatchError(
                request.prompt,
                "Generated output contained no usable sections",
                attempts=outcome.attempts,
            )

        self._schedule_persist(artifacts)
        return GenerationResult(artifacts=artifacts, source="ai", attempts=outcome.attempts)

    # =========================================================================
    # Persistence
    # =========================================================================

    def _schedule_persist(self, artifacts: list[GeneratedArtifact]) -> None:
        for artifact in artifacts:
            task = asyncio.create_task(self._persist(artifact))
            self._pending.add(task)
            task.add_done_callback(self._pending.discard)

    async def _persist(self, artifact: GeneratedArtifact) -> None:
        try:
            await asyncio.to_thread(self._sink.save, artifact)
        except Exception as e:
            warning = PersistenceWarning(f"Could not save generated section {artifact.id}: {e}")
            logger.warning(str(warning), exc_info=not isinstance(e, OSError))

    @property
    def pending_writes(self) -> int:
        return len(self._pending)

    async def drain(self) -> None:
        """Wait for every scheduled write to finish."""
        if self._pending:
            logger.info(f"Waiting for {len(self._pending)} pending section write(s)")
            await asyncio.gather(*list(self._pending))
