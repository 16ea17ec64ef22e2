"""Component Factory for strategy instantiation.

The Factory Pattern allows the application to instantiate
different strategy implementations at runtime based on
configuration or environment variables.
"""

import logging

import httpx

from sectionforge.core.config import Settings, get_settings
from sectionforge.interfaces.catalog import BaseCatalogRepository
from sectionforge.interfaces.ranker import BaseRanker
from sectionforge.interfaces.sink import BasePersistenceSink
from sectionforge.services.sections import SectionService
from sectionforge.strategies.catalog import FileSystemCatalog
from sectionforge.strategies.generation import (
    ResilientGenerationClient,
    ResponseSplitter,
    SectionAssembler,
)
from sectionforge.strategies.matching import LexicalRanker, ReferenceResolver
from sectionforge.strategies.persistence import FileSystemSink, NullSink
from sectionforge.strategies.providers import ProviderRegistry

logger = logging.getLogger(__name__)


class ComponentFactory:
    """Factory for creating component instances based on configuration.

    Example:
        ```python
        settings = get_settings()
        factory = ComponentFactory(settings)

        catalog = factory.get_catalog()
        client = factory.get_generation_client()
        service = factory.get_section_service()
        ```
    """

    def __init__(self, settings: Settings | None = None) -> None:
        """Initialize the factory with optional settings.

        Args:
            settings: Application settings. If None, uses global settings.
        """
        self._settings = settings or get_settings()
        self._catalog_cache: BaseCatalogRepository | None = None
        self._ranker_cache: BaseRanker | None = None
        self._registry_cache: ProviderRegistry | None = None
        self._client_cache: ResilientGenerationClient | None = None
        self._sink_cache: BasePersistenceSink | None = None
        self._service_cache: SectionService | None = None

    @property
    def settings(self) -> Settings:
        return self._settings

    def get_catalog(self, catalog_type: str | None = None) -> BaseCatalogRepository:
        """Get a catalog repository based on the specified type.

        Args:
            catalog_type: The catalog type to instantiate. If None, uses settings.

        Returns:
            A BaseCatalogRepository implementation instance.

        Raises:
            ValueError: If the catalog type is unknown.
        """
        if self._catalog_cache is None or catalog_type is not None:
            catalog_type = catalog_type or self._settings.catalog_type

            logger.info(f"Instantiating catalog: {catalog_type}")

            match catalog_type:
                case "filesystem":
                    self._catalog_cache = FileSystemCatalog(self._settings.sections_dir)
                case _:
                    raise ValueError(
                        f"Unknown catalog type: {catalog_type}. "
                        f"Valid options: 'filesystem'"
                    )

        return self._catalog_cache

    def get_ranker(self) -> BaseRanker:
        if self._ranker_cache is None:
            logger.info("Instantiating lexical ranker")
            self._ranker_cache = LexicalRanker()
        return self._ranker_cache

    def get_resolver(self) -> ReferenceResolver:
        return ReferenceResolver(self.get_catalog(), self.get_ranker())

    def get_provider_registry(self) -> ProviderRegistry:
        if self._registry_cache is None:
            logger.info("Instantiating provider registry")
            self._registry_cache = ProviderRegistry.from_settings(self._settings)
        return self._registry_cache

    def get_generation_client(self, http_client: httpx.AsyncClient | None = None) -> ResilientGenerationClient:
        """Get the resilient generation client.

        Args:
            http_client: Optional HTTP client. When provided, bypasses the cache.

        Returns:
            A ResilientGenerationClient configured from settings.
        """
        if http_client is not None:
            return ResilientGenerationClient.from_settings(
                self._settings,
                registry=self.get_provider_registry(),
                http_client=http_client,
            )

        if self._client_cache is None:
            logger.info("Instantiating generation client")
            self._client_cache = ResilientGenerationClient.from_settings(
                self._settings,
                registry=self.get_provider_registry(),
            )
        return self._client_cache

    def get_splitter(self) -> ResponseSplitter:
        return ResponseSplitter(min_fragment_length=self._settings.min_fragment_length)

    def get_assembler(self) -> SectionAssembler:
        return SectionAssembler()

    def get_sink(self, sink_type: str | None = None) -> BasePersistenceSink:
        """Get a persistence sink based on the specified type.

        Args:
            sink_type: The sink type to instantiate. If None, uses settings.

        Returns:
            A BasePersistenceSink implementation instance.

        Raises:
            ValueError: If the sink type is unknown.
        """
        if self._sink_cache is None or sink_type is not None:
            sink_type = sink_type or self._settings.sink_type

            logger.info(f"Instantiating persistence sink: {sink_type}")

            match sink_type:
                case "filesystem":
                    self._sink_cache = FileSystemSink(self._settings.sections_dir)
                case "null":
                    self._sink_cache = NullSink()
                case _:
                    raise ValueError(
                        f"Unknown sink type: {sink_type}. "
                        f"Valid options: 'filesystem', 'null'"
                    )

        return self._sink_cache

    def get_section_service(self) -> SectionService:
        if self._service_cache is None:
            logger.info("Instantiating section service")
            self._service_cache = SectionService(
                catalog=self.get_catalog(),
                ranker=self.get_ranker(),
                resolver=self.get_resolver(),
                client=self.get_generation_client(),
                splitter=self.get_splitter(),
                assembler=self.get_assembler(),
                sink=self.get_sink(),
                settings=self._settings,
            )
        return self._service_cache

    def clear_cache(self) -> None:
        """Clear all cached component instances.

        This forces new instances to be created on next access.
        """
        self._catalog_cache = None
        self._ranker_cache = None
        self._registry_cache = None
        self._client_cache = None
        self._sink_cache = None
        self._service_cache = None
        logger.debug("Component factory cache cleared")

