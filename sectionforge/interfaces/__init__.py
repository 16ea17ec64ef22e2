"""Abstract base classes for section resolution and generation strategies."""

from sectionforge.interfaces.catalog import BaseCatalogRepository, Template, VariableDefinition
from sectionforge.interfaces.provider import BaseProvider, ProviderRequest, ProviderResponseError
from sectionforge.interfaces.ranker import BaseRanker, ScoredCandidate
from sectionforge.interfaces.sink import BasePersistenceSink, GeneratedArtifact

__all__ = [
    "BaseCatalogRepository",
    "Template",
    "VariableDefinition",
    "BaseRanker",
    "ScoredCandidate",
    "BaseProvider",
    "ProviderRequest",
    "ProviderResponseError",
    "BasePersistenceSink",
    "GeneratedArtifact",
]
