"""Concrete strategy implementations."""

from sectionforge.strategies.catalog import (
    FileSystemCatalog,
)
from sectionforge.strategies.generation import (
    ResilientGenerationClient,
    ResponseSplitter,
    SectionAssembler,
)
from sectionforge.strategies.matching import (
    LexicalRanker,
    ReferenceResolver,
)
from sectionforge.strategies.persistence import (
    FileSystemSink,
    NullSink,
)
from sectionforge.strategies.providers import (
    CredentialRouter,
    ProviderRegistry,
)

__all__ = [
    "FileSystemCatalog",
    "ResilientGenerationClient",
    "ResponseSplitter",
    "SectionAssembler",
    "LexicalRanker",
    "ReferenceResolver",
    "FileSystemSink",
    "NullSink",
    "CredentialRouter",
    "ProviderRegistry",
]
