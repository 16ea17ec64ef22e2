"""Application services."""

from sectionforge.services.sections import (
    GenerationMode,
    GenerationRequest,
    GenerationResult,
    SectionService,
)

__all__ = [
    "GenerationMode",
    "GenerationRequest",
    "GenerationResult",
    "SectionService",
]
