"""FastAPI routers and dependencies."""

from sectionforge.api.deps import get_component_factory, get_section_service
from sectionforge.api.sections import router as sections_router

__all__ = [
    "get_component_factory",
    "get_section_service",
    "sections_router",
]
