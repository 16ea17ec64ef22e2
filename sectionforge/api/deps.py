"""FastAPI dependencies for dependency injection."""

from fastapi import Depends, Request

from sectionforge.core.factory import ComponentFactory
from sectionforge.services.sections import SectionService


def get_component_factory(request: Request) -> ComponentFactory:
    """Return the factory stored on the application state."""
    return request.app.state.factory


def get_section_service(
    factory: ComponentFactory = Depends(get_component_factory),
) -> SectionService:
    """Dependency for getting the section service.

    Args:
        factory: The application's component factory.

    Returns:
        The cached SectionService.
    """
    return factory.get_section_service()
