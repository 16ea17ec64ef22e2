"""Section catalog and generation API routes."""

import logging

from fastapi import APIRouter, Depends, HTTPException, Query, status

from sectionforge.api.deps import get_section_service
from sectionforge.api.schemas import (
    ArtifactResponse,
    AttemptResponse,
    CategoryListResponse,
    GenerateSectionRequest,
    GenerateSectionResponse,
    SearchResponse,
    SearchResult,
    SectionDetail,
    SectionListResponse,
    SectionSummary,
)
from sectionforge.core.exceptions import SectionForgeError
from sectionforge.services.sections import GenerationRequest, SectionService
from sectionforge.strategies.matching.resolver import parse_references

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/sections", tags=["sections"])


# =============================================================================
# Catalog Endpoints
# =============================================================================


@router.get("", response_model=SectionListResponse)
def list_sections(
    category: str | None = Query(default=None, description="Only sections of this category"),
    service: SectionService = Depends(get_section_service),
) -> SectionListResponse:
    """List the catalog in catalog order, optionally filtered by category."""
    templates = service.list_templates(category)
    return SectionListResponse(
        sections=[SectionSummary.from_template(t) for t in templates],
        total=len(templates),
    )


@router.get("/categories", response_model=CategoryListResponse)
def list_categories(
    service: SectionService = Depends(get_section_service),
) -> CategoryListResponse:
    return CategoryListResponse(categories=service.categories())


@router.get("/search", response_model=SearchResponse)
def search_sections(
    query: str = Query(default="", description="Free-text query"),
    limit: int = Query(default=10, ge=1, le=50),
    exclude: str | None = Query(default=None, description="Comma separated section ids to skip"),
    service: SectionService = Depends(get_section_service),
) -> SearchResponse:
    """Rank the catalog against a free-text query.

    Args:
        query: Query text; empty returns the catalog in order.
        limit: Maximum number of results.
        exclude: Comma separated identifiers to leave out.
        service: Section service.

    Returns:
        Ranked results with score and match reason.
    """
    candidates = service.search(
        query,
        max_results=limit,
        exclude_ids=parse_references(exclude or ""),
    )
    results = [SearchResult.from_candidate(c) for c in candidates]
    return SearchResponse(query=query, results=results, total=len(results))


@router.get("/{section_id}", response_model=SectionDetail)
def get_section(
    section_id: str,
    service: SectionService = Depends(get_section_service),
) -> SectionDetail:
    """Return one section with its assembled code.

    Raises:
        HTTPException: 404 if the section does not exist.
    """
    template = service.get_template(section_id)
    if template is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Section not found: {section_id}",
        )
    return SectionDetail.from_template_with_code(template, service.assembler.assemble(template))


# =============================================================================
# Generation Endpoints
# =============================================================================


@router.post("/generate", response_model=GenerateSectionResponse)
async def generate_sections(
    request: GenerateSectionRequest,
    service: SectionService = Depends(get_section_service),
) -> GenerateSectionResponse:
    """Generate sections from identifiers or a description.

    Domain errors are translated by the application's exception handlers:
    no match -> 404, no credential -> 503, every provider failed -> 502.

    Args:
        request: Generation request.
        service: Section service.

    Returns:
        The artifacts, their source and the provider attempts.
    """
    try:
        logger.info(f"Generate request (mode={request.mode}, max_results={request.max_results})")

        result = await service.generate(
            GenerationRequest(
                prompt=request.prompt,
                excluded_ids=tuple(request.excluded_ids),
                max_results=request.max_results,
                base_template_id=request.base_template_id,
                customizations=request.customizations,
            ),
            mode=request.mode,
        )

        return GenerateSectionResponse(
            artifacts=[ArtifactResponse.from_artifact(a) for a in result.artifacts],
            source=result.source,
            attempts=[AttemptResponse.from_attempt(a) for a in result.attempts],
        )

    except (HTTPException, SectionForgeError):
        raise
    except Exception as e:
        logger.error(f"Section generation failed: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Section generation failed",
        ) from e
