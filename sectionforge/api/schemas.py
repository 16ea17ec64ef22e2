"""API request and response schemas.

Pydantic v2 models for API serialization/deserialization.
"""

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

from sectionforge.core.exceptions import ProviderAttempt
from sectionforge.interfaces.catalog import Template
from sectionforge.interfaces.ranker import ScoredCandidate
from sectionforge.interfaces.sink import GeneratedArtifact

# =============================================================================
# Catalog Schemas
# =============================================================================


class VariableSchema(BaseModel):
    """A configurable setting of a section."""

    type: str
    default: Any = None
    label: str = ""
    description: str = ""


class SectionSummary(BaseModel):
    """Catalog entry without its code."""

    id: str
    name: str
    description: str = ""
    category: str
    tags: list[str] = Field(default_factory=list)
    preview_ref: str | None = None
    mobile_preview_ref: str | None = None
    has_schema: bool = False

    @classmethod
    def from_template(cls, template: Template) -> "SectionSummary":
        return cls(
            id=template.id,
            name=template.name,
            description=template.description,
            category=template.category,
            tags=list(template.tags),
            preview_ref=template.preview_ref,
            mobile_preview_ref=template.mobile_preview_ref,
            has_schema=template.has_schema,
        )


class SectionDetail(SectionSummary):
    """Catalog entry with assembled code and variables."""

    code: str = Field(description="Section code with exactly one schema block")
    variables: dict[str, VariableSchema] = Field(default_factory=dict)

    @classmethod
    def from_template_with_code(cls, template: Template, code: str) -> "SectionDetail":
        summary = SectionSummary.from_template(template)
        return cls(
            **summary.model_dump(),
            code=code,
            variables={
                key: VariableSchema(
                    type=var.type,
                    default=var.default,
                    label=var.label,
                    description=var.description,
                )
                for key, var in template.variables.items()
            },
        )


class SectionListResponse(BaseModel):
    """Response for listing the catalog."""

    sections: list[SectionSummary]
    total: int


class CategoryListResponse(BaseModel):
    """Response for listing categories."""

    categories: list[str]


class SearchResult(SectionSummary):
    """A ranked catalog entry."""

    score: float
    match_reason: str

    @classmethod
    def from_candidate(cls, candidate: ScoredCandidate) -> "SearchResult":
        return cls(
            **SectionSummary.from_template(candidate.template).model_dump(),
            score=candidate.score,
            match_reason=candidate.match_reason,
        )


class SearchResponse(BaseModel):
    """Response for catalog search."""

    query: str
    results: list[SearchResult]
    total: int


# =============================================================================
# Generation Schemas
# =============================================================================


class GenerateSectionRequest(BaseModel):
    """Request schema for section generation."""

    model_config = ConfigDict(str_strip_whitespace=True)

    prompt: str = Field(
        min_length=10,
        description="Section identifiers (comma or newline separated) or a description",
    )
    excluded_ids: list[str] = Field(
        default_factory=list,
        description="Sections already returned to the caller",
    )
    max_results: int = Field(default=1, ge=1, le=10)
    mode: Literal["library", "ai", "auto"] = Field(
        default="auto",
        description="'library' matches the catalog, 'ai' generates, 'auto' generates with library fallback",
    )
    base_template_id: str | None = Field(
        default=None,
        description="Catalog section used as the starting point for generation",
    )
    customizations: dict[str, Any] = Field(
        default_factory=dict,
        description="Values for `{{name}}` placeholders of catalog sections",
    )


class ArtifactResponse(BaseModel):
    """A returned section."""

    id: str
    name: str
    description: str = ""
    code: str
    preview_ref: str | None = None
    source: str

    @classmethod
    def from_artifact(cls, artifact: GeneratedArtifact) -> "ArtifactResponse":
        return cls(
            id=artifact.id,
            name=artifact.name,
            description=artifact.description,
            code=artifact.body,
            preview_ref=artifact.preview_ref,
            source=artifact.source,
        )


class AttemptResponse(BaseModel):
    """One provider attempt, without transport internals."""

    provider: str
    outcome: str
    reason: str
    attempts: int = 0
    status_code: int | None = None

    @classmethod
    def from_attempt(cls, attempt: ProviderAttempt) -> "AttemptResponse":
        return cls(
            provider=attempt.provider,
            outcome=attempt.outcome,
            reason=attempt.reason,
            attempts=attempt.attempts,
            status_code=attempt.status_code,
        )


class GenerateSectionResponse(BaseModel):
    """Response for section generation."""

    artifacts: list[ArtifactResponse]
    source: str
    attempts: list[AttemptResponse] = Field(default_factory=list)


# =============================================================================
# Error Schemas
# =============================================================================


class ErrorResponse(BaseModel):
    """Standard error response."""

    detail: str = Field(description="Error message")
    error_code: str | None = Field(default=None, description="Application-specific error code")
    extra: dict[str, Any] | None = Field(default=None, description="Additional error context")
