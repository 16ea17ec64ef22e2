"""Unit tests for the HTTP API."""

import inspect
from unittest.mock import AsyncMock, Mock

import pytest
from fastapi.testclient import TestClient

from sectionforge.api.deps import get_section_service
from sectionforge.api.sections import get_section, list_categories, list_sections, search_sections
from sectionforge.core.exceptions import (
    AllProvidersFailedError,
    ConfigurationError,
    NoMatchError,
    ProviderAttempt,
)
from sectionforge.core.factory import ComponentFactory
from sectionforge.interfaces.sink import GeneratedArtifact
from sectionforge.main import create_app
from sectionforge.services import GenerationResult, SectionService
from sectionforge.strategies.liquid import find_schema_blocks

ATTEMPTS = (
    ProviderAttempt("openai", "failed", "HTTP 503", attempts=1, status_code=503),
    ProviderAttempt("anthropic", "failed", "transport error: ConnectError", attempts=1),
)


@pytest.fixture
def app(settings):
    return create_app(settings)


@pytest.fixture
def client(app):
    return TestClient(app)


@pytest.fixture
def mock_service(app):
    service = Mock(spec=SectionService)
    service.generate = AsyncMock()
    app.dependency_overrides[get_section_service] = lambda: service
    yield service
    app.dependency_overrides.clear()


# =============================================================================
# Catalog Endpoint Tests
# =============================================================================


class TestCatalogEndpoints:
    """Test suite for the read-only catalog routes."""

    def test_health(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    def test_list_sections(self, client):
        response = client.get("/sections")

        assert response.status_code == 200
        data = response.json()
        assert data["total"] == 3
        assert [s["id"] for s in data["sections"]] == ["newsletter-signup", "sg-hero-banner", "sg-testimonials-3"]

    def test_list_sections_by_category(self, client):
        response = client.get("/sections", params={"category": "testimonial"})

        data = response.json()
        assert data["total"] == 1
        assert data["sections"][0]["id"] == "sg-testimonials-3"

    @pytest.mark.parametrize("route", [list_sections, list_categories, search_sections, get_section])
    def test_catalog_routes_run_in_threadpool(self, route):
        assert not inspect.iscoroutinefunction(route)

    def test_categories(self, client):
        response = client.get("/sections/categories")
        assert response.json() == {"categories": ["hero", "newsletter", "testimonial"]}

    def test_search(self, client):
        response = client.get("/sections/search", params={"query": "hero banner", "limit": 5})

        assert response.status_code == 200
        data = response.json()
        assert data["query"] == "hero banner"
        assert data["results"][0]["id"] == "sg-hero-banner"
        assert data["results"][0]["score"] > 0
        assert data["results"][0]["match_reason"]

    def test_search_with_exclusions(self, client):
        response = client.get(
            "/sections/search",
            params={"query": "", "exclude": "sg-hero-banner,newsletter-signup"},
        )

        assert [r["id"] for r in response.json()["results"]] == ["sg-testimonials-3"]

    def test_search_limit_is_validated(self, client):
        response = client.get("/sections/search", params={"query": "hero", "limit": 0})

        assert response.status_code == 422
        assert response.json()["detail"] == "Validation error"

    def test_get_section_has_one_schema_block(self, client):
        response = client.get("/sections/newsletter-signup")

        assert response.status_code == 200
        data = response.json()
        assert data["has_schema"] is False
        assert len(find_schema_blocks(data["code"])) == 1

    def test_get_section_variables(self, client):
        data = client.get("/sections/sg-hero-banner").json()

        assert data["variables"]["heading"]["default"] == "Welcome"
        assert data["preview_ref"] == "/sections/images/sg-hero-banner.png"

    def test_get_unknown_section(self, client):
        response = client.get("/sections/does-not-exist")

        assert response.status_code == 404
        assert "does-not-exist" in response.json()["detail"]


# =============================================================================
# Generation Endpoint Tests
# =============================================================================


class TestGenerateEndpoint:
    """Test suite for POST /sections/generate."""

    def test_library_generation(self, client):
        response = client.post(
            "/sections/generate",
            json={"prompt": "sg-testimonials-3", "mode": "library"},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["source"] == "library"
        assert data["artifacts"][0]["id"] == "sg-testimonials-3"
        assert data["attempts"] == []

    def test_request_is_forwarded(self, client, mock_service):
        artifact = GeneratedArtifact(body="<div></div>", id="promo-1", name="Promo", source="ai")
        mock_service.generate.return_value = GenerationResult(
            artifacts=[artifact],
            source="ai",
            attempts=(ProviderAttempt("groq", "succeeded", "ok", attempts=1, status_code=200),),
        )

        response = client.post(
            "/sections/generate",
            json={
                "prompt": "  a promo strip for sales  ",
                "excluded_ids": ["promo-0"],
                "max_results": 2,
                "mode": "ai",
                "customizations": {"heading": "Spring"},
            },
        )

        assert response.status_code == 200
        sent, = mock_service.generate.await_args.args
        assert sent.prompt == "a promo strip for sales"
        assert sent.excluded_ids == ("promo-0",)
        assert sent.max_results == 2
        assert sent.customizations == {"heading": "Spring"}
        assert mock_service.generate.await_args.kwargs["mode"] == "ai"
        assert response.json()["attempts"][0]["provider"] == "groq"

    def test_short_prompt_is_rejected(self, client, mock_service):
        response = client.post("/sections/generate", json={"prompt": "hero"})

        assert response.status_code == 422
        assert response.json()["errors"][0]["loc"] == ["body", "prompt"]
        mock_service.generate.assert_not_called()

    def test_max_results_bounds(self, client, mock_service):
        response = client.post("/sections/generate", json={"prompt": "a long enough prompt", "max_results": 11})
        assert response.status_code == 422

    def test_no_match_maps_to_404(self, client, mock_service):
        mock_service.generate.side_effect = NoMatchError("nothing like this", attempts=ATTEMPTS)

        response = client.post("/sections/generate", json={"prompt": "nothing like this"})

        assert response.status_code == 404
        data = response.json()
        assert data["error_code"] == "NO_MATCH"
        assert [a["provider"] for a in data["extra"]["attempts"]] == ["openai", "anthropic"]

    def test_unconfigured_maps_to_503(self, client, mock_service):
        mock_service.generate.side_effect = ConfigurationError("No provider credential configured")

        response = client.post("/sections/generate", json={"prompt": "a flash sale banner", "mode": "ai"})

        assert response.status_code == 503
        assert response.json()["error_code"] == "PROVIDER_NOT_CONFIGURED"

    def test_all_failed_maps_to_502(self, client, mock_service):
        mock_service.generate.side_effect = AllProvidersFailedError(ATTEMPTS)

        response = client.post("/sections/generate", json={"prompt": "a flash sale banner", "mode": "ai"})

        assert response.status_code == 502
        data = response.json()
        assert data["error_code"] == "ALL_PROVIDERS_FAILED"
        assert data["extra"]["attempts"] == [
            {"provider": "openai", "reason": "HTTP 503"},
            {"provider": "anthropic", "reason": "transport error: ConnectError"},
        ]

    def test_unexpected_error_maps_to_500(self, client, mock_service):
        mock_service.generate.side_effect = RuntimeError("boom")

        response = client.post("/sections/generate", json={"prompt": "a flash sale banner"})

        assert response.status_code == 500
        assert response.json()["detail"] == "Section generation failed"


class TestLifespan:
    """Test suite for application startup and shutdown."""

    def test_shutdown_drains_pending_writes(self, app, settings):
        factory: ComponentFactory = app.state.factory

        with TestClient(app) as client:
            assert client.get("/health").status_code == 200

        assert factory.get_section_service().pending_writes == 0
