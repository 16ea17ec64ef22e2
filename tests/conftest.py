"""Shared fixtures for the test suite."""

from pathlib import Path

import pytest

from sectionforge.core.config import Settings
from sectionforge.interfaces.catalog import Template

HERO_SECTION = """<!-- name: Hero Banner -->
<!-- tags: hero, banner, landing -->
<!-- description: Full width hero banner with gradient overlay -->
<section class="hero-banner">
  <h1>{{ section.settings.heading }}</h1>
  <a href="{{ section.settings.cta_url }}">{{ section.settings.cta_text }}</a>
</section>

{% schema %}
{
  "name": "SG-Hero Banner",
  "settings": [
    {"type": "text", "id": "heading", "label": "Heading", "default": "Welcome"},
    {"type": "url", "id": "cta_url", "label": "Button link"},
    {"type": "color", "id": "bg_color", "label": "Background", "default": "#000000", "info": "Section background"}
  ]
}
{% endschema %}
"""

TESTIMONIAL_SECTION = """<section class="testimonials">
  {% for block in section.blocks %}
    <blockquote>{{ block.settings.quote }}</blockquote>
  {% endfor %}
</section>

{% schema %}
{
  "name": "Customer Testimonials",
  "tags": ["reviews"],
  "settings": []
}
{% endschema %}
"""

BROKEN_SCHEMA_SECTION = """<div class="newsletter-signup">
  <form action="/contact#newsletter">
    <input type="email" name="contact[email]">
  </form>
</div>

{% schema %}
{ "name": "Newsletter", "settings": [ }
{% endschema %}
"""


def make_template(
    template_id: str,
    name: str | None = None,
    body: str = "<div></div>",
    description: str = "",
    tags: tuple[str, ...] = (),
    category: str = "custom",
    **kwargs,
) -> Template:
    """Build a catalog entry with sensible defaults."""
    return Template(
        id=template_id,
        name=name or template_id.replace("-", " ").title(),
        body=body,
        description=description,
        tags=tags,
        category=category,
        **kwargs,
    )


@pytest.fixture
def template_factory():
    """Expose `make_template` to tests."""
    return make_template


@pytest.fixture
def sections_dir(tmp_path: Path) -> Path:
    """A catalog directory holding three section files."""
    directory = tmp_path / "sections"
    directory.mkdir()
    (directory / "sg-hero-banner.liquid").write_text(HERO_SECTION, encoding="utf-8")
    (directory / "sg-testimonials-3.liquid").write_text(TESTIMONIAL_SECTION, encoding="utf-8")
    (directory / "newsletter-signup.liquid").write_text(BROKEN_SCHEMA_SECTION, encoding="utf-8")
    return directory


@pytest.fixture
def settings(tmp_path: Path, sections_dir: Path) -> Settings:
    """Settings isolated from the environment's catalog and credentials."""
    return Settings(
        sections_dir=sections_dir,
        log_dir=tmp_path / "logs",
        ai_api_keys="",
        ai_providers="openai,anthropic",
        ai_models="",
        provider_credentials={},
        retry_base_delay=0.0,
        generation_deadline=5.0,
        min_fragment_length=40,
    )
