"""Unit tests for the file-system catalog and library maintenance."""

import json

import pytest

from sectionforge.strategies.catalog import FileSystemCatalog, infer_category
from sectionforge.strategies.catalog.filesystem import infer_name_from_filename
from sectionforge.strategies.catalog.maintenance import (
    prefix_schema_name,
    process_directory,
    process_section_file,
    remove_vendor_comments,
    rewrite_prefixes,
)
from sectionforge.strategies.liquid import parse_schema


# =============================================================================
# Loader Tests
# =============================================================================


class TestFileSystemCatalog:
    """Test suite for FileSystemCatalog."""

    @pytest.fixture
    def catalog(self, sections_dir):
        return FileSystemCatalog(sections_dir)

    def test_loads_files_sorted_by_name(self, catalog):
        templates = catalog.load()
        assert [t.id for t in templates] == ["newsletter-signup", "sg-hero-banner", "sg-testimonials-3"]

    def test_schema_fields_become_variables(self, catalog):
        hero = catalog.get("sg-hero-banner")

        assert hero.has_schema is True
        assert list(hero.variables) == ["heading", "cta_url", "bg_color"]
        assert hero.variables["heading"].default == "Welcome"
        assert hero.variables["bg_color"].description == "Section background"

    def test_name_prefers_schema_and_is_cleaned(self, catalog):
        assert catalog.get("sg-hero-banner").name == "Hero Banner"
        assert catalog.get("sg-testimonials-3").name == "Customer Testimonials"

    def test_comment_metadata_and_schema_tags(self, catalog):
        hero = catalog.get("sg-hero-banner")
        testimonials = catalog.get("sg-testimonials-3")

        assert hero.tags == ("hero", "banner", "landing")
        assert hero.description == "Full width hero banner with gradient overlay"
        assert testimonials.tags == ("reviews",)

    def test_invalid_schema_is_still_loaded_as_schema_less(self, catalog):
        newsletter = catalog.get("newsletter-signup")

        assert newsletter is not None
        assert newsletter.has_schema is False
        assert newsletter.variables == {}
        assert newsletter.name == "Newsletter Signup"

    def test_categories_inferred_from_identifier(self, catalog):
        assert catalog.get("sg-hero-banner").category == "hero"
        assert catalog.get("sg-testimonials-3").category == "testimonial"
        assert catalog.get("newsletter-signup").category == "newsletter"
        assert catalog.categories() == ["hero", "newsletter", "testimonial"]

    def test_preview_references(self, catalog):
        hero = catalog.get("sg-hero-banner")
        assert hero.preview_ref == "/sections/images/sg-hero-banner.png"
        assert hero.mobile_preview_ref == "/sections/images/mobile/sg-hero-banner.png"

    def test_get_is_case_insensitive(self, catalog):
        assert catalog.get("SG-Hero-Banner").id == "sg-hero-banner"
        assert catalog.get("missing") is None

    def test_reloads_on_every_call(self, catalog, sections_dir):
        assert len(catalog.load()) == 3
        (sections_dir / "faq-accordion.liquid").write_text("<div>faq</div>", encoding="utf-8")
        assert len(catalog.load()) == 4

    def test_missing_directory_falls_back_to_defaults(self, tmp_path):
        templates = FileSystemCatalog(tmp_path / "does-not-exist").load()
        assert [t.id for t in templates] == ["hero-1", "product-carousel-1", "faq-1"]

    def test_empty_directory_falls_back_to_defaults(self, tmp_path):
        templates = FileSystemCatalog(tmp_path).load()
        assert len(templates) == 3

    def test_ignores_non_liquid_and_empty_files(self, sections_dir):
        (sections_dir / "notes.txt").write_text("not a section", encoding="utf-8")
        (sections_dir / "empty.liquid").write_text("   ", encoding="utf-8")

        ids = [t.id for t in FileSystemCatalog(sections_dir).load()]
        assert "notes" not in ids
        assert "empty" not in ids


class TestCategoryInference:
    """Test suite for identifier based category inference."""

    @pytest.mark.parametrize(
        "identifier,expected",
        [
            ("sg-testimonials-3", "testimonial"),
            ("customer-reviews", "testimonial"),
            ("hero-banner-1", "hero"),
            ("promo-banner", "hero"),
            ("faq-accordion", "faq"),
            ("image-with-text", "gallery"),
            ("something-else", "custom"),
        ],
    )
    def test_infer_category(self, identifier, expected):
        assert infer_category(identifier) == expected

    def test_name_from_filename(self):
        assert infer_name_from_filename("sg-hero-banner.liquid") == "Hero Banner"
        assert infer_name_from_filename("rich_text.liquid") == "Rich Text"


# =============================================================================
# Maintenance Tests
# =============================================================================


class TestLibraryMaintenance:
    """Test suite for the section library processing helpers."""

    def test_removes_vendor_comments_only(self):
        content = (
            "{% comment %}Copyright Section Store 2024{% endcomment %}\n"
            "{% comment %}Keep me{% endcomment %}\n"
            "<!-- Copyright notice -->\n"
            "<div>body</div>"
        )
        cleaned = remove_vendor_comments(content)

        assert "Copyright" not in cleaned
        assert "Keep me" in cleaned
        assert "<div>body</div>" in cleaned

    def test_rewrites_prefixes_keeping_case(self):
        assert rewrite_prefixes('<div class="ss-hero SS-title" id="ss_main">') == (
            '<div class="sg-hero SG-title" id="sg_main">'
        )

    def test_does_not_touch_words_ending_in_ss(self):
        assert rewrite_prefixes(".glass-card .class-list") == ".glass-card .class-list"

    def test_prefixes_schema_name(self):
        content = '<div></div>\n{% schema %}\n{"name": "Hero", "settings": []}\n{% endschema %}'
        assert parse_schema(prefix_schema_name(content))["name"] == "SG-Hero"

    def test_schema_name_already_prefixed_is_kept(self):
        content = '{% schema %}{"name": "SG-Hero"}{% endschema %}'
        assert parse_schema(prefix_schema_name(content))["name"] == "SG-Hero"

    def test_invalid_schema_json_uses_textual_rewrite(self):
        content = '{% schema %}{"name": "Hero", "settings": [}{% endschema %}'
        assert '"name": "SG-Hero"' in prefix_schema_name(content)

    def test_process_section_file_renames(self, tmp_path):
        path = tmp_path / "ss-hero.liquid"
        path.write_text(
            '{% comment %}Unauthorized copying is prohibited{% endcomment %}\n'
            '<div class="ss-hero"></div>\n'
            '{% schema %}{"name": "SS-Hero"}{% endschema %}',
            encoding="utf-8",
        )

        result = process_section_file(path)

        assert result.renamed is True
        assert result.path.name == "sg-hero.liquid"
        assert not path.exists()
        content = result.path.read_text(encoding="utf-8")
        assert "Unauthorized" not in content
        assert 'class="sg-hero"' in content
        assert json.loads(content.split("{% schema %}")[1].split("{% endschema %}")[0])["name"] == "SG-Hero"

    def test_process_directory_counts(self, tmp_path):
        (tmp_path / "ss-one.liquid").write_text("<div></div>", encoding="utf-8")
        (tmp_path / "two.liquid").write_text("<div></div>", encoding="utf-8")
        (tmp_path / "readme.md").write_text("ignored", encoding="utf-8")

        counts = process_directory(tmp_path)

        assert counts == {"processed": 2, "renamed": 1, "failed": 0}
        assert (tmp_path / "sg-one.liquid").exists()

    def test_process_directory_missing(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            process_directory(tmp_path / "missing")
