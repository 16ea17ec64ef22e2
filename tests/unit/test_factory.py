"""Unit tests for the component factory and the write-through sinks."""

import pytest

from sectionforge.core.factory import ComponentFactory
from sectionforge.interfaces.sink import GeneratedArtifact
from sectionforge.strategies.catalog import FileSystemCatalog
from sectionforge.strategies.persistence import FileSystemSink, NullSink


class TestComponentFactory:
    """Test suite for ComponentFactory."""

    @pytest.fixture
    def factory(self, settings):
        return ComponentFactory(settings)

    def test_default_strategies(self, factory, settings):
        catalog = factory.get_catalog()

        assert isinstance(catalog, FileSystemCatalog)
        assert catalog.sections_dir == settings.sections_dir
        assert isinstance(factory.get_sink(), FileSystemSink)
        assert factory.get_provider_registry().names == ["openai", "anthropic"]

    def test_components_are_cached(self, factory):
        assert factory.get_catalog() is factory.get_catalog()
        assert factory.get_section_service() is factory.get_section_service()

    def test_clear_cache(self, factory):
        service = factory.get_section_service()

        factory.clear_cache()

        assert factory.get_section_service() is not service

    def test_null_sink(self, factory):
        assert isinstance(factory.get_sink("null"), NullSink)

    def test_unknown_types_raise(self, factory):
        with pytest.raises(ValueError, match="Unknown catalog type"):
            factory.get_catalog("postgres")
        with pytest.raises(ValueError, match="Unknown sink type"):
            factory.get_sink("s3")

    def test_client_uses_retry_settings(self, factory):
        client = factory.get_generation_client()

        assert client.backoff_delay(3) == 0.0
        assert factory.get_generation_client() is client


class TestFileSystemSink:
    """Test suite for FileSystemSink."""

    def test_writes_liquid_file(self, tmp_path):
        sink = FileSystemSink(tmp_path / "out")

        path = sink.save(GeneratedArtifact(body="<div>a</div>", id="Promo Strip-1", name="Promo Strip"))

        assert path == tmp_path / "out" / "promo-strip-1.liquid"
        assert path.read_text(encoding="utf-8") == "<div>a</div>"

    def test_never_overwrites(self, tmp_path):
        sink = FileSystemSink(tmp_path)
        (tmp_path / "hero-1.liquid").write_text("original", encoding="utf-8")

        first = sink.save(GeneratedArtifact(body="new", id="hero-1", name="Hero"))
        second = sink.save(GeneratedArtifact(body="newer", id="hero-1", name="Hero"))

        assert (tmp_path / "hero-1.liquid").read_text(encoding="utf-8") == "original"
        assert first.name == "hero-1-2.liquid"
        assert second.name == "hero-1-3.liquid"

    def test_null_sink_discards(self):
        assert NullSink().save(GeneratedArtifact(body="x", id="x", name="x")) is None
