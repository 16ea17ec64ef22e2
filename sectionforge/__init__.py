"""SectionForge: section catalog matching and multi-provider generation."""

__version__ = "0.1.0"
