"""Concrete catalog implementations."""

from sectionforge.strategies.catalog.categories import infer_category
from sectionforge.strategies.catalog.defaults import get_default_templates
from sectionforge.strategies.catalog.filesystem import FileSystemCatalog
from sectionforge.strategies.catalog.maintenance import process_directory, process_section_file

__all__ = [
    "FileSystemCatalog",
    "get_default_templates",
    "infer_category",
    "process_directory",
    "process_section_file",
]
