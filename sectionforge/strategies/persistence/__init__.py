"""Persistence sink implementations."""

from sectionforge.strategies.persistence.filesystem import FileSystemSink, NullSink

__all__ = ["FileSystemSink", "NullSink"]
