"""Jest reporter module."""

from tdd_reporter.frameworks.jest.manifest import jest_manifest
from tdd_reporter.frameworks.jest.reporter import JestCase, JestIngestor, JestReporter

__all__ = ["JestCase", "JestIngestor", "JestReporter", "jest_manifest"]
