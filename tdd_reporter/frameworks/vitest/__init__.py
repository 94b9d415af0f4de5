"""Vitest reporter module."""

from tdd_reporter.frameworks.vitest.manifest import vitest_manifest
from tdd_reporter.frameworks.vitest.reporter import VitestIngestor, VitestReporter

__all__ = ["VitestIngestor", "VitestReporter", "vitest_manifest"]
