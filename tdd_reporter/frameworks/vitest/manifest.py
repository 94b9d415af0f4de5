"""Vitest reporter manifest."""

from tdd_reporter.frameworks.manifest import FrameworkManifest
from tdd_reporter.frameworks.vitest.reporter import VitestIngestor, VitestReporter

vitest_manifest = FrameworkManifest(
    reporter_cls=VitestReporter, ingestor_cls=VitestIngestor
)
