"""Jest reporter manifest."""

from tdd_reporter.frameworks.jest.reporter import JestIngestor, JestReporter
from tdd_reporter.frameworks.manifest import FrameworkManifest

jest_manifest = FrameworkManifest(reporter_cls=JestReporter, ingestor_cls=JestIngestor)
