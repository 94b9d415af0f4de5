"""Go test reporter manifest."""

from tdd_reporter.frameworks.go.reporter import GoIngestor, GoReporter
from tdd_reporter.frameworks.manifest import FrameworkManifest

go_manifest = FrameworkManifest(reporter_cls=GoReporter, ingestor_cls=GoIngestor)
