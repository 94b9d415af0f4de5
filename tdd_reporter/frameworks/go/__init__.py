"""Go test reporter module."""

from tdd_reporter.frameworks.go.manifest import go_manifest
from tdd_reporter.frameworks.go.reporter import GoIngestor, GoReporter, GoTestRef

__all__ = ["GoIngestor", "GoReporter", "GoTestRef", "go_manifest"]
