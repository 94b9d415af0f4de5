"""PHPUnit reporter manifest."""

from tdd_reporter.frameworks.manifest import FrameworkManifest
from tdd_reporter.frameworks.phpunit.reporter import PhpunitIngestor, PhpunitReporter

phpunit_manifest = FrameworkManifest(
    reporter_cls=PhpunitReporter, ingestor_cls=PhpunitIngestor
)
