"""PHPUnit reporter module."""

from tdd_reporter.frameworks.phpunit.manifest import phpunit_manifest
from tdd_reporter.frameworks.phpunit.reporter import (
    PhpunitCase,
    PhpunitIngestor,
    PhpunitReporter,
)

__all__ = ["PhpunitCase", "PhpunitIngestor", "PhpunitReporter", "phpunit_manifest"]
