"""Vitest reporter implementation.

Vitest's `json` reporter writes the Jest report structure, so only naming
differs: suites are joined with ` > ` and a file that failed to load is
named after the file itself.
"""

from dataclasses import dataclass
from pathlib import PurePosixPath

from tdd_reporter.frameworks.base import TestIdentity
from tdd_reporter.frameworks.jest.models import AssertionResult
from tdd_reporter.frameworks.jest.reporter import JestCase, JestIngestor, JestReporter


@dataclass(kw_only=True)
class VitestReporter(JestReporter):
    def full_name(self, assertion: AssertionResult) -> str:
        return " > ".join([*assertion.ancestor_titles, assertion.title])

    def load_failure_identity(self, event: JestCase) -> TestIdentity:
        return TestIdentity(
            module_id=event.file,
            name=PurePosixPath(event.file).name,
            full_name=event.file,
        )


@dataclass(kw_only=True)
class VitestIngestor(JestIngestor):
    """Reads a complete report of `vitest run --reporter=json`."""
