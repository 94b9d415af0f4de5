"""PHPUnit reporter implementation.

Reads the JUnit XML written by `phpunit --log-junit <file>`.
"""

import logging
import re
import xml.etree.ElementTree as ET
from collections.abc import Iterator
from dataclasses import dataclass
from typing import Any

from tdd_reporter.frameworks.base import DocumentIngestor, Reporter, TestIdentity
from tdd_reporter.models.result import TestState

log = logging.getLogger(__name__)

FAILED_TAGS = ("failure", "error")
SKIPPED_TAGS = ("skipped", "incomplete")

COMPARISON = re.compile(
    r"^Failed asserting that (?P<actual>.+?) "
    r"(?:matches expected|is identical to|is equal to) (?P<expected>.+?)\.$",
    re.MULTILINE,
)

XML_START = re.compile(r"<\?xml|<testsuites?[\s>]")
XML_END = re.compile(r"</testsuites?>|<testsuite\b[^>]*/>")


@dataclass(frozen=True, kw_only=True)
class PhpunitCase:
    """A `<testcase>` element with the file inherited from its suites."""

    file: str | None
    class_name: str | None
    name: str


@dataclass(kw_only=True)
class PhpunitReporter(Reporter[PhpunitCase]):
    """Groups PHPUnit tests by file, falling back to the test class."""

    def identify(self, event: PhpunitCase) -> TestIdentity:
        module_id = event.file or event.class_name or "unknown"
        full_name = (
            f"{event.class_name}::{event.name}" if event.class_name else event.name
        )
        return TestIdentity(module_id=module_id, name=event.name, full_name=full_name)


def failure_error(element: ET.Element) -> dict[str, Any]:
    """Build an error from a `<failure>` or `<error>` element."""
    text = (element.text or "").strip()
    message = text or element.get("message") or element.get("type") or element.tag
    error: dict[str, Any] = {"message": message}
    if match := COMPARISON.search(message):
        error["actual"] = match.group("actual")
        error["expected"] = match.group("expected")
    return error


def iter_cases(
    element: ET.Element, file: str | None = None
) -> Iterator[tuple[ET.Element, str | None]]:
    """Yield every `<testcase>` with the nearest enclosing suite file.

    Data providers nest one suite per method, so suites are walked
    recursively.
    """
    for child in element:
        if child.tag == "testsuite":
            yield from iter_cases(child, child.get("file") or file)
        elif child.tag == "testcase":
            yield child, child.get("file") or file


def _xml_document(document: str) -> str:
    """Cut the report out of console output printed around it."""
    start = XML_START.search(document)
    ends = list(XML_END.finditer(document))
    begin = start.start() if start else 0
    end = ends[-1].end() if ends else len(document)
    return document[begin:end]


@dataclass(kw_only=True)
class PhpunitIngestor(DocumentIngestor[PhpunitCase]):
    """Reads a complete JUnit XML report."""

    def ingest_document(self, document: str) -> None:
        root = ET.fromstring(_xml_document(document))
        if root.tag not in ("testsuites", "testsuite"):
            raise ValueError(f"expected a JUnit report, found <{root.tag}>")

        count = 0
        for case, file in iter_cases(root, root.get("file")):
            self._record_case(case, file)
            count += 1
        log.debug("Read %d test case(s) from JUnit report", count)

    def _record_case(self, case: ET.Element, file: str | None) -> None:
        event = PhpunitCase(
            file=file,
            class_name=case.get("class") or case.get("classname"),
            name=case.get("name", ""),
        )

        failures = [child for child in case if child.tag in FAILED_TAGS]
        state: TestState = "passed"
        if failures:
            state = "failed"
        elif any(child.tag in SKIPPED_TAGS for child in case):
            state = "skipped"

        self.reporter.record_result(
            event, state, [failure_error(child) for child in failures]
        )

