"""Jest reporter implementation."""

import json
import logging
import re
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any

from pydantic import ValidationError

from tdd_reporter.frameworks.base import DocumentIngestor, Reporter, TestIdentity
from tdd_reporter.frameworks.jest.models import (
    AssertionResult,
    FailureDetail,
    JestReport,
    TestFileResult,
)
from tdd_reporter.models.result import TestState

log = logging.getLogger(__name__)

STATUS_TO_STATE: Mapping[str, TestState] = {
    "passed": "passed",
    "failed": "failed",
    "pending": "skipped",
    "skipped": "skipped",
    "todo": "skipped",
    "disabled": "skipped",
}

ERROR_TYPE = re.compile(r"\b(?P<type>[A-Z]\w*Error)\b:")


@dataclass(frozen=True, kw_only=True)
class JestCase:
    """One assertion result, or a test file that failed to run (no assertion)."""

    file: str
    assertion: AssertionResult | None = None
    error_type: str = "Error"


def _as_text(value: Any) -> str:
    return value if isinstance(value, str) else json.dumps(value)


def _error_type(file_result: TestFileResult) -> str:
    exec_error = file_result.test_exec_error
    if exec_error is not None and exec_error.type:
        return exec_error.type
    if match := ERROR_TYPE.search(file_result.message):
        return match.group("type")
    return "Error"


def _json_document(document: str) -> str:
    """Drop console output printed ahead of the report."""
    lines = document.splitlines()
    for index, line in enumerate(lines):
        if line.lstrip().startswith("{"):
            return "\n".join(lines[index:])
    return document


def assertion_errors(assertion: AssertionResult) -> Sequence[dict[str, Any]]:
    """Pair failure messages with the matcher data Jest serialised for them."""
    errors: list[dict[str, Any]] = []
    for index, message in enumerate(assertion.failure_messages):
        error: dict[str, Any] = {"message": message}

        if index < len(assertion.failure_details):
            try:
                detail = FailureDetail.model_validate(assertion.failure_details[index])
            except ValidationError:
                detail = None
            if detail is not None and detail.matcher_result is not None:
                matcher = detail.matcher_result
                if "expected" in matcher.model_fields_set:
                    error["expected"] = _as_text(matcher.expected)
                if "actual" in matcher.model_fields_set:
                    error["actual"] = _as_text(matcher.actual)

        errors.append(error)
    return errors


@dataclass(kw_only=True)
class JestReporter(Reporter[JestCase]):
    """Groups Jest tests by file, named with Jest's own full names.

    A file that failed before running any test (an import error, a syntax
    error) is reported as one `Module failed to load (<ErrorType>)` test.
    """

    def identify(self, event: JestCase) -> TestIdentity:
        """Name the test from its titles, or the file for load failures."""
        if event.assertion is None:
            return self.load_failure_identity(event)
        return TestIdentity(
            module_id=event.file,
            name=event.assertion.title,
            full_name=self.full_name(event.assertion),
        )

    def full_name(self, assertion: AssertionResult) -> str:
        """Jest joins describe blocks and the test title with spaces."""
        if assertion.full_name:
            return assertion.full_name
        return " ".join([*assertion.ancestor_titles, assertion.title])

    def load_failure_identity(self, event: JestCase) -> TestIdentity:
        """Identity of the synthetic test standing for a file that did not run."""
        name = f"Module failed to load ({event.error_type})"
        return TestIdentity(module_id=event.file, name=name, full_name=name)


@dataclass(kw_only=True)
class JestIngestor(DocumentIngestor[JestCase]):
    """Reads a complete `--json` report."""

    def ingest_document(self, document: str) -> None:
        """Record every assertion, and every file that failed to run."""
        report = JestReport.model_validate_json(_json_document(document))

        if report.run_exec_error is not None:
            self.reporter.record_unhandled_error(
                report.run_exec_error.model_dump(include={"message", "stack"})
            )

        for entry in report.test_results:
            try:
                file_result = TestFileResult.model_validate(entry)
            except ValidationError as exc:
                self._record_malformed_entry(entry, exc)
                continue

            if file_result.assertion_results:
                self._record_assertions(file_result)
            elif file_result.status == "failed" or file_result.test_exec_error:
                self._record_load_failure(file_result)

    def _record_malformed_entry(self, entry: Any, exc: ValidationError) -> None:
        name = entry.get("name") if isinstance(entry, Mapping) else None
        log.warning("Malformed results of test file %s: %s", name, exc)
        self.reporter.record_unhandled_error(
            {"message": f"Could not parse results of test file {name or entry!r}"}
        )

    def _record_assertions(self, file_result: TestFileResult) -> None:
        for assertion in file_result.assertion_results:
            state = STATUS_TO_STATE.get(assertion.status, assertion.status)
            self.reporter.record_result(
                JestCase(file=file_result.name, assertion=assertion),
                state,  # type: ignore[arg-type]
                assertion_errors(assertion),
            )

    def _record_load_failure(self, file_result: TestFileResult) -> None:
        exec_error = file_result.test_exec_error
        message = file_result.message.strip()
        if not message and exec_error is not None:
            message = exec_error.message

        log.debug("Test file %s failed to run", file_result.name)
        self.reporter.record_result(
            JestCase(file=file_result.name, error_type=_error_type(file_result)),
            "failed",
            [
                {
                    "message": message or f"{file_result.name} failed to run",
                    "stack": exec_error.stack if exec_error else None,
                }
            ],
        )
