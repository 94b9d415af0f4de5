"""Pydantic models for the JSON report of `jest --json`.

Vitest's `json` reporter writes the same structure.
"""

from collections.abc import Sequence
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class JestModel(BaseModel):
    """Base for report models: camelCase keys, unknown keys ignored."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class MatcherResult(JestModel):
    """Structured assertion data attached to a matcher failure."""

    expected: Any = None
    actual: Any = None


class FailureDetail(JestModel):
    """Serialised error thrown by a failing test."""

    matcher_result: MatcherResult | None = None
    stack: str | None = None


class AssertionResult(JestModel):
    """Outcome of one test."""

    ancestor_titles: Sequence[str] = Field(default_factory=list)
    title: str = ""
    full_name: str | None = None
    status: str = "unknown"
    failure_messages: Sequence[str] = Field(default_factory=list)
    failure_details: Sequence[Any] = Field(default_factory=list)


class ExecError(JestModel):
    """Error that stopped a test file or the whole run."""

    message: str = ""
    stack: str | None = None
    type: str | None = None


class TestFileResult(JestModel):
    """Outcomes of all tests in one file."""

    __test__ = False

    name: str
    status: str = "unknown"
    message: str = ""
    assertion_results: Sequence[AssertionResult] = Field(default_factory=list)
    test_exec_error: ExecError | None = None


class JestReport(JestModel):
    """Complete report written when the run exits.

    File entries are kept raw and validated one by one, so a malformed entry
    does not take the rest of the report with it.
    """

    test_results: Sequence[Any] = Field(default_factory=list)
    run_exec_error: ExecError | None = None
