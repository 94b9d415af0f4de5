"""Canonical, framework-agnostic test run results."""

from collections.abc import Sequence
from typing import Any, Literal, Self

from pydantic import Field, model_validator

from tdd_reporter.models.base import Model

type TestState = Literal["passed", "failed", "skipped"]
type RunReason = Literal["passed", "failed", "interrupted"]

TEST_STATES: frozenset[str] = frozenset(["passed", "failed", "skipped"])


class TestError(Model):
    """A single error attached to a failed test.

    ``expected`` and ``actual`` are only set when the framework exposes
    structured assertion data.
    """

    __test__ = False

    message: str
    stack: str | None = None
    expected: str | None = None
    actual: str | None = None


class TestCase(Model):
    """One reportable test outcome."""

    __test__ = False

    name: str
    full_name: str
    state: TestState
    errors: Sequence[TestError] | None = None

    @model_validator(mode="after")
    def _errors_only_when_failed(self) -> Self:
        if self.state != "failed" and self.errors:
            raise ValueError(f"A {self.state} test cannot carry errors")
        return self


class TestModule(Model):
    """Tests grouped by the source file (or package) they came from."""

    __test__ = False

    module_id: str
    tests: Sequence[TestCase] = Field(default_factory=list)


class TestRunOutput(Model):
    """The snapshot written to the result store at the end of a run."""

    __test__ = False

    test_modules: Sequence[TestModule] = Field(default_factory=list)
    unhandled_errors: Sequence[Any] = Field(default_factory=list)
    reason: RunReason | None = None

    @model_validator(mode="after")
    def _check_invariants(self) -> Self:
        module_ids = [module.module_id for module in self.test_modules]
        if len(module_ids) != len(set(module_ids)):
            raise ValueError("Module identifiers must be unique within a run")

        # "interrupted" is allowed on an empty run: it claims no evidence.
        if (
            not self.test_modules
            and not self.unhandled_errors
            and self.reason in ("passed", "failed")
        ):
            raise ValueError(
                f"A run without tests or errors cannot be reported as {self.reason}"
            )
        return self

    @property
    def tests(self) -> Sequence[TestCase]:
        """All tests across every module, in reporting order."""
        return [test for module in self.test_modules for test in module.tests]

    def to_json(self) -> str:
        """Serialise to the wire format, omitting unset optional values."""
        return self.model_dump_json(by_alias=True, exclude_none=True, indent=2)

    @classmethod
    def from_json(cls, content: str) -> Self:
        """Parse a stored snapshot."""
        return cls.model_validate_json(content)
