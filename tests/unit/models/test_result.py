"""Tests for canonical result models."""

import json

import pytest
from pydantic import ValidationError

from tdd_reporter.models.result import TestCase, TestError, TestModule, TestRunOutput
from tdd_reporter.testing.factories import (
    TestCaseFactory,
    TestErrorFactory,
    TestModuleFactory,
)


def test_serialises_with_camel_case_keys() -> None:
    """Writes the wire format with camelCase keys and no unset values."""
    output = TestRunOutput(
        test_modules=[
            TestModule(
                module_id="src/calc.test.ts",
                tests=[
                    TestCase(
                        name="adds",
                        full_name="calc > adds",
                        state="failed",
                        errors=[TestError(message="boom", expected="5", actual="6")],
                    )
                ],
            )
        ],
        reason="failed",
    )

    assert json.loads(output.to_json()) == {
        "testModules": [
            {
                "moduleId": "src/calc.test.ts",
                "tests": [
                    {
                        "name": "adds",
                        "fullName": "calc > adds",
                        "state": "failed",
                        "errors": [{"message": "boom", "expected": "5", "actual": "6"}],
                    }
                ],
            }
        ],
        "unhandledErrors": [],
        "reason": "failed",
    }


def test_omits_unset_reason() -> None:
    """Leaves the reason out of an empty run."""
    assert json.loads(TestRunOutput().to_json()) == {
        "testModules": [],
        "unhandledErrors": [],
    }


def test_parses_stored_snapshot() -> None:
    """Parses what to_json wrote back into an equal model."""
    output = TestRunOutput(
        test_modules=[TestModuleFactory.build()],
        unhandled_errors=[{"message": "oops"}],
        reason="passed",
    )

    assert TestRunOutput.from_json(output.to_json()) == output


def test_accepts_snake_case_names() -> None:
    """Builds models from Python field names as well as wire aliases."""
    test = TestCase.model_validate(
        {"name": "a", "fullName": "mod a", "state": "skipped"}
    )

    assert test.full_name == "mod a"


@pytest.mark.parametrize("state", ["passed", "skipped"])
def test_rejects_errors_on_non_failed_test(state: str) -> None:
    """Only failed tests carry errors."""
    with pytest.raises(ValidationError, match="cannot carry errors"):
        TestCaseFactory.build(state=state, errors=[TestErrorFactory.build()])


def test_rejects_unknown_state() -> None:
    """Test states are closed."""
    with pytest.raises(ValidationError):
        TestCaseFactory.build(state="errored")


def test_rejects_duplicate_module_ids() -> None:
    """Every module id appears once per run."""
    module = TestModuleFactory.build(module_id="tests/test_a.py")

    with pytest.raises(ValidationError, match="unique"):
        TestRunOutput(test_modules=[module, module], reason="passed")


@pytest.mark.parametrize("reason", ["passed", "failed"])
def test_rejects_verdict_on_empty_run(reason: str) -> None:
    """An empty run never claims to have passed or failed."""
    with pytest.raises(ValidationError, match="cannot be reported"):
        TestRunOutput(reason=reason)


def test_allows_interrupted_empty_run() -> None:
    """An interrupted run may have recorded nothing."""
    assert TestRunOutput(reason="interrupted").reason == "interrupted"


def test_flattens_tests_in_reporting_order() -> None:
    """Lists tests module by module."""
    first = TestModuleFactory.build(module_id="a")
    second = TestModuleFactory.build(module_id="b")
    output = TestRunOutput(test_modules=[first, second], reason="passed")

    assert output.tests == [*first.tests, *second.tests]


def test_models_are_immutable() -> None:
    """Recorded results cannot be changed after the fact."""
    test = TestCaseFactory.build()

    with pytest.raises(ValidationError):
        test.state = "failed"  # type: ignore[misc]
