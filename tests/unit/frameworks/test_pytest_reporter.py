"""Tests for the pytest reporter mapping."""

import pytest

from tdd_reporter.frameworks.base import TestIdentity
from tdd_reporter.frameworks.pytest import PytestReporter
from tdd_reporter.storage import MemoryStorage


def make_test_report(nodeid: str, outcome: str = "passed") -> pytest.TestReport:
    """Create a call phase report."""
    return pytest.TestReport(
        nodeid=nodeid,
        location=("tests/test_calc.py", 1, "test"),
        keywords={},
        outcome=outcome,  # type: ignore[arg-type]
        longrepr=None,
        when="call",
    )


@pytest.fixture
def reporter(storage: MemoryStorage) -> PytestReporter:
    """Create reporter writing to memory."""
    return PytestReporter(storage=storage)


@pytest.mark.parametrize(
    ("nodeid", "expected"),
    [
        (
            "tests/test_calc.py::test_add",
            TestIdentity(
                module_id="tests/test_calc.py",
                name="test_add",
                full_name="tests/test_calc.py::test_add",
            ),
        ),
        (
            "tests/test_calc.py::TestCalc::test_add[1-2]",
            TestIdentity(
                module_id="tests/test_calc.py",
                name="test_add[1-2]",
                full_name="tests/test_calc.py::TestCalc::test_add[1-2]",
            ),
        ),
    ],
)
def test_identifies_tests_by_node_id(
    reporter: PytestReporter, nodeid: str, expected: TestIdentity
) -> None:
    """Uses the file as module and the last node id part as name."""
    assert reporter.identify(make_test_report(nodeid)) == expected


def test_identifies_collection_errors(reporter: PytestReporter) -> None:
    """Names a failed collection after the file."""
    report = pytest.CollectReport(
        nodeid="tests/unit/test_calc.py",
        outcome="failed",
        longrepr="ImportError while importing test module",
        result=[],
    )

    assert reporter.identify(report) == TestIdentity(
        module_id="tests/unit/test_calc.py",
        name="collection_error_test_calc.py",
        full_name="tests/unit/test_calc.py",
    )


def test_identifies_session_level_collection_errors(reporter: PytestReporter) -> None:
    """Uses the session module for reports without a node id."""
    report = pytest.CollectReport(
        nodeid="", outcome="failed", longrepr="usage error", result=[]
    )

    identity = reporter.identify(report)

    assert identity.module_id == "session"
    assert identity.full_name == "session"
