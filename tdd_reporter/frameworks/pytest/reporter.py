"""pytest reporter implementation."""

from dataclasses import dataclass
from pathlib import PurePosixPath

import pytest

from tdd_reporter.frameworks.base import Reporter, TestIdentity

type PytestReport = pytest.TestReport | pytest.CollectReport

SESSION_MODULE_ID = "session"


@dataclass(kw_only=True)
class PytestReporter(Reporter[PytestReport]):
    """Names pytest outcomes after their node ids.

    A test ``tests/test_calc.py::TestCalc::test_add`` lands in module
    ``tests/test_calc.py`` as ``test_add``. A file that failed to collect is
    reported as a single ``collection_error_<file>`` test.
    """

    def identify(self, event: PytestReport) -> TestIdentity:
        """Derive module and names from the report's node id."""
        nodeid = event.nodeid
        module_id = nodeid.split("::", 1)[0] or SESSION_MODULE_ID

        if isinstance(event, pytest.CollectReport):
            return TestIdentity(
                module_id=module_id,
                name=f"collection_error_{PurePosixPath(module_id).name}",
                full_name=nodeid or module_id,
            )

        return TestIdentity(
            module_id=module_id,
            name=nodeid.rsplit("::", 1)[-1],
            full_name=nodeid,
        )
