"""Overall outcome of a run, derived from its recorded tests."""

from collections.abc import Iterable
from typing import Literal

from tdd_reporter.models.result import TestModule


def reduce_run_status(
    modules: Iterable[TestModule],
) -> Literal["passed", "failed"] | None:
    """Compute the run reason from the recorded tests.

    Returns None when no test was recorded, so that an empty run is never
    mistaken for a passing one. Skipped tests never decide the outcome: a
    run made only of skipped tests is reported as passed. "interrupted" is
    never produced here, only by the interruption path.
    """
    states = [test.state for module in modules for test in module.tests]
    if not states:
        return None
    if "failed" in states:
        return "failed"
    return "passed"
