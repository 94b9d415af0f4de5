"""pytest reporter module."""

from tdd_reporter.frameworks.pytest.reporter import PytestReporter

__all__ = ["PytestReporter"]
