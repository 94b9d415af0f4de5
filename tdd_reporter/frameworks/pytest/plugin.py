"""pytest plugin recording the session's results for the project."""

import logging
import signal
from dataclasses import dataclass, field
from pathlib import Path

import pytest

from tdd_reporter.config import Config
from tdd_reporter.frameworks.pytest.reporter import PytestReporter
from tdd_reporter.interruption import InterruptionHandler

log = logging.getLogger(__name__)

PLUGIN_NAME = "tdd-reporter-session"


@dataclass(kw_only=True)
class TddReporterPlugin:
    """Forwards a session's reports to a PytestReporter."""

    reporter: PytestReporter
    interruption: InterruptionHandler
    _keyboard_interrupted: bool = field(default=False, init=False)

    def pytest_sessionstart(self, session: pytest.Session) -> None:
        # pytest turns SIGINT into KeyboardInterrupt itself.
        self.interruption.install()

    def pytest_collectreport(self, report: pytest.CollectReport) -> None:
        if report.failed:
            self.reporter.record_result(report, "failed", [report.longreprtext])

    def pytest_runtest_logreport(self, report: pytest.TestReport) -> None:
        if report.when == "call":
            reportable = True
        elif report.when == "setup":
            reportable = not report.passed
        else:
            reportable = report.failed

        if not reportable:
            return

        errors = [report.longreprtext] if report.failed else None
        self.reporter.record_result(report, report.outcome, errors)

    def pytest_internalerror(self, excrepr: object) -> None:
        self.reporter.record_unhandled_error(str(excrepr))

    def pytest_keyboard_interrupt(
        self, excinfo: pytest.ExceptionInfo[BaseException]
    ) -> None:
        # Collection errors stop the session through Session.Interrupted,
        # which is not an interruption of the run.
        if not isinstance(excinfo.value, pytest.Session.Interrupted):
            self._keyboard_interrupted = True

    def pytest_sessionfinish(
        self, session: pytest.Session, exitstatus: int | pytest.ExitCode
    ) -> None:
        try:
            if self._keyboard_interrupted:
                log.debug("Session interrupted, saving partial results")
                self.reporter.interrupt()
            else:
                self.reporter.complete()
        finally:
            self.interruption.uninstall()


plugin_key = pytest.StashKey[TddReporterPlugin]()


def pytest_addoption(parser: pytest.Parser) -> None:
    group = parser.getgroup("tdd-reporter", "test result capture")
    group.addoption(
        "--tdd-project-root",
        dest="tdd_project_root",
        default=None,
        help="Project whose results file receives this session's results "
        "(default: rootdir).",
    )
    parser.addini(
        "tdd_project_root",
        help="Project whose results file receives this session's results.",
        default="",
    )


def _project_root(config: pytest.Config) -> Path:
    if option := config.getoption("tdd_project_root"):
        return (config.invocation_params.dir / option).resolve()
    if ini := config.getini("tdd_project_root"):
        return (config.rootpath / str(ini)).resolve()
    return config.rootpath.resolve()


def pytest_configure(config: pytest.Config) -> None:
    # xdist workers report back to the controller, which records everything.
    if hasattr(config, "workerinput"):
        return

    reporter = PytestReporter.from_config(Config(project_root=_project_root(config)))
    plugin = TddReporterPlugin(
        reporter=reporter,
        interruption=InterruptionHandler(reporter=reporter, signals=(signal.SIGTERM,)),
    )
    config.stash[plugin_key] = plugin
    config.pluginmanager.register(plugin, PLUGIN_NAME)


def pytest_unconfigure(config: pytest.Config) -> None:
    plugin = config.stash.get(plugin_key, None)
    if plugin is not None:
        plugin.interruption.uninstall()
        del config.stash[plugin_key]
        config.pluginmanager.unregister(plugin)
