"""Go test reporter implementation."""

import logging
import re
from collections import defaultdict
from collections.abc import Mapping
from dataclasses import dataclass, field

from pydantic import ValidationError

from tdd_reporter.frameworks.base import Ingestor, Reporter, TestIdentity
from tdd_reporter.frameworks.go.models import GoTestEvent
from tdd_reporter.models.result import TestState

log = logging.getLogger(__name__)

ACTION_TO_STATE: Mapping[str, TestState] = {
    "pass": "passed",
    "fail": "failed",
    "skip": "skipped",
}

COMPILATION_ERROR_TEST = "CompilationError"
PACKAGE_FAILURE_TEST = "PackageFailure"

BUILD_HEADER = re.compile(r"^# (?P<package>\S+)")
BUILD_FAILED = re.compile(r"^FAIL\s+(?P<package>\S+)\s+\[(?:setup|build) failed\]")
FRAMING_LINE = re.compile(
    r"^\s*(?:=== (?:RUN|PAUSE|CONT|NAME)|--- (?:FAIL|PASS|SKIP))\b"
)


@dataclass(frozen=True, kw_only=True)
class GoTestRef:
    """A test, or a synthetic stand-in, within a Go package."""

    __test__ = False

    package: str
    test: str


@dataclass(kw_only=True)
class GoReporter(Reporter[GoTestRef]):
    """Groups Go tests by package, named `<package>/<test>`."""

    def identify(self, event: GoTestRef) -> TestIdentity:
        """Use the package as module and the test path as name."""
        return TestIdentity(
            module_id=event.package,
            name=event.test,
            full_name=f"{event.package}/{event.test}",
        )


def _strip_variant(import_path: str) -> str:
    """Drop the ` [pkg.test]` suffix Go appends to test build import paths."""
    return import_path.split(" ", 1)[0]


@dataclass(kw_only=True)
class GoIngestor(Ingestor[GoTestRef]):
    """Reads `go test -json` output, including interleaved build errors.

    Only leaf tests are recorded: once a subtest of ``TestX`` was seen,
    the outcome of ``TestX`` itself is not recorded again. A package that
    fails without a failing test (build or setup failure, panic in
    ``TestMain``) is recorded as one synthetic failed test.
    """

    _outputs: dict[tuple[str, str], list[str]] = field(
        default_factory=lambda: defaultdict(list), init=False, repr=False
    )
    _package_output: dict[str, list[str]] = field(
        default_factory=lambda: defaultdict(list), init=False, repr=False
    )
    _build_output: dict[str, list[str]] = field(
        default_factory=lambda: defaultdict(list), init=False, repr=False
    )
    _parents: set[tuple[str, str]] = field(default_factory=set, init=False)
    _build_failed: set[str] = field(default_factory=set, init=False)
    _failed_packages: set[str] = field(default_factory=set, init=False)
    _finished_packages: set[str] = field(default_factory=set, init=False)
    _build_package: str | None = field(default=None, init=False)

    def feed(self, line: str) -> None:
        """Handle one JSON event, or one plain line of build output."""
        try:
            event = GoTestEvent.model_validate_json(line)
        except ValidationError:
            self._feed_text(line)
            return

        self._build_package = None
        self._handle(event)

    def close(self) -> None:
        """Report packages whose build failed but never sent a fail event."""
        for package in sorted(self._build_failed - self._finished_packages):
            self._finish_package(package, failed_build=None)

    def _feed_text(self, line: str) -> None:
        if match := BUILD_HEADER.match(line):
            self._build_package = match.group("package")
        elif match := BUILD_FAILED.match(line):
            self._build_failed.add(match.group("package"))
            self._build_package = None
        elif self._build_package is not None and line.strip():
            self._build_output[self._build_package].append(line.rstrip())

    def _handle(self, event: GoTestEvent) -> None:
        package = event.package or ""

        match event.action:
            case "build-output":
                if (
                    event.import_path
                    and event.output
                    and not BUILD_HEADER.match(event.output)
                ):
                    self._build_output[_strip_variant(event.import_path)].append(
                        event.output.rstrip("\n")
                    )
            case "build-fail":
                if event.import_path:
                    self._build_failed.add(_strip_variant(event.import_path))
            case "run":
                if event.test and "/" in event.test:
                    self._parents.add((package, event.test.rsplit("/", 1)[0]))
            case "output":
                self._handle_output(package, event)
            case "pass" | "fail" | "skip":
                if event.test:
                    self._finish_test(package, event.test, event.action)
                elif event.action == "fail":
                    self._finish_package(package, failed_build=event.failed_build)
                else:
                    self._finished_packages.add(package)

    def _handle_output(self, package: str, event: GoTestEvent) -> None:
        output = (event.output or "").rstrip("\n")
        if event.test:
            self._outputs[(package, event.test)].append(output)
            return

        if match := BUILD_FAILED.match(output):
            self._build_failed.add(match.group("package"))
        self._package_output[package].append(output)

    def _finish_test(self, package: str, test: str, action: str) -> None:
        output = self._outputs.pop((package, test), [])
        if (package, test) in self._parents:
            log.debug("Not recording parent test %s/%s", package, test)
            return

        state = ACTION_TO_STATE[action]
        errors = None
        if state == "failed":
            self._failed_packages.add(package)
            message = "\n".join(
                line.strip() for line in output if not FRAMING_LINE.match(line)
            ).strip()
            message = message or "\n".join(output).strip()
            errors = [message] if message else None

        self.reporter.record_result(
            GoTestRef(package=package, test=test), state, errors
        )

    def _finish_package(self, package: str, failed_build: str | None) -> None:
        self._finished_packages.add(package)
        if package in self._failed_packages:
            return

        build_output = self._build_output.get(package) or []
        if failed_build:
            self._build_failed.add(package)
            variant_output = self._build_output.get(_strip_variant(failed_build))
            build_output = variant_output or build_output

        if package in self._build_failed or build_output:
            name = COMPILATION_ERROR_TEST
            lines = build_output or self._package_output.get(package, [])
        else:
            name = PACKAGE_FAILURE_TEST
            lines = self._package_output.get(package, [])

        message = "\n".join(lines).strip()
        log.debug("Package %s failed without a failing test (%s)", package, name)
        self.reporter.record_result(
            GoTestRef(package=package, test=name),
            "failed",
            [message] if message else None,
        )
