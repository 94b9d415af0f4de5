"""Rust test reporter implementation."""

import logging
import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import PurePath
from typing import Any

from tdd_reporter.frameworks.base import Ingestor, Reporter, TestIdentity
from tdd_reporter.models.result import TestState

log = logging.getLogger(__name__)

OUTCOME_TO_STATE: Mapping[str, TestState] = {
    "ok": "passed",
    "FAILED": "failed",
    "ignored": "skipped",
}

UNKNOWN_CRATE = "unknown"
COMPILATION_MODULE = "compilation"
BUILD_TEST = "build"

RUNNING = re.compile(r"^\s*Running\s+(?:unittests\s+)?(?P<target>.+?)\s*$")
DOC_TESTS = re.compile(r"^\s*Doc-tests\s+(?P<crate>\S+)")
TEST_LINE = re.compile(r"^test (?P<name>.+?) \.\.\. (?P<outcome>ok|FAILED|ignored)\b")
STDOUT_HEADER = re.compile(r"^---- (?P<name>.+?) stdout ----$")
TEST_RESULT = re.compile(r"^test result: ")
FAILURES = re.compile(r"^failures:\s*$")
COULD_NOT_COMPILE = re.compile(r"^error: could not compile `(?P<crate>[^`]+)`")
CARGO_TEST_FAILED = re.compile(r"^error: test failed")
COMPILE_ERROR = re.compile(r"^error(?:\[E\d+\])?: ")
BINARY_HASH = re.compile(r"-[0-9a-f]{8,}$")
LEFT = re.compile(r"^\s*left:\s*`?(?P<value>.*?)`?,?\s*$", re.MULTILINE)
RIGHT = re.compile(r"^\s*right:\s*`?(?P<value>.*?)`?,?\s*$", re.MULTILINE)


@dataclass(frozen=True, kw_only=True)
class RustTestRef:
    """A test, or a synthetic stand-in, within a crate's test binary."""

    __test__ = False

    crate: str
    name: str


@dataclass(kw_only=True)
class RustReporter(Reporter[RustTestRef]):
    """Groups Rust tests by crate, named `<crate>::<test path>`."""

    def identify(self, event: RustTestRef) -> TestIdentity:
        """Use the crate as module and the test path as name."""
        return TestIdentity(
            module_id=event.crate,
            name=event.name,
            full_name=f"{event.crate}::{event.name}",
        )


def crate_from_target(target: str) -> str:
    """Extract the crate name from a `Running` line target.

    Handles both `src/lib.rs (target/debug/deps/calc-1a2b3c4d5e6f7a8b)` and
    the older bare `target/debug/deps/calc-1a2b3c4d5e6f7a8b` form.
    """
    if "(" in target and target.endswith(")"):
        target = target[target.rindex("(") + 1 : -1]
    binary = PurePath(target.replace("\\", "/")).name
    binary = binary.removesuffix(".exe")
    return BINARY_HASH.sub("", binary) or UNKNOWN_CRATE


def assertion_error(output: str) -> dict[str, Any]:
    """Build an error from panic output, splitting out assert_eq! operands.

    ``assert_eq!(actual, expected)`` is the Rust convention, so ``left`` is
    reported as actual and ``right`` as expected.
    """
    error: dict[str, Any] = {"message": output}
    left = LEFT.search(output)
    right = RIGHT.search(output)
    if left and right:
        error["actual"] = left.group("value")
        error["expected"] = right.group("value")
    return error


@dataclass(kw_only=True)
class RustIngestor(Ingestor[RustTestRef]):
    """Reads the human-readable output of `cargo test`.

    Outcomes are printed before the panic output of failed tests, so they
    are held back until the suite's `test result:` line and recorded with
    their captured output attached.
    """

    _crate: str = field(default=UNKNOWN_CRATE, init=False)
    _pending: list[tuple[str, str, str]] = field(default_factory=list, init=False)
    _captured: dict[str, list[str]] = field(default_factory=dict, init=False)
    _capturing: str | None = field(default=None, init=False)
    _error_blocks: list[list[str]] = field(default_factory=list, init=False)
    _in_error_block: bool = field(default=False, init=False)

    def feed(self, line: str) -> None:
        """Handle one line of cargo or test harness output."""
        if match := RUNNING.match(line):
            self._flush()
            self._crate = crate_from_target(match.group("target"))
        elif match := DOC_TESTS.match(line):
            self._flush()
            self._crate = match.group("crate")
        elif match := TEST_LINE.match(line):
            self._pending.append(
                (self._crate, match.group("name"), match.group("outcome"))
            )
        elif match := STDOUT_HEADER.match(line):
            self._capturing = match.group("name")
            self._captured[self._capturing] = []
        elif FAILURES.match(line):
            self._capturing = None
        elif TEST_RESULT.match(line):
            self._flush()
        elif self._capturing is not None:
            self._captured[self._capturing].append(line)
        else:
            self._feed_build_line(line)

    def close(self) -> None:
        """Record outcomes of a suite cut short, and unreported build errors."""
        self._flush()
        if self._error_blocks:
            self._record_compilation_failure(None)

    def _feed_build_line(self, line: str) -> None:
        if match := COULD_NOT_COMPILE.match(line):
            self._in_error_block = False
            self._record_compilation_failure(match.group(0))
        elif CARGO_TEST_FAILED.match(line):
            self._in_error_block = False
        elif COMPILE_ERROR.match(line):
            self._error_blocks.append([line])
            self._in_error_block = True
        elif self._in_error_block:
            if line.strip():
                self._error_blocks[-1].append(line)
            else:
                self._in_error_block = False

    def _record_compilation_failure(self, summary: str | None) -> None:
        message = "\n\n".join("\n".join(block) for block in self._error_blocks)
        if summary:
            message = f"{message}\n\n{summary}" if message else summary
        self._error_blocks.clear()

        log.debug("Compilation failed: %s", summary or "output ended")
        self.reporter.record_result(
            RustTestRef(crate=COMPILATION_MODULE, name=BUILD_TEST),
            "failed",
            [{"message": message}],
        )

    def _flush(self) -> None:
        self._capturing = None
        for crate, name, outcome in self._pending:
            state = OUTCOME_TO_STATE[outcome]
            errors = None
            if state == "failed":
                output = "\n".join(self._captured.pop(name, [])).strip()
                errors = [assertion_error(output)] if output else None
            self.reporter.record_result(
                RustTestRef(crate=crate, name=name), state, errors
            )

        self._pending.clear()
        self._captured.clear()
