"""Abstract base classes shared by all framework reporters."""

import logging
import threading
import traceback
from abc import ABC, abstractmethod
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any, Self

from tdd_reporter.config import Config
from tdd_reporter.models.result import (
    TEST_STATES,
    TestCase,
    TestError,
    TestModule,
    TestRunOutput,
    TestState,
)
from tdd_reporter.reducer import reduce_run_status
from tdd_reporter.storage import FileStorage, Storage

log = logging.getLogger(__name__)

UNKNOWN_MODULE_ID = "unknown"


@dataclass(frozen=True, kw_only=True)
class TestIdentity:
    """Where a native outcome belongs in the canonical output."""

    __test__ = False

    module_id: str
    name: str
    full_name: str


def to_test_error(raw: Any) -> TestError:
    """Normalise an error of any shape a framework hands over.

    Mappings contribute their ``message``, ``stack``, ``expected`` and
    ``actual`` keys; exceptions their text and traceback. Anything else is
    converted to a string.
    """
    if isinstance(raw, TestError):
        return raw

    if isinstance(raw, BaseException):
        return TestError(
            message=str(raw) or type(raw).__name__,
            stack="".join(traceback.format_exception(raw)) or None,
        )

    if isinstance(raw, Mapping):
        message = raw.get("message")
        return TestError(
            message=str(raw) if message is None else _as_text(message),
            stack=_optional_text(raw.get("stack")),
            expected=_optional_text(raw.get("expected")),
            actual=_optional_text(raw.get("actual")),
        )

    return TestError(message=_as_text(raw))


def _as_text(value: Any) -> str:
    return value if isinstance(value, str) else str(value)


def _optional_text(value: Any) -> str | None:
    return None if value is None else _as_text(value)


@dataclass(kw_only=True)
class Reporter[EventT](ABC):
    """Accumulates native test outcomes and writes one canonical snapshot.

    Generic type EventT is whatever the framework hands over for a single
    outcome: a pytest report, a parsed Go event, a Storybook context. The
    only framework-specific piece is ``identify``; accumulation, status
    reduction and persistence are shared.

    One instance covers one run. Mutation of the accumulated state is
    serialised, so callbacks from several threads are safe, but separate
    processes must use separate instances.
    """

    storage: Storage = field(default_factory=FileStorage)
    _modules: dict[str, list[TestCase]] = field(
        default_factory=dict, init=False, repr=False
    )
    _unhandled_errors: list[Any] = field(default_factory=list, init=False, repr=False)
    # Reentrant: a signal handler may interrupt while the main thread holds it.
    _lock: threading.RLock = field(
        default_factory=threading.RLock, init=False, repr=False
    )
    _interrupted: bool = field(default=False, init=False)
    _completed: bool = field(default=False, init=False)

    @classmethod
    def from_config(cls, config: Config) -> Self:
        """Create a reporter writing to the project's results file."""
        return cls(storage=FileStorage(config=config))

    @abstractmethod
    def identify(self, event: EventT) -> TestIdentity | None:
        """Map a native event to its module and test names.

        Returns:
            The identity of the test, or None if the event does not stand
            for a test and must be left out of the results

        """

    @property
    def completed(self) -> bool:
        """Whether results were written at least once."""
        return self._completed

    @property
    def interrupted(self) -> bool:
        """Whether the run was cut short."""
        return self._interrupted

    def record_result(
        self,
        event: EventT,
        state: TestState,
        errors: Iterable[Any] | Any = None,
    ) -> None:
        """Record one test outcome.

        Never raises on malformed events: whatever can be derived from the
        event is kept, and the rest falls back to string conversions.
        """
        try:
            identity = self.identify(event)
        except Exception:
            log.warning("Could not identify test event %r", event, exc_info=True)
            identity = TestIdentity(
                module_id=UNKNOWN_MODULE_ID, name=str(event), full_name=str(event)
            )

        if identity is None:
            log.debug("Skipping non-test event %r", event)
            return

        if state not in TEST_STATES:
            log.warning(
                "Unknown test state %r for %s, recording as skipped",
                state,
                identity.full_name,
            )
            state = "skipped"

        test_errors = None
        if state == "failed" and errors is not None:
            if isinstance(
                errors, (str, bytes, Mapping, BaseException, TestError)
            ) or not isinstance(errors, Iterable):
                errors = [errors]
            test_errors = [to_test_error(error) for error in errors] or None

        test = TestCase(
            name=identity.name,
            full_name=identity.full_name,
            state=state,
            errors=test_errors,
        )

        with self._lock:
            self._modules.setdefault(identity.module_id, []).append(test)

    def record_unhandled_error(self, error: Any) -> None:
        """Record an error that does not belong to any test."""
        normalised = to_test_error(error).model_dump(mode="json", exclude_none=True)
        with self._lock:
            self._unhandled_errors.append(normalised)

    def build_output(self) -> TestRunOutput:
        """Snapshot the accumulated results without writing them."""
        with self._lock:
            modules = [
                TestModule(module_id=module_id, tests=list(tests))
                for module_id, tests in self._modules.items()
            ]
            unhandled_errors = list(self._unhandled_errors)

        reason = "interrupted" if self._interrupted else reduce_run_status(modules)

        return TestRunOutput(
            test_modules=modules,
            unhandled_errors=unhandled_errors,
            reason=reason,
        )

    def complete(self) -> TestRunOutput:
        """Write the results of the run to storage.

        Calling it again rewrites the same content unless new results were
        recorded in between. Storage errors propagate.
        """
        output = self.build_output()
        self.storage.save_test(output.to_json())
        self._completed = True

        log.debug(
            "Wrote %d test(s) in %d module(s), reason=%s",
            len(output.tests),
            len(output.test_modules),
            output.reason,
        )
        return output

    def interrupt(self) -> None:
        """Write whatever was collected with the reason forced to interrupted.

        Best effort: failures are logged and dropped so they never mask the
        error that interrupted the run.
        """
        self._interrupted = True
        try:
            self.complete()
        except Exception:
            log.debug("Could not save interrupted test results", exc_info=True)

    def reset(self) -> None:
        """Forget everything recorded so the instance can serve another run."""
        with self._lock:
            self._modules.clear()
            self._unhandled_errors.clear()
        self._interrupted = False
        self._completed = False


@dataclass(kw_only=True)
class Ingestor[EventT](ABC):
    """Feeds line-oriented native output to a reporter."""

    reporter: Reporter[EventT]

    @abstractmethod
    def feed(self, line: str) -> None:
        """Consume one line of output, without its trailing newline."""

    def close(self) -> None:
        """Flush anything buffered once the output ended."""


@dataclass(kw_only=True)
class DocumentIngestor[EventT](Ingestor[EventT]):
    """Buffers lines and parses them as one report document at close."""

    _lines: list[str] = field(default_factory=list, init=False, repr=False)

    def feed(self, line: str) -> None:
        """Buffer one line of the report."""
        self._lines.append(line)

    def close(self) -> None:
        """Parse the buffered report."""
        document = "\n".join(self._lines)
        self._lines.clear()
        if not document.strip():
            log.info("Report is empty, no results recorded")
            return

        try:
            self.ingest_document(document)
        except Exception as exc:
            log.warning("Could not parse test report: %s", exc, exc_info=True)
            self.reporter.record_unhandled_error(
                {"message": f"Could not parse test report: {exc}"}
            )

    @abstractmethod
    def ingest_document(self, document: str) -> None:
        """Record every outcome found in a complete report."""
