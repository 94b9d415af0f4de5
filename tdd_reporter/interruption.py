"""Best-effort persistence of partial results when a run is cut short."""

import atexit
import logging
import signal
import threading
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from types import FrameType
from typing import Any, Self

from tdd_reporter.frameworks.base import Reporter

log = logging.getLogger(__name__)

type SignalHandler = Callable[[int, FrameType | None], Any] | int | None

DEFAULT_SIGNALS: Sequence[signal.Signals] = (signal.SIGINT, signal.SIGTERM)


@dataclass(kw_only=True)
class InterruptionHandler:
    """Forces an interrupted write when the process ends abnormally.

    Covers termination signals and interpreter exit before the reporter
    completed (an uncaught exception, ``sys.exit`` from inside a run).
    Signal handlers can only be installed from the main thread; elsewhere
    only the exit hook is registered.
    """

    reporter: Reporter[Any]
    signals: Sequence[signal.Signals] = DEFAULT_SIGNALS
    _previous: dict[signal.Signals, SignalHandler] = field(
        default_factory=dict, init=False, repr=False
    )
    _installed: bool = field(default=False, init=False)

    def install(self) -> None:
        """Register the exit hook and signal handlers."""
        if self._installed:
            return

        atexit.register(self._on_exit)
        if threading.current_thread() is threading.main_thread():
            for signum in self.signals:
                self._previous[signum] = signal.getsignal(signum) or signal.SIG_DFL
                signal.signal(signum, self._on_signal)
        else:
            log.debug("Not in main thread, signal handlers not installed")

        self._installed = True

    def uninstall(self) -> None:
        """Restore previous signal handlers and drop the exit hook."""
        if not self._installed:
            return

        atexit.unregister(self._on_exit)
        for signum, previous in self._previous.items():
            signal.signal(signum, previous)
        self._previous.clear()
        self._installed = False

    def __enter__(self) -> Self:
        self.install()
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.uninstall()

    def _on_exit(self) -> None:
        if not self.reporter.completed:
            log.debug("Exiting before the run completed, saving partial results")
            self.reporter.interrupt()

    def _on_signal(self, signum: int, frame: FrameType | None) -> None:
        previous = self._previous.get(signal.Signals(signum), signal.SIG_DFL)
        if previous == signal.SIG_IGN:
            # The process keeps running, so the run is not cut short.
            log.debug("Ignoring signal %d, as before the run started", signum)
            return

        log.debug("Received signal %d, saving partial results", signum)
        self.reporter.interrupt()
        self.uninstall()

        if callable(previous):
            previous(signum, frame)
        elif previous == signal.SIG_DFL:
            signal.raise_signal(signum)
