"""Persistence of the latest test results."""

import logging
import os
import tempfile
from abc import ABC, abstractmethod
from dataclasses import dataclass, field

from tdd_reporter.config import Config

log = logging.getLogger(__name__)


class Storage(ABC):
    """Key/value boundary holding the latest test results of a project."""

    @abstractmethod
    def save_test(self, content: str) -> None:
        """Persist serialised test results, replacing any previous ones."""

    @abstractmethod
    def get_test(self) -> str | None:
        """Return the stored test results, or None if nothing was saved."""


@dataclass(frozen=True, kw_only=True)
class FileStorage(Storage):
    """Stores results as a JSON file under the project's data directory.

    Writes are atomic: content goes to a temporary file that then replaces
    the target, so concurrent writers never leave a partial file behind.
    """

    config: Config = field(default_factory=Config)

    def save_test(self, content: str) -> None:
        """Write content to the results file."""
        path = self.config.test_results_path
        path.parent.mkdir(parents=True, exist_ok=True)

        fd, tmp_name = tempfile.mkstemp(
            dir=path.parent, prefix=f".{path.name}.", suffix=".tmp"
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as tmp:
                tmp.write(content)
            os.replace(tmp_name, path)
        except BaseException:
            os.unlink(tmp_name)
            raise

        log.debug("Saved test results to %s", path)

    def get_test(self) -> str | None:
        """Read the results file if it exists."""
        path = self.config.test_results_path
        if not path.exists():
            return None
        return path.read_text(encoding="utf-8")


@dataclass(kw_only=True)
class MemoryStorage(Storage):
    """Keeps results in memory, recording every write."""

    writes: list[str] = field(default_factory=list)

    def save_test(self, content: str) -> None:
        """Record content as the latest results."""
        self.writes.append(content)

    def get_test(self) -> str | None:
        """Return the latest write."""
        return self.writes[-1] if self.writes else None
