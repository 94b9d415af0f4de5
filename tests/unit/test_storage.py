"""Tests for result storage."""

from pathlib import Path
from unittest.mock import patch

import pytest

from tdd_reporter.config import Config
from tdd_reporter.storage import FileStorage, MemoryStorage


def test_file_storage_returns_none_before_first_save(config: Config) -> None:
    """Reads nothing when no results were written."""
    assert FileStorage(config=config).get_test() is None


def test_file_storage_writes_results_file(config: Config) -> None:
    """Creates the data directory and writes the results file."""
    storage = FileStorage(config=config)

    storage.save_test('{"testModules": []}')

    assert config.test_results_path.read_text() == '{"testModules": []}'
    assert storage.get_test() == '{"testModules": []}'


def test_file_storage_replaces_previous_results(config: Config) -> None:
    """Keeps only the latest results."""
    storage = FileStorage(config=config)

    storage.save_test("first")
    storage.save_test("second")

    assert storage.get_test() == "second"
    assert list(config.test_results_path.parent.iterdir()) == [
        config.test_results_path
    ]


def test_file_storage_keeps_previous_results_on_failed_write(config: Config) -> None:
    """Leaves neither a partial file nor a temporary file behind."""
    storage = FileStorage(config=config)
    storage.save_test("previous")

    with (
        patch("tdd_reporter.storage.os.replace", side_effect=OSError("disk full")),
        pytest.raises(OSError, match="disk full"),
    ):
        storage.save_test("next")

    assert storage.get_test() == "previous"
    assert list(config.test_results_path.parent.iterdir()) == [
        config.test_results_path
    ]


def test_file_storage_propagates_unwritable_root(tmp_path: Path) -> None:
    """Raises when the data directory cannot be created."""
    blocker = tmp_path / "file"
    blocker.write_text("")
    storage = FileStorage(config=Config(project_root=blocker))

    with pytest.raises(OSError):
        storage.save_test("content")


def test_memory_storage_records_writes() -> None:
    """Returns the latest of all recorded writes."""
    storage = MemoryStorage()
    assert storage.get_test() is None

    storage.save_test("a")
    storage.save_test("b")

    assert storage.writes == ["a", "b"]
    assert storage.get_test() == "b"
