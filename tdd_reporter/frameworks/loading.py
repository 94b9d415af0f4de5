"""Loading of framework adapters from entry points."""

from importlib.metadata import entry_points
from typing import Any

from tdd_reporter.frameworks.manifest import FrameworkManifest

ENTRY_POINT_GROUP = "tdd_reporter.frameworks"


class FrameworkNotFoundError(Exception):
    """Raised when a framework adapter is not found."""


def available_frameworks() -> list[str]:
    """Keys of every installed framework adapter, sorted."""
    return sorted({entry.name for entry in entry_points(group=ENTRY_POINT_GROUP)})


def load_framework_manifest(key: str) -> FrameworkManifest[Any]:
    """Load a framework manifest by key.

    Keys are matched case-insensitively, so `--framework Jest` works too.

    Args:
        key: The framework key as registered in pyproject.toml
             (e.g., "go", "jest")

    Returns:
        The framework manifest instance

    Raises:
        FrameworkNotFoundError: If no framework with the given key is found,
            or the entry point does not resolve to a manifest

    """
    wanted = key.strip().lower()
    matches = [
        entry
        for entry in entry_points(group=ENTRY_POINT_GROUP)
        if entry.name.lower() == wanted
    ]
    if not matches:
        raise FrameworkNotFoundError(
            f"Framework '{key}' not found. "
            f"Available frameworks: {available_frameworks()}"
        )

    entry = matches[0]
    manifest = entry.load()
    if not isinstance(manifest, FrameworkManifest):
        raise FrameworkNotFoundError(
            f"Framework '{key}' is registered as {entry.value}, "
            f"which is not a framework manifest"
        )
    return manifest
