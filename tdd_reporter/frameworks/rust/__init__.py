"""Rust test reporter module."""

from tdd_reporter.frameworks.rust.manifest import rust_manifest
from tdd_reporter.frameworks.rust.reporter import (
    RustIngestor,
    RustReporter,
    RustTestRef,
)

__all__ = ["RustIngestor", "RustReporter", "RustTestRef", "rust_manifest"]
