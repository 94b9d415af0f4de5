"""Rust test reporter manifest."""

from tdd_reporter.frameworks.manifest import FrameworkManifest
from tdd_reporter.frameworks.rust.reporter import RustIngestor, RustReporter

rust_manifest = FrameworkManifest(reporter_cls=RustReporter, ingestor_cls=RustIngestor)
