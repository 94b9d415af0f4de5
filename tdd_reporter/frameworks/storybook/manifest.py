"""Storybook reporter manifest."""

from tdd_reporter.frameworks.manifest import FrameworkManifest
from tdd_reporter.frameworks.storybook.reporter import (
    StorybookIngestor,
    StorybookReporter,
)

storybook_manifest = FrameworkManifest(
    reporter_cls=StorybookReporter, ingestor_cls=StorybookIngestor
)
