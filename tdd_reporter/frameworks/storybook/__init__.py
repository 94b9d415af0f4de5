"""Storybook reporter module."""

from tdd_reporter.frameworks.storybook.manifest import storybook_manifest
from tdd_reporter.frameworks.storybook.models import StoryContext, StoryResult
from tdd_reporter.frameworks.storybook.reporter import (
    StorybookIngestor,
    StorybookReporter,
    StoryOutcome,
)

__all__ = [
    "StoryContext",
    "StoryOutcome",
    "StoryResult",
    "StorybookIngestor",
    "StorybookReporter",
    "storybook_manifest",
]
