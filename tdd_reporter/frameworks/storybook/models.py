"""Pydantic models for story results emitted by the Storybook test-runner.

A test-runner `postVisit` hook prints one JSON object per visited story:

    {"context": {"id": "button--primary", "title": "Button", ...},
     "state": "failed", "errors": [{"message": "..."}]}
"""

from collections.abc import Mapping, Sequence
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

PLAY_FUNCTION_TAG = "play-fn"


class StorybookModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class StoryContext(StorybookModel):
    """What the test-runner knows about a story."""

    model_config = ConfigDict(frozen=True)

    id: str
    title: str
    name: str
    import_path: str | None = None
    tags: Sequence[str] | None = None
    has_play_function: bool | None = None

    @property
    def has_play(self) -> bool:
        """Whether the story declares an interaction test.

        Stories whose play function status is unknown count as tests.
        """
        if self.has_play_function is not None:
            return self.has_play_function
        if self.tags is not None:
            return PLAY_FUNCTION_TAG in self.tags
        return True


class StoryResult(StorybookModel):
    """One line of test-runner output."""

    context: Mapping[str, Any]
    state: str | None = None
    errors: Sequence[Any] = Field(default_factory=list)
    render_error: Any = None
