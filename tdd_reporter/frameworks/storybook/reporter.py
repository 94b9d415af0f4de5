"""Storybook reporter implementation."""

import json
import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any

from pydantic import ValidationError

from tdd_reporter.frameworks.base import Ingestor, Reporter, TestIdentity
from tdd_reporter.frameworks.storybook.models import StoryContext, StoryResult
from tdd_reporter.models.result import TestState

log = logging.getLogger(__name__)


@dataclass(frozen=True, kw_only=True)
class StoryOutcome:
    """A visited story and whether it rendered."""

    context: StoryContext
    rendered: bool = True


def story_module_id(context: StoryContext) -> str:
    """Group stories by their file, or by the component part of the id."""
    if context.import_path:
        return context.import_path
    component, separator, _ = context.id.partition("--")
    if separator and component:
        return component
    return context.title


def fallback_context(raw: Any) -> StoryContext:
    """Build a context from whatever a malformed one carries."""
    fields = raw if isinstance(raw, Mapping) else {}
    text = str(raw)

    def field_text(key: str) -> str | None:
        value = fields.get(key)
        return None if value is None or value == "" else str(value)

    story_id = field_text("id") or text
    return StoryContext(
        id=story_id,
        title=field_text("title") or story_id,
        name=field_text("name") or text,
        import_path=field_text("importPath") or field_text("import_path"),
    )


@dataclass(kw_only=True)
class StorybookReporter(Reporter[StoryOutcome]):
    """Records interaction tests run by the Storybook test-runner.

    A story without a play function only checks that it renders, so it is
    left out of the results unless rendering failed.
    """

    def identify(self, event: StoryOutcome) -> TestIdentity | None:
        context = event.context
        if event.rendered and not context.has_play:
            return None
        return TestIdentity(
            module_id=story_module_id(context),
            name=context.name,
            full_name=f"{context.title} > {context.name}",
        )

    def on_story_result(
        self,
        context: StoryContext | Mapping[str, Any],
        state: TestState | None = None,
        errors: Iterable[Any] | Any = None,
        render_error: Any = None,
    ) -> None:
        """Record the outcome of one story, as reported by the test-runner.

        Without a state, a story is failed when it carries errors and passed
        otherwise.
        """
        if not isinstance(context, StoryContext):
            try:
                context = StoryContext.model_validate(context)
            except ValidationError as exc:
                log.warning("Incomplete story context %r: %s", context, exc)
                context = fallback_context(context)

        if render_error is not None:
            log.debug("Story %s failed to render", context.id)
            self.record_result(
                StoryOutcome(context=context, rendered=False), "failed", [render_error]
            )
            return

        if state is None:
            state = "failed" if errors else "passed"
        self.record_result(StoryOutcome(context=context), state, errors)


@dataclass(kw_only=True)
class StorybookIngestor(Ingestor[StoryOutcome]):
    """Reads JSON-lines story results, ignoring the runner's own output."""

    reporter: StorybookReporter

    def feed(self, line: str) -> None:
        line = line.strip()
        if not line.startswith("{"):
            return

        try:
            payload = json.loads(line)
        except json.JSONDecodeError:
            return

        try:
            result = StoryResult.model_validate(payload)
        except ValidationError as exc:
            log.warning("Malformed story result: %s", exc)
            self.reporter.record_unhandled_error(
                {"message": f"Malformed story result: {line}"}
            )
            return

        self.reporter.on_story_result(
            result.context,
            result.state,  # type: ignore[arg-type]
            result.errors,
            result.render_error,
        )
