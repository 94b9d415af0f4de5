"""Payload helpers for Storybook test-runner results in tests."""

import json
from collections.abc import Sequence
from typing import Any


def story_context(
    *,
    story_id: str = "button--primary",
    title: str = "Button",
    name: str = "Primary",
    import_path: str | None = "./src/Button.stories.js",
    tags: Sequence[str] | None = ("dev", "test", "play-fn"),
    has_play_function: bool | None = None,
) -> dict[str, Any]:
    """Create the story context the test-runner passes to its hooks."""
    context: dict[str, Any] = {"id": story_id, "title": title, "name": name}
    if import_path is not None:
        context["importPath"] = import_path
    if tags is not None:
        context["tags"] = list(tags)
    if has_play_function is not None:
        context["hasPlayFunction"] = has_play_function
    return context


def story_result(
    context: dict[str, Any] | None = None,
    *,
    state: str | None = "passed",
    errors: Sequence[Any] = (),
    render_error: Any = None,
) -> str:
    """Create one JSON line of story results."""
    payload: dict[str, Any] = {
        "context": context or story_context(),
        "errors": list(errors),
    }
    if state is not None:
        payload["state"] = state
    if render_error is not None:
        payload["renderError"] = render_error
    return json.dumps(payload)
