"""Pydantic models for `go test -json` events."""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_pascal


class GoTestEvent(BaseModel):
    """One line of `go test -json` output (see `go doc test2json`).

    ``action`` is kept as a plain string so events added by newer Go
    releases still parse.
    """

    model_config = ConfigDict(alias_generator=to_pascal, populate_by_name=True)

    action: str
    package: str | None = None
    test: str | None = None
    output: str | None = None
    elapsed: float | None = None
    import_path: str | None = None
    failed_build: str | None = None
