"""Framework manifest definition for the plugin system."""

from dataclasses import dataclass

from tdd_reporter.frameworks.base import Ingestor, Reporter


@dataclass(frozen=True, kw_only=True)
class FrameworkManifest[EventT]:
    """Manifest describing a framework adapter driven by its output.

    The manifest pairs the reporter, which knows how to name the framework's
    outcomes, with the ingestor that turns the framework's output (a live
    stream or a report file) into those outcomes.
    """

    reporter_cls: type[Reporter[EventT]]
    ingestor_cls: type[Ingestor[EventT]]
