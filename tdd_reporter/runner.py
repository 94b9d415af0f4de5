"""Run a test command and stream its output to an ingestor."""

import asyncio
import logging
from collections.abc import Iterable, Sequence
from typing import Any, TextIO

from tdd_reporter.frameworks.base import Ingestor

log = logging.getLogger(__name__)

# Test output can hold very long lines (JSON reports on a single line).
LINE_LIMIT = 2**24


def feed_line(ingestor: Ingestor[Any], line: str) -> None:
    """Hand one line to the ingestor, keeping ingestion errors out of the run."""
    try:
        ingestor.feed(line)
    except Exception as exc:
        log.warning("Could not ingest line %r: %s", line, exc, exc_info=True)
        ingestor.reporter.record_unhandled_error(exc)


def feed_lines(
    lines: Iterable[str],
    ingestor: Ingestor[Any],
    echo: TextIO | None = None,
) -> None:
    """Feed lines read from a file or a pipe."""
    for raw in lines:
        if echo is not None:
            echo.write(raw)
        feed_line(ingestor, raw.rstrip("\r\n"))
    if echo is not None:
        echo.flush()


async def run_command(
    command: Sequence[str],
    *,
    ingestor: Ingestor[Any] | None = None,
    echo: TextIO | None = None,
) -> int:
    """Run a command with stdout and stderr merged, line by line.

    Args:
        command: Program and arguments, run without a shell
        ingestor: Receives every output line, if given
        echo: Receives a copy of the output, if given

    Returns:
        The exit code of the command.

    """
    log.debug("Running %s", " ".join(command))
    process = await asyncio.create_subprocess_exec(
        *command,
        stdout=asyncio.subprocess.PIPE,
        stderr=asyncio.subprocess.STDOUT,
        limit=LINE_LIMIT,
    )
    assert process.stdout is not None

    try:
        async for raw in process.stdout:
            line = raw.decode(errors="replace")
            if echo is not None:
                echo.write(line)
                echo.flush()
            if ingestor is not None:
                feed_line(ingestor, line.rstrip("\r\n"))
        return await process.wait()
    finally:
        if process.returncode is None:
            log.debug("Killing %s", command[0])
            process.kill()
            await process.wait()
