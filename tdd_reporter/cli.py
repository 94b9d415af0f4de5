"""CLI entry point for reporting results of non-Python test frameworks."""

import argparse
import asyncio
import logging
import os
import sys
from collections.abc import Sequence
from pathlib import Path
from typing import Any

from tdd_reporter.config import PROJECT_ROOT_ENV, Config
from tdd_reporter.frameworks.base import Ingestor, Reporter
from tdd_reporter.frameworks.loading import (
    FrameworkNotFoundError,
    available_frameworks,
    load_framework_manifest,
)
from tdd_reporter.interruption import InterruptionHandler
from tdd_reporter.models.result import TestRunOutput
from tdd_reporter.runner import feed_lines, run_command

STATE_SYMBOLS = {
    "passed": "✅",
    "failed": "❌",
    "skipped": "⏭️",
}

# Conventional exit code of a process ended by SIGINT.
INTERRUPTED_EXIT_CODE = 130


def log_run_summary(log: logging.Logger, output: TestRunOutput) -> None:
    """Log a formatted summary of the recorded results."""
    log.info("=" * 80)
    log.info("Test Results Summary:")
    log.info("=" * 80)

    for module in output.test_modules:
        log.info("%s", module.module_id)
        for test in module.tests:
            log.info("  %s %s", STATE_SYMBOLS.get(test.state, "?"), test.full_name)
            for error in test.errors or ():
                first_line, _, _ = error.message.strip().partition("\n")
                log.info("      %s", first_line)

    for error in output.unhandled_errors:
        log.info("❗ %s", error.get("message") if isinstance(error, dict) else error)

    tests = output.tests
    log.info(
        "%d passed, %d failed, %d skipped, reason=%s",
        sum(1 for test in tests if test.state == "passed"),
        sum(1 for test in tests if test.state == "failed"),
        sum(1 for test in tests if test.state == "skipped"),
        output.reason or "none",
    )


def create_session(
    framework_key: str, project_root: Path
) -> tuple[Reporter[Any], Ingestor[Any]]:
    """Create the reporter and ingestor of a framework for one run."""
    manifest = load_framework_manifest(framework_key)
    reporter = manifest.reporter_cls.from_config(Config(project_root=project_root))
    return reporter, manifest.ingestor_cls(reporter=reporter)


def read_report(report_path: Path, ingestor: Ingestor[Any]) -> None:
    """Feed a report file, recording a missing file as an unhandled error."""
    try:
        with report_path.open(encoding="utf-8", errors="replace") as report:
            feed_lines(report, ingestor)
    except OSError as exc:
        logging.getLogger(__name__).warning(
            "Could not read report %s: %s", report_path, exc
        )
        ingestor.reporter.record_unhandled_error(
            {"message": f"Could not read test report {report_path}: {exc}"}
        )


def finish(
    log: logging.Logger,
    reporter: Reporter[Any],
    ingestor: Ingestor[Any],
    exit_code: int,
) -> int:
    """Flush the ingestor, write results and derive the exit code."""
    ingestor.close()
    output = reporter.complete()
    log_run_summary(log, output)

    if exit_code == 0 and output.reason == "failed":
        return 1
    return exit_code


async def run(
    framework_key: str,
    project_root: Path,
    command: Sequence[str],
    report_path: Path | None = None,
) -> int:
    """Run a test command, record its results and return its exit code."""
    log = logging.getLogger("tdd_reporter")

    log.info("Loading framework: %s", framework_key)
    reporter, ingestor = create_session(framework_key, project_root)

    with InterruptionHandler(reporter=reporter):
        try:
            exit_code = await run_command(
                command,
                ingestor=None if report_path is not None else ingestor,
                echo=sys.stdout,
            )
        except OSError as exc:
            log.error("Could not run %s: %s", command[0], exc)
            reporter.record_unhandled_error(exc)
            exit_code = 127

        log.info("Command exited with code %d", exit_code)
        if report_path is not None:
            read_report(report_path, ingestor)

        return finish(log, reporter, ingestor, exit_code)


def ingest(framework_key: str, project_root: Path, report_path: Path | None) -> int:
    """Record results from a report file or from standard input."""
    log = logging.getLogger("tdd_reporter")

    log.info("Loading framework: %s", framework_key)
    reporter, ingestor = create_session(framework_key, project_root)

    with InterruptionHandler(reporter=reporter):
        if report_path is not None:
            read_report(report_path, ingestor)
        else:
            feed_lines(sys.stdin, ingestor, echo=sys.stdout)

        return finish(log, reporter, ingestor, 0)


def parse_command(command: Sequence[str]) -> Sequence[str]:
    """Drop the `--` separating the command from the options."""
    if command and command[0] == "--":
        return command[1:]
    return command


def main(argv: Sequence[str] | None = None) -> None:
    """CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Record test results in the format read by TDD Guard",
    )
    parser.add_argument(
        "framework",
        help=f"Framework key, one of: {', '.join(available_frameworks())}",
    )
    parser.add_argument(
        "--project-root",
        type=Path,
        default=os.environ.get(PROJECT_ROOT_ENV) or Path.cwd(),
        help=f"Project root holding the results (default: ${PROJECT_ROOT_ENV} or cwd)",
    )
    parser.add_argument(
        "--report",
        type=Path,
        help="Report file to read instead of the command output",
    )
    parser.add_argument(
        "command",
        nargs=argparse.REMAINDER,
        help="Test command to run, after --",
    )

    args = parser.parse_args(argv)
    command = parse_command(args.command)

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )

    project_root = Path(args.project_root).absolute()
    try:
        if command:
            exit_code = asyncio.run(
                run(args.framework, project_root, command, args.report)
            )
        else:
            exit_code = ingest(args.framework, project_root, args.report)
    except FrameworkNotFoundError as exc:
        parser.error(str(exc))
    except KeyboardInterrupt:
        exit_code = INTERRUPTED_EXIT_CODE
    sys.exit(exit_code)


if __name__ == "__main__":  # pragma: no cover
    main()
