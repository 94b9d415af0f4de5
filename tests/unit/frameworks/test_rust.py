"""Tests for the Rust reporter."""

import pytest

from tdd_reporter.frameworks.rust import RustIngestor, RustReporter
from tdd_reporter.frameworks.rust.reporter import crate_from_target
from tdd_reporter.models.result import TestRunOutput
from tdd_reporter.storage import MemoryStorage
from tdd_reporter.testing.rust import payloads


@pytest.fixture
def ingestor(storage: MemoryStorage) -> RustIngestor:
    """Create ingestor feeding a reporter writing to memory."""
    return RustIngestor(reporter=RustReporter(storage=storage))


def ingest(ingestor: RustIngestor, lines: list[str]) -> TestRunOutput:
    """Feed lines, close the stream and complete the run."""
    for line in lines:
        ingestor.feed(line)
    ingestor.close()
    return ingestor.reporter.complete()


@pytest.mark.parametrize(
    ("target", "crate"),
    [
        ("src/lib.rs (target/debug/deps/calc-1a2b3c4d5e6f7a8b)", "calc"),
        ("tests/api.rs (target/debug/deps/api-0123456789abcdef)", "api"),
        ("target/debug/deps/calc-1a2b3c4d5e6f7a8b", "calc"),
        (r"src\main.rs (target\debug\deps\cli-1a2b3c4d5e6f7a8b.exe)", "cli"),
    ],
)
def test_crate_from_target(target: str, crate: str) -> None:
    """Extracts the crate from the binary cargo runs."""
    assert crate_from_target(target) == crate


def test_passing_and_ignored_tests(ingestor: RustIngestor) -> None:
    """Records outcomes under the crate."""
    output = ingest(
        ingestor,
        payloads.test_run([("tests::adds", "ok"), ("tests::slow", "ignored")]),
    )

    assert output.reason == "passed"
    [module] = output.test_modules
    assert module.module_id == "calc"
    assert [(t.name, t.full_name, t.state) for t in module.tests] == [
        ("tests::adds", "calc::tests::adds", "passed"),
        ("tests::slow", "calc::tests::slow", "skipped"),
    ]


def test_failed_assertion_carries_operands(ingestor: RustIngestor) -> None:
    """Attaches panic output with left as actual and right as expected."""
    panic = payloads.assertion_panic("tests::adds", left="6", right="5")
    output = ingest(
        ingestor,
        payloads.test_run(
            [("tests::adds", "FAILED")], failures=[("tests::adds", panic)]
        ),
    )

    assert output.reason == "failed"
    [test] = output.tests
    assert test.state == "failed"
    assert test.errors is not None
    [error] = test.errors
    assert "assertion `left == right` failed" in error.message
    assert error.actual == "6"
    assert error.expected == "5"


def test_plain_panic_has_no_operands(ingestor: RustIngestor) -> None:
    """Keeps only the message for panics other than assert_eq!."""
    panic = "thread 'tests::parses' panicked at src/lib.rs:3:5:\nnot implemented"
    output = ingest(
        ingestor,
        payloads.test_run(
            [("tests::parses", "FAILED")], failures=[("tests::parses", panic)]
        ),
    )

    [error] = output.tests[0].errors or []
    assert error.message == panic
    assert error.actual is None
    assert error.expected is None


def test_several_binaries(ingestor: RustIngestor) -> None:
    """Groups unit and integration test binaries by crate."""
    output = ingest(
        ingestor,
        [
            *payloads.test_run([("tests::adds", "ok")]),
            *payloads.test_run(
                [("subtracts", "ok")],
                target="tests/api.rs (target/debug/deps/api-0123456789abcdef)",
            ),
        ],
    )

    assert [m.module_id for m in output.test_modules] == ["calc", "api"]
    assert output.tests[1].full_name == "api::subtracts"


def test_doc_tests(ingestor: RustIngestor) -> None:
    """Names doc tests after the crate cargo reports."""
    output = ingest(
        ingestor,
        [
            "   Doc-tests calc",
            "",
            "running 1 test",
            "test src/lib.rs - add (line 3) ... ok",
            "",
            "test result: ok. 1 passed; 0 failed; 0 ignored; 0 measured; "
            "0 filtered out; finished in 0.10s",
        ],
    )

    [test] = output.tests
    assert test.full_name == "calc::src/lib.rs - add (line 3)"


def test_compilation_error(ingestor: RustIngestor) -> None:
    """Reports a crate that does not compile as one synthetic failure."""
    output = ingest(ingestor, payloads.compilation_error())

    assert output.reason == "failed"
    [module] = output.test_modules
    assert module.module_id == "compilation"
    [test] = module.tests
    assert test.name == "build"
    assert test.full_name == "compilation::build"
    assert test.errors is not None
    message = test.errors[0].message
    assert "cannot find function `multiply`" in message
    assert "could not compile `calc`" in message


def test_run_cut_short_records_pending_outcomes(ingestor: RustIngestor) -> None:
    """Records outcomes seen before the output ended."""
    output = ingest(
        ingestor,
        [payloads.running(), "", "running 2 tests", "test tests::adds ... ok"],
    )

    assert [(t.name, t.state) for t in output.tests] == [("tests::adds", "passed")]


def test_ignores_cargo_noise(ingestor: RustIngestor) -> None:
    """Never records compiler progress lines."""
    output = ingest(
        ingestor,
        [
            "   Compiling calc v0.1.0 (/work/calc)",
            "    Finished `test` profile [unoptimized + debuginfo] target(s)",
            "warning: unused variable: `x`",
        ],
    )

    assert output == TestRunOutput()
