import io
import json
import logging

import pytest
from rich.console import Console

from rsrcgen.errors import E_UNKNOWN_FIELD, grammar_error, internal_error
from rsrcgen.lexer.tokens import SourcePosition
from rsrcgen.logging import configure_logging, get_logger
from rsrcgen.reporting import (
    JsonLinesReporter,
    PlainReporter,
    RichReporter,
    format_diagnostic,
    set_reporter,
    set_verbosity,
    task,
)


@pytest.fixture(autouse=True)
def reset_verbosity():
    yield
    set_verbosity(0)


def _err():
    return grammar_error(
        E_UNKNOWN_FIELD,
        "The field 'x' is not defined by type 'T'.",
        SourcePosition("a.rdef", 2, 5, 14),
    )


def test_format_diagnostic_with_source():
    lines = format_diagnostic(_err(), "new(#1) {\n    x = 1;\n}\n")
    assert lines == [
        "a.rdef:2:5: E_UNKNOWN_FIELD: The field 'x' is not defined by type 'T'.",
        "        x = 1;",
        "        ^",
    ]


def test_format_diagnostic_without_position():
    assert format_diagnostic(internal_error("boom")) == ["E_INTERNAL: boom"]


def test_plain_diagnostic():
    buf = io.StringIO()
    PlainReporter(stream=buf, use_color=False).diagnostic(_err())
    assert buf.getvalue().startswith("ERROR: a.rdef:2:5: E_UNKNOWN_FIELD")


def test_jsonl_diagnostic_event():
    buf = io.StringIO()
    JsonLinesReporter(stream=buf).diagnostic(_err())
    event = json.loads(buf.getvalue())
    assert event["event"] == "diagnostic"
    assert event["code"] == E_UNKNOWN_FIELD
    assert event["position"] == {
        "path": "a.rdef",
        "line": 2,
        "column": 5,
        "offset": 14,
    }


def test_jsonl_summary_parsing():
    buf = io.StringIO()
    JsonLinesReporter(stream=buf).status("Compile summary: resources=2 bytes=10")
    summary, status = [json.loads(line) for line in buf.getvalue().splitlines()]
    assert summary["summary_type"] == "compile"
    assert (summary["resources"], summary["bytes"]) == ("2", "10")
    assert status["event"] == "status"


def test_task_marks_failures():
    buf = io.StringIO()
    set_reporter(JsonLinesReporter(stream=buf))
    with pytest.raises(RuntimeError):
        with task("compile.encode", "Encode resources"):
            raise RuntimeError("stop")
    events = [json.loads(line) for line in buf.getvalue().splitlines()]
    assert events[-1]["event"] == "task_end"
    assert events[-1]["status"] == "failed"


def test_logger_forwards_to_reporter():
    buf = io.StringIO()
    set_reporter(PlainReporter(stream=buf, use_color=False))
    set_verbosity(1)
    configure_logging(1)
    get_logger().debug("encoded %d", 3)
    get_logger().warning("careful")
    assert buf.getvalue().splitlines() == ["VERB1: encoded 3", "WARN: careful"]
    configure_logging(0)
    assert get_logger().level == logging.INFO


def test_rich_diagnostic_escapes_markup():
    buf = io.StringIO()
    console = Console(file=buf, width=120, color_system=None)
    err = grammar_error(
        E_UNKNOWN_FIELD,
        "The field '[x]' is not defined by type 'T'.",
        SourcePosition("a.rdef", 1, 1, 0),
    )
    RichReporter(console=console).diagnostic(err, "[x] = 1;\n")
    out = buf.getvalue().splitlines()
    assert out[0] == (
        "ERROR: a.rdef:1:1: E_UNKNOWN_FIELD: "
        "The field '[x]' is not defined by type 'T'."
    )
    assert out[1:] == ["    [x] = 1;", "    ^"]
