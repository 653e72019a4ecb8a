"""Tests for the JSON log formatter."""

import json
import logging

from sitecloner.logs import JsonLogFormatter


def _record(msg="hello", exc_info=None, **extra):
    record = logging.LogRecord(
        name="sitecloner.scraper.service",
        level=logging.WARNING,
        pathname=__file__,
        lineno=1,
        msg=msg,
        args=(),
        exc_info=exc_info,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_basic_fields():
    """Each record becomes one JSON object with level, message and component."""
    payload = json.loads(JsonLogFormatter().format(_record(url="https://ex.com/")))
    assert payload["level"] == "WARNING"
    assert payload["msg"] == "hello"
    assert payload["component"] == "sitecloner.scraper.service"
    assert payload["url"] == "https://ex.com/"
    assert payload["ts"].endswith("Z")


def test_secret_extras_are_redacted():
    """Extras under key-like names never reach the log line."""
    line = JsonLogFormatter().format(_record(api_key="fc-live-123", auth_token="t0k"))
    payload = json.loads(line)
    assert payload["api_key"] == "[redacted]"
    assert payload["auth_token"] == "[redacted]"
    assert "fc-live-123" not in line


def test_exception_summary():
    """Exception info is summarised as error_type and error."""
    try:
        raise ValueError("bad markup")
    except ValueError as exc:
        record = _record(exc_info=(type(exc), exc, exc.__traceback__))
    payload = json.loads(JsonLogFormatter().format(record))
    assert payload["error_type"] == "ValueError"
    assert payload["error"] == "bad markup"


def test_non_json_values_are_stringified():
    """Objects that are not JSON-native are rendered with str()."""
    payload = json.loads(JsonLogFormatter().format(_record(formats=("html",), obj=object())))
    assert payload["formats"] == ["html"]
    assert payload["obj"].startswith("<object object")
