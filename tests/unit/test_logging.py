import json
import logging

import pytest

from spotfinder.config.settings import Settings
from spotfinder.core.logging import JsonFormatter, build_handler


def _record(**extra):
    record = logging.makeLogRecord({"name": "spotfinder.test", "levelname": "INFO", "msg": "hello"})
    record.__dict__.update(extra)
    return record


def test_text_log_format_from_env_builds_plain_formatter(monkeypatch):
    monkeypatch.setenv("LOG_FORMAT", "text")
    monkeypatch.setenv("LOG_PATTERN", "%(levelname)s|%(message)s")

    s = Settings()
    handler = build_handler(s.log_format, s.log_pattern)

    assert s.log_format == "text"
    assert not isinstance(handler.formatter, JsonFormatter)
    assert handler.format(_record()) == "INFO|hello"


def test_default_log_format_is_json_with_extra_fields():
    s = Settings()
    handler = build_handler(s.log_format, s.log_pattern)

    payload = json.loads(handler.format(_record(request_id="req-1", stage="search")))

    assert s.log_format == "json"
    assert payload["message"] == "hello"
    assert payload["request_id"] == "req-1"
    assert payload["stage"] == "search"


def test_unknown_log_style_is_rejected():
    with pytest.raises(ValueError):
        build_handler("yaml")
