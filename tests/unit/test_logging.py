"""
Tests du logging structure.
"""
import json
import logging
import pytest

from restopos.core.logging import (
    ConsoleFormatter,
    JSONFormatter,
    clear_request_context,
    configure_logging,
    sanitize_dict,
    set_request_context,
)


def make_record(message="Stock transfere", **extra):
    record = logging.makeLogRecord({"name": "restopos.test", "levelname": "INFO", "msg": message})
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestSanitize:

    @pytest.mark.unit
    def test_database_url_redacted(self):
        result = sanitize_dict({"database_url": "postgresql://pos:s3cret@db/pos", "ingredient_id": 3})

        assert "s3cret" not in result["database_url"]
        assert result["database_url"].endswith("[REDACTED]")
        assert result["ingredient_id"] == 3

    @pytest.mark.unit
    def test_nested_and_lists(self):
        result = sanitize_dict({
            "waiter": {"name": "Ali", "phone": "0300"},
            "waiters": [{"phone": "0311"}],
        })

        assert result["waiter"] == {"name": "Ali", "phone": "[REDACTED]"}
        assert result["waiters"] == [{"phone": "[REDACTED]"}]


class TestFormatters:

    @pytest.mark.unit
    def test_json_includes_request_id_and_extra(self):
        set_request_context("req-42")
        try:
            line = JSONFormatter().format(make_record(topics=["orders"]))
        finally:
            clear_request_context()

        entry = json.loads(line)
        assert entry["message"] == "Stock transfere"
        assert entry["request_id"] == "req-42"
        assert entry["extra"] == {"topics": ["orders"]}

    @pytest.mark.unit
    def test_json_without_request(self):
        entry = json.loads(JSONFormatter().format(make_record()))

        assert "request_id" not in entry
        assert "extra" not in entry

    @pytest.mark.unit
    def test_console_format(self):
        line = ConsoleFormatter().format(make_record())

        assert "restopos.test: Stock transfere" in line

    @pytest.mark.unit
    def test_configure_logging_installs_single_handler(self):
        root = logging.getLogger()
        previous_handlers, previous_level = list(root.handlers), root.level
        try:
            configure_logging(level="DEBUG", json_format=False)
            configure_logging(level="WARNING", json_format=True)

            assert len(root.handlers) == 1
            assert isinstance(root.handlers[0].formatter, JSONFormatter)
            assert root.level == logging.WARNING
        finally:
            root.handlers[:] = previous_handlers
            root.setLevel(previous_level)
