"""
Tests for structured logging and request correlation
"""

import json
import logging

from fsb_admin import structured_logging
from fsb_admin.structured_logging import (
    Subsystem,
    StructuredFormatter,
    configure_logging,
    get_subsystem_logger,
    request_id_var,
)


def make_record(msg: str, **extra) -> logging.LogRecord:
    record = logging.LogRecord("fsb_admin.registry", logging.INFO, __file__, 1, msg, None, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestStructuredFormatter:

    def test_renders_json_with_subsystem(self):
        record = make_record("Bot registered", subsystem="registry", extra_data={"bot_id": "42"})
        entry = json.loads(StructuredFormatter().format(record))

        assert entry["level"] == "INFO"
        assert entry["subsystem"] == "registry"
        assert entry["message"] == "Bot registered"
        assert entry["data"] == {"bot_id": "42"}

    def test_defaults_to_general_subsystem(self):
        entry = json.loads(StructuredFormatter().format(make_record("plain")))
        assert entry["subsystem"] == "general"
        assert "data" not in entry

    def test_includes_request_id(self):
        token = request_id_var.set("req-abc")
        try:
            entry = json.loads(StructuredFormatter().format(make_record("handled")))
        finally:
            request_id_var.reset(token)
        assert entry["request_id"] == "req-abc"


class TestSubsystemLogger:

    def test_same_instance_per_subsystem(self):
        assert get_subsystem_logger(Subsystem.DB) is get_subsystem_logger(Subsystem.DB)
        assert get_subsystem_logger(Subsystem.API).name == "fsb_admin.api"

    def test_attaches_subsystem_and_data(self, caplog):
        log = get_subsystem_logger(Subsystem.BROADCAST)
        with caplog.at_level(logging.INFO, logger="fsb_admin"):
            log.info("Observer connected", {"interval": 5.0})

        record = caplog.records[-1]
        assert record.subsystem == "broadcast"
        assert record.extra_data == {"interval": 5.0}


def test_configure_logging_replaces_handler():
    root = logging.getLogger("fsb_admin")

    configure_logging("DEBUG", json_output=True)
    first = structured_logging._handler
    configure_logging("WARNING", json_output=False)

    assert first not in root.handlers
    assert structured_logging._handler in root.handlers
    assert root.level == logging.WARNING
