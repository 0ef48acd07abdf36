"""
Unit tests for structured logging setup
"""
import io
import json
import logging
import pytest
from pythonjsonlogger import jsonlogger

from frogtrack.core.logging import ServiceContextFilter, configure_logging


@pytest.fixture
def clean_root():
    root = logging.getLogger()
    saved_handlers, saved_level = root.handlers[:], root.level
    root.handlers = []
    yield root
    root.handlers = saved_handlers
    root.setLevel(saved_level)


class TestConfigureLogging:
    """Root logger configuration"""

    def test_installs_single_handler(self, clean_root):
        configure_logging("debug", "frogtrack", "test")
        configure_logging("debug", "frogtrack", "test")

        assert len(clean_root.handlers) == 1
        assert clean_root.level == logging.DEBUG
        assert isinstance(clean_root.handlers[0].formatter, jsonlogger.JsonFormatter)

    def test_records_carry_service_context(self, clean_root):
        configure_logging("INFO", "frogtrack", "staging")
        stream = io.StringIO()
        clean_root.handlers[0].setStream(stream)

        logging.getLogger("frogtrack.tests").info("created certification", extra={"id": 12})

        payload = json.loads(stream.getvalue())
        assert payload["message"] == "created certification"
        assert payload["service"] == "frogtrack"
        assert payload["environment"] == "staging"
        assert payload["level"] == "INFO"
        assert payload["logger"] == "frogtrack.tests"
        assert payload["id"] == 12


class TestServiceContextFilter:
    """Context stamping"""

    def test_filter_sets_attributes(self):
        record = logging.LogRecord("x", logging.INFO, __file__, 1, "msg", None, None)

        assert ServiceContextFilter("svc", "dev").filter(record) is True
        assert (record.service, record.environment) == ("svc", "dev")
