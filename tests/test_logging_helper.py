"""Tests for the debug record line format."""

import logging

import pytest

from hunyuan_sdk._logging import level_number, log_structured
from hunyuan_sdk.exceptions import ConfigError

logger = logging.getLogger("hunyuan_sdk.test_record")


def _line(caplog, **fields) -> str:
    with caplog.at_level(logging.DEBUG, logger=logger.name):
        log_structured(logger, logging.DEBUG, "TC3 call", **fields)
    assert len(caplog.records) == 1
    return caplog.records[0].getMessage()


class TestLogStructured:
    def test_label_and_fields(self, caplog):
        line = _line(caplog, action="ChatCompletions", status=200, token_present=False)
        assert line == "TC3 call | action=ChatCompletions status=200 token_present=False"

    def test_none_skipped(self, caplog):
        line = _line(caplog, action="A", status=None, outcome="TransportError")
        assert line == "TC3 call | action=A outcome=TransportError"

    def test_body_newlines_stay_on_one_line(self, caplog):
        line = _line(caplog, response_body='{"A":\n"b"}\r\n')
        assert "\n" not in line
        assert "\r" not in line
        assert 'response_body={"A":\\n"b"}\\r\\n' in line

    def test_terminal_escapes_neutralized(self, caplog):
        line = _line(caplog, response_body="\x1b[31mred\x00\x7f")
        assert "\x1b" not in line
        assert "response_body=\\x1b[31mred\\x00\\x7f" in line

    def test_printable_unicode_untouched(self, caplog):
        assert _line(caplog, request_body="你好") == "TC3 call | request_body=你好"

    def test_disabled_level_emits_nothing(self, caplog):
        with caplog.at_level(logging.WARNING, logger=logger.name):
            log_structured(logger, logging.DEBUG, "TC3 call", action="A")
        assert caplog.records == []


class TestLevelNumber:
    @pytest.mark.parametrize("name", ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"])
    def test_standard_levels(self, name):
        assert level_number(name) == getattr(logging, name)

    @pytest.mark.parametrize("name", ["NOPE", "debug", ""])
    def test_unknown_rejected(self, name):
        with pytest.raises(ConfigError, match="Invalid log_level"):
            level_number(name)
