import asyncio
import logging

import pytest

from smolchat.utilities import LOG_FMT, basic_log_config, format_json, log_trace, suppress_logs, synchronize


class TestFormatJson:
    def test_dict(self):
        assert format_json({"a": 1, "b": "x"}) == '{\n  "a": 1,\n  "b": "x"\n}'

    def test_empty(self):
        assert format_json({}) == "{}"
        assert format_json([]) == "[]"

    def test_list(self):
        assert format_json([1, 2]) == "[\n  1,\n  2\n]"

    def test_json_string(self):
        assert format_json('{"a": true}') == '{\n  "a": true\n}'

    def test_plain_string(self):
        assert format_json("hello") == '"hello"'

    def test_null(self):
        assert format_json(None) == "null"


class TestLogHelpers:
    def test_basic_log_config(self, monkeypatch):
        calls = {}
        monkeypatch.setattr(logging, "basicConfig", lambda **kwargs: calls.update(kwargs))

        basic_log_config(level=logging.DEBUG)

        assert calls == {"level": logging.DEBUG, "format": LOG_FMT}

    def test_suppress_logs(self):
        logger = logging.getLogger("smolchat.test")
        with suppress_logs(logger):
            assert logger.disabled
        assert not logger.disabled

    def test_log_trace(self, caplog):
        trace = log_trace(logging.getLogger("smolchat.test.trace"))

        with caplog.at_level(logging.DEBUG, logger="smolchat.test.trace"):
            trace("function.invoke", "getWeather", {"city": "Paris"})

        assert "function.invoke 'getWeather' {'city': 'Paris'}" in caplog.text

    def test_log_trace_respects_level(self, caplog):
        trace = log_trace(logging.getLogger("smolchat.test.quiet"), level=logging.DEBUG)

        with caplog.at_level(logging.INFO, logger="smolchat.test.quiet"):
            trace("chat.start")

        assert caplog.text == ""


def test_synchronize():
    async def add(a, b):
        return a + b

    assert synchronize(add, 1, b=2) == 3


def test_synchronize_closes_its_loop():
    async def current_loop():
        return asyncio.get_running_loop()

    loop = synchronize(current_loop)

    assert loop.is_closed()
