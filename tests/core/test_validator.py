from __future__ import annotations

import json

from pydantic import BaseModel
import pytest

from smolchat.core.exceptions import ParseError, RecoverableError, ValidationError
from smolchat.core.registry import FunctionRegistry
from smolchat.core.validator import ArgumentValidator
from smolchat.types.core import UserMessage


class WeatherQuery(BaseModel):
    city: str


@pytest.fixture
def registry():
    registry = FunctionRegistry()
    registry.register(lambda q: {"tempC": 18}, WeatherQuery, name="getWeather")
    registry.register(
        lambda args: args,
        {"type": "object", "properties": {"city": {"type": "string"}}, "required": ["city"]},
        name="echo",
    )
    return registry


@pytest.fixture
def validator():
    return ArgumentValidator()


class TestDecode:
    def test_valid_json(self, validator):
        assert validator.decode('{"city": "Paris"}') == {"city": "Paris"}

    def test_non_object_json(self, validator):
        assert validator.decode("[1, 2]") == [1, 2]
        assert validator.decode("null") is None

    @pytest.mark.parametrize("raw", ['{"city": "Paris"', "{city: Paris}", "not json", ""])
    def test_malformed(self, validator, raw):
        with pytest.raises(ParseError) as excinfo:
            validator.decode(raw)
        assert isinstance(excinfo.value, RecoverableError)
        assert excinfo.value.raw == raw

    def test_missing(self, validator):
        with pytest.raises(ParseError, match="missing"):
            validator.decode(None)

    def test_repair(self):
        validator = ArgumentValidator(repair=True)
        assert validator.decode('{"city": "Paris"') == {"city": "Paris"}
        assert validator.decode("{'city': 'Paris'}") == {"city": "Paris"}

    def test_repair_keeps_valid_json(self):
        validator = ArgumentValidator(repair=True)
        assert validator.decode('{"city": "Paris"}') == {"city": "Paris"}


class TestValidate:
    def test_structured_pass(self, validator, registry):
        result = validator.validate({"city": "Paris"}, registry.lookup("getWeather"))
        assert isinstance(result, WeatherQuery)
        assert result.city == "Paris"

    @pytest.mark.parametrize("decoded", [{}, {"city": 42}, {"town": "Paris"}, ["Paris"], None])
    def test_structured_fail(self, validator, registry, decoded):
        with pytest.raises(ValidationError):
            validator.validate(decoded, registry.lookup("getWeather"))

    @pytest.mark.parametrize("decoded", [{"city": "Paris"}, {}, {"city": 42}, ["Paris"], None])
    def test_document_accepts_without_checking(self, validator, registry, decoded):
        # even values violating the advertised schema are accepted
        assert validator.validate(decoded, registry.lookup("echo")) == decoded


class TestCorrectiveMessage:
    def test_embeds_error(self, validator):
        message = validator.corrective_message(ParseError("Expecting value: line 1 column 1 (char 0)"))

        assert isinstance(message, UserMessage)
        assert message.role == "user"
        assert "invalid arguments" in message.content
        assert "Expecting value: line 1 column 1 (char 0)" in message.content
        assert "valid JSON" in message.content

    def test_embeds_schema(self, validator, registry):
        descriptor = registry.lookup("getWeather")
        message = validator.corrective_message(ValidationError("city: Field required"), descriptor)

        assert "city: Field required" in message.content
        assert "getWeather" in message.content
        assert json.dumps(descriptor.wire_schema) in message.content

    def test_accepts_plain_string(self, validator):
        message = validator.corrective_message("bad arguments")
        assert "bad arguments" in message.content
