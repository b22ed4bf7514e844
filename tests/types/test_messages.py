from __future__ import annotations

import json

from pydantic import BaseModel, ValidationError
import pytest

from smolchat.types.core import (
    AssistantMessage,
    AutoPolicy,
    ChatRequest,
    DisabledPolicy,
    ForcedPolicy,
    FunctionMessage,
    FunctionSpec,
    Message,
    SystemMessage,
    UserMessage,
    forced,
)


class TestMessages:
    def test_roles(self):
        assert SystemMessage(content="s").role == "system"
        assert UserMessage(content="u").role == "user"
        assert AssistantMessage(content="a").role == "assistant"
        assert FunctionMessage(name="f", content="{}").role == "function"

    def test_function_role_requires_name(self):
        with pytest.raises(ValidationError, match="'name' is required"):
            Message(role="function", content="{}")

        assert Message(role="function", name="f", content="{}").name == "f"

    def test_empty_content_rejected(self):
        with pytest.raises(ValidationError):
            UserMessage(content="")

    def test_unknown_role_rejected(self):
        with pytest.raises(ValidationError):
            Message(role="tool", content="x")

    def test_repr(self):
        assert '"role": "user"' in repr(UserMessage(content="hello"))


class TestFunctionMessageFromResult:
    def test_dict(self):
        message = FunctionMessage.from_result("getWeather", {"tempC": 18})
        assert message.name == "getWeather"
        assert message.content == '{"tempC":18}'

    def test_string_passthrough(self):
        assert FunctionMessage.from_result("f", "sunny").content == "sunny"

    def test_none(self):
        assert FunctionMessage.from_result("f", None).content == "null"

    def test_list(self):
        assert FunctionMessage.from_result("f", [1, "a"]).content == '[1,"a"]'

    def test_pydantic_model(self):
        class Weather(BaseModel):
            temp_c: int

        message = FunctionMessage.from_result("f", Weather(temp_c=18))
        assert json.loads(message.content) == {"temp_c": 18}

    def test_unserializable_falls_back_to_str(self):
        class Opaque:
            def __str__(self):
                return "opaque"

        assert FunctionMessage.from_result("f", Opaque()).content == "opaque"


class TestChatRequest:
    def test_strings_become_user_messages(self):
        request = ChatRequest(messages=["hello", AssistantMessage(content="hi"), {"role": "user", "content": "bye"}])

        assert [m.role for m in request.messages] == ["user", "assistant", "user"]
        assert isinstance(request.messages[0], UserMessage)
        assert request.messages[0].content == "hello"

    def test_single_string(self):
        request = ChatRequest(messages="hello")
        assert len(request.messages) == 1

    def test_default_policy(self):
        assert ChatRequest(messages=["x"]).function_call == AutoPolicy()

    @pytest.mark.parametrize(
        "policy, expected",
        [
            ("auto", AutoPolicy()),
            (None, DisabledPolicy()),
            ("getWeather", ForcedPolicy(name="getWeather")),
            ({"mode": "forced", "name": "getWeather"}, ForcedPolicy(name="getWeather")),
            ({"mode": "disabled"}, DisabledPolicy()),
            (DisabledPolicy(), DisabledPolicy()),
        ],
    )
    def test_policy_shorthand(self, policy, expected):
        assert ChatRequest(messages=["x"], function_call=policy).function_call == expected

    def test_callable_policy(self):
        def get_weather(query):
            return query

        assert ChatRequest(messages=["x"], function_call=get_weather).function_call == ForcedPolicy(name="get_weather")
        assert forced(get_weather) == ForcedPolicy(name="get_weather")
        assert forced("get_weather").name == "get_weather"

    def test_messages_are_live(self):
        request = ChatRequest(messages=["x"])
        request.messages.append(FunctionMessage(name="f", content="1"))
        assert len(request.messages) == 2


class TestFunctionSpec:
    def test_dump(self):
        spec = FunctionSpec(name="f", parameters={"type": "object", "properties": {}})
        assert spec.model_dump(exclude_none=True) == {"name": "f", "parameters": {"type": "object", "properties": {}}}

    def test_requires_name(self):
        with pytest.raises(ValidationError):
            FunctionSpec(name="", parameters={})
