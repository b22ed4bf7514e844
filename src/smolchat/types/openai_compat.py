from __future__ import annotations

import logging
from typing import Literal

from pydantic import BaseModel, Field

from aisuite.framework import ChatCompletionResponse as AISuiteChatCompletion
from openai.types.chat import ChatCompletion as OpenAIChatCompletion

from .core import JSON, FunctionSpec, Message

logger = logging.getLogger(__name__)


# OpenAI compatibility (legacy 'functions' / 'function_call' protocol)
class FunctionCall(BaseModel, extra="ignore"):
    name: str
    arguments: str


class ChatCompletionMessage(Message, extra="ignore"):
    content: str | None = None
    function_call: FunctionCall | None = None
    refusal: str | None = None


class ChatCompletionChoice(BaseModel, extra="ignore"):
    finish_reason: Literal["stop", "length", "tool_calls", "content_filter", "function_call"] | None = None
    message: ChatCompletionMessage


class ChatCompletion(BaseModel, extra="ignore"):
    id: int | str | None = None
    model: str | None = None
    choices: list[ChatCompletionChoice]


class ChatCompletionRequest(BaseModel):
    """Everything the completion provider needs for one round trip."""

    model: str = Field(min_length=1)
    messages: list[Message]
    functions: list[FunctionSpec] = Field(default_factory=list)
    function_call: str | None = Field(default=None, description="Name of the function the provider must call.")

    def to_params(self) -> dict[str, JSON]:
        """Keyword arguments for an OpenAI-compatible ``chat.completions.create`` call.

        Empty function lists and unset forced names are omitted rather than sent as empty values.
        """
        params: dict[str, JSON] = {
            "model": self.model,
            "messages": [m.model_dump(exclude_none=True) for m in self.messages],
        }
        if self.functions:
            params["functions"] = [f.model_dump(exclude_none=True) for f in self.functions]
        if self.function_call:
            params["function_call"] = {"name": self.function_call}
        return params


def convert_response(response: OpenAIChatCompletion | AISuiteChatCompletion) -> ChatCompletion:
    """Unify openai and aisuite response object types."""
    if isinstance(response, OpenAIChatCompletion):
        return ChatCompletion(**response.model_dump())
    else:
        choices = []
        for choice in response.choices:
            message = ChatCompletionMessage(**choice.message.model_dump())

            choices.append(
                ChatCompletionChoice(
                    message=message,
                    finish_reason=choice.finish_reason if hasattr(choice, "finish_reason") else None,
                )
            )

        completion_response = ChatCompletion(
            id=response.id if hasattr(response, "id") else None,
            choices=choices,
        )
        return completion_response
