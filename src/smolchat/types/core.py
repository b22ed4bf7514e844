from __future__ import annotations

import json
import logging
from typing import Annotated, Any, Callable, Literal, Self, Union

from pydantic import (
    BaseModel,
    Field,
    ValidationError,
    ValidationInfo,
    ValidatorFunctionWrapHandler,
    WrapValidator,
    field_validator,
    model_validator,
)
from pydantic_core import PydanticCustomError
from typing_extensions import TypeAliasType  # TODO: import from typing when drop support for 3.11

from ..utilities import format_json

logger = logging.getLogger(__name__)


def json_simple_error_validator(value: Any, handler: ValidatorFunctionWrapHandler, _info: ValidationInfo) -> Any:
    """Simplify the error message to avoid a gross error stemming from exhaustive checking of all union options."""
    try:
        return handler(value)
    except ValidationError as e:
        raise PydanticCustomError("invalid_json", "Input is not valid json") from e


JSON = TypeAliasType(
    "JSON",
    Annotated[
        Union[dict[str, "JSON"], list["JSON"], str, int, float, bool, None],
        WrapValidator(json_simple_error_validator),
    ],
)

Role = Literal["assistant", "function", "system", "user"]


class Message(BaseModel):
    role: Role = Field(description="The role of the message author.")
    content: str = Field(description="The contents of the message.", min_length=1)
    name: str | None = Field(default=None, description="The function name, required for 'function' messages.")

    @model_validator(mode="after")
    def _require_function_name(self) -> Self:
        if self.role == "function" and not self.name:
            raise ValueError("'name' is required for messages with role 'function'")
        return self

    def __repr__(self):
        return format_json(self.model_dump(exclude_none=True))


class SystemMessage(Message):
    role: Literal["system"] = "system"


class UserMessage(Message):
    role: Literal["user"] = "user"


class AssistantMessage(Message):
    role: Literal["assistant"] = "assistant"


class FunctionMessage(Message):
    role: Literal["function"] = "function"
    content: str = Field(description="The serialized result of the function call.")
    name: str = Field(description="The name of the function that produced this result.", min_length=1)

    @classmethod
    def from_result(cls, name: str, result: Any) -> FunctionMessage:
        """Serialize a function result into a FunctionMessage.

        Strings are passed through; pydantic models use their own JSON serializer;
        anything else is dumped as compact JSON, falling back to ``str()``.
        """
        if isinstance(result, str):
            content = result
        elif isinstance(result, BaseModel):
            # !!!NOTE!!!
            # pydantic_model.model_dump_json() != json.dumps(pydantic_model.model_dump())
            content = result.model_dump_json()
        else:
            try:
                content = json.dumps(result, separators=(",", ":"))
            except (TypeError, ValueError) as e:
                logger.debug(f"Could not serialize result as json string: {e}")
                content = str(result)

        return cls(name=name, content=content)


class FunctionSpec(BaseModel):
    """Function definition advertised to the completion provider."""

    name: str = Field(description="The name of the function.", min_length=1)
    description: str | None = Field(default=None, description="What the function does.")
    parameters: dict[str, JSON] = Field(description="JSON schema for the function arguments.")


# ------------------------------------------------------------------
# Function-call policies
class AutoPolicy(BaseModel, frozen=True):
    """The provider may choose freely among the registered functions."""

    mode: Literal["auto"] = "auto"


class ForcedPolicy(BaseModel, frozen=True):
    """The provider must call exactly ``name``."""

    mode: Literal["forced"] = "forced"
    name: str = Field(min_length=1)


class DisabledPolicy(BaseModel, frozen=True):
    """No function specs are sent; the provider cannot call anything."""

    mode: Literal["disabled"] = "disabled"


FunctionCallPolicy = Annotated[
    Union[AutoPolicy, ForcedPolicy, DisabledPolicy],
    Field(discriminator="mode"),
]


def forced(func: Callable | str) -> ForcedPolicy:
    """Build a policy forcing a call to ``func`` (a function or its registered name)."""
    return ForcedPolicy(name=func if isinstance(func, str) else func.__name__)


class ChatRequest(BaseModel):
    """Caller messages plus the function-call policy for one ``chat()`` invocation.

    ``messages`` is the live conversation: the orchestrator appends corrective and
    function-result messages to it in place.
    """

    messages: list[Message] = Field(description="The caller's conversation.")
    function_call: FunctionCallPolicy = Field(default_factory=AutoPolicy)

    @field_validator("messages", mode="before")
    @classmethod
    def _coerce_strings(cls, messages: Any) -> Any:
        if isinstance(messages, (str, Message)):
            messages = [messages]
        return [UserMessage(content=m) if isinstance(m, str) else m for m in messages]

    @field_validator("function_call", mode="before")
    @classmethod
    def _coerce_policy(cls, policy: Any) -> Any:
        if policy is None:
            return DisabledPolicy()
        if policy == "auto":
            return AutoPolicy()
        if isinstance(policy, str) or callable(policy):
            return forced(policy)
        return policy

    def __repr__(self):
        return format_json(self.model_dump(exclude_none=True))
