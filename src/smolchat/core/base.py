"""Core protocols for function-calling chats.

This module defines the seams between the orchestrator and its collaborators.
Argument schemas validate decoded function arguments and describe themselves for the wire.
Completion providers advance a conversation by one turn.
Trace sinks observe the chat loop without influencing it.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Generic, Literal, Protocol

from typing_extensions import TypeVar, runtime_checkable

from ..types.core import JSON
from ..types.openai_compat import ChatCompletion, ChatCompletionRequest

logger = logging.getLogger(__name__)

ArgumentReturnType = TypeVar("ArgumentReturnType", covariant=True, default=Any)

TraceSink = Callable[..., None]


def null_trace(tag: str, *payload: Any) -> None:
    """Discard tracepoints."""
    return None


@runtime_checkable
class ArgumentSchema(Generic[ArgumentReturnType], Protocol):
    """Protocol for the schema attached to a registered function.

    Implementations are a closed set of two variants: a structured schema that validates
    fully, and a plain schema document that accepts any decoded value.

    Attributes
    ----------
    kind : {"structured", "document"}
        The variant tag.
    """

    kind: Literal["structured", "document"]

    def validate(self, decoded: Any) -> ArgumentReturnType:
        """Validate decoded arguments.

        Parameters
        ----------
        decoded : Any
            Arguments already decoded from the provider's argument text.

        Returns
        -------
        ArgumentReturnType
            The value handed to the registered function.

        Raises
        ------
        ValidationError
            If the arguments do not satisfy the schema.
        """
        ...

    def wire_schema(self) -> dict[str, JSON]:
        """Return the JSON schema document sent to the provider."""
        ...


@runtime_checkable
class CompletionProvider(Protocol):
    """Protocol for the hosted chat-completion service."""

    async def complete(self, request: ChatCompletionRequest) -> ChatCompletion:
        """Send one request and return the provider's next turn.

        Parameters
        ----------
        request : ChatCompletionRequest
            Model, messages, function specs and optional forced function name.

        Returns
        -------
        ChatCompletion
            The normalized provider response.
        """
        ...
