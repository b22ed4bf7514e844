"""Conversation loop for function-calling chats.

A ChatOrchestrator owns a FunctionRegistry and a CompletionProvider. Each ``chat()`` call
sends the conversation to the provider, expects the provider to select one registered
function, validates the selected arguments, runs the function, and appends its result to
the conversation. Invalid arguments are answered with a corrective message and another
round trip, up to the retry limit.

The loop is an explicit state machine:

    SENDING -> INTERPRETING -> VALIDATING -> EXECUTING -> APPENDING -> BACKOFF -> DONE
                                    |                                     |
                                    +--(invalid arguments)--> BACKOFF ----+--> SENDING
                                                                          +--> EXHAUSTED
    any state --(fatal error)--> FAILED

One orchestrator serves one ``chat()`` call at a time; concurrent calls on the same instance
share ``state`` and ``retry_state`` and must be serialized by the caller.
"""

from __future__ import annotations

import asyncio
from enum import Enum
import logging
from typing import Any, Awaitable, Callable, Literal, Sequence, Type

from pydantic import BaseModel, Field

from .base import CompletionProvider, TraceSink, null_trace
from .exceptions import ProtocolError, RecoverableError, RetryExhausted
from .registry import FunctionDescriptor, FunctionRegistry
from .schema import DocumentSchema, StructuredSchema
from .retry import RetryPolicy, RetryState
from .validator import ArgumentValidator
from ..types.core import (
    JSON,
    ChatRequest,
    DisabledPolicy,
    ForcedPolicy,
    FunctionCallPolicy,
    FunctionMessage,
    FunctionSpec,
    Message,
    SystemMessage,
)
from ..types.openai_compat import ChatCompletion, ChatCompletionRequest, FunctionCall
from ..utilities import synchronize

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "gpt-3.5-turbo-0613"
DEFAULT_SYSTEM_MESSAGE = "You are a helpful chatbot. You are helping a user with a task."


class ChatState(str, Enum):
    IDLE = "idle"
    SENDING = "sending"
    INTERPRETING = "interpreting"
    VALIDATING = "validating"
    EXECUTING = "executing"
    APPENDING = "appending"
    BACKOFF = "backoff"
    DONE = "done"
    EXHAUSTED = "exhausted"
    FAILED = "failed"


class ChatResult(BaseModel):
    """Outcome of one ``chat()`` call."""

    response: ChatCompletion = Field(description="The last provider response.")
    messages: list[Message] = Field(description="The conversation after the call.")
    attempts: int = Field(description="Number of recoverable argument failures.")
    status: Literal["completed", "exhausted"]

    @property
    def exhausted(self) -> bool:
        """True if the retry limit was reached without a valid function call."""
        return self.status == "exhausted"


class ChatOrchestrator:
    """Run function-calling conversations against a completion provider.

    Examples
    --------
    >>> registry = FunctionRegistry()
    >>> registry.register(get_weather, WeatherQuery)  # doctest: +SKIP
    >>> orchestrator = ChatOrchestrator(OpenAIProvider(AsyncOpenAI()), registry)
    >>> result = await orchestrator.chat(["What's the weather in Paris?"])  # doctest: +SKIP
    >>> result.messages[-1].content  # doctest: +SKIP
    '{"tempC":18}'
    """

    def __init__(
        self,
        provider: CompletionProvider,
        registry: FunctionRegistry | None = None,
        *,
        model: str = DEFAULT_MODEL,
        system_message: str = DEFAULT_SYSTEM_MESSAGE,
        retry_policy: RetryPolicy | None = None,
        validator: ArgumentValidator | None = None,
        trace: TraceSink | None = None,
        sleep: Callable[[float], Awaitable[Any]] | None = None,
        raise_on_exhaustion: bool = False,
    ):
        """Initialize the orchestrator.

        Parameters
        ----------
        provider : CompletionProvider
            The completion service adapter.
        registry : FunctionRegistry | None, optional
            Functions offered to the provider; a new empty registry by default.
        model : str, optional
            Model identifier sent with every request.
        system_message : str, optional
            System message prepended to every request.
        retry_policy : RetryPolicy | None, optional
            Retry limit and backoff pacing.
        validator : ArgumentValidator | None, optional
            Argument decoder/validator, by default a strict (non-repairing) one.
        trace : TraceSink | None, optional
            Called as ``trace(tag, *payload)`` at fixed tracepoints; no-op by default.
        sleep : Callable[[float], Awaitable], optional
            Coroutine used for backoff, by default ``asyncio.sleep``.
        raise_on_exhaustion : bool, optional
            Raise RetryExhausted instead of returning an exhausted ChatResult.
        """
        self.provider = provider
        self.registry = registry if registry is not None else FunctionRegistry()
        self.model = model
        self.system_message = system_message
        self.retry_policy = retry_policy or RetryPolicy()
        self.validator = validator or ArgumentValidator()
        self.trace = trace or null_trace
        self.sleep = sleep or asyncio.sleep
        self.raise_on_exhaustion = raise_on_exhaustion

        self.state = ChatState.IDLE
        self.retry_state: RetryState | None = None

    @property
    def model(self) -> str:
        """Model identifier sent with every request."""
        return self._model

    @model.setter
    def model(self, model: str):
        if not model or not isinstance(model, str):
            raise ValueError("Model must be a non-empty string")
        self._model = model

    def register(
        self,
        func: Callable[[Any], Any],
        schema: Type[BaseModel] | dict[str, JSON] | StructuredSchema | DocumentSchema,
        **kwargs: Any,
    ) -> FunctionDescriptor:
        """Register a function with the owned registry."""
        return self.registry.register(func, schema, **kwargs)

    def deregister(self, func: Callable | str) -> None:
        """Remove a function from the owned registry."""
        self.registry.deregister(func)

    def _transition(self, state: ChatState) -> None:
        logger.debug(f"{self.state.value} -> {state.value}")
        self.state = state

    def _function_specs(self, policy: FunctionCallPolicy) -> tuple[list[FunctionSpec], str | None]:
        """Resolve the function specs and forced name sent on every round trip of one chat."""
        if isinstance(policy, DisabledPolicy):
            return [], None

        functions = [descriptor.spec() for descriptor in self.registry.list_all()]
        if isinstance(policy, ForcedPolicy):
            return functions, policy.name
        return functions, None

    async def _send(self, request: ChatRequest, functions: list[FunctionSpec], forced: str | None) -> ChatCompletion:
        self._transition(ChatState.SENDING)
        completion_request = ChatCompletionRequest(
            model=self.model,
            messages=[SystemMessage(content=self.system_message), *request.messages],
            functions=functions,
            function_call=forced,
        )
        return await self.provider.complete(completion_request)

    def _interpret(self, response: ChatCompletion) -> FunctionCall:
        self._transition(ChatState.INTERPRETING)
        if not response.choices:
            raise ProtocolError("Response contained no choices", response=response)

        function_call = response.choices[0].message.function_call
        if function_call is None:
            raise ProtocolError("Response did not select a function", response=response)
        return function_call

    async def _dispatch(self, request: ChatRequest, function_call: FunctionCall, retry: RetryState) -> bool:
        """Validate and run the selected function.

        Returns True if the arguments were invalid and a corrective message was appended.
        """
        self._transition(ChatState.VALIDATING)
        descriptor = self.registry.lookup(function_call.name)

        try:
            self.trace("arguments.decode", descriptor.name, function_call.arguments)
            decoded = self.validator.decode(function_call.arguments)
            arguments = self.validator.validate(decoded, descriptor)
        except RecoverableError as e:
            logger.warning(f"Invalid arguments for '{descriptor.name}': {e}")
            self.trace("arguments.invalid", descriptor.name, e)
            request.messages.append(self.validator.corrective_message(e, descriptor))
            retry.record_failure()
            return True

        self._transition(ChatState.EXECUTING)
        self.trace("function.invoke", descriptor.name, arguments)
        logger.debug(f"Invoking {descriptor.name} with arguments: {arguments!r}")
        result = await descriptor.invoke(arguments)

        self._transition(ChatState.APPENDING)
        request.messages.append(FunctionMessage.from_result(descriptor.name, result))
        return False

    async def _backoff(self, retry: RetryState) -> None:
        self._transition(ChatState.BACKOFF)
        delay = retry.next_delay()
        logger.debug(f"Waiting {delay:.3f} seconds")
        await self.sleep(delay)

    async def chat(
        self,
        request: ChatRequest | str | Sequence[Message | str | dict],
        function_call: FunctionCallPolicy | Callable | str | None = "auto",
    ) -> ChatResult:
        """Run the function-calling loop until a function result is appended or retries run out.

        Parameters
        ----------
        request : ChatRequest | str | Sequence[Message | str | dict]
            A ChatRequest, a single message, or the conversation messages (bare strings become
            user messages).
            The request's message list is extended in place.
        function_call : FunctionCallPolicy | Callable | str | None, optional
            Used only when ``request`` is not a ChatRequest. ``"auto"`` lets the provider choose,
            a function or name forces that function, ``None`` disables function calling.

        Returns
        -------
        ChatResult
            The last provider response, the conversation, and whether retries ran out.

        Raises
        ------
        UnknownFunctionError
            If the provider selected a function that is not registered.
        ProtocolError
            If the provider's response does not select a function.
        RetryExhausted
            If ``raise_on_exhaustion`` is set and the retry limit was reached.
        """
        if not isinstance(request, ChatRequest):
            request = ChatRequest(messages=request, function_call=function_call)

        retry = self.retry_state = RetryState(self.retry_policy)
        self.trace("chat.start", request)
        logger.debug(f"Starting chat with {len(request.messages)} messages, policy {request.function_call.mode}")

        functions, forced = self._function_specs(request.function_call)

        try:
            while True:
                response = await self._send(request, functions, forced)
                selected = self._interpret(response)
                needs_retry = await self._dispatch(request, selected, retry)
                await self._backoff(retry)

                if not needs_retry:
                    self._transition(ChatState.DONE)
                    break
                if retry.exhausted:
                    self._transition(ChatState.EXHAUSTED)
                    break

                self.trace("chat.retry", retry.attempts)
                logger.debug(f"Retry {retry.attempts}/{retry.limit}")
        except BaseException:
            self._transition(ChatState.FAILED)
            raise

        result = ChatResult(
            response=response,
            messages=request.messages,
            attempts=retry.attempts,
            status="exhausted" if self.state == ChatState.EXHAUSTED else "completed",
        )
        self.trace("chat.finish", result)

        if result.exhausted:
            logger.warning(f"Chat ended after {retry.attempts} attempts without valid function arguments")
            if self.raise_on_exhaustion:
                raise RetryExhausted(result)
        return result

    def chat_sync(
        self,
        request: ChatRequest | str | Sequence[Message | str | dict],
        function_call: FunctionCallPolicy | Callable | str | None = "auto",
    ) -> ChatResult:
        """Run ``chat`` from synchronous code."""
        return synchronize(self.chat, request, function_call)
