"""Completion providers backed by OpenAI-compatible clients."""

from __future__ import annotations

import asyncio
import logging

from typing_extensions import override

from aisuite import Client as AISuiteClient
from openai import AsyncOpenAI

from .base import CompletionProvider
from ..types.openai_compat import ChatCompletion, ChatCompletionRequest, convert_response

logger = logging.getLogger(__name__)


class OpenAIProvider(CompletionProvider):
    """Send requests through an ``openai.AsyncOpenAI`` client."""

    def __init__(self, client: AsyncOpenAI):
        self.client = client

    @override
    async def complete(self, request: ChatCompletionRequest) -> ChatCompletion:
        response = await self.client.chat.completions.create(**request.to_params())
        return convert_response(response)


class AISuiteProvider(CompletionProvider):
    """Send requests through a synchronous ``aisuite.Client``.

    The blocking client runs in a worker thread so the event loop stays free.
    Request models must be in 'provider:identifier' format (e.g. 'openai:gpt-4o').
    """

    def __init__(self, client: AISuiteClient):
        self.client = client

    @staticmethod
    def _check_model(model: str) -> None:
        if ":" not in model:
            raise ValueError(
                "Model must be in format 'provider:identifier' (e.g., 'openai:gpt-4o' or 'anthropic:claude-3-5-haiku-latest')"
            )

    @override
    async def complete(self, request: ChatCompletionRequest) -> ChatCompletion:
        self._check_model(request.model)
        response = await asyncio.to_thread(self.client.chat.completions.create, **request.to_params())
        return convert_response(response)
