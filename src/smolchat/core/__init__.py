"""Core components for function-calling chats.

This module provides the function registry, argument schemas and validation, retry pacing,
completion providers, and the orchestrator that drives the conversation loop.
"""

from .base import ArgumentSchema, CompletionProvider, TraceSink, null_trace
from .exceptions import (
    FatalError,
    ParseError,
    ProtocolError,
    RecoverableError,
    RetryExhausted,
    SmolChatError,
    UnknownFunctionError,
    ValidationError,
)
from .orchestrator import ChatOrchestrator, ChatResult, ChatState
from .provider import AISuiteProvider, OpenAIProvider
from .registry import FunctionDescriptor, FunctionRegistry
from .retry import RetryPolicy, RetryState
from .schema import DocumentSchema, StructuredSchema, pydantic_to_schema
from .validator import ArgumentValidator

__all__ = [
    # Base protocols
    "ArgumentSchema",
    "CompletionProvider",
    "TraceSink",
    "null_trace",
    # Schemas and validation
    "ArgumentValidator",
    "DocumentSchema",
    "StructuredSchema",
    "pydantic_to_schema",
    # Registry
    "FunctionDescriptor",
    "FunctionRegistry",
    # Orchestration
    "ChatOrchestrator",
    "ChatResult",
    "ChatState",
    "RetryPolicy",
    "RetryState",
    # Providers
    "AISuiteProvider",
    "OpenAIProvider",
    # Exceptions
    "FatalError",
    "ParseError",
    "ProtocolError",
    "RecoverableError",
    "RetryExhausted",
    "SmolChatError",
    "UnknownFunctionError",
    "ValidationError",
]
