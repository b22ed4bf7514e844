import logging
from pathlib import Path

from .core import (
    ChatOrchestrator,
    ChatResult,
    ChatState,
    FunctionRegistry,
    ParseError,
    ProtocolError,
    RetryExhausted,
    RetryPolicy,
    UnknownFunctionError,
    ValidationError,
)
from .types.core import ChatRequest, Message

# assumes:
# smolchat
# ├ __init__.py - (this file)
# └ VERSION
with open(Path(__file__).parent / "VERSION", "r") as f:
    __version__ = f.readline().strip()

# add nullhandler to prevent a default configuration being used if the calling application doesn't set one
logging.getLogger("smolchat").addHandler(logging.NullHandler())

__all__ = [
    "ChatOrchestrator",
    "ChatRequest",
    "ChatResult",
    "ChatState",
    "FunctionRegistry",
    "Message",
    "ParseError",
    "ProtocolError",
    "RetryExhausted",
    "RetryPolicy",
    "UnknownFunctionError",
    "ValidationError",
]
