"""Error taxonomy for function-calling chats.

Recoverable errors describe bad arguments from the provider; the orchestrator turns them into
a corrective message and retries. Fatal errors describe a broken protocol contract and always
propagate to the caller.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from .orchestrator import ChatResult


class SmolChatError(Exception):
    """Base class for all smolchat errors."""


class RecoverableError(SmolChatError):
    """The provider's function call can be retried with a corrective message."""


class FatalError(SmolChatError):
    """The chat loop cannot continue."""


class ParseError(RecoverableError):
    """Raw argument text is not well-formed JSON."""

    def __init__(self, message: str, raw: str | None = None):
        super().__init__(message)
        self.raw = raw


class ValidationError(RecoverableError):
    """Decoded arguments do not satisfy the function's structured schema."""


class UnknownFunctionError(FatalError):
    """A function name is not present in the registry."""

    def __init__(self, name: str):
        super().__init__(f"Function '{name}' is not registered")
        self.name = name


class ProtocolError(FatalError):
    """The provider's response does not carry a function call."""

    def __init__(self, message: str, response: Any = None):
        super().__init__(message)
        self.response = response


class RetryExhausted(SmolChatError):
    """The retry limit was reached while the provider's arguments were still invalid."""

    def __init__(self, result: ChatResult):
        super().__init__(f"Retry limit reached after {result.attempts} attempts without a valid function call")
        self.result = result
