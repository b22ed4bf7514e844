"""Decoding and validation of function-call arguments.

The ArgumentValidator turns the provider's raw argument text into the value handed to a
registered function:
- decode(): Parse the argument text as JSON.
- validate(): Check the decoded value against the function's schema variant.
- corrective_message(): Build the user message that asks the provider to try again.
"""

from __future__ import annotations

import json
import logging
from typing import Any

import json_repair

from .exceptions import ParseError, RecoverableError
from .registry import FunctionDescriptor
from ..types.core import UserMessage

logger = logging.getLogger(__name__)


class ArgumentValidator:
    """Decode and validate function-call arguments.

    Args:
        repair: If True, attempt to fix malformed JSON with ``json_repair`` before giving up.

    Examples
    --------
    >>> validator = ArgumentValidator()
    >>> validator.decode('{"city": "Paris"}')
    {'city': 'Paris'}
    >>> ArgumentValidator(repair=True).decode('{"city": "Paris"')
    {'city': 'Paris'}
    """

    def __init__(self, repair: bool = False):
        self.repair = repair

    def decode(self, raw: str | None) -> Any:
        """Parse raw argument text.

        Raises
        ------
            ParseError: If the text is not well-formed JSON (and cannot be repaired).
        """
        if raw is None:
            raise ParseError("Function call arguments are missing", raw=raw)

        try:
            return json.loads(raw)
        except json.JSONDecodeError as e:
            if not self.repair:
                raise ParseError(f"Function call arguments are not valid JSON: {e}", raw=raw) from e
            error = e

        # json_repair returns an empty string when nothing salvageable is found
        repaired = json_repair.loads(raw)
        if repaired == "":
            raise ParseError(f"Function call arguments are not valid JSON: {error}", raw=raw) from error
        logger.debug(f"Repaired malformed arguments {raw!r} to {repaired!r}")
        return repaired

    def validate(self, decoded: Any, descriptor: FunctionDescriptor) -> Any:
        """Validate decoded arguments with the descriptor's schema.

        Structured schemas return the model instance; plain schema documents return the decoded
        value unchanged.

        Raises
        ------
            ValidationError: If a structured schema rejects the arguments.
        """
        return descriptor.schema.validate(decoded)

    def corrective_message(self, error: RecoverableError | str, descriptor: FunctionDescriptor | None = None) -> UserMessage:
        """Build the user message asking the provider to retry with valid arguments."""
        lines = [
            "Your function call involved invalid arguments.",
            str(error),
            "Please respond only with valid JSON under the provided schema.",
        ]
        if descriptor is not None:
            lines.append(f"Schema for function '{descriptor.name}':\n{json.dumps(descriptor.wire_schema)}")
        return UserMessage(content="\n".join(lines))
