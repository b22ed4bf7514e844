"""Argument schemas for registered functions.

A registered function declares its arguments either with a pydantic model (structured) or
with a plain JSON schema document. Both variants expose the same `validate` and `wire_schema`
interface; only the structured variant checks the arguments it is given.

ref: https://github.com/openai/openai-agents-python/blob/8d906f88f02d30b3cf6068e5de88a5f1e4bafd82/src/agents/function_schema.py
"""

from __future__ import annotations

import contextlib
import inspect
import logging
import re
from typing import Any, Callable, Literal, Type

from pydantic import BaseModel, ValidationError as PydanticValidationError
from typing_extensions import override

from .base import ArgumentSchema
from .exceptions import ValidationError
from ..types.core import JSON

logger = logging.getLogger(__name__)


DocstringStyle = Literal["google", "numpy", "sphinx"]


def _detect_docstring_style(doc: str) -> DocstringStyle:
    """Guess the docstring style by scoring the section markers of each style.

    Ref: https://github.com/openai/openai-agents-python/blob/8d906f88f02d30b3cf6068e5de88a5f1e4bafd82/src/agents/function_schema.py#L87-L129
    """
    patterns: dict[DocstringStyle, list[str]] = {
        "sphinx": [r"^:param\s", r"^:type\s", r"^:return:", r"^:rtype:"],
        "numpy": [r"^Parameters\s*\n\s*-{3,}", r"^Returns\s*\n\s*-{3,}", r"^Yields\s*\n\s*-{3,}"],
        "google": [r"^(Args|Arguments):", r"^(Returns):", r"^(Raises):"],
    }
    scores = {
        style: sum(1 for pattern in style_patterns if re.search(pattern, doc, re.MULTILINE))
        for style, style_patterns in patterns.items()
    }

    # dict order gives priority sphinx > numpy > google on ties
    best = max(scores, key=lambda style: scores[style])
    return best if scores[best] > 0 else "google"


@contextlib.contextmanager
def _suppress_griffe_logging():
    """Suppress griffe warnings about missing annotations for params."""
    griffe_logger = logging.getLogger("griffe")
    previous_level = griffe_logger.getEffectiveLevel()
    griffe_logger.setLevel(logging.ERROR)
    try:
        yield
    finally:
        griffe_logger.setLevel(previous_level)


def extract_function_description(fn: Callable) -> str | None:
    """Extract the leading description text from a function's docstring."""
    from griffe import Docstring, DocstringSectionKind

    doc = inspect.getdoc(fn)
    if not doc:
        return None

    with _suppress_griffe_logging():
        docstring = Docstring(doc, lineno=1, parser=_detect_docstring_style(doc))
        parsed = docstring.parse()

    return next((section.value for section in parsed if section.kind == DocstringSectionKind.text), None)


def pydantic_to_schema(model: Type[BaseModel], strict: bool = False) -> dict[str, Any]:
    """Convert a Pydantic model to a JSON schema document for the wire.

    Args:
        model: Pydantic model to convert.
        strict: If True, use OpenAI's strict JSON schema conversion.

    Returns
    -------
        JSON schema document.
    """
    if strict:
        from openai.lib._pydantic import to_strict_json_schema

        return to_strict_json_schema(model)
    else:
        return model.model_json_schema()


class StructuredSchema(ArgumentSchema[BaseModel]):
    """Validate arguments with a pydantic model.

    Examples
    --------
    >>> class Query(BaseModel):
    ...     city: str
    >>> StructuredSchema(Query).validate({"city": "Paris"})
    Query(city='Paris')
    """

    kind: Literal["structured"] = "structured"

    def __init__(self, model: Type[BaseModel], strict: bool = False):
        if not (isinstance(model, type) and issubclass(model, BaseModel)):
            raise TypeError(f"StructuredSchema requires a pydantic model class, received {model!r}")
        self.model = model
        self.strict = strict

    @override
    def validate(self, decoded: Any) -> BaseModel:
        try:
            return self.model.model_validate(decoded)
        except PydanticValidationError as e:
            raise ValidationError(str(e)) from e

    @override
    def wire_schema(self) -> dict[str, JSON]:
        return pydantic_to_schema(self.model, strict=self.strict)

    def __repr__(self):
        return f"StructuredSchema({self.model.__name__})"


class DocumentSchema(ArgumentSchema[Any]):
    """Carry a plain JSON schema document.

    The document is only advertised to the provider; decoded arguments are accepted as-is.
    """

    kind: Literal["document"] = "document"

    def __init__(self, document: dict[str, JSON]):
        if not isinstance(document, dict):
            raise TypeError(f"DocumentSchema requires a JSON schema dict, received {type(document)}")
        self.document = document

    @override
    def validate(self, decoded: Any) -> Any:
        return decoded

    @override
    def wire_schema(self) -> dict[str, JSON]:
        return self.document

    def __repr__(self):
        return f"DocumentSchema({self.document!r})"


def as_argument_schema(
    schema: Type[BaseModel] | dict[str, JSON] | StructuredSchema | DocumentSchema, strict: bool = False
) -> StructuredSchema | DocumentSchema:
    """Wrap a pydantic model class or a JSON schema dict in the matching schema variant."""
    if isinstance(schema, (StructuredSchema, DocumentSchema)):
        return schema
    elif isinstance(schema, type) and issubclass(schema, BaseModel):
        return StructuredSchema(schema, strict=strict)
    elif isinstance(schema, dict):
        return DocumentSchema(schema)
    else:
        raise TypeError(f"Unsupported schema type: {type(schema)}")
