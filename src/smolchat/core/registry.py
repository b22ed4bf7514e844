"""Registry of functions the completion provider may call."""

from __future__ import annotations

import inspect
import logging
from typing import Any, Callable, Iterator, Type

from pydantic import BaseModel

from .schema import DocumentSchema, StructuredSchema, as_argument_schema, extract_function_description
from .exceptions import UnknownFunctionError
from ..types.core import JSON, FunctionSpec

logger = logging.getLogger(__name__)


def _function_name(func: Callable | str) -> str:
    if isinstance(func, str):
        return func
    try:
        return func.__name__
    except AttributeError as e:
        raise TypeError(f"Cannot derive a function name from {func!r}; pass 'name' explicitly") from e


class FunctionDescriptor:
    """A registered function with its argument schema and derived wire schema."""

    def __init__(
        self,
        name: str,
        func: Callable[[Any], Any],
        schema: StructuredSchema | DocumentSchema,
        description: str | None = None,
    ) -> None:
        if not name:
            raise ValueError("Registered functions require a non-empty name")
        self.name = name
        self.func = func
        self.schema = schema
        self.description = description
        self.wire_schema: dict[str, JSON] = schema.wire_schema()

    async def invoke(self, arguments: Any) -> Any:
        """Call the function with validated arguments, awaiting the result if needed."""
        result = self.func(arguments)
        if inspect.isawaitable(result):
            result = await result
        return result

    def spec(self) -> FunctionSpec:
        """Describe the function for the completion provider."""
        return FunctionSpec(name=self.name, description=self.description, parameters=self.wire_schema)

    def __repr__(self):
        return f"FunctionDescriptor(name={self.name!r}, schema={self.schema!r})"


class FunctionRegistry:
    """Named function descriptors, keyed by function name.

    Registering a name that already exists replaces the previous descriptor.
    Reads are safe to share across conversations; mutations during an in-flight chat are not
    guaranteed to be visible to that chat.

    Examples
    --------
    >>> class Query(BaseModel):
    ...     city: str
    >>> def get_weather(query: Query) -> dict:
    ...     "Look up the current weather."
    ...     return {"tempC": 18}
    >>> registry = FunctionRegistry()
    >>> registry.register(get_weather, Query).name
    'get_weather'
    """

    def __init__(self) -> None:
        self._functions: dict[str, FunctionDescriptor] = {}

    def register(
        self,
        func: Callable[[Any], Any],
        schema: Type[BaseModel] | dict[str, JSON] | StructuredSchema | DocumentSchema,
        *,
        name: str | None = None,
        description: str | None = None,
        strict: bool = False,
    ) -> FunctionDescriptor:
        """Register ``func`` under ``name`` (default: ``func.__name__``).

        Parameters
        ----------
        func : Callable
            Invoked with a single argument: the validated model instance for structured
            schemas, or the decoded JSON value for plain schema documents. May be async.
        schema : type[BaseModel] | dict | StructuredSchema | DocumentSchema
            A pydantic model class, a JSON schema document, or an existing schema variant.
        name : str, optional
            Registry key; defaults to the function's ``__name__``.
        description : str, optional
            Description sent to the provider; defaults to the docstring summary.
        strict : bool, optional
            Use OpenAI's strict JSON schema conversion for pydantic models.

        Returns
        -------
        FunctionDescriptor
            The stored descriptor.
        """
        name = name or _function_name(func)
        if description is None and inspect.getdoc(func):
            description = extract_function_description(func)

        descriptor = FunctionDescriptor(
            name=name,
            func=func,
            schema=as_argument_schema(schema, strict=strict),
            description=description,
        )
        if name in self._functions:
            logger.debug(f"Replacing registered function '{name}'")
        self._functions[name] = descriptor
        return descriptor

    def deregister(self, func: Callable | str) -> None:
        """Remove a function if present."""
        self._functions.pop(_function_name(func), None)

    def lookup(self, func: Callable | str) -> FunctionDescriptor:
        """Return the descriptor registered under the function's name.

        Raises
        ------
        UnknownFunctionError
            If nothing is registered under that name.
        """
        name = _function_name(func)
        try:
            return self._functions[name]
        except KeyError as e:
            raise UnknownFunctionError(name) from e

    def list_all(self) -> list[FunctionDescriptor]:
        """Return a snapshot of all registered descriptors in registration order."""
        return list(self._functions.values())

    def __contains__(self, func: Callable | str) -> bool:
        return _function_name(func) in self._functions

    def __len__(self) -> int:
        return len(self._functions)

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._functions))
