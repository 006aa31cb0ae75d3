"""
Input normalization for Gatekeeper.

Turns the raw input and raw context of an invocation into the parameters
and context every rule receives. Errors raised here are not attributed to
any rule and reach the caller unchanged.
"""

import inspect
from typing import Any, Awaitable, Callable, Optional, Tuple, Type, TypeVar, Union

from pydantic import BaseModel


Capture = Callable[[Any], Union[Any, Awaitable[Any]]]
ContextFactory = Callable[[Any], Union[Any, Awaitable[Any]]]

ModelT = TypeVar("ModelT", bound=BaseModel)


async def _call(func: Callable[[Any], Any], value: Any) -> Any:
    result = func(value)
    if inspect.isawaitable(result):
        result = await result
    return result


class InputNormalizer:
    """Applies the capture and optional context functions."""

    def __init__(self, capture: Capture, context: Optional[ContextFactory] = None):
        if not callable(capture):
            raise TypeError("capture must be callable")
        if context is not None and not callable(context):
            raise TypeError("context must be callable")

        self.capture = capture
        self.context = context

    async def normalize(self, raw_input: Any, raw_context: Any = None) -> Tuple[Any, Any]:
        """Return ``(parameters, context)`` for one invocation.

        Without a context function the context is ``None`` whatever the
        caller passed.
        """
        context = await _call(self.context, raw_context) if self.context is not None else None
        parameters = await _call(self.capture, raw_input)
        return parameters, context


def capture_model(model: Type[ModelT]) -> Callable[[Any], ModelT]:
    """Build a capture function that validates raw input with a pydantic model."""

    def capture(raw_input: Any) -> ModelT:
        if isinstance(raw_input, model):
            return raw_input
        return model.model_validate(raw_input)

    capture.__name__ = f"capture_{model.__name__}"
    capture.__qualname__ = capture.__name__
    return capture


def context_model(model: Type[ModelT]) -> Callable[[Any], ModelT]:
    """Build a context function that validates raw context with a pydantic model.

    An omitted context (``None``) validates as an empty mapping, so models
    whose fields all have defaults still produce an instance.
    """
    validate = capture_model(model)

    def context(raw_context: Any) -> ModelT:
        return validate({} if raw_context is None else raw_context)

    context.__name__ = f"context_{model.__name__}"
    context.__qualname__ = context.__name__
    return context
