"""Adapters turning plain functions into methods taking a list of values."""

from __future__ import annotations

import functools
import types
from typing import Any, Callable, Sequence

AnyFunction = Callable[[Sequence[Any]], Any]

_CO_VARARGS = 0x04
_CO_VARKEYWORDS = 0x08


def _positional_count(func: Callable[..., Any]) -> int:
    """Return how many positional parameters ``func`` takes."""
    bound_offset = 0
    target: Any = func
    if isinstance(func, types.MethodType):
        target = func.__func__
        bound_offset = 1
    if not isinstance(target, types.FunctionType):
        raise TypeError("make_any_function only accepts a plain function or a bound method")

    code = target.__code__
    if code.co_flags & (_CO_VARARGS | _CO_VARKEYWORDS):
        raise TypeError("make_any_function needs a callable with a fixed number of parameters")

    keyword_only = code.co_varnames[code.co_argcount : code.co_argcount + code.co_kwonlyargcount]
    keyword_defaults = target.__kwdefaults__ or {}
    if any(name not in keyword_defaults for name in keyword_only):
        raise TypeError("make_any_function cannot supply required keyword-only parameters")

    return code.co_argcount - bound_offset


def make_any_function(func: Callable[..., Any]) -> AnyFunction:
    """Wrap ``func`` so that it is called with the items of a single sequence.

    The wrapper checks that the sequence holds exactly as many values as
    ``func`` has positional parameters.
    """
    if not callable(func):
        raise TypeError("make_any_function only accepts a callable")

    expected = _positional_count(func)

    @functools.wraps(func)
    def call(arguments: Sequence[Any]) -> Any:
        values = list(arguments)
        if len(values) != expected:
            raise TypeError(
                "Wrong number of arguments passed to AnyFunction. "
                f"Expected {expected}, got {len(values)}"
            )
        return func(*values)

    return call