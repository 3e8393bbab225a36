"""Combinators over Result values.

All functions are pure: they never modify their input and return new
Results where something changes.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from typing import Any, TypeIs

from tracked_result._logging import get_logger
from tracked_result.callsite import CallSite
from tracked_result.errors import UnwrapFailureError, UnwrapSuccessError
from tracked_result.result import Failure, Result, Success, _accumulate, _here

__all__ = [
    'extract_trace',
    'format_trace',
    'is_failure',
    'is_success',
    'map_failure',
    'map_success',
    'match',
    'strip_trace',
    'unwrap',
    'unwrap_error',
]

logger = get_logger(__name__)


def is_success[O](result: Result[O, Any]) -> TypeIs[Success[O]]:
    """Return True if result is a Success, narrowing its type."""
    return isinstance(result, Success)


def is_failure[E](result: Result[Any, E]) -> TypeIs[Failure[E]]:
    """Return True if result is a Failure, narrowing its type."""
    return isinstance(result, Failure)


def match[O, E, T](
    result: Result[O, E],
    *,
    on_success: Callable[[O], T],
    on_failure: Callable[[E], T],
) -> T:
    """Call exactly one handler depending on the variant.

    Examples:
        >>> match(success(2), on_success=lambda v: v + 1, on_failure=len)
        3
    """
    if isinstance(result, Success):
        return on_success(result.value)
    if isinstance(result, Failure):
        return on_failure(result.error)
    msg = f'Expected Success or Failure, got {type(result).__name__}'
    raise TypeError(msg)


def map_success[O, E, U, F](
    result: Result[O, E],
    fn: Callable[[O], Result[U, F]],
) -> Result[U, E | F]:
    """Chain a Result-returning function onto a Success.

    A Failure is returned as-is and ``fn`` is not called.

    Examples:
        >>> map_success(success(5), lambda x: success(x * 2))
        Success(value=10)
    """
    if isinstance(result, Success):
        return fn(result.value)
    return result


def map_failure[O, E, U, F](
    result: Result[O, E],
    fn: Callable[[E], Result[U, F]],
) -> Result[O | U, F]:
    """Chain a Result-returning function onto a Failure's error.

    Use it to recover (return a Success) or to translate the error. To keep
    the trace when translating, build the new Failure with a ``caused_by``
    link or re-wrap the original. A Success is returned as-is.
    """
    if isinstance(result, Failure):
        return fn(result.error)
    return result


def unwrap[O](result: Result[O, Any], context: str | None = None) -> O:
    """Return the Success value, or raise UnwrapFailureError.

    When ``context`` is given, the raised Failure is first extended by one
    hop recording the caller of unwrap(), exactly as failure() would.

    Raises:
        UnwrapFailureError: If result is a Failure.
    """
    if isinstance(result, Success):
        return result.value

    if context is not None:
        result = _accumulate(result, _here(context))
    if logger.isEnabledFor(logging.DEBUG):
        logger.debug('result.unwrap_failed', error=repr(result.error), depth=len(result.trace))
    raise UnwrapFailureError(result)


def unwrap_error[E](result: Result[Any, E]) -> E:
    """Return the Failure error, or raise UnwrapSuccessError.

    Raises:
        UnwrapSuccessError: If result is a Success.
    """
    if isinstance(result, Failure):
        return result.error

    if logger.isEnabledFor(logging.DEBUG):
        logger.debug('result.unwrap_error_failed', value=repr(result.value))
    raise UnwrapSuccessError(result)


def extract_trace(result: Result[Any, Any]) -> tuple[CallSite, ...]:
    """Return the trace of a Failure, oldest first; () for a Success."""
    if isinstance(result, Failure):
        return result.trace
    return ()


def strip_trace[O, E](result: Result[O, E]) -> Result[O, E]:
    """Return a Failure with the same error and an empty trace.

    A Success is returned unchanged.
    """
    if isinstance(result, Failure):
        return Failure(result.error)
    return result


def format_trace(trace: Iterable[CallSite]) -> str:
    """Render a trace for humans, one line per hop, oldest first.

    Examples:
        >>> print(format_trace([CallSite(file='a.py', line=3, function_name='load', context='reading')]))
          at load (a.py:3): reading
    """
    lines = []
    for site in trace:
        if site.file is None:
            location = '<unknown>'
        else:
            location = f'{site.file}:{site.line}'
        line = f'  at {site.function_name} ({location})' if site.function_name else f'  at {location}'
        if site.context is not None:
            line = f'{line}: {site.context}'
        lines.append(line)
    return '\n'.join(lines)
