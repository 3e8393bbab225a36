"""Result type: Success[O] | Failure[E], with traced failure construction."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, ClassVar

import msgspec
from msgspec import structs

from tracked_result.callsite import CallSite, capture_call_site

__all__ = ['Failure', 'Result', 'Success', 'failure', 'success']


class Success[O](msgspec.Struct, frozen=True, gc=False):
    """Success variant of Result containing a value of type O.

    Examples:
        >>> ok = success(42)
        >>> ok.value
        42
        >>> ok.is_success, ok.is_failure
        (True, False)
    """

    value: O

    is_success: ClassVar[bool] = True
    is_failure: ClassVar[bool] = False


class Failure[E](msgspec.Struct, frozen=True):
    """Failure variant of Result containing an error and its trace.

    The trace is ordered oldest first: index 0 is where the failure was
    created, the last entry is the most recent re-wrap. Build failures with
    failure() rather than the constructor so the trace is maintained.

    Examples:
        >>> err = failure('disk full')
        >>> err.error
        'disk full'
        >>> err.trace[-1].function_name is None  # created at module level
        True
    """

    error: E
    trace: tuple[CallSite, ...] = ()

    is_success: ClassVar[bool] = False
    is_failure: ClassVar[bool] = True


type Result[O, E = Exception] = Success[O] | Failure[E]


def success[O](value: O = None) -> Success[O]:  # type: ignore[assignment]
    """Create a Success. Without an argument it carries None."""
    return Success(value)


def failure[E](error: E | Failure[E], context: str | None = None) -> Failure[E]:
    """Create a Failure, recording the caller as the newest trace entry.

    ``error`` may be:

    - an existing Failure (or its decoded wire shape): the trace is extended
      and the error value is carried over unwrapped;
    - an error with a ``caused_by`` Failure: the cause's trace is continued
      while ``error`` itself stays the error value;
    - any other value: a fresh trace is started.

    Args:
        error: The error value, or a Failure to re-wrap.
        context: Annotation attached to the new trace entry.

    Returns:
        A new Failure. The input is never modified.

    Example:
        ```python
        def load(path: str) -> Result[bytes, OSError]:
            data = read(path)
            if is_failure(data):
                return failure(data, f'loading {path}')
            return data
        ```
    """
    return _accumulate(error, _here(context))


def _here(context: str | None) -> CallSite | None:
    site = capture_call_site()
    if context is None:
        return site
    if site is None:
        return CallSite(context=context)
    return structs.replace(site, context=context)


def _accumulate(error: Any, here: CallSite | None) -> Failure[Any]:
    appended = (here,) if here is not None else ()

    prior = _as_failure(error)
    if prior is not None:
        return Failure(prior.error, (*prior.trace, *appended))

    cause = _as_failure(getattr(error, 'caused_by', None))
    if cause is not None:
        return Failure(error, (*cause.trace, *appended))

    return Failure(error, appended)


def _as_failure(obj: object) -> Failure[Any] | None:
    """Return obj as a Failure if it is one, or has the encoded Failure shape.

    A mapping that only resembles the shape but does not decode is an
    ordinary error value.
    """
    if isinstance(obj, Failure):
        return obj
    if isinstance(obj, Mapping) and obj.get('is_failure') is True and 'trace' in obj:
        from tracked_result.codec import from_builtins
        from tracked_result.errors import ResultDecodeError

        try:
            return from_builtins(obj)  # type: ignore[return-value]
        except ResultDecodeError:
            return None
    return None
