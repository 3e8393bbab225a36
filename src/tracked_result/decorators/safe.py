"""@safe and @safe_async decorators, and attempt()/attempt_async().

A caught exception becomes a Failure whose newest trace entry is the code
that called the wrapped function. An UnwrapFailureError is turned back into
the Failure it carries, so its trace continues instead of restarting.

For the async variants the capture happens where the wrapper observes the
exception (the awaiting caller); the frames of the original raise are gone
by then. Cancellation is always re-raised.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from typing import Any, ParamSpec, TypeVar, overload

import anyio
import wrapt

from tracked_result.errors import UnwrapFailureError
from tracked_result.result import Failure, Result, Success, failure

__all__ = ['attempt', 'attempt_async', 'safe', 'safe_async']

P = ParamSpec('P')
T = TypeVar('T')
E = TypeVar('E', bound=BaseException)


def _failure_from(exc: BaseException) -> Failure[Any]:
    if isinstance(exc, UnwrapFailureError):
        return failure(exc.result)
    return failure(exc)


def attempt[T](
    fn: Callable[..., T],
    /,
    *args: Any,
    exceptions: tuple[type[BaseException], ...] | None = None,
    **kwargs: Any,
) -> Result[T, Any]:
    """Call ``fn`` and return Success(result), or a Failure for what it raised.

    ``exceptions`` is consumed by attempt() and never passed on to ``fn``.

    Args:
        fn: The callable to run.
        *args: Positional arguments for fn.
        exceptions: Tuple of exception types to catch. Defaults to (Exception,).
        **kwargs: Keyword arguments for fn.

    Example:
        ```python
        attempt(int, '42')
        # Success(value=42)
        attempt(int, 'x', exceptions=(ValueError,))
        # Failure(error=ValueError(...), trace=(CallSite(...),))
        ```
    """
    catch = exceptions if exceptions is not None else (Exception,)
    try:
        return Success(fn(*args, **kwargs))
    except catch as e:
        return _failure_from(e)


async def attempt_async[T](
    operation: Awaitable[T],
    *,
    exceptions: tuple[type[BaseException], ...] | None = None,
) -> Result[T, Any]:
    """Await ``operation`` and return Success(result), or a Failure for what it raised.

    Args:
        operation: The awaitable to run to completion.
        exceptions: Tuple of exception types to catch. Defaults to (Exception,).

    Returns:
        The Result of the operation. Cancellation is re-raised unchanged.
    """
    catch = exceptions if exceptions is not None else (Exception,)
    try:
        return Success(await operation)
    except catch as e:
        if isinstance(e, anyio.get_cancelled_exc_class()):
            raise
        return _failure_from(e)


@overload
def safe[**P, T](
    func: Callable[P, T],
) -> Callable[P, Result[T, Exception]]: ...


@overload
def safe[E: BaseException](
    *,
    exceptions: tuple[type[E], ...],
) -> Callable[[Callable[P, T]], Callable[P, Result[T, E]]]: ...


@overload
def safe[E: BaseException](
    func: None = None,
    *,
    exceptions: tuple[type[E], ...] | None = None,
) -> Callable[[Callable[P, T]], Callable[P, Result[T, E]]]: ...


def safe[**P, T](
    func: Callable[P, T] | None = None,
    *,
    exceptions: tuple[type[Any], ...] | None = None,
) -> Any:
    """Decorator that catches exceptions and returns a traced Failure.

    Can be used with or without arguments:
        @safe
        def risky(): ...

        @safe(exceptions=(ValueError, TypeError))
        def specific(): ...

    Args:
        func: The function to wrap (when used without parentheses).
        exceptions: Tuple of exception types to catch. Defaults to (Exception,).

    Returns:
        A wrapped function that returns Result[T, E] instead of T.

    Example:
        ```python
        @safe
        def divide(a: int, b: int) -> float:
            return a / b
        divide(10, 2)
        # Success(value=5.0)
        divide(10, 0)
        # Failure(error=ZeroDivisionError('division by zero'), trace=(...))
        ```
    """
    catch = exceptions if exceptions is not None else (Exception,)

    @wrapt.decorator
    def wrapper(
        wrapped: Callable[P, T],
        instance: Any,
        args: tuple[Any, ...],
        kwargs: dict[str, Any],
    ) -> Result[T, Any]:
        try:
            return Success(wrapped(*args, **kwargs))
        except catch as e:
            return _failure_from(e)

    if func is not None:
        return wrapper(func)
    return wrapper


@overload
def safe_async[**P, T](
    func: Callable[P, Awaitable[T]],
) -> Callable[P, Awaitable[Result[T, Exception]]]: ...


@overload
def safe_async[E: BaseException](
    *,
    exceptions: tuple[type[E], ...],
) -> Callable[[Callable[P, Awaitable[T]]], Callable[P, Awaitable[Result[T, E]]]]: ...


@overload
def safe_async[E: BaseException](
    func: None = None,
    *,
    exceptions: tuple[type[E], ...] | None = None,
) -> Callable[[Callable[P, Awaitable[T]]], Callable[P, Awaitable[Result[T, E]]]]: ...


def safe_async[**P, T](
    func: Callable[P, Awaitable[T]] | None = None,
    *,
    exceptions: tuple[type[Any], ...] | None = None,
) -> Any:
    """Async decorator that catches exceptions and returns a traced Failure.

    Can be used with or without arguments:
        @safe_async
        async def risky(): ...

        @safe_async(exceptions=(ValueError, TypeError))
        async def specific(): ...

    Args:
        func: The async function to wrap (when used without parentheses).
        exceptions: Tuple of exception types to catch. Defaults to (Exception,).

    Returns:
        A wrapped async function that returns Result[T, E] instead of T.
    """
    catch = exceptions if exceptions is not None else (Exception,)

    @wrapt.decorator
    async def wrapper(
        wrapped: Callable[P, Awaitable[T]],
        instance: Any,
        args: tuple[Any, ...],
        kwargs: dict[str, Any],
    ) -> Result[T, Any]:
        return await attempt_async(wrapped(*args, **kwargs), exceptions=catch)

    if func is not None:
        return wrapper(func)
    return wrapper
