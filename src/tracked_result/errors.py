"""Error types: unwrap contract violations, causal errors, and decode errors."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from tracked_result.callsite import CallSite
    from tracked_result.result import Failure, Success

__all__ = [
    'ResultDecodeError',
    'TracedError',
    'UnwrapError',
    'UnwrapFailureError',
    'UnwrapSuccessError',
]


class UnwrapError(RuntimeError):
    """Base class for unwrapping the wrong variant of a Result."""

    def __init__(self, message: str, result: Any) -> None:
        self.result = result
        super().__init__(message)


class UnwrapFailureError(UnwrapError):
    """Raised by unwrap() on a Failure.

    Carries the Failure (extended by the unwrap hop when a context was
    given) so that safe()/attempt() can turn it back into a Failure and keep
    its trace.
    """

    result: Failure[Any]

    def __init__(self, result: Failure[Any]) -> None:
        from tracked_result.algebra import format_trace

        message = f'Called unwrap on a Failure: {result.error!r}'
        if result.trace:
            message = f'{message}\n{format_trace(result.trace)}'
        super().__init__(message, result)

    @property
    def error(self) -> Any:
        """The error value of the unwrapped Failure."""
        return self.result.error

    @property
    def trace(self) -> tuple[CallSite, ...]:
        """The trace of the unwrapped Failure, oldest first."""
        return self.result.trace


class UnwrapSuccessError(UnwrapError):
    """Raised by unwrap_error() on a Success."""

    result: Success[Any]

    def __init__(self, result: Success[Any]) -> None:
        super().__init__(f'Called unwrap_error on a Success: {result.value!r}', result)

    @property
    def value(self) -> Any:
        """The value of the unwrapped Success."""
        return self.result.value


class TracedError(Exception):
    """Exception that keeps the Failure it was raised in response to.

    failure() continues the trace of ``caused_by`` while keeping this
    exception as the error value. Any other error type can opt in by
    exposing a ``caused_by`` attribute.

    Example:
        ```python
        loaded = load_config(path)
        if is_failure(loaded):
            return failure(TracedError('cannot start', caused_by=loaded))
        ```
    """

    def __init__(self, message: str = '', *, caused_by: Failure[Any] | None = None) -> None:
        self.caused_by = caused_by
        super().__init__(message)


class ResultDecodeError(ValueError):
    """Data does not have the shape of an encoded Result."""
