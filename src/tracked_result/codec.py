"""Wire representation of Results.

A Result converts to a plain structure that any JSON or MessagePack codec
can carry without custom hooks:

    Success: {"is_success": true, "is_failure": false, "value": ...}
    Failure: {"is_success": false, "is_failure": true, "error": ..., "trace": [...]}

Trace entries are CallSite objects; fields that are None are omitted.
Exceptions used as error values are reduced to {"type": ..., "message": ...}.

The decoded Failure (or even the undecoded dict) is recognized by failure(),
so a failure received from another process keeps accumulating its trace:

    ```python
    received = decode(payload)
    return failure(received, 'handling remote job')
    ```
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Literal

import msgspec

from tracked_result._logging import get_logger
from tracked_result.callsite import CallSite
from tracked_result.errors import ResultDecodeError
from tracked_result.result import Failure, Result, Success

__all__ = ['decode', 'encode', 'from_builtins', 'to_builtins']

logger = get_logger(__name__)

type WireProtocol = Literal['json', 'msgpack']


def _enc_hook(obj: Any) -> Any:
    """Reduce values msgspec cannot represent natively."""
    if isinstance(obj, BaseException):
        return {'type': type(obj).__qualname__, 'message': str(obj)}
    msg = f'Objects of type {type(obj).__name__!r} are not supported'
    raise NotImplementedError(msg)


def to_builtins(result: Result[Any, Any]) -> dict[str, Any]:
    """Convert a Result to its plain wire structure.

    Raises:
        TypeError: If the value or error contains objects msgspec cannot convert.
    """
    if isinstance(result, Success):
        return {
            'is_success': True,
            'is_failure': False,
            'value': msgspec.to_builtins(result.value, enc_hook=_enc_hook),
        }
    if isinstance(result, Failure):
        return {
            'is_success': False,
            'is_failure': True,
            'error': msgspec.to_builtins(result.error, enc_hook=_enc_hook),
            'trace': msgspec.to_builtins(result.trace),
        }
    msg = f'Expected Success or Failure, got {type(result).__name__}'
    raise TypeError(msg)


def from_builtins(
    obj: Any,
    *,
    value_type: Any = Any,
    error_type: Any = Any,
) -> Result[Any, Any]:
    """Rebuild a Result from its plain wire structure.

    Args:
        obj: The decoded structure.
        value_type: Type to convert a Success value into.
        error_type: Type to convert a Failure error into.

    Raises:
        ResultDecodeError: If obj is not a well-formed Result.
    """
    if not isinstance(obj, Mapping):
        msg = f'Expected a mapping, got {type(obj).__name__}'
        raise ResultDecodeError(msg)

    is_success = obj.get('is_success')
    is_failure = obj.get('is_failure')

    try:
        if is_failure is True and is_success is not True:
            trace = msgspec.convert(obj.get('trace', ()), tuple[CallSite, ...])
            return Failure(msgspec.convert(obj.get('error'), error_type), trace)
        if is_success is True and is_failure is not True:
            return Success(msgspec.convert(obj.get('value'), value_type))
    except msgspec.ValidationError as e:
        logger.debug('codec.decode_failed', reason=str(e))
        msg = f'Malformed Result: {e}'
        raise ResultDecodeError(msg) from e

    logger.debug('codec.decode_failed', reason='discriminants', is_success=is_success, is_failure=is_failure)
    msg = f'Ambiguous Result discriminants: is_success={is_success!r}, is_failure={is_failure!r}'
    raise ResultDecodeError(msg)


def encode(result: Result[Any, Any], *, protocol: WireProtocol = 'json') -> bytes:
    """Encode a Result as JSON or MessagePack bytes."""
    builtins = to_builtins(result)
    if protocol == 'json':
        return msgspec.json.encode(builtins)
    if protocol == 'msgpack':
        return msgspec.msgpack.encode(builtins)
    msg = f'Unknown protocol: {protocol!r}'
    raise ValueError(msg)


def decode(
    data: bytes | str,
    *,
    protocol: WireProtocol = 'json',
    value_type: Any = Any,
    error_type: Any = Any,
) -> Result[Any, Any]:
    """Decode bytes produced by encode() back into a Result.

    Raises:
        ResultDecodeError: If data is not valid encoded data or not a Result.
    """
    try:
        if protocol == 'json':
            obj = msgspec.json.decode(data)
        elif protocol == 'msgpack':
            obj = msgspec.msgpack.decode(data)
        else:
            msg = f'Unknown protocol: {protocol!r}'
            raise ValueError(msg)
    except msgspec.DecodeError as e:
        logger.debug('codec.decode_failed', reason=str(e), protocol=protocol)
        msg = f'Invalid {protocol} data: {e}'
        raise ResultDecodeError(msg) from e
    return from_builtins(obj, value_type=value_type, error_type=error_type)
