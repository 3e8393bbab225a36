"""tracked-result: Result types that record where failures travel.

Every time a Failure is re-wrapped with failure(), the caller's file, line
and function are appended to its trace, oldest first. Traces survive
encoding, so a Failure decoded in another process keeps growing.

Flat imports (preferred):
    from tracked_result import Result, Success, Failure, success, failure
    from tracked_result import unwrap, extract_trace, safe, encode, decode

Submodule imports (for organization):
    from tracked_result.result import Success, Failure
    from tracked_result.callsite import CallSite, use_provider
    from tracked_result.codec import to_builtins, from_builtins
"""

# Configuration
from tracked_result._config import TraceConfig, get_config, init

# Logging
from tracked_result._logging import (
    add_log_hook,
    clear_log_hooks,
    configure_logging,
    get_logger,
    remove_log_hook,
)

# Algebra
from tracked_result.algebra import (
    extract_trace,
    format_trace,
    is_failure,
    is_success,
    map_failure,
    map_success,
    match,
    strip_trace,
    unwrap,
    unwrap_error,
)

# Capture
from tracked_result.callsite import (
    CallSite,
    CallSiteProvider,
    NullProvider,
    StackTextProvider,
    capture_call_site,
    get_provider,
    parse_frame,
    use_provider,
)

# Serialization
from tracked_result.codec import decode, encode, from_builtins, to_builtins

# Decorators
from tracked_result.decorators import attempt, attempt_async, safe, safe_async

# Errors
from tracked_result.errors import (
    ResultDecodeError,
    TracedError,
    UnwrapError,
    UnwrapFailureError,
    UnwrapSuccessError,
)

# Result types
from tracked_result.result import Failure, Result, Success, failure, success

__all__ = [
    # Capture
    'CallSite',
    'CallSiteProvider',
    # Result types
    'Failure',
    'NullProvider',
    'Result',
    # Errors
    'ResultDecodeError',
    'StackTextProvider',
    'Success',
    # Configuration
    'TraceConfig',
    'TracedError',
    'UnwrapError',
    'UnwrapFailureError',
    'UnwrapSuccessError',
    'add_log_hook',
    # Decorators
    'attempt',
    'attempt_async',
    'capture_call_site',
    'clear_log_hooks',
    # Logging
    'configure_logging',
    # Serialization
    'decode',
    'encode',
    # Algebra
    'extract_trace',
    'failure',
    'format_trace',
    'from_builtins',
    'get_config',
    'get_logger',
    'get_provider',
    'init',
    'is_failure',
    'is_success',
    'map_failure',
    'map_success',
    'match',
    'parse_frame',
    'remove_log_hook',
    'safe',
    'safe_async',
    'strip_trace',
    'success',
    'to_builtins',
    'unwrap',
    'unwrap_error',
    'use_provider',
]
