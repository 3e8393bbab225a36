"""Call-site capture: where a failure was created or re-wrapped.

Capture reads the interpreter's formatted stack report (the same text a
traceback prints) and parses the frame of the code that called into
tracked-result. It is best-effort: an unavailable or unparsable stack yields
no CallSite, never an exception.

The provider is pluggable so that chain accumulation can be exercised with a
deterministic fake:

    ```python
    class Fixed:
        def current(self) -> CallSite | None:
            return CallSite(file='app.py', line=1, function_name='load')

    with use_provider(Fixed()):
        failure('boom')
    ```
"""

from __future__ import annotations

import os
import re
import traceback
from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Protocol, runtime_checkable

import msgspec
import wrapt

from tracked_result._config import TraceConfig, get_config
from tracked_result._logging import get_logger

__all__ = [
    'CallSite',
    'CallSiteProvider',
    'NullProvider',
    'StackTextProvider',
    'capture_call_site',
    'get_provider',
    'parse_frame',
    'use_provider',
]

logger = get_logger(__name__)

_PACKAGE_DIR = os.path.dirname(os.path.abspath(__file__))
_WRAPT_DIR = os.path.dirname(os.path.abspath(wrapt.__file__))

# Function names that stand for "no named function".
_ANONYMOUS = frozenset({'', '<module>', '<lambda>', '<anonymous>'})


class CallSite(msgspec.Struct, frozen=True, omit_defaults=True, gc=False):
    """One point where a failure was observed or re-wrapped.

    A CallSite built by capture always has file and line. A context-only
    record (context supplied but nothing captured) has neither.

    Examples:
        >>> CallSite(file='app.py', line=12, function_name='load')
        CallSite(file='app.py', line=12, function_name='load', context=None)
    """

    file: str | None = None
    line: int | None = None
    function_name: str | None = None
    context: str | None = None


# --- Stack text dialects ---

# CPython: '  File "/srv/app.py", line 12, in load'
_PYTHON_FRAME = re.compile(r'^\s*File "(?P<file>.+)", line (?P<line>\d+), in (?P<name>.*?)\s*$')
# V8: '    at load (/srv/app.js:12:5)'
_V8_NAMED_FRAME = re.compile(r'^\s*at\s+(?P<name>.+?)\s+\((?P<file>.*?):(?P<line>\d+):\d+\)$')
# V8 without a name: '    at (/srv/app.js:12:5)'
_V8_UNNAMED_FRAME = re.compile(r'^\s*at\s+\((?P<file>.*?):(?P<line>\d+):\d+\)$')
# V8 top level: '    at /srv/app.js:12:5'
_V8_BARE_FRAME = re.compile(r'^\s*at\s+(?P<file>.*?):(?P<line>\d+):\d+$')
# Gecko/WebKit: 'load@/srv/app.js:12:5'
_GECKO_FRAME = re.compile(r'^(?P<name>.*?)@(?P<file>.*?):(?P<line>\d+):\d+$')

_DIALECTS = (
    _PYTHON_FRAME,
    _V8_NAMED_FRAME,
    _V8_UNNAMED_FRAME,
    _V8_BARE_FRAME,
    _GECKO_FRAME,
)


def parse_frame(line: str) -> CallSite | None:
    """Parse one frame line of a stack report.

    Recognizes CPython traceback headers, V8 ``at ...`` lines and Gecko/WebKit
    ``name@file:line:col`` lines. Anonymous frames get ``function_name=None``.

    Args:
        line: A single line of stack text.

    Returns:
        The parsed CallSite, or None if no dialect matches.

    Examples:
        >>> parse_frame('  File "app.py", line 3, in <module>')
        CallSite(file='app.py', line=3, function_name=None, context=None)
        >>> parse_frame('load@http://host/app.js:12:5').function_name
        'load'
    """
    for pattern in _DIALECTS:
        match = pattern.match(line)
        if match is None:
            continue
        groups = match.groupdict()
        name = (groups.get('name') or '').strip()
        return CallSite(
            file=groups['file'],
            line=int(groups['line']),
            function_name=None if name in _ANONYMOUS else name,
        )
    return None


# --- Providers ---


@runtime_checkable
class CallSiteProvider(Protocol):
    """Source of the current call site."""

    def current(self) -> CallSite | None:
        """Return the call site of the code calling into tracked-result, if known."""
        ...


class NullProvider:
    """Provider used when capture is disabled."""

    __slots__ = ()

    def current(self) -> CallSite | None:
        return None


class StackTextProvider:
    """Capture backend that parses ``traceback.format_stack()`` output.

    Frames are examined innermost first. Frames whose file lies under one of
    ``skip_paths`` (tracked-result itself and wrapt by default) are the
    capture machinery and the failure constructors; the first frame outside
    them is the caller. If that frame cannot be parsed, nothing is returned.

    Attributes:
        skip_paths: Normalized path prefixes of frames to skip.
    """

    __slots__ = ('skip_paths',)

    def __init__(self, skip_paths: tuple[str, ...] = ()) -> None:
        self.skip_paths = tuple(os.path.normcase(os.path.abspath(p)) for p in (_PACKAGE_DIR, _WRAPT_DIR, *skip_paths))

    def _is_skipped(self, file: str) -> bool:
        path = os.path.normcase(file)
        return any(path == prefix or path.startswith(prefix + os.sep) for prefix in self.skip_paths)

    def current(self) -> CallSite | None:
        # The last entry is this method; each entry starts with its header line.
        entries = traceback.format_stack()[:-1]
        if not entries:
            logger.debug('callsite.unavailable', reason='empty stack')
            return None

        for entry in reversed(entries):
            header = entry.splitlines()[0] if entry else ''
            site = parse_frame(header)
            if site is None:
                logger.debug('callsite.unparsed', frame=header)
                return None
            if self._is_skipped(site.file or ''):
                continue
            return site

        logger.debug('callsite.unavailable', reason='no caller frame', depth=len(entries))
        return None


# --- Provider selection ---

_provider_override: ContextVar[CallSiteProvider | None] = ContextVar('tracked_result_provider', default=None)

_default_provider: tuple[TraceConfig, CallSiteProvider] | None = None


def _provider_for(config: TraceConfig) -> CallSiteProvider:
    global _default_provider  # noqa: PLW0603

    if _default_provider is not None and _default_provider[0] == config:
        return _default_provider[1]

    provider: CallSiteProvider = StackTextProvider(config.skip_paths) if config.capture else NullProvider()
    _default_provider = (config, provider)
    return provider


def get_provider() -> CallSiteProvider:
    """Return the provider active in the current context.

    A provider installed with use_provider() wins; otherwise the default
    provider for the current configuration is used.
    """
    override = _provider_override.get()
    if override is not None:
        return override
    return _provider_for(get_config())


@contextmanager
def use_provider(provider: CallSiteProvider) -> Iterator[CallSiteProvider]:
    """Install ``provider`` for the current context (thread or task).

    Example:
        ```python
        with use_provider(NullProvider()):
            assert extract_trace(failure('x')) == ()
        ```
    """
    token = _provider_override.set(provider)
    try:
        yield provider
    finally:
        _provider_override.reset(token)


def capture_call_site() -> CallSite | None:
    """Capture the call site of the code that called into tracked-result."""
    return get_provider().current()
