"""Trace configuration: TraceConfig, environment detection, and initialization."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass

from tracked_result._logging import configure_logging

__all__ = [
    'TraceConfig',
    'get_config',
    'init',
]

CAPTURE_ENV_VAR = 'TRACKED_RESULT_CAPTURE'

_TRUTHY = frozenset({'1', 'on', 'true', 'yes'})
_FALSY = frozenset({'0', 'off', 'false', 'no'})


@dataclass(frozen=True)
class TraceConfig:
    """Configuration for call-site capture.

    Attributes:
        capture: Whether failure() records call sites at all.
        skip_paths: Extra path prefixes whose frames are never reported as
            call sites (helper libraries that build failures on behalf of
            their callers).
        log_level: Logging level (e.g., "DEBUG", "INFO"). None = leave logging alone.
    """

    capture: bool = True
    skip_paths: tuple[str, ...] = ()
    log_level: str | None = None


# Process configuration (set by init())
_config: TraceConfig | None = None

# Environment-derived fallback, detected once
_default_config: TraceConfig | None = None


def _detect_capture() -> bool:
    """Detect whether capture is enabled from the environment.

    TRACKED_RESULT_CAPTURE accepts 1/on/true/yes and 0/off/false/no.
    Anything else is reported and treated as enabled.
    """
    env_capture = os.environ.get(CAPTURE_ENV_VAR, '').strip().lower()
    if not env_capture or env_capture in _TRUTHY:
        return True
    if env_capture in _FALSY:
        return False
    logging.warning("Unknown %s value '%s', capture stays enabled", CAPTURE_ENV_VAR, env_capture)
    return True


def init(
    capture: bool | None = None,
    skip_paths: tuple[str, ...] | list[str] = (),
    log_level: str | None = None,
) -> TraceConfig:
    """Initialize tracked-result with the given configuration.

    Calling init() is optional; without it get_config() falls back to
    environment detection.

    Args:
        capture: Enable call-site capture. Detected from the environment if None.
        skip_paths: Extra path prefixes to skip while looking for the caller frame.
        log_level: Logging level ("DEBUG", "INFO", etc.). None = leave logging alone.

    Returns:
        The TraceConfig that was set.

    Example:
        ```python
        import tracked_result

        tracked_result.init(skip_paths=('/srv/app/helpers',), log_level='DEBUG')
        ```
    """
    global _config  # noqa: PLW0603

    _config = TraceConfig(
        capture=_detect_capture() if capture is None else capture,
        skip_paths=tuple(skip_paths),
        log_level=log_level,
    )

    if log_level is not None:
        configure_logging(log_level)

    return _config


def get_config() -> TraceConfig:
    """Get the current configuration.

    Returns:
        The TraceConfig set by init(), or one derived from the environment
        the first time it is needed.
    """
    global _default_config  # noqa: PLW0603

    if _config is not None:
        return _config
    if _default_config is None:
        _default_config = TraceConfig(capture=_detect_capture())
    return _default_config


def _reset() -> None:
    """Forget any configuration set by init() or detected from the environment."""
    global _config, _default_config  # noqa: PLW0603

    _config = None
    _default_config = None
