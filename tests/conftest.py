"""Pytest configuration and shared fixtures for tracked-result tests."""

from __future__ import annotations

from collections.abc import Iterator

import pytest
from hypothesis import HealthCheck, settings

from tracked_result import CallSite
from tracked_result._config import CAPTURE_ENV_VAR, _reset

# The autouse config fixture is function-scoped but idempotent across examples.
settings.register_profile('tracked_result', suppress_health_check=[HealthCheck.function_scoped_fixture])
settings.load_profile('tracked_result')


class SequenceProvider:
    """Deterministic provider handing out the given call sites in order, then None."""

    def __init__(self, *sites: CallSite | None) -> None:
        self._sites = iter(sites)
        self.calls = 0

    def current(self) -> CallSite | None:
        self.calls += 1
        return next(self._sites, None)


@pytest.fixture(autouse=True)
def default_config(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Run every test with capture enabled and no init() configuration."""
    monkeypatch.delenv(CAPTURE_ENV_VAR, raising=False)
    _reset()
    yield
    _reset()


@pytest.fixture
def sites() -> tuple[CallSite, CallSite, CallSite]:
    """Three distinct call sites for deterministic traces."""
    return (
        CallSite(file='store.py', line=10, function_name='read'),
        CallSite(file='service.py', line=20, function_name='load'),
        CallSite(file='api.py', line=30, function_name='handle'),
    )


@pytest.fixture
def sample_success():
    """Sample Success value for testing."""
    from tracked_result import success

    return success(42)


@pytest.fixture
def sample_failure():
    """Sample Failure with a one-entry trace."""
    from tracked_result import Failure

    return Failure('boom', (CallSite(file='store.py', line=10, function_name='read'),))
