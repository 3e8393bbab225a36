"""Tests for logging configuration, hooks, and library events."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from typing import Any

import pytest
import structlog

from tracked_result import ResultDecodeError, StackTextProvider, decode, failure, unwrap, unwrap_error, success
from tracked_result import callsite as callsite_module
from tracked_result._logging import (
    add_log_hook,
    clear_log_hooks,
    configure_logging,
    get_logger,
    remove_log_hook,
)


@pytest.fixture(autouse=True)
def isolated_logging() -> Iterator[None]:
    """Clear log hooks and restore the root logger around each test."""
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    clear_log_hooks()
    yield
    clear_log_hooks()
    root.handlers[:] = handlers
    root.setLevel(level)
    structlog.reset_defaults()


@pytest.fixture
def events() -> list[dict[str, Any]]:
    """Capture every log entry emitted under DEBUG JSON logging."""
    received: list[dict[str, Any]] = []
    configure_logging(level='DEBUG', json_output=True)
    add_log_hook(received.append)
    return received


def named(events: list[dict[str, Any]], name: str) -> list[dict[str, Any]]:
    return [e for e in events if e.get('event') == name]


class TestLogHooks:
    """Tests for logging hooks functionality."""

    def test_hook_receives_log_events(self, events) -> None:
        logger = get_logger('test')
        logger.info('Test message', extra_field='extra_value')

        test_entries = named(events, 'Test message')
        assert len(test_entries) == 1
        assert test_entries[0]['extra_field'] == 'extra_value'
        assert test_entries[0]['level'] == 'info'

    def test_remove_hook(self) -> None:
        calls: list[str] = []

        def hook(event_dict: dict[str, Any]) -> None:
            calls.append('called')

        configure_logging(level='DEBUG', json_output=True)
        add_log_hook(hook)

        logger = get_logger('test')
        logger.info('First')
        assert len(calls) == 1

        remove_log_hook(hook)
        logger.info('Second')
        assert len(calls) == 1

    def test_clear_hooks(self) -> None:
        calls: list[str] = []

        configure_logging(level='DEBUG', json_output=True)
        add_log_hook(lambda _e: calls.append('hook1'))
        add_log_hook(lambda _e: calls.append('hook2'))

        logger = get_logger('test')
        logger.info('First')
        assert calls == ['hook1', 'hook2']

        clear_log_hooks()
        logger.info('Second')
        assert calls == ['hook1', 'hook2']

    def test_hook_exception_does_not_break_logging(self) -> None:
        calls: list[str] = []

        def bad_hook(event_dict: dict[str, Any]) -> None:
            raise RuntimeError('Hook failed')

        configure_logging(level='DEBUG', json_output=True)
        add_log_hook(bad_hook)
        add_log_hook(lambda _e: calls.append('good'))

        get_logger('test').info('Test')
        assert calls == ['good']

    def test_hook_receives_copy(self) -> None:
        def mutating_hook(event_dict: dict[str, Any]) -> None:
            event_dict['event'] = 'changed'

        seen: list[dict[str, Any]] = []
        configure_logging(level='DEBUG', json_output=True)
        add_log_hook(mutating_hook)
        add_log_hook(seen.append)

        get_logger('test').info('original')
        assert seen[0]['event'] == 'original'

    def test_console_output(self, capsys: pytest.CaptureFixture[str]) -> None:
        configure_logging(level='INFO', json_output=False)
        get_logger('console').warning('visible')
        assert 'visible' in capsys.readouterr().err


class TestLibraryEvents:
    """Debug events emitted by tracked-result itself."""

    def test_unparsed_frame(self, events, monkeypatch) -> None:
        monkeypatch.setattr(callsite_module.traceback, 'format_stack', lambda: ['garbage\n', 'this frame\n'])
        assert StackTextProvider().current() is None

        entries = named(events, 'callsite.unparsed')
        assert len(entries) == 1
        assert entries[0]['frame'] == 'garbage'
        assert entries[0]['level'] == 'debug'

    def test_unavailable_stack(self, events, monkeypatch) -> None:
        monkeypatch.setattr(callsite_module.traceback, 'format_stack', lambda: [])
        assert StackTextProvider().current() is None
        assert len(named(events, 'callsite.unavailable')) == 1

    def test_unwrap_failed(self, events) -> None:
        with pytest.raises(RuntimeError):
            unwrap(failure('e'))
        entries = named(events, 'result.unwrap_failed')
        assert entries[0]['error'] == "'e'"
        assert entries[0]['depth'] == 1

    def test_unwrap_error_failed(self, events) -> None:
        with pytest.raises(RuntimeError):
            unwrap_error(success(1))
        assert len(named(events, 'result.unwrap_error_failed')) == 1

    def test_decode_failed(self, events) -> None:
        with pytest.raises(ResultDecodeError):
            decode(b'[1')
        assert named(events, 'codec.decode_failed')[0]['protocol'] == 'json'

    def test_silent_without_configuration(self, capsys: pytest.CaptureFixture[str], monkeypatch) -> None:
        monkeypatch.setattr(callsite_module.traceback, 'format_stack', lambda: ['garbage\n', 'this frame\n'])
        assert StackTextProvider().current() is None
        captured = capsys.readouterr()
        assert 'callsite.unparsed' not in captured.out
        assert 'callsite.unparsed' not in captured.err

    def test_unwrap_log_payload_skipped_below_debug(self) -> None:
        rendered: list[str] = []

        class Loud:
            def __repr__(self) -> str:
                rendered.append('repr')
                return 'Loud()'

        configure_logging(level='INFO', json_output=True)
        with pytest.raises(RuntimeError):
            unwrap(failure(Loud()))
        with pytest.raises(RuntimeError):
            unwrap_error(success(Loud()))
        # Once per exception message, never for the log event.
        assert rendered == ['repr', 'repr']
