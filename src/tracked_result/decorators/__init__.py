"""Wrappers turning raised exceptions into traced Failures."""

from tracked_result.decorators.safe import attempt, attempt_async, safe, safe_async

__all__ = ['attempt', 'attempt_async', 'safe', 'safe_async']
