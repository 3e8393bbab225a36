"""Failure factory living in its own file, for skip-path tests."""

from tracked_result import failure


def make_failure(error):
    return failure(error)
