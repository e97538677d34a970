"""Shared fixtures for query-modifier tests."""

from __future__ import annotations

from typing import Any

import pytest


class RecordingQuery:
    """Fluent builder double recording every call in order."""

    def __init__(self, *methods: str) -> None:
        self.calls: list[tuple[str, Any]] = []
        for name in methods:
            setattr(self, name, self._recorder(name))

    def _recorder(self, name: str) -> Any:
        def _call(value: Any) -> RecordingQuery:
            self.calls.append((name, value))
            return self

        return _call

    def called(self, name: str) -> list[Any]:
        return [value for method, value in self.calls if method == name]


BUILTIN_METHODS = ("sort", "skip", "limit", "select", "populate")


@pytest.fixture
def query() -> RecordingQuery:
    """Builder exposing every built-in operator method."""
    return RecordingQuery(*BUILTIN_METHODS)


@pytest.fixture
def make_query() -> type[RecordingQuery]:
    """Factory for builders exposing only the given methods."""
    return RecordingQuery
