"""Fixtures for history contexts.

Two kinds of context are provided:
- Counter: a tracked object whose mutators register their own inverses
- Recorder: a passive object that only logs which commands were replayed
"""

from typing import Any

import pytest

from historian import Historian


class Counter:
    """Integer counter that records the inverse of every mutation."""

    def __init__(self, capacity: int = 10, value: int = 0) -> None:
        self.value = value
        self.history = Historian(self, capacity)

    def increment(self, amount: int = 1) -> None:
        self.value += amount
        self.history.register(Counter.decrement, amount)

    def decrement(self, amount: int = 1) -> None:
        self.value -= amount
        self.history.register(Counter.increment, amount)

    def set(self, value: int) -> None:
        previous = self.value
        self.value = value
        self.history.register(Counter.set, previous)

    def add(self, amount: int) -> None:
        self.value += amount
        self.history.register(self.subtract, amount)

    def subtract(self, amount: int) -> None:
        self.value -= amount
        self.history.register(self.add, amount)


class Recorder:
    """Context that remembers every call made against it."""

    def __init__(self) -> None:
        self.calls: list[tuple[str, tuple[Any, ...]]] = []

    def command(self, label: str):
        """Create a command that appends ``(label, args)`` to this recorder."""
        return record(self, label)


def record(recorder: Recorder, label: str):
    """Create a closure that appends ``(label, args)`` to a Recorder."""

    def command(*args: Any) -> None:
        recorder.calls.append((label, args))

    command.__qualname__ = f"record_{label}"
    return command


def create_counter(capacity: int = 10, value: int = 0) -> Counter:
    """Create a Counter with its own Historian.

    Args:
        capacity: History capacity per stack.
        value: Starting value.

    Returns:
        Counter instance ready for testing.
    """
    return Counter(capacity=capacity, value=value)


def create_historian(context: Any = None, capacity: int = 10) -> Historian:
    """Create a Historian over the given context.

    Args:
        context: Replay context (defaults to a fresh Recorder).
        capacity: History capacity per stack.

    Returns:
        Historian instance ready for testing.
    """
    if context is None:
        context = Recorder()
    return Historian(context, capacity)


@pytest.fixture
def counter():
    """Provide a Counter at zero with default capacity."""
    return create_counter()


@pytest.fixture
def recorder():
    """Provide an empty Recorder."""
    return Recorder()


@pytest.fixture
def historian(recorder):
    """Provide a Historian bound to the recorder fixture."""
    return create_historian(recorder)
