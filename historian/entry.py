"""History entry model.

This module provides the unit of recorded history:
- is_sequence: Decides whether a value is already an ordered argument list
- normalize_args: Turns whatever the caller passed as ``args`` into a tuple
- is_receiver_method: Decides whether a command needs the context as self
- HistoryEntry: An immutable (command, args) pair replayed against a context
"""

import inspect
from typing import Any, Callable

from pydantic import BaseModel, Field, field_validator


def is_sequence(value: Any) -> bool:
    """Check whether a value is an ordered argument sequence.

    Only lists and tuples qualify. Strings and bytes are sequences in the
    Python sense but are treated as single argument values here.

    Args:
        value: The value to inspect.

    Returns:
        True if the value is a list or tuple.
    """
    return isinstance(value, (list, tuple))


def normalize_args(args: Any) -> tuple[Any, ...]:
    """Normalize ``args`` into a tuple of positional arguments.

    Args:
        args: A list/tuple of arguments, or a single bare argument value.

    Returns:
        The arguments as a tuple. A bare value becomes a one-element tuple.
    """
    if is_sequence(args):
        return tuple(args)
    return (args,)


def is_receiver_method(command: Any, context: Any) -> bool:
    """Check whether a command is an unbound method of the context's class.

    Static methods, class methods and bound methods do not qualify.

    Args:
        command: The registered callable.
        context: The receiver object the history is tracking.

    Returns:
        True if the command must be called with the context as ``self``.
    """
    name = getattr(command, "__name__", None)
    if name is None or getattr(command, "__self__", None) is not None:
        return False
    return inspect.getattr_static(type(context), name, None) is command


class HistoryEntry(BaseModel):
    """A recorded operation that can be replayed against a context.

    Entries are created by Historian.register() and consumed by undo()/redo().
    Unbound methods of the context's class are replayed as
    ``command(context, *args)``; any other callable as ``command(*args)``.

    Args:
        command: Callable invoked on replay.
        args: Positional arguments passed on replay.

    Examples:
        # Record how to reverse "counter.increment(5)"
        HistoryEntry(command=Counter.decrement, args=[5])

        # A single bare value is wrapped
        HistoryEntry(command=Counter.decrement, args=5).args == (5,)
    """

    command: Callable[..., Any] = Field(description="Callable invoked on replay")
    args: tuple[Any, ...] = Field(
        default_factory=tuple,
        description="Positional arguments passed on replay",
    )

    class Config:
        frozen = True

    @field_validator("args", mode="before")
    @classmethod
    def validate_args(cls, v: Any) -> tuple[Any, ...]:
        """Wrap a bare argument value into a one-element tuple.

        Args:
            v: The raw args value.

        Returns:
            The arguments as a tuple.
        """
        return normalize_args(v)

    @property
    def name(self) -> str:
        """Readable name of the command, used in logs and summaries."""
        return getattr(
            self.command,
            "__qualname__",
            getattr(self.command, "__name__", repr(self.command)),
        )

    def invoke(self, context: Any) -> Any:
        """Call the command against the context.

        Plain functions defined on the context's class (``Counter.decrement``)
        receive the context as ``self``. Bound methods, closures and other
        callables already carry their receiver and get only the args.

        Args:
            context: The receiver object the history is tracking.

        Returns:
            Whatever the command returns.
        """
        if is_receiver_method(self.command, context):
            return self.command(context, *self.args)
        return self.command(*self.args)

    def to_summary(self) -> dict[str, Any]:
        """Summarize this entry for inspection.

        Returns:
            Dict with the command name and the repr of each argument.
        """
        return {
            "command": self.name,
            "args": [repr(arg) for arg in self.args],
        }
