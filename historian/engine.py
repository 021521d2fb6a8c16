"""History engine.

This module contains the Historian, a bounded two-stack undo/redo manager
over caller-supplied inverse operations.

The Historian does not know what changed. Inside every mutating operation the
caller registers the operation that reverses it. undo() replays those inverse
operations; while one runs, any registration it makes lands on the redo stack,
which is what makes redo() possible (and vice versa).
"""

import logging
from enum import Enum
from typing import Any, Callable, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from historian.entry import HistoryEntry, normalize_args

logger = logging.getLogger(__name__)

DEFAULT_CAPACITY = 10


class HistoryTarget(str, Enum):
    """Stack that the next registration is appended to."""

    UNDO = "undo"
    REDO = "redo"

    @property
    def opposite(self) -> "HistoryTarget":
        """The other stack."""
        if self is HistoryTarget.UNDO:
            return HistoryTarget.REDO
        return HistoryTarget.UNDO


class Historian(BaseModel):
    """Bounded undo/redo history over caller-supplied commands.

    Each registered entry is a callable plus its arguments. Unbound methods of
    the context's class are replayed as ``command(context, *args)``, bound
    methods and closures as ``command(*args)``. The engine keeps two LIFO
    stacks and a next-target flag:

    - register() appends to the stack named by next_target, then resets the
      flag to UNDO
    - undo() pops from the undo stack and sets the flag to REDO before each
      replay, so a registration made by the replayed command lands on redo
    - redo() is the mirror image

    A stack that already holds ``capacity`` entries drops its oldest entry on
    the next registration. A stack that is *at* capacity refuses undo()/redo()
    entirely; that guard is kept as-is. Likewise the flag is left on the
    opposite stack after replaying a command that never registers, so the
    caller's next registration lands there.

    Args:
        context: Object every command is invoked against.
        capacity: Maximum entries per stack (default 10).

    Examples:
        class Counter:
            def __init__(self):
                self.value = 0
                self.history = Historian(self)

            def increment(self, amount=1):
                self.value += amount
                self.history.register(Counter.decrement, amount)

            def decrement(self, amount=1):
                self.value -= amount
                self.history.register(Counter.increment, amount)

        counter = Counter()
        counter.increment(5)
        counter.history.undo()  # value == 0
        counter.history.redo()  # value == 5
    """

    context: Any = Field(default=None, description="Object commands are invoked against")
    capacity: Optional[int] = Field(
        default=DEFAULT_CAPACITY, description="Maximum number of entries per stack"
    )
    undo_entries: list[HistoryEntry] = Field(
        default_factory=list,
        description="Entries available for undo (most recent at end)",
    )
    redo_entries: list[HistoryEntry] = Field(
        default_factory=list,
        description="Entries available for redo (most recent at end)",
    )
    next_target: HistoryTarget = Field(
        default=HistoryTarget.UNDO,
        description="Stack the next registration is appended to",
    )

    class Config:
        arbitrary_types_allowed = True
        use_enum_values = False

    def __init__(self, context: Any = None, capacity: Optional[int] = DEFAULT_CAPACITY, **data):
        """Allow ``Historian(context, capacity)`` positional construction."""
        super().__init__(context=context, capacity=capacity, **data)

    @field_validator("capacity")
    @classmethod
    def validate_capacity(cls, v: Optional[int]) -> int:
        """Fall back to the default for a missing capacity, reject negatives.

        Args:
            v: The capacity value.

        Returns:
            The validated capacity.

        Raises:
            ValueError: If capacity is negative.
        """
        if not v:
            return DEFAULT_CAPACITY
        if v < 0:
            raise ValueError("capacity must be positive")
        return v

    @model_validator(mode="after")
    def trim_entries_to_capacity(self) -> "Historian":
        """Trim stacks passed in at construction down to capacity.

        Keeps the most recent entries.

        Returns:
            The validated Historian.
        """
        if len(self.undo_entries) > self.capacity:
            self.undo_entries = self.undo_entries[-self.capacity :]
        if len(self.redo_entries) > self.capacity:
            self.redo_entries = self.redo_entries[-self.capacity :]
        return self

    # ===== Inspection =====

    @property
    def undo_count(self) -> int:
        """Number of entries on the undo stack."""
        return len(self.undo_entries)

    @property
    def redo_count(self) -> int:
        """Number of entries on the redo stack."""
        return len(self.redo_entries)

    @property
    def can_undo(self) -> bool:
        """Check whether undo() would replay at least one entry.

        Returns:
            True if the undo stack is non-empty and below capacity.
        """
        return 0 < len(self.undo_entries) < self.capacity

    @property
    def can_redo(self) -> bool:
        """Check whether redo() would replay at least one entry.

        Returns:
            True if the redo stack is non-empty and below capacity.
        """
        return 0 < len(self.redo_entries) < self.capacity

    def peek_undo(self, count: int = 1) -> list[HistoryEntry]:
        """Peek at the most recent undo entries without removing them.

        Args:
            count: Number of entries to peek (default: 1).

        Returns:
            List of HistoryEntry objects, most recent first.

        Raises:
            ValueError: If count is not positive.
        """
        return self._peek(self.undo_entries, count)

    def peek_redo(self, count: int = 1) -> list[HistoryEntry]:
        """Peek at the most recent redo entries without removing them.

        Args:
            count: Number of entries to peek (default: 1).

        Returns:
            List of HistoryEntry objects, most recent first.

        Raises:
            ValueError: If count is not positive.
        """
        return self._peek(self.redo_entries, count)

    def get_undo_summary(self) -> list[dict[str, Any]]:
        """Summaries of the undo stack, most recent first."""
        return [entry.to_summary() for entry in reversed(self.undo_entries)]

    def get_redo_summary(self) -> list[dict[str, Any]]:
        """Summaries of the redo stack, most recent first."""
        return [entry.to_summary() for entry in reversed(self.redo_entries)]

    def clear(self) -> "Historian":
        """Drop both stacks and point the next registration at undo."""
        self.undo_entries.clear()
        self.redo_entries.clear()
        self.next_target = HistoryTarget.UNDO
        logger.debug("History cleared")
        return self

    # ===== Recording and replay =====

    def register(self, command: Callable[..., Any], args: Any = ()) -> "Historian":
        """Record the operation that reverses the one currently running.

        The entry goes onto the stack named by next_target, which is the undo
        stack unless a redo()/undo() replay is in progress. The command is not
        called here.

        Args:
            command: Callable replayed against the context on undo()/redo().
            args: Argument list, or a single bare argument value.

        Returns:
            This Historian, for chaining.
        """
        entry = HistoryEntry(command=command, args=normalize_args(args))
        target = self.next_target
        stack = self._stack(target)

        if len(stack) >= self.capacity:
            evicted = stack.pop(0)
            logger.debug(f"Evicted oldest {target.value} entry {evicted.name}")

        stack.append(entry)
        self.next_target = HistoryTarget.UNDO

        logger.debug(
            f"Registered {entry.name} on {target.value} stack "
            f"({len(stack)}/{self.capacity})"
        )
        return self

    def undo(self, levels: Optional[int] = 1) -> "Historian":
        """Replay the most recent undo entries.

        Args:
            levels: Number of entries to replay. Clamped to what is available.

        Returns:
            This Historian, for chaining.
        """
        self._replay(HistoryTarget.UNDO, levels)
        return self

    def redo(self, levels: Optional[int] = 1) -> "Historian":
        """Replay the most recent redo entries.

        Args:
            levels: Number of entries to replay. Clamped to what is available.

        Returns:
            This Historian, for chaining.
        """
        self._replay(HistoryTarget.REDO, levels)
        return self

    # ===== Internals =====

    def _stack(self, target: HistoryTarget) -> list[HistoryEntry]:
        if target is HistoryTarget.UNDO:
            return self.undo_entries
        return self.redo_entries

    def _peek(self, stack: list[HistoryEntry], count: int) -> list[HistoryEntry]:
        if count <= 0:
            raise ValueError("count must be positive")
        return list(reversed(stack[-count:]))

    def _replay(self, source: HistoryTarget, levels: Optional[int]) -> int:
        """Pop and invoke up to ``levels`` entries from the source stack.

        Entries popped before a failing command stay consumed; the exception
        propagates and the remaining levels never run.

        Returns:
            Number of entries replayed.
        """
        stack = self._stack(source)
        levels = levels or 1
        levels = min(levels, len(stack))

        if len(stack) >= self.capacity:
            # Full stack: replay is refused outright, not capped
            logger.debug(
                f"{source.value} refused: stack at capacity "
                f"({len(stack)}/{self.capacity})"
            )
            return 0

        if levels <= 0:
            logger.debug(f"Nothing to {source.value}")
            return 0

        replayed = 0
        for _ in range(levels):
            entry = stack.pop()
            self.next_target = source.opposite
            try:
                entry.invoke(self.context)
            except Exception:
                logger.error(
                    f"{source.value} of {entry.name} failed after "
                    f"{replayed} of {levels} entries",
                    exc_info=True,
                )
                raise
            replayed += 1
            logger.debug(f"{source.value}: replayed {entry.name}")

        return replayed
