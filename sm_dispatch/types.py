"""Shared type aliases, rule rows and errors for the dispatcher."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable

State = int
Event = int

Predicate = Callable[[Event, Any], bool]
Action = Callable[[Any], None]


@dataclass(frozen=True, slots=True)
class Rule:
    """One row of a rule table.

    Attributes:
        state: State the rule applies to. Must be positive, 0 is reserved.
        predicate: ``(event, payload) -> bool``. A rule without a predicate
            never fires.
        action: Optional ``(payload) -> None`` run when the rule fires.
        next_state: State entered after the action runs.
    """

    state: State
    predicate: Predicate | None
    action: Action | None
    next_state: State

    def matches(self, event: Event, payload: Any) -> bool:
        return self.predicate is not None and bool(self.predicate(event, payload))


@dataclass(frozen=True, slots=True)
class Resolution:
    """Outcome of a single resolve step."""

    fired: bool
    rule: Rule | None
    from_guard: bool
    previous: State
    current: State


class DispatchError(Exception):
    """Base class for dispatcher errors."""


class AllocationError(DispatchError, MemoryError):
    """Raised when the state index cannot be built."""


class TableError(DispatchError, ValueError):
    """Raised when a rule table breaks the table contract."""

    def __init__(self, offset: int, message: str) -> None:
        self.offset = offset
        super().__init__(message)


class NotInitializedError(DispatchError, RuntimeError):
    """Raised when dispatching without a built index."""


class TransitoryLoopError(DispatchError, RuntimeError):
    """Raised when transitory re-entry does not settle within the step cap."""

    def __init__(self, state: State, steps: int) -> None:
        self.state = state
        self.steps = steps
        super().__init__(
            f"Transitory chain did not settle after {steps} steps (stuck at state {state})"
        )
