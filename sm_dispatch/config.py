"""Dispatcher configuration dataclass."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable

from sm_dispatch.types import State


@dataclass(frozen=True)
class DispatcherConfig:
    """Immutable configuration for a dispatcher.

    Attributes:
        guard_state: Fallback rule scope. Never becomes the current state.
        transitory_states: States that are re-dispatched with the same event
            until a non-transitory state is reached.
        max_transitory_steps: Cap on automatic re-dispatches per transition
            (None for no cap).
    """

    guard_state: State
    transitory_states: Iterable[State] = field(default_factory=frozenset)
    max_transitory_steps: int | None = 1000

    def __post_init__(self) -> None:
        if self.guard_state <= 0:
            raise ValueError(f"guard_state must be positive, got {self.guard_state}")
        # Frozen: normalize through object.__setattr__.
        transitory = frozenset(self.transitory_states)
        object.__setattr__(self, "transitory_states", transitory)
        for state in transitory:
            if state <= 0:
                raise ValueError(f"transitory states must be positive, got {state}")
        if self.guard_state in transitory:
            raise ValueError("guard_state cannot be transitory")
        if self.max_transitory_steps is not None and self.max_transitory_steps < 1:
            raise ValueError(
                f"max_transitory_steps must be >= 1, got {self.max_transitory_steps}"
            )

    def is_transitory(self, state: State) -> bool:
        return state in self.transitory_states
