"""Dispatcher - rule resolution, guard fallback and transitory re-entry."""
from __future__ import annotations

import logging
from typing import Any, Callable, Iterable

from sm_dispatch import table
from sm_dispatch.config import DispatcherConfig
from sm_dispatch.types import (
    AllocationError,
    Event,
    NotInitializedError,
    Resolution,
    Rule,
    State,
    TransitoryLoopError,
)

logger = logging.getLogger(__name__)

TransitionHook = Callable[[State, State, Rule], None]


class Dispatcher:
    """Table-driven finite state machine.

    The rule table is grouped by state. An event is matched first against the
    current state's rules, then against the guard state's rules. The first
    rule whose predicate returns true runs its action and moves the machine
    to its ``next_state``, unless that is the guard state, which is only ever
    a matching scope.

    Not thread-safe: callers driving one dispatcher from several threads must
    serialize access themselves.
    """

    def __init__(
        self,
        rules: Iterable[Rule],
        initial_state: State,
        config: DispatcherConfig,
    ) -> None:
        if initial_state <= 0:
            raise ValueError(f"initial_state must be positive, got {initial_state}")
        if initial_state == config.guard_state:
            raise ValueError("initial_state cannot be the guard state")
        self._rules: tuple[Rule, ...] = tuple(rules)
        self._config = config
        self._current: State = initial_state
        self._index: dict[State, int] | None = None
        self._hooks: list[TransitionHook] = []

    @property
    def config(self) -> DispatcherConfig:
        return self._config

    @property
    def current_state(self) -> State:
        return self._current

    @property
    def guard_state(self) -> State:
        return self._config.guard_state

    @property
    def initialized(self) -> bool:
        return self._index is not None

    def initialize(self) -> None:
        """Validate the rule table and build the state index.

        Raises TableError for a malformed table and AllocationError if the
        index cannot be built. Calling it again rebuilds the index.
        """
        self._index = None
        table.validate_rules(self._rules)
        try:
            index = table.build_index(self._rules)
        except MemoryError as exc:
            raise AllocationError("Could not allocate the state index") from exc
        self._index = index
        logger.debug(
            "Indexed %d rules over %d states (guard=%s)",
            len(self._rules), len(index), self._config.guard_state,
        )

    def teardown(self) -> None:
        """Release the index. Safe to call repeatedly or before initialize."""
        self._index = None

    def on_transition(self, hook: TransitionHook) -> None:
        """Register ``hook(previous, current, rule)``, called after each fired rule."""
        self._hooks.append(hook)

    def rules_for(self, state: State) -> list[Rule]:
        return list(table.group(self._rules, self._require_index(), state))

    def resolve(self, event: Event, payload: Any = None) -> Resolution:
        """Resolve one event against the current state, then the guard state.

        At most one rule fires. A miss in both scopes leaves the state as is.
        """
        index = self._require_index()
        guard = self._config.guard_state
        previous = self._current

        from_guard = False
        rule = self._match(index, previous, event, payload)
        if rule is None:
            from_guard = True
            rule = self._match(index, guard, event, payload)
        if rule is None:
            logger.debug("No rule for event %s in state %s", event, previous)
            return Resolution(False, None, False, previous, previous)

        if rule.action is not None:
            rule.action(payload)
        if rule.next_state != guard:
            self._current = rule.next_state
        logger.debug(
            "Event %s: %s -> %s%s",
            event, previous, self._current, " (guard)" if from_guard else "",
        )
        for hook in self._hooks:
            hook(previous, self._current, rule)
        return Resolution(True, rule, from_guard, previous, self._current)

    def transition(self, event: Event, payload: Any = None) -> list[Resolution]:
        """Dispatch ``event`` and follow transitory states until the machine settles.

        Every re-entry uses the same event and payload. Returns the
        resolutions performed, external step first.
        """
        if event <= 0:
            raise ValueError(f"event must be positive, got {event}")
        steps = [self.resolve(event, payload)]
        limit = self._config.max_transitory_steps
        reentries = 0
        while self._config.is_transitory(self._current):
            if limit is not None and reentries >= limit:
                logger.warning(
                    "Transitory state %s did not settle after %d re-entries",
                    self._current, reentries,
                )
                raise TransitoryLoopError(self._current, reentries)
            steps.append(self.resolve(event, payload))
            reentries += 1
        return steps

    def _match(
        self, index: dict[State, int], state: State, event: Event, payload: Any,
    ) -> Rule | None:
        for rule in table.group(self._rules, index, state):
            if rule.matches(event, payload):
                return rule
        return None

    def _require_index(self) -> dict[State, int]:
        if self._index is None:
            raise NotInitializedError("Dispatcher is not initialized")
        return self._index
