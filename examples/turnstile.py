"""Turnstile -- a coin-operated gate driven by a rule table.

Demonstrates:
- Declaring states and events as IntEnums starting at 1
- A guard-state rule that handles an event from every state
- A transitory state that does bookkeeping and falls straight through
- Observing transitions with an on_transition hook

Run: python -m examples.turnstile
"""

from enum import IntEnum

from sm_dispatch import Dispatcher, DispatcherConfig, Rule


class State(IntEnum):
    LOCKED = 1
    UNLOCKED = 2
    AUDIT = 3
    GUARD = 4


class Event(IntEnum):
    COIN = 1
    PUSH = 2
    KICK = 3


def event_is(expected: Event):
    return lambda event, till: event == expected


def main() -> None:
    print("=== Turnstile ===\n")

    till = {"coins": 0, "passes": 0, "alarms": 0}

    rules = [
        # The guard group catches KICK in any state.
        Rule(State.GUARD, event_is(Event.KICK),
             lambda t: t.update(alarms=t["alarms"] + 1), State.LOCKED),
        Rule(State.LOCKED, event_is(Event.COIN),
             lambda t: t.update(coins=t["coins"] + 1), State.UNLOCKED),
        Rule(State.UNLOCKED, event_is(Event.PUSH), None, State.AUDIT),
        # AUDIT is transitory: it counts the pass and relocks immediately.
        Rule(State.AUDIT, lambda event, t: True,
             lambda t: t.update(passes=t["passes"] + 1), State.LOCKED),
    ]

    config = DispatcherConfig(guard_state=State.GUARD, transitory_states={State.AUDIT})
    machine = Dispatcher(rules, State.LOCKED, config)
    machine.on_transition(
        lambda old, new, rule: print(f"  {State(old).name:>8} -> {State(new).name}")
    )
    machine.initialize()

    for event in (Event.PUSH, Event.COIN, Event.PUSH, Event.COIN, Event.KICK):
        print(f"{event.name}:")
        machine.transition(event, till)

    machine.teardown()
    print(f"\nDone. {till}")


if __name__ == "__main__":
    main()
