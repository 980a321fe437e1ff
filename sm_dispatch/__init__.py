"""sm-dispatch - Table-driven finite state machine dispatcher."""
from __future__ import annotations

from sm_dispatch.config import DispatcherConfig
from sm_dispatch.dispatcher import Dispatcher
from sm_dispatch.types import (
    AllocationError,
    DispatchError,
    Event,
    NotInitializedError,
    Resolution,
    Rule,
    State,
    TableError,
    TransitoryLoopError,
)

__all__ = [
    "Dispatcher",
    "DispatcherConfig",
    "Rule",
    "Resolution",
    "State",
    "Event",
    "DispatchError",
    "AllocationError",
    "TableError",
    "NotInitializedError",
    "TransitoryLoopError",
]
