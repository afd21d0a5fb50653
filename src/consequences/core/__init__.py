"""
Core components of the consequences engine.

This package contains:
- bus: Event and Event Bus implementation
- inputs: InputValue and first-match lookup
- interfaces: Condition and Action capabilities
- variables: ReadOnly/ReadWrite variables with change listeners
- link / chain: the evaluation graph
- dispatcher: ChainDispatcher for event-triggered chains
"""

from consequences.core.bus import Event, EventBus, EventFilter
from consequences.core.inputs import InputValue, first_value, MISSING
from consequences.core.interfaces import Action, Condition
from consequences.core.variables import (
    ListenerHandle,
    ReadOnlyVariable,
    ReadWriteVariable,
    Variable,
)
from consequences.core.link import EvaluationTrace, Link
from consequences.core.chain import Chain
from consequences.core.models import ChainExecution, DispatcherConfig
from consequences.core.dispatcher import ChainDispatcher

__all__ = [
    "Event",
    "EventBus",
    "EventFilter",
    "InputValue",
    "first_value",
    "MISSING",
    "Action",
    "Condition",
    "ListenerHandle",
    "ReadOnlyVariable",
    "ReadWriteVariable",
    "Variable",
    "EvaluationTrace",
    "Link",
    "Chain",
    "ChainExecution",
    "DispatcherConfig",
    "ChainDispatcher",
]
