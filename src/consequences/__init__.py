"""
consequences: an event-driven home automation rule engine.

This library provides the evaluation core for device automation:
- Chains of conditional links triggered by events
- Read-only and read-write variables with change notification
- Condition and action capabilities supplied by addons
- An Event Bus and a fire-and-forget chain dispatcher
"""

from consequences.core.bus import Event, EventBus, EventFilter
from consequences.core.inputs import InputValue
from consequences.core.interfaces import Action, Condition
from consequences.core.variables import ReadOnlyVariable, ReadWriteVariable, Variable
from consequences.core.link import Link
from consequences.core.chain import Chain
from consequences.core.dispatcher import ChainDispatcher

__version__ = "0.1.0"

__all__ = [
    "Event",
    "EventBus",
    "EventFilter",
    "InputValue",
    "Action",
    "Condition",
    "ReadOnlyVariable",
    "ReadWriteVariable",
    "Variable",
    "Link",
    "Chain",
    "ChainDispatcher",
]
