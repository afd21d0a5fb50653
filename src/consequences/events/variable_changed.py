"""
Event fired when a variable's value changes.
"""

import logging
from datetime import datetime
from typing import TYPE_CHECKING, Any, Optional

from consequences.core.bus import Event
from consequences.core.variables import ListenerHandle, ReadWriteVariable, Variable

if TYPE_CHECKING:
    from consequences.core.bus import EventBus

logger = logging.getLogger(__name__)


class VariableValueChangedEvent(Event):
    """
    An event associated with one variable.

    Once bound to a bus, every update of a read-write variable publishes
    this event, which in turn dispatches the chains that start with it.
    Read-only variables never change, so binding them does nothing.
    """

    def __init__(
        self,
        unique_id: str,
        variable: Variable,
        last_triggered: Optional[datetime] = None,
    ) -> None:
        super().__init__(unique_id=unique_id, last_triggered=last_triggered)
        self.variable = variable
        self._bus: Optional["EventBus"] = None
        self._handle: Optional[ListenerHandle] = None

    @property
    def is_bound(self) -> bool:
        return self._handle is not None

    def bind(self, bus: "EventBus") -> None:
        """
        Publish this event on the bus whenever the variable changes.

        Args:
            bus: EventBus to publish on
        """
        if self._handle is not None:
            self.unbind()

        if not isinstance(self.variable, ReadWriteVariable):
            logger.debug(f"Not binding {self.unique_id}: {self.variable.unique_id} is read-only")
            return

        self._bus = bus
        self._handle = self.variable.add_change_event_listener(self._on_value_changed)
        logger.debug(f"Bound {self.unique_id} to changes of {self.variable.unique_id}")

    def unbind(self) -> None:
        """Stop publishing on variable changes."""
        if self._handle is None:
            return
        if isinstance(self.variable, ReadWriteVariable):
            self.variable.remove_change_event_listener(self._handle)
        self._handle = None
        self._bus = None

    def _on_value_changed(self, new_value: Any) -> None:
        if self._bus is None:
            return
        logger.debug(f"{self.variable.unique_id} changed to {new_value!r}, firing {self.unique_id}")
        self._bus.publish(self)

    def __repr__(self) -> str:
        return (
            f"VariableValueChangedEvent(unique_id={self.unique_id!r}, "
            f"variable={self.variable.unique_id!r})"
        )
