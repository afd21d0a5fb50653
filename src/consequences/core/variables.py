"""
Variables: named state cells with change notification.

A ReadOnlyVariable holds its starting value forever. A ReadWriteVariable can
be updated and notifies its change listeners after every update.

Notification model:
    Every update stores the value first, then queues a notification round.
    Rounds are delivered by one delivery loop per variable, run by the task
    that found no delivery in progress. Each round works on a snapshot of the
    listener list taken when the round starts.

    A listener that updates its own variable runs inside the delivering task,
    so its round is folded into that delivery and the call returns at once.
    Any other task that writes while a delivery is running waits on its own
    round, and only that round's listener failures are raised to it.

    A listener that updates its own variable never deadlocks, and every
    listener sees the first value before any listener sees the second.
"""

import asyncio
import inspect
import logging
from abc import ABC, abstractmethod
from collections import deque
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Awaitable, Callable, Deque, List, Optional, Union

from consequences.errors import ListenerFailure

if TYPE_CHECKING:
    from consequences.core.bus import Event
    from consequences.core.interfaces import Condition

logger = logging.getLogger(__name__)


ChangeListener = Callable[[Any], Optional[Awaitable[None]]]


@dataclass(frozen=True, eq=False)
class ListenerHandle:
    """
    Token for one listener registration.

    Returned by ``add_change_event_listener``. Removing by handle removes
    exactly this registration, even when the same callable was registered
    more than once.
    """

    listener: ChangeListener


@dataclass(eq=False)
class _Round:
    """A queued notification. ``waiter`` is set when another task awaits it."""

    value: Any
    waiter: Optional["asyncio.Future[bool]"] = None
    task: Optional["asyncio.Task[Any]"] = None
    errors: List[BaseException] = field(default_factory=list)


class Variable(ABC):
    """
    Base class for variables.

    Attributes:
        unique_id: Identifier of the variable
        name: Human-readable name
        starting_value: Value the variable was created with
        conditions: Conditions describing when the variable may change
            (informational, never evaluated by the variable)
        events: Events associated with the variable (informational)
    """

    def __init__(
        self,
        unique_id: str,
        name: str,
        starting_value: Any,
        conditions: Optional[List["Condition"]] = None,
        events: Optional[List["Event"]] = None,
    ) -> None:
        self.unique_id = unique_id
        self.name = name
        self.starting_value = starting_value
        self.conditions: List["Condition"] = conditions if conditions is not None else []
        self.events: List["Event"] = events if events is not None else []

    @property
    @abstractmethod
    def is_writable(self) -> bool:
        """Whether update_value is supported."""
        pass

    @abstractmethod
    async def retrieve_value(self) -> Any:
        """Return the current value."""
        pass

    def __repr__(self) -> str:
        return f"{type(self).__name__}(unique_id={self.unique_id!r}, name={self.name!r})"


class ReadOnlyVariable(Variable):
    """A variable whose value never changes."""

    @property
    def is_writable(self) -> bool:
        return False

    async def retrieve_value(self) -> Any:
        return self.starting_value


class ReadWriteVariable(Variable):
    """
    A mutable variable with change listeners.

    Listeners are called with the new value, in registration order. A
    listener may be a plain callable or a coroutine function.
    """

    def __init__(
        self,
        unique_id: str,
        name: str,
        starting_value: Any,
        conditions: Optional[List["Condition"]] = None,
        events: Optional[List["Event"]] = None,
    ) -> None:
        super().__init__(unique_id, name, starting_value, conditions, events)
        self._value = starting_value
        self._registrations: List[ListenerHandle] = []
        self._pending: Deque[_Round] = deque()
        self._delivering = False
        self._deliverer: Optional["asyncio.Task[Any]"] = None

    @property
    def is_writable(self) -> bool:
        return True

    @property
    def listener_count(self) -> int:
        """Number of active registrations (duplicates counted separately)."""
        return len(self._registrations)

    async def retrieve_value(self) -> Any:
        return self._value

    async def update_value(self, new_value: Any) -> None:
        """
        Store a new value and notify listeners.

        The value is visible to ``retrieve_value`` as soon as this is called.
        If another task is delivering, this call queues its round behind the
        current one and waits until it has been delivered. A listener that
        updates its own variable has its round folded into the delivery it
        runs in, and returns without waiting.

        Args:
            new_value: The value to store

        Raises:
            ListenerFailure: If any listener raised during a round this call
                is answerable for. The value is kept and every other listener
                was still notified.
        """
        self._value = new_value
        current = asyncio.current_task()

        if self._delivering and current is self._deliverer:
            self._pending.append(_Round(new_value))
            logger.debug(f"Queued nested notification for {self.unique_id}")
            return

        if self._delivering:
            waiter = asyncio.get_running_loop().create_future()
            queued = _Round(new_value, waiter=waiter, task=current)
            self._pending.append(queued)
            logger.debug(f"Queued notification for {self.unique_id} (delivery in progress)")

            try:
                delivered = await waiter
            except asyncio.CancelledError:
                if self._deliverer is current:
                    self._release()
                raise

            if delivered:
                if queued.errors:
                    raise ListenerFailure(self.unique_id, queued.errors)
                return
            logger.debug(f"Taking over notification delivery for {self.unique_id}")
        else:
            self._pending.append(_Round(new_value))
            self._delivering = True
            self._deliverer = current

        errors: List[BaseException] = []
        try:
            while self._pending:
                queued = self._pending.popleft()
                round_errors = await self._notify(queued.value)
                if queued.waiter is None:
                    errors.extend(round_errors)
                elif not queued.waiter.done():
                    queued.errors = round_errors
                    queued.waiter.set_result(True)
        finally:
            self._release()

        if errors:
            raise ListenerFailure(self.unique_id, errors)

    def _release(self) -> None:
        """End the current delivery, handing leftover rounds to a waiting writer."""
        self._delivering = False
        self._deliverer = None

        for queued in self._pending:
            if queued.waiter is not None and not queued.waiter.done():
                waiter, queued.waiter = queued.waiter, None
                self._delivering = True
                self._deliverer = queued.task
                waiter.set_result(False)
                return

    async def _notify(self, value: Any) -> List[BaseException]:
        """Deliver one round to a snapshot of the current listeners."""
        registrations = list(self._registrations)
        logger.debug(f"Notifying {len(registrations)} listener(s) of {self.unique_id} change")

        errors: List[BaseException] = []
        for registration in registrations:
            try:
                result = registration.listener(value)
                if inspect.isawaitable(result):
                    await result
            except Exception as e:
                logger.error(
                    f"Error in change listener for variable {self.unique_id}: {e}",
                    exc_info=True,
                )
                errors.append(e)
        return errors

    def add_change_event_listener(self, listener: ChangeListener) -> ListenerHandle:
        """
        Register a change listener.

        Registering the same listener twice stores two registrations, and it
        is then called twice per update.

        Args:
            listener: Callable receiving the new value

        Returns:
            Handle that removes exactly this registration
        """
        handle = ListenerHandle(listener)
        self._registrations.append(handle)
        return handle

    def remove_change_event_listener(self, listener: Union[ListenerHandle, ChangeListener]) -> None:
        """
        Remove a change listener.

        Passing a handle removes that registration only. Passing the listener
        itself removes every registration of it. Unknown listeners are ignored.

        Args:
            listener: A handle or a previously registered listener
        """
        if isinstance(listener, ListenerHandle):
            self._registrations = [r for r in self._registrations if r is not listener]
        else:
            self._registrations = [r for r in self._registrations if r.listener != listener]
