"""
Chain dispatcher - starts chains when their starting event fires.

Dispatch is fire-and-forget: the event source never waits for chains to
complete, and failures stop here instead of reaching the event source.
"""

import asyncio
import logging
from collections import deque
from datetime import datetime, UTC
from typing import TYPE_CHECKING, Any, Deque, Dict, List, Optional, Set

from .bus import Event
from .chain import Chain
from .link import EvaluationTrace
from .models import ChainExecution, DispatcherConfig

if TYPE_CHECKING:
    from .bus import EventBus

logger = logging.getLogger(__name__)


class ChainDispatcher:
    """
    Registry of chains keyed by starting event, and their dispatcher.

    Responsibilities:
    - Map events to the chains they start
    - Run each triggered chain as an independent asyncio task
    - Contain chain failures at the dispatch boundary
    - Track execution history

    Chains sharing an event are started in registration order, but they run
    concurrently and no completion order is guaranteed.
    """

    def __init__(self, config: Optional[DispatcherConfig] = None) -> None:
        self._config = config or DispatcherConfig()

        # Chains by starting event id
        self._chains: Dict[str, List[Chain]] = {}

        # In-flight dispatches
        self._tasks: Set[asyncio.Task] = set()

        # Execution history (ring buffer)
        self._history: Deque[ChainExecution] = deque(maxlen=self._config.history_size)

        self._bus: Optional["EventBus"] = None

    @property
    def config(self) -> DispatcherConfig:
        return self._config

    # =========================================================================
    # Bus wiring
    # =========================================================================

    def attach(self, bus: "EventBus") -> None:
        """
        Subscribe to every event on the bus.

        Args:
            bus: EventBus instance
        """
        if self._bus is not None:
            self.detach()
        bus.subscribe(self.dispatch)
        self._bus = bus
        logger.info("ChainDispatcher attached to event bus")

    def detach(self) -> None:
        """Unsubscribe from the bus, if attached."""
        if self._bus is None:
            return
        self._bus.unsubscribe(self.dispatch)
        self._bus = None

    # =========================================================================
    # Registration
    # =========================================================================

    def register_chain(self, chain: Chain) -> None:
        """
        Register a chain under its starting event.

        Args:
            chain: The chain to register
        """
        event_id = chain.starting_event.unique_id
        self._chains.setdefault(event_id, []).append(chain)
        logger.info(f"Registered chain {chain.id} for event {event_id}")

    def unregister_chain(self, chain: Chain) -> bool:
        """
        Remove a chain.

        Dispatches already running are not affected.

        Args:
            chain: The chain to remove

        Returns:
            True if the chain was registered, False otherwise
        """
        event_id = chain.starting_event.unique_id
        chains = self._chains.get(event_id, [])
        remaining = [c for c in chains if c is not chain]

        if len(remaining) == len(chains):
            return False

        if remaining:
            self._chains[event_id] = remaining
        else:
            self._chains.pop(event_id, None)
        logger.info(f"Unregistered chain {chain.id} from event {event_id}")
        return True

    def chains_for(self, event_id: str) -> List[Chain]:
        """Get the chains started by an event."""
        return list(self._chains.get(event_id, []))

    def all_chains(self) -> List[Chain]:
        """Get every registered chain."""
        return [chain for chains in self._chains.values() for chain in chains]

    # =========================================================================
    # Dispatch
    # =========================================================================

    def dispatch(self, event: Event) -> List[asyncio.Task]:
        """
        Start every chain registered for an event.

        Must be called with a running event loop. Returns immediately.

        Args:
            event: The event that fired

        Returns:
            One task per started chain
        """
        chains = self.chains_for(event.unique_id)
        if not chains:
            logger.debug(f"No chains for event {event.unique_id}")
            return []

        loop = asyncio.get_running_loop()
        tasks = []
        for chain in chains:
            task = loop.create_task(
                self.run_chain(chain, event),
                name=f"chain:{chain.id}",
            )
            self._tasks.add(task)
            task.add_done_callback(self._tasks.discard)
            tasks.append(task)

        logger.debug(f"Dispatched {len(tasks)} chain(s) for event {event.unique_id}")
        return tasks

    async def run_chain(self, chain: Chain, event: Optional[Event] = None) -> ChainExecution:
        """
        Evaluate a chain to completion and record the execution.

        Failures are logged and recorded, never raised.

        Args:
            chain: The chain to evaluate
            event: Event that triggered the chain (None for manual runs)

        Returns:
            The execution record
        """
        start_time = datetime.now(UTC)
        trace = EvaluationTrace(
            detect_cycles=self._config.detect_cycles,
            max_depth=self._config.max_depth,
        )
        success = True
        error = None

        try:
            await chain.evaluate(trace)
        except Exception as e:
            success = False
            error = str(e)
            logger.error(f"Error evaluating chain {chain.id}: {e}", exc_info=True)

        end_time = datetime.now(UTC)
        duration_ms = int((end_time - start_time).total_seconds() * 1000)

        execution = ChainExecution(
            chain_id=chain.id,
            event_id=event.unique_id if event else None,
            links_evaluated=list(trace.links_evaluated),
            actions_performed=trace.actions_performed,
            conditions_evaluated=trace.conditions_evaluated,
            branches_taken=trace.branches_taken,
            success=success,
            error=error,
            timestamp=start_time,
            duration_ms=duration_ms,
        )
        self._history.append(execution)
        return execution

    @property
    def pending(self) -> int:
        """Number of dispatched chains still running."""
        return len(self._tasks)

    async def wait_idle(self) -> None:
        """
        Wait until no dispatched chain is running.

        Chains dispatched while waiting (for example by variable changes made
        inside a chain) are waited for as well.
        """
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    # =========================================================================
    # History
    # =========================================================================

    def get_history(
        self,
        chain_id: Optional[str] = None,
        event_id: Optional[str] = None,
        limit: int = 20,
    ) -> List[ChainExecution]:
        """
        Get execution history.

        Args:
            chain_id: Filter by chain (optional)
            event_id: Filter by triggering event (optional)
            limit: Maximum entries to return

        Returns:
            List of ChainExecution records (newest first)
        """
        result = []
        for execution in reversed(self._history):
            if chain_id and execution.chain_id != chain_id:
                continue
            if event_id and execution.event_id != event_id:
                continue
            result.append(execution)
            if len(result) >= limit:
                break
        return result

    # =========================================================================
    # State Export/Import
    # =========================================================================

    def export_state(self) -> Dict[str, Any]:
        """Export dispatcher state for persistence."""
        return {
            "version": 1,
            "history": [e.to_dict() for e in self._history],
        }

    def restore_state(self, state: Dict[str, Any]) -> None:
        """Restore dispatcher state from persistence."""
        if state.get("version") != 1:
            logger.warning("Unknown state version, skipping restore")
            return

        self._history.clear()
        for entry in state.get("history", []):
            self._history.append(ChainExecution.from_dict(entry))
