"""
Chain: binds a starting event to a starting link.
"""

from dataclasses import dataclass
from typing import Optional

from .bus import Event
from .link import EvaluationTrace, Link


@dataclass(frozen=True, eq=False)
class Chain:
    """
    A chain of links triggered by an event.

    Attributes:
        starting_event: The event that triggers the chain to be evaluated
        starting_link: The first link evaluated when the event fires
    """

    starting_event: Event
    starting_link: Link

    @property
    def id(self) -> str:
        """Chains are identified by their starting link."""
        return self.starting_link.id

    async def evaluate(self, trace: Optional[EvaluationTrace] = None) -> None:
        """Evaluate the starting link."""
        await self.starting_link.evaluate(trace)
