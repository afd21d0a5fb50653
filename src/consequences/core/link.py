"""
Link evaluation - the core graph walk.

A Link runs its actions in order, then checks each of its conditional
branches in order and fully evaluates every branch whose condition holds
before moving on to the next one.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple

from consequences.errors import ActionFailure, ConditionFailure, CycleDetected, DepthExceeded

from .inputs import InputValue
from .interfaces import Action, Condition

logger = logging.getLogger(__name__)


ActionStep = Tuple[Action, Tuple[InputValue, ...]]
ConditionalLink = Tuple[Condition, Tuple[InputValue, ...], "Link"]


@dataclass
class EvaluationTrace:
    """
    State carried through one evaluation of a link graph.

    Cycles are detected by link identity, so distinct links sharing an id do
    not collide. ``max_depth`` only bounds evaluation when ``detect_cycles``
    is off; with detection on, a path can never be longer than the number of
    distinct links in the graph.

    Attributes:
        detect_cycles: Fail when a link is re-entered on the current path
        max_depth: Nesting limit used when cycle detection is disabled
        path: Ids of the links currently being evaluated (outermost first)
        links_evaluated: Ids of every link entered, in visit order
        actions_performed: Number of actions that completed
        conditions_evaluated: Number of conditions evaluated
        branches_taken: Number of conditions that held
    """

    detect_cycles: bool = True
    max_depth: int = 64
    path: List[str] = field(default_factory=list)
    links_evaluated: List[str] = field(default_factory=list)
    actions_performed: int = 0
    conditions_evaluated: int = 0
    branches_taken: int = 0
    _active: List["Link"] = field(default_factory=list, init=False, repr=False)

    def enter(self, link: "Link") -> None:
        """Push a link onto the path, failing on cycles or excessive depth."""
        if self.detect_cycles:
            if any(active is link for active in self._active):
                raise CycleDetected(link.id, list(self.path))
        elif len(self._active) >= self.max_depth:
            raise DepthExceeded(link.id, list(self.path), self.max_depth)

        self._active.append(link)
        self.path.append(link.id)
        self.links_evaluated.append(link.id)

    def leave(self) -> None:
        """Pop the innermost link from the path."""
        self._active.pop()
        self.path.pop()


class Link:
    """
    A step in a Chain.

    Links are built once during addon setup. The wiring methods exist so that
    graphs with shared or cyclic references can be assembled; the structure
    must not change once evaluation has started.
    """

    def __init__(
        self,
        id: str,
        conditional_links: Optional[Sequence[Tuple[Condition, Sequence[InputValue], "Link"]]] = None,
        actions: Optional[Sequence[Tuple[Action, Sequence[InputValue]]]] = None,
    ) -> None:
        """
        Create a link.

        Args:
            id: Link identifier
            conditional_links: (condition, inputs, next link) triples, checked
                in order after the actions
            actions: (action, inputs) pairs, performed in order
        """
        self.id = id
        self._conditional_links: List[ConditionalLink] = []
        self._actions: List[ActionStep] = []

        for condition, inputs, link in conditional_links or []:
            self.add_conditional_link(condition, inputs, link)
        for action, inputs in actions or []:
            self.add_action(action, inputs)

    @property
    def conditional_links(self) -> Tuple[ConditionalLink, ...]:
        return tuple(self._conditional_links)

    @property
    def actions(self) -> Tuple[ActionStep, ...]:
        return tuple(self._actions)

    def add_action(self, action: Action, inputs: Sequence[InputValue] = ()) -> None:
        """Append an action step."""
        self._actions.append((action, tuple(inputs)))

    def add_conditional_link(
        self,
        condition: Condition,
        inputs: Sequence[InputValue],
        link: "Link",
    ) -> None:
        """Append a conditional branch to another link."""
        self._conditional_links.append((condition, tuple(inputs), link))

    async def evaluate(self, trace: Optional[EvaluationTrace] = None) -> None:
        """
        Evaluate this link and every branch whose condition holds.

        Args:
            trace: Evaluation state shared with nested links (created if None)

        Raises:
            ActionFailure: An action failed; remaining steps are skipped
            ConditionFailure: A condition failed; remaining steps are skipped
            CycleDetected: This link is already being evaluated on the path
            DepthExceeded: Nesting passed max_depth with cycle detection off
        """
        if trace is None:
            trace = EvaluationTrace()

        trace.enter(self)
        try:
            for action, inputs in self._actions:
                await self._perform(action, inputs)
                trace.actions_performed += 1

            for condition, inputs, link in self._conditional_links:
                trace.conditions_evaluated += 1
                if await self._check(condition, inputs):
                    trace.branches_taken += 1
                    await link.evaluate(trace)
        finally:
            trace.leave()

    async def _perform(self, action: Action, inputs: Tuple[InputValue, ...]) -> None:
        """Perform one action, normalising failures to ActionFailure."""
        logger.debug(f"Link {self.id}: performing {action!r}")
        try:
            await action.perform(inputs)
        except ActionFailure as e:
            if e.link_id is None:
                e.link_id = self.id
            raise
        except Exception as e:
            raise ActionFailure(
                f"Action {action!r} failed in link '{self.id}': {e}",
                action=action,
                link_id=self.id,
            ) from e

    async def _check(self, condition: Condition, inputs: Tuple[InputValue, ...]) -> bool:
        """Evaluate one condition, normalising failures to ConditionFailure."""
        try:
            result = await condition.evaluate(inputs)
        except ConditionFailure as e:
            if e.link_id is None:
                e.link_id = self.id
            raise
        except Exception as e:
            raise ConditionFailure(
                f"Condition {condition!r} failed in link '{self.id}': {e}",
                condition=condition,
                link_id=self.id,
            ) from e

        logger.debug(f"Link {self.id}: {condition!r} -> {result}")
        return bool(result)

    def __repr__(self) -> str:
        return (
            f"Link(id={self.id!r}, actions={len(self._actions)}, "
            f"conditional_links={len(self._conditional_links)})"
        )
