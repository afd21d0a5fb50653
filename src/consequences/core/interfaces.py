"""
Capability interfaces for conditions and actions.

Addons supply concrete implementations; the engine only relies on the
single coroutine each capability exposes. Identity is by reference.
"""

from abc import ABC, abstractmethod
from typing import Sequence

from consequences.core.inputs import InputValue


class Condition(ABC):
    """
    An asynchronous predicate over a list of input values.

    Implementations must be deterministic functions of their inputs (and of
    whatever external state they query), free of side effects, and follow
    first-match-wins when several inputs share an id.
    """

    @abstractmethod
    async def evaluate(self, inputs: Sequence[InputValue]) -> bool:
        """
        Evaluate the condition.

        Args:
            inputs: Input values, in configuration order

        Returns:
            True if the condition holds
        """
        pass

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


class Action(ABC):
    """
    An asynchronous side effect over a list of input values.

    Commonly updates a variable or calls into an addon's external system.
    Failures should be raised as ActionFailure; anything else raised is
    wrapped in one by the link evaluator.
    """

    @abstractmethod
    async def perform(self, inputs: Sequence[InputValue]) -> None:
        """
        Perform the action.

        Args:
            inputs: Input values, in configuration order
        """
        pass

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"
